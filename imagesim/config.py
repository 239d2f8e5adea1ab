"""
Configuration constants for imagesim.

This module contains all calibrated settings including:
- Mask and downsample geometry used for fingerprinting
- Similarity thresholds used by the comparison filters
- Supported image extensions for batch processing
"""

import os

# Side dimension of the square mask space
MASK_SIZE = 24

# Side dimension (in pixels) of the block each mask cell averages over.
# Images are resampled to MASK_SIZE * DOWNSAMPLE_SIZE on each side.
DOWNSAMPLE_SIZE = 12

# Image width base scale for the proportions filter
BASE_WIDTH = 100

# Threshold of height pixels for images rescaled to BASE_WIDTH
HEIGHT_THRESHOLD = 10

# Per-element color distance used to derive the Euclidean threshold
COLOR_DIFF = 50

# Share of COLOR_DIFF**2 allowed per mask in the Euclidean filters
EUCL_COEFF = 0.2

# Share of adjacent fingerprint pairs that must move in the same direction
CORR_COEFF = 0.7

# Default number of parallel workers for batch fingerprinting
DEFAULT_WORKERS = 4

# Decompression bomb limit applied to Pillow (500 megapixels)
MAX_IMAGE_PIXELS = 500_000_000

# Extensions considered during batch discovery (formats Pillow decodes)
IMAGE_EXTENSIONS = {
    '.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp', '.tiff', '.tif',
    '.ico', '.pbm', '.pgm', '.ppm', '.pnm', '.tga', '.pcx', '.sgi',
    '.jp2', '.j2k', '.heic', '.heif',
}

# Extensions requiring the optional pillow-heif plugin
HEIF_EXTENSIONS = {'.heic', '.heif'}

# User configuration location (see user_config.py)
CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.imagesim')
