"""
imagesim
========
Perceptual image fingerprints and near-duplicate decisions.

Features:
- Deterministic fingerprint of localized color averages
- Tolerant to resizing, mild recompression and small distortions
- Layered similarity filters with early exit
- Raw filter statistics for threshold calibration
- CLI for hashing, comparing and grouping images

Example:
    >>> from imagesim import generate_masks, open_image, compute_fingerprint, similar
    >>> masks = generate_masks()
    >>> a = compute_fingerprint(open_image("large.jpg"), masks)
    >>> b = compute_fingerprint(open_image("small.jpg"), masks)
    >>> similar(a, b, masks)
    True
"""

__version__ = "1.0.0"
__author__ = "imagesim contributors"

from .exceptions import ImageSimError, InvalidSizeError, FingerprintMismatchError, ImageDecodeError
from .models import ImageSize, Fingerprint, SimilarityStats, ImageRecord, SimilarGroup
from .fingerprint import (
    PixelGrid,
    MaskCollection,
    SimilarityThresholds,
    DEFAULT_THRESHOLDS,
    resample_nearest,
    generate_masks,
    compute_fingerprint,
    normalize,
    similar,
    similarity_stats,
    stats_pass,
)
from .imaging import open_image, decode_bytes, encode, fingerprint_file, fingerprint_image
from .batch import find_image_files, fingerprint_files, find_similar_groups

__all__ = [
    "ImageSimError",
    "InvalidSizeError",
    "FingerprintMismatchError",
    "ImageDecodeError",
    "ImageSize",
    "Fingerprint",
    "SimilarityStats",
    "ImageRecord",
    "SimilarGroup",
    "PixelGrid",
    "MaskCollection",
    "SimilarityThresholds",
    "DEFAULT_THRESHOLDS",
    "resample_nearest",
    "generate_masks",
    "compute_fingerprint",
    "normalize",
    "similar",
    "similarity_stats",
    "stats_pass",
    "open_image",
    "decode_bytes",
    "encode",
    "fingerprint_file",
    "fingerprint_image",
    "find_image_files",
    "fingerprint_files",
    "find_similar_groups",
]
