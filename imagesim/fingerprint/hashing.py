"""
Fingerprint extraction for the fingerprinting core.

The image is resampled to a square of mask_size * downsample_size pixels, so
each mask cell corresponds to a downsample_size x downsample_size block. The
fingerprint value of a mask is the mean of one color channel over all pixels
of all blocks under the mask. A cycle over the mask index selects the
channel: red, green, blue.
"""

from __future__ import annotations

import logging

import numpy as np

from ..config import DOWNSAMPLE_SIZE
from ..exceptions import InvalidSizeError
from ..models import Fingerprint
from .grid import PixelGrid
from .masks import MaskCollection
from .resample import resample_nearest

logger = logging.getLogger(__name__)


def cell_sums(grid: PixelGrid, mask_size: int, downsample_size: int) -> np.ndarray:
    """
    Sum the RGB channels over every downsample block of a resampled grid.

    Args:
        grid: Grid of exactly mask_size * downsample_size pixels per side
        mask_size: Number of cells per side
        downsample_size: Pixels per cell side

    Returns:
        int64 array of shape (mask_size * mask_size, 3); row y * mask_size + x
        holds the sums for cell (x, y)
    """
    side = mask_size * downsample_size
    if grid.size != (side, side):
        raise InvalidSizeError(f"Expected a {side}x{side} grid, got {grid.size}")
    # Alpha channel is not used for image comparison
    rgb = grid.pixels[:, :, :3].astype(np.int64)
    blocks = rgb.reshape(mask_size, downsample_size, mask_size, downsample_size, 3)
    return blocks.sum(axis=(1, 3)).reshape(mask_size * mask_size, 3)


def compute_fingerprint(
    grid: PixelGrid,
    masks: MaskCollection,
    downsample_size: int = DOWNSAMPLE_SIZE,
) -> Fingerprint:
    """
    Calculate the fingerprint of an image.

    Args:
        grid: Decoded image
        masks: Mask collection from generate_masks
        downsample_size: Pixels per mask cell side after resampling

    Returns:
        Fingerprint with one value in [0, 255] per mask and the original
        image size

    Raises:
        InvalidSizeError: If the image is empty or downsample_size is not positive
    """
    if downsample_size < 1:
        raise InvalidSizeError(f"Downsample size must be positive, got {downsample_size}")

    side = masks.mask_size * downsample_size
    resampled, image_size = resample_nearest(grid, (side, side))

    sums = cell_sums(resampled, masks.mask_size, downsample_size)
    mask_sums = masks.incidence @ sums

    n = len(masks)
    channel = np.arange(n) % 3
    selected = mask_sums[np.arange(n), channel]
    sample_counts = masks.cell_counts * downsample_size * downsample_size
    values = selected / sample_counts

    logger.debug(f"Fingerprinted {image_size} image with {n} masks")
    return Fingerprint(values=values.tolist(), size=image_size, mask_size=masks.mask_size)


__all__ = ['compute_fingerprint', 'cell_sums']
