"""
Nearest-neighbour resampling for the fingerprinting core.

The source coordinate of every destination pixel is computed with truncating
integer division, so mask cells always land on the same source pixels for a
given input size.
"""

from __future__ import annotations

import numpy as np

from ..exceptions import InvalidSizeError
from ..models import ImageSize
from .grid import PixelGrid


def _validate_target(size) -> ImageSize:
    try:
        width, height = size
    except (TypeError, ValueError) as exc:
        raise InvalidSizeError(f"Target size must be a (width, height) pair, got {size!r}") from exc
    for value in (width, height):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidSizeError(f"Target dimensions must be integers, got {size!r}")
    if width <= 0 or height <= 0:
        raise InvalidSizeError(f"Target dimensions must be positive, got {width}x{height}")
    return ImageSize(int(width), int(height))


def source_indices(src_length: int, dst_length: int) -> np.ndarray:
    """
    Map destination offsets to source offsets along one axis.

    Offset d samples source offset d * src_length // dst_length.
    """
    return np.arange(dst_length, dtype=np.int64) * src_length // dst_length


def resample_nearest(grid: PixelGrid, size) -> tuple[PixelGrid, ImageSize]:
    """
    Resize a grid by the nearest neighbour method.

    Args:
        grid: Source pixel grid (8 or 16 bits per channel)
        size: Target (width, height), both positive integers

    Returns:
        Tuple of (new 8-bit grid of the target size, original grid size)

    Raises:
        InvalidSizeError: If the target size is not positive or the source is empty
    """
    target = _validate_target(size)
    source_size = grid.size
    if source_size.width == 0 or source_size.height == 0:
        raise InvalidSizeError(f"Cannot resample an empty grid ({source_size})")

    cols = source_indices(source_size.width, target.width)
    rows = source_indices(source_size.height, target.height)
    sampled = grid.pixels[np.ix_(rows, cols)]

    if grid.bit_depth == 16:
        sampled = (sampled >> 8).astype(np.uint8)

    return PixelGrid(pixels=sampled, bit_depth=8), source_size


__all__ = ['resample_nearest', 'source_indices']
