"""
Mask generation for the fingerprinting core.

Conceptually a mask is a black square image with a few white pixels used for
average color calculation. A mask is stored as the set of its white pixel
coordinates only, since black pixels are redundant.

Every interior coordinate of the mask space seeds one mask covering the 3x3
block around it, so masks near the border still fit within bounds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterator

import numpy as np

from ..config import MASK_SIZE
from ..exceptions import InvalidSizeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MaskCollection:
    """
    Ordered, immutable set of masks over a square mask space.

    Order matters: the index of a mask selects the color channel it samples
    and the sign-correlation filter compares neighbouring indices.

    Attributes:
        mask_size: Side of the square mask space
        masks: Tuple of frozensets of (x, y) cells
    """
    mask_size: int
    masks: tuple
    incidence: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Row i marks the cells of mask i; cell (x, y) is column y * mask_size + x
        incidence = np.zeros((len(self.masks), self.mask_size * self.mask_size), dtype=np.int64)
        for i, mask in enumerate(self.masks):
            if not mask:
                raise ValueError(f"Mask {i} has no cells")
            for x, y in mask:
                if not (0 <= x < self.mask_size and 0 <= y < self.mask_size):
                    raise InvalidSizeError(
                        f"Mask {i} cell ({x}, {y}) is outside a {self.mask_size}x{self.mask_size} space"
                    )
                incidence[i, y * self.mask_size + x] = 1
        incidence.flags.writeable = False
        object.__setattr__(self, 'incidence', incidence)

    def __len__(self) -> int:
        return len(self.masks)

    def __iter__(self) -> Iterator[frozenset]:
        return iter(self.masks)

    def __getitem__(self, index: int) -> frozenset:
        return self.masks[index]

    @property
    def cell_counts(self) -> np.ndarray:
        """Number of cells in each mask."""
        return self.incidence.sum(axis=1)


def _block_mask(x: int, y: int) -> frozenset:
    return frozenset((x + dx, y + dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1))


@lru_cache(maxsize=None)
def generate_masks(mask_size: int = MASK_SIZE) -> MaskCollection:
    """
    Generate the mask collection for a square mask space.

    One mask per interior coordinate (x, y) with 1 <= x, y <= mask_size - 2,
    x in the outer loop and y in the inner one. The result is memoized per
    mask_size and is safe to share between threads.

    Args:
        mask_size: Side of the mask space (at least 3)

    Returns:
        MaskCollection of (mask_size - 2) ** 2 masks

    Raises:
        InvalidSizeError: If mask_size is smaller than 3
    """
    if mask_size < 3:
        raise InvalidSizeError(f"Mask size must be at least 3, got {mask_size}")

    masks = tuple(
        _block_mask(x, y)
        for x in range(1, mask_size - 1)
        for y in range(1, mask_size - 1)
    )
    logger.debug(f"Generated {len(masks)} masks for mask size {mask_size}")
    return MaskCollection(mask_size=mask_size, masks=masks)


__all__ = ['MaskCollection', 'generate_masks']
