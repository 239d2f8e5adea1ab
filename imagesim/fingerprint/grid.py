"""
Pixel grid container for the fingerprinting core.

A PixelGrid is the decoded form of an image: an immutable array of RGBA samples
at 8 or 16 bits per channel, plus the origin of its bounds. Decoders produce
grids, the resampler produces new grids, nothing mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from PIL import Image

from ..exceptions import InvalidSizeError
from ..models import ImageSize

# Numpy dtype per supported channel bit depth
_DTYPES = {8: np.uint8, 16: np.uint16}

# Pillow modes holding 16-bit grayscale samples
_GRAY16_MODES = {'I;16', 'I;16L', 'I;16B', 'I;16N'}


@dataclass(frozen=True)
class PixelGrid:
    """
    Immutable RGBA raster.

    Attributes:
        pixels: Array of shape (height, width, 4), uint8 or uint16
        bit_depth: Bits per channel (8 or 16)
        origin: (min_x, min_y) of the grid bounds
    """
    pixels: np.ndarray = field(repr=False, compare=False)
    bit_depth: int = 8
    origin: tuple = (0, 0)

    def __post_init__(self):
        if self.bit_depth not in _DTYPES:
            raise ValueError(f"Unsupported bit depth: {self.bit_depth}")
        pixels = np.array(self.pixels, dtype=_DTYPES[self.bit_depth], copy=True)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected an array of shape (height, width, 4), got {pixels.shape}")
        pixels.flags.writeable = False
        object.__setattr__(self, 'pixels', pixels)
        object.__setattr__(self, 'origin', (int(self.origin[0]), int(self.origin[1])))

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> ImageSize:
        return ImageSize(self.width, self.height)

    @property
    def max_value(self) -> int:
        """Largest representable channel value."""
        return (1 << self.bit_depth) - 1

    def at(self, x: int, y: int) -> tuple:
        """
        Return the RGBA sample at bounds coordinates (x, y).

        Raises:
            IndexError: If (x, y) lies outside the grid bounds
        """
        col = x - self.origin[0]
        row = y - self.origin[1]
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise IndexError(f"Point ({x}, {y}) is outside the grid bounds")
        return tuple(int(c) for c in self.pixels[row, col])

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (
            self.bit_depth == other.bit_depth
            and self.origin == other.origin
            and np.array_equal(self.pixels, other.pixels)
        )

    def __hash__(self):
        return hash((self.bit_depth, self.origin, self.pixels.shape, self.pixels.tobytes()))

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        bit_depth: Optional[int] = None,
        origin: tuple = (0, 0),
    ) -> 'PixelGrid':
        """
        Build a grid from an RGB or RGBA array.

        Args:
            array: Array of shape (height, width, 3) or (height, width, 4)
            bit_depth: 8 or 16; inferred from the dtype when omitted
            origin: (min_x, min_y) of the grid bounds

        Returns:
            PixelGrid with an opaque alpha channel added for RGB input
        """
        array = np.asarray(array)
        if bit_depth is None:
            bit_depth = 16 if array.dtype == np.uint16 else 8
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError(f"Expected an RGB or RGBA array, got shape {array.shape}")
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), (1 << bit_depth) - 1, dtype=_DTYPES[bit_depth])
            array = np.concatenate([array.astype(_DTYPES[bit_depth]), alpha], axis=2)
        return cls(pixels=array, bit_depth=bit_depth, origin=origin)

    @classmethod
    def from_image(cls, img: Image.Image) -> 'PixelGrid':
        """
        Build a grid from a Pillow image.

        16-bit grayscale images keep their precision; every other mode is
        converted to 8-bit RGBA by Pillow.
        """
        if img.width == 0 or img.height == 0:
            raise InvalidSizeError(f"Image has no pixels: {img.width}x{img.height}")
        if img.mode in _GRAY16_MODES:
            gray = np.asarray(img, dtype=np.uint16)
            return cls.from_array(np.stack([gray, gray, gray], axis=2), bit_depth=16)
        if img.mode != 'RGBA':
            img = img.convert('RGBA')
        return cls(pixels=np.asarray(img), bit_depth=8)


__all__ = ['PixelGrid']
