"""
Image decoding and encoding.

Bridges files and bytes to PixelGrid through Pillow. The fingerprinting core
never touches files; everything here is a thin wrapper that callers can
replace with their own decoder.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

import numpy as np

from .dependencies import Image, _logger
from .exceptions import ImageDecodeError
from .fingerprint.grid import PixelGrid
from .fingerprint.hashing import compute_fingerprint
from .fingerprint.masks import MaskCollection, generate_masks
from .models import Fingerprint


def _decode(source, label: str) -> PixelGrid:
    try:
        with Image.open(source) as img:
            # Force load to detect truncated/corrupt images early
            img.load()
            return PixelGrid.from_image(img)
    except Image.UnidentifiedImageError as e:
        raise ImageDecodeError(f"Not a valid image file: {label}") from e
    except Image.DecompressionBombError as e:
        raise ImageDecodeError(f"Image too large to decode: {label}: {e}") from e
    except (OSError, ValueError) as e:
        raise ImageDecodeError(f"Cannot decode {label}: {e}") from e


def open_image(path: str | Path) -> PixelGrid:
    """
    Open and decode an image file.

    Raises:
        ImageDecodeError: If the file cannot be read or decoded
    """
    return _decode(path, str(path))


def decode_bytes(data: bytes) -> PixelGrid:
    """
    Decode an in-memory image.

    Raises:
        ImageDecodeError: If the bytes are not a decodable image
    """
    return _decode(io.BytesIO(data), f"{len(data)}-byte buffer")


def to_pil(grid: PixelGrid) -> Image.Image:
    """Convert a grid to an 8-bit RGBA Pillow image."""
    if grid.bit_depth == 16:
        pixels = (grid.pixels >> 8).astype(np.uint8)
    else:
        pixels = grid.pixels.copy()
    # uint8 arrays of shape (h, w, 4) map to RGBA
    return Image.fromarray(pixels)


def _prepare(img: Image.Image, fmt: str) -> Image.Image:
    fmt = fmt.upper()
    if fmt in ('JPEG', 'JPG', 'BMP'):
        return img.convert('RGB')
    if fmt == 'GIF':
        # 256 color palette
        return img.convert('RGB').quantize(colors=256)
    return img


def encode(grid: PixelGrid, fmt: str = 'PNG', quality: Optional[int] = None) -> bytes:
    """
    Encode a grid into image file bytes.

    Args:
        grid: Grid to encode
        fmt: Pillow format name (PNG, JPEG, GIF, ...)
        quality: JPEG/WebP quality (1-95), format default when None

    Raises:
        ImageDecodeError: If Pillow cannot encode the grid in that format
    """
    fmt = 'JPEG' if fmt.upper() == 'JPG' else fmt.upper()
    options = {} if quality is None else {'quality': quality}
    buffer = io.BytesIO()
    try:
        _prepare(to_pil(grid), fmt).save(buffer, format=fmt, **options)
    except (OSError, ValueError, KeyError) as e:
        raise ImageDecodeError(f"Cannot encode image as {fmt}: {e}") from e
    return buffer.getvalue()


def _save(grid: PixelGrid, path: str | Path, fmt: str, quality: Optional[int] = None) -> None:
    data = encode(grid, fmt, quality)
    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise ImageDecodeError(f"Cannot create file {path}: {e}") from e
    _logger.debug(f"Saved {grid.size} {fmt} image to {path}")


def save_png(grid: PixelGrid, path: str | Path) -> None:
    """Save a grid as PNG."""
    _save(grid, path, 'PNG')


def save_jpeg(grid: PixelGrid, path: str | Path, quality: int = 75) -> None:
    """Save a grid as JPEG with the given quality."""
    _save(grid, path, 'JPEG', quality)


def save_gif(grid: PixelGrid, path: str | Path) -> None:
    """Save a grid as a 256-color GIF."""
    _save(grid, path, 'GIF')


def fingerprint_image(img: Image.Image, masks: Optional[MaskCollection] = None) -> Fingerprint:
    """Fingerprint a Pillow image (default mask collection when masks is None)."""
    return compute_fingerprint(PixelGrid.from_image(img), generate_masks() if masks is None else masks)


def fingerprint_file(path: str | Path, masks: Optional[MaskCollection] = None) -> Fingerprint:
    """
    Decode an image file and fingerprint it.

    Raises:
        ImageDecodeError: If the file cannot be decoded
    """
    return compute_fingerprint(open_image(path), generate_masks() if masks is None else masks)


__all__ = [
    'open_image',
    'decode_bytes',
    'to_pil',
    'encode',
    'save_png',
    'save_jpeg',
    'save_gif',
    'fingerprint_image',
    'fingerprint_file',
]
