"""
Third-party imports shared by the imaging and batch layers.

Pillow is required. pillow-heif (HEIC/HEIF decoding) and tqdm (progress bars)
are optional and reported through HAS_HEIF_SUPPORT and HAS_TQDM.
"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Optional

from .user_config import get_user_config

_logger = logging.getLogger(__name__)

try:
    from PIL import Image
except ImportError:
    raise ImportError(
        "imagesim needs Pillow to decode images.\n"
        "Install with: pip install Pillow"
    )


def _register_heif() -> bool:
    # Registration has to happen before the first HEIC file is opened
    try:
        from pillow_heif import register_heif_opener
    except ImportError:
        _logger.debug("pillow-heif missing; .heic/.heif files are skipped (pip install pillow-heif)")
        return False
    register_heif_opener()
    _logger.debug("Registered pillow-heif opener")
    return True


HAS_HEIF_SUPPORT = _register_heif()

# Replaces Pillow's default limit of ~89 MP
Image.MAX_IMAGE_PIXELS = get_user_config().max_image_pixels
warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)

try:
    from tqdm import tqdm as _tqdm_class
    HAS_TQDM = True
except ImportError:
    _tqdm_class = None
    HAS_TQDM = False


def progress_bar(total: int, desc: str, unit: str, enabled: bool = True) -> Optional[Any]:
    """
    Create a tqdm progress bar, or None when disabled or tqdm is missing.

    Callers must close() the returned bar.
    """
    if not (enabled and HAS_TQDM):
        return None
    return _tqdm_class(total=total, desc=desc, unit=unit, ncols=80)


__all__ = [
    'Image',
    'HAS_HEIF_SUPPORT',
    'HAS_TQDM',
    'progress_bar',
    '_logger',
]
