"""
Discovery of decodable image files for batch fingerprinting.

Only the file suffix is checked here; files that turn out not to be images
are reported later as ImageRecord errors.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..config import HEIF_EXTENSIONS, IMAGE_EXTENSIONS
from ..dependencies import HAS_HEIF_SUPPORT

_logger = logging.getLogger(__name__)


def supported_extensions() -> frozenset:
    """Lower-case suffixes Pillow can decode with the installed plugins."""
    if HAS_HEIF_SUPPORT:
        return frozenset(IMAGE_EXTENSIONS)
    return frozenset(IMAGE_EXTENSIONS - HEIF_EXTENSIONS)


def iter_image_files(
    root_path: str | Path,
    recursive: bool = True,
    extensions: Optional[Iterable[str]] = None,
) -> Iterator[Path]:
    """
    Yield image files under root_path in directory walk order.

    Symlinks are resolved and each target is yielded once, even when it is
    reachable through several links.
    """
    wanted = supported_extensions() if extensions is None else frozenset(e.lower() for e in extensions)
    pattern = '**/*' if recursive else '*'
    seen = set()
    for candidate in Path(root_path).glob(pattern):
        if candidate.suffix.lower() not in wanted or not candidate.is_file():
            continue
        target = candidate.resolve()
        if target in seen:
            continue
        seen.add(target)
        yield target


def find_image_files(
    root_path: str | Path,
    recursive: bool = True,
    extensions: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    List image files to fingerprint.

    Args:
        root_path: Directory to scan
        recursive: Descend into subdirectories
        extensions: Suffixes to accept (with leading dot); every decodable
            format when None

    Returns:
        Sorted absolute paths
    """
    files = sorted(str(path) for path in iter_image_files(root_path, recursive, extensions))
    _logger.debug(f"Found {len(files)} image files under {root_path}")
    return files


__all__ = ['supported_extensions', 'iter_image_files', 'find_image_files']
