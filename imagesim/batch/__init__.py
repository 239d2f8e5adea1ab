"""
Batch package for imagesim.

Tooling around the fingerprinting core for whole directories: discovery,
parallel fingerprinting and grouping of similar images.

Public API:
- find_image_files: Discover image files in directories
- fingerprint_path: Fingerprint a single file into an ImageRecord
- fingerprint_files: Fingerprint many files in parallel
- find_similar_groups: Group similar images with pairwise comparison
"""

from __future__ import annotations

from .file_discovery import find_image_files, iter_image_files, supported_extensions
from .parallel import fingerprint_path, fingerprint_files
from .grouping import find_similar_groups

__all__ = [
    'find_image_files',
    'iter_image_files',
    'supported_extensions',
    'fingerprint_path',
    'fingerprint_files',
    'find_similar_groups',
]
