"""
Utilities package for imagesim.

Provides:
- formatters: Human-readable formatting for numbers, sizes and fingerprints
- exporters: Export similar-image groups to files
"""

from __future__ import annotations

from . import formatters
from . import exporters

from .formatters import format_number, format_size, format_fingerprint
from .exporters import export_results

__all__ = [
    'formatters',
    'exporters',
    'format_number',
    'format_size',
    'format_fingerprint',
    'export_results',
]
