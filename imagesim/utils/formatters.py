"""
Formatting utilities for imagesim.

Provides human-readable formatting for numbers, file sizes and fingerprints.
"""

from __future__ import annotations

# Re-export format_size from models for convenience
from ..models import Fingerprint, format_size


def format_number(n: int) -> str:
    """
    Format large numbers with commas for readability.

    Examples:
        >>> format_number(1000)
        '1,000'
        >>> format_number(1234567)
        '1,234,567'
    """
    return f"{n:,}"


def format_fingerprint(fingerprint: Fingerprint, precision: int = 1, limit: int = 6) -> str:
    """
    Format a short preview of a fingerprint.

    Examples:
        >>> from imagesim.models import ImageSize
        >>> format_fingerprint(Fingerprint(values=[1, 2.25, 3], size=ImageSize(4, 3)))
        '4x3 [1.0, 2.2, 3.0] (3 values)'
    """
    shown = ", ".join(f"{v:.{precision}f}" for v in fingerprint.values[:limit])
    if len(fingerprint) > limit:
        shown += ", ..."
    return f"{fingerprint.size} [{shown}] ({len(fingerprint)} values)"


__all__ = ['format_number', 'format_size', 'format_fingerprint']
