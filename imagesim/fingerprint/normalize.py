"""
Per-channel histogram normalization of fingerprints.

Each channel subsequence (indices 0, 1 and 2 modulo 3) is stretched linearly
so its minimum maps to 0 and its maximum to 255. A channel with zero variance
has no range to stretch; all of its values are set to 0.
"""

from __future__ import annotations

import logging

import numpy as np

from ..models import CHANNELS, Fingerprint

logger = logging.getLogger(__name__)


def normalize_values(values) -> np.ndarray:
    """
    Normalize a sequence of fingerprint values.

    Args:
        values: Fingerprint values, channel cycling red, green, blue

    Returns:
        New float64 array; the input is not modified
    """
    source = np.asarray(values, dtype=np.float64)
    result = np.zeros_like(source)
    for index, name in enumerate(CHANNELS):
        channel = source[index::3]
        if channel.size == 0:
            continue
        lo, hi = channel.min(), channel.max()
        if hi == lo:
            logger.debug(f"Constant {name} channel ({lo:.3f}), normalized to 0")
            continue
        result[index::3] = (channel - lo) * 255 / (hi - lo)
    return result


def normalize(fingerprint: Fingerprint) -> Fingerprint:
    """Return a new fingerprint with each channel rescaled to 0-255."""
    return Fingerprint(
        values=normalize_values(fingerprint.values).tolist(),
        size=fingerprint.size,
        mask_size=fingerprint.mask_size,
    )


__all__ = ['normalize', 'normalize_values']
