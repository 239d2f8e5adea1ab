"""
Fingerprinting core for imagesim.

Pure functions over caller-owned data; the only shared value is the memoized,
immutable mask collection.

Public API:
- PixelGrid: Immutable RGBA raster
- resample_nearest: Nearest-neighbour resize
- generate_masks / MaskCollection: Deterministic 3x3 masks
- compute_fingerprint: Per-mask channel averages of an image
- normalize: Per-channel min-max rescaling of a fingerprint
- similar / similarity_stats: Pairwise verdict and its raw statistics
"""

from __future__ import annotations

from .grid import PixelGrid
from .resample import resample_nearest
from .masks import MaskCollection, generate_masks
from .hashing import compute_fingerprint
from .normalize import normalize, normalize_values
from .similarity import (
    SimilarityThresholds,
    DEFAULT_THRESHOLDS,
    proportions_match,
    aspect_delta,
    squared_distance,
    correlation_count,
    similar,
    similarity_stats,
    stats_pass,
)

__all__ = [
    'PixelGrid',
    'resample_nearest',
    'MaskCollection',
    'generate_masks',
    'compute_fingerprint',
    'normalize',
    'normalize_values',
    'SimilarityThresholds',
    'DEFAULT_THRESHOLDS',
    'proportions_match',
    'aspect_delta',
    'squared_distance',
    'correlation_count',
    'similar',
    'similarity_stats',
    'stats_pass',
]
