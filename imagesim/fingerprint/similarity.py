"""
Similarity decision between two fingerprints.

Filters run from cheapest to most expensive and the first failing one ends
the comparison:

1. Proportions: both images rescaled to a common base width must have
   heights within a pixel threshold of each other.
2. Euclidean distance between raw fingerprints.
3. Sign correlation: neighbouring fingerprint values must rise, fall or stay
   equal together for most index pairs.
4. Euclidean distance between normalized fingerprints.

similarity_stats computes all four raw metrics without thresholds, for
calibrating the constants on a labelled set of image pairs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import BASE_WIDTH, COLOR_DIFF, CORR_COEFF, EUCL_COEFF, HEIGHT_THRESHOLD
from ..exceptions import FingerprintMismatchError, InvalidSizeError
from ..models import Fingerprint, ImageSize, SimilarityStats
from .masks import MaskCollection
from .normalize import normalize_values

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarityThresholds:
    """
    Calibrated constants of the similarity filters.

    Attributes:
        base_width: Common width images are rescaled to for the proportions filter
        height_threshold: Allowed height difference (pixels) at base_width
        color_diff: Per-mask color distance the Euclidean threshold is built from
        eucl_coeff: Share of color_diff**2 allowed per mask
        corr_coeff: Share of masks that must agree in the sign-correlation filter
    """
    base_width: int = BASE_WIDTH
    height_threshold: int = HEIGHT_THRESHOLD
    color_diff: float = COLOR_DIFF
    eucl_coeff: float = EUCL_COEFF
    corr_coeff: float = CORR_COEFF

    def euclidean_threshold(self, mask_count: int) -> float:
        """Maximum squared Euclidean distance for mask_count fingerprint values."""
        return mask_count * self.color_diff * self.color_diff * self.eucl_coeff

    def correlation_threshold(self, mask_count: int) -> float:
        """Minimum number of agreeing neighbour pairs."""
        return mask_count * self.corr_coeff


DEFAULT_THRESHOLDS = SimilarityThresholds()


def _check_size(size: ImageSize) -> None:
    if size.width <= 0 or size.height <= 0:
        raise InvalidSizeError(f"Image dimensions must be positive, got {size}")


def _check_comparable(
    a: Fingerprint,
    b: Fingerprint,
    masks: Optional[MaskCollection],
) -> None:
    if len(a) != len(b) or a.mask_size != b.mask_size:
        raise FingerprintMismatchError(
            f"Fingerprints come from different mask collections "
            f"({len(a)} values / mask size {a.mask_size} vs "
            f"{len(b)} values / mask size {b.mask_size})"
        )
    if masks is not None and (len(a) != len(masks) or a.mask_size != masks.mask_size):
        raise FingerprintMismatchError(
            f"Fingerprints of {len(a)} values do not match a collection of "
            f"{len(masks)} masks (mask size {masks.mask_size})"
        )
    _check_size(a.size)
    _check_size(b.size)


def proportions_match(
    size_a: ImageSize,
    size_b: ImageSize,
    base_width: int = BASE_WIDTH,
    height_threshold: int = HEIGHT_THRESHOLD,
) -> bool:
    """
    Check whether two image sizes have close enough proportions.

    Both images are conceptually rescaled to base_width; their heights must
    then differ by at most height_threshold pixels. Cross-multiplication keeps
    the test in integers.
    """
    xa, ya = size_a
    xb, yb = size_b
    if xa * yb * base_width + height_threshold * xa * xb < xb * ya * base_width:
        return False
    if xa * yb * base_width > xb * ya * base_width + height_threshold * xa * xb:
        return False
    return True


def aspect_delta(size_a: ImageSize, size_b: ImageSize, base_width: int = BASE_WIDTH) -> float:
    """Height difference in pixels after rescaling both images to base_width."""
    xa, ya = size_a
    xb, yb = size_b
    return abs(xb * ya - xa * yb) * base_width / (xa * xb)


def squared_distance(a, b) -> float:
    """Squared Euclidean distance between two value sequences."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.dot(diff, diff))


def correlation_count(a, b) -> int:
    """
    Count neighbour pairs (i, i + 1) that change the same way in both sequences.

    A pair agrees when both values rise, both fall, or both stay equal.
    """
    step_a = np.sign(np.diff(np.asarray(a, dtype=np.float64)))
    step_b = np.sign(np.diff(np.asarray(b, dtype=np.float64)))
    return int(np.count_nonzero(step_a == step_b))


def similar(
    a: Fingerprint,
    b: Fingerprint,
    masks: Optional[MaskCollection] = None,
    thresholds: SimilarityThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """
    Give a verdict for images A and B based on their fingerprints and sizes.

    Args:
        a: Fingerprint of image A
        b: Fingerprint of image B
        masks: Collection both fingerprints were computed with; when given,
            the fingerprints are checked against it
        thresholds: Filter constants

    Returns:
        True if the images are considered visually similar

    Raises:
        FingerprintMismatchError: If the fingerprints are not comparable
        InvalidSizeError: If either image size is not positive
    """
    _check_comparable(a, b, masks)
    n = len(a)

    # Filter 1. Mismatching image proportions.
    if not proportions_match(a.size, b.size, thresholds.base_width, thresholds.height_threshold):
        logger.debug(f"Rejected on proportions: {a.size} vs {b.size}")
        return False

    # Filter 2. Euclidean distance, to exit early on obvious outliers.
    values_a, values_b = a.as_array(), b.as_array()
    max_distance2 = thresholds.euclidean_threshold(n)
    distance2 = squared_distance(values_a, values_b)
    if distance2 > max_distance2:
        logger.debug(f"Rejected on distance: {distance2:.1f} > {max_distance2:.1f}")
        return False

    # Filter 3. Sign correlation of neighbouring values.
    correlation = correlation_count(values_a, values_b)
    if correlation < thresholds.correlation_threshold(n):
        logger.debug(f"Rejected on correlation: {correlation} of {n - 1} pairs")
        return False

    # Filter 4. Euclidean distance between normalized fingerprints.
    normalized_distance2 = squared_distance(normalize_values(values_a), normalize_values(values_b))
    if normalized_distance2 > max_distance2:
        logger.debug(
            f"Rejected on normalized distance: {normalized_distance2:.1f} > {max_distance2:.1f}"
        )
        return False

    return True


def similarity_stats(
    a: Fingerprint,
    b: Fingerprint,
    masks: Optional[MaskCollection] = None,
    base_width: int = BASE_WIDTH,
) -> SimilarityStats:
    """
    Compute the raw metrics of every filter without applying thresholds.

    Raises:
        FingerprintMismatchError: If the fingerprints are not comparable
        InvalidSizeError: If either image size is not positive
    """
    _check_comparable(a, b, masks)
    values_a, values_b = a.as_array(), b.as_array()
    return SimilarityStats(
        size_a=a.size,
        size_b=b.size,
        aspect_delta=aspect_delta(a.size, b.size, base_width),
        distance2=squared_distance(values_a, values_b),
        normalized_distance2=squared_distance(normalize_values(values_a), normalize_values(values_b)),
        correlation=correlation_count(values_a, values_b),
        mask_count=len(a),
    )


def stats_pass(stats: SimilarityStats, thresholds: SimilarityThresholds = DEFAULT_THRESHOLDS) -> bool:
    """
    Apply the filter thresholds to precomputed statistics.

    Gives the same verdict as similar() for the pair the statistics came from,
    which lets calibration runs try many thresholds without refingerprinting.
    """
    n = stats.mask_count
    max_distance2 = thresholds.euclidean_threshold(n)
    return (
        proportions_match(stats.size_a, stats.size_b, thresholds.base_width, thresholds.height_threshold)
        and stats.distance2 <= max_distance2
        and stats.correlation >= thresholds.correlation_threshold(n)
        and stats.normalized_distance2 <= max_distance2
    )


__all__ = [
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
