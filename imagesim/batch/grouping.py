"""
Grouping module for the batch package.

Compares every pair of fingerprinted images with the similarity filters and
merges similar pairs into groups with a Union-Find structure. There is no
index: the cost is quadratic in the number of images.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Optional, Callable

from ..dependencies import progress_bar
from ..fingerprint import DEFAULT_THRESHOLDS, SimilarityThresholds, similar
from ..models import ImageRecord, SimilarGroup


def find_similar_groups(
    records: list[ImageRecord],
    thresholds: SimilarityThresholds = DEFAULT_THRESHOLDS,
    start_id: int = 1,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
    logger: Optional[logging.Logger] = None,
) -> list[SimilarGroup]:
    """
    Find groups of visually similar images.

    Records without a fingerprint, or whose fingerprint does not share the
    mask collection of the first usable record, are skipped.

    Args:
        records: ImageRecord objects produced by fingerprint_files
        thresholds: Similarity filter constants
        start_id: Starting ID for groups
        progress_callback: Optional callback(current, total) for progress
        show_progress: Whether to show tqdm progress bar
        logger: Optional logger for status messages

    Returns:
        List of SimilarGroup objects with at least two images each
    """
    candidates = [r for r in records if r.fingerprint is not None]
    if candidates:
        reference = candidates[0].fingerprint
        comparable = [
            r for r in candidates
            if len(r.fingerprint) == len(reference) and r.fingerprint.mask_size == reference.mask_size
        ]
        if logger and len(comparable) != len(candidates):
            logger.warning(
                f"Skipping {len(candidates) - len(comparable):,} fingerprints "
                f"from a different mask collection"
            )
        candidates = comparable

    if len(candidates) < 2:
        return []

    parent = list(range(len(candidates)))

    def find(x: int) -> int:
        if parent[x] != x:
            parent[x] = find(parent[x])  # Path compression
        return parent[x]

    def union(x: int, y: int) -> None:
        px, py = find(x), find(y)
        if px != py:
            parent[px] = py

    total_comparisons = (len(candidates) * (len(candidates) - 1)) // 2

    # Small sets finish before a bar is useful
    pbar = progress_bar(
        total_comparisons, "Comparing images", "cmp", enabled=show_progress and total_comparisons > 1000
    )

    comparison_count = 0
    merges = 0
    for i in range(len(candidates)):
        for j in range(i + 1, len(candidates)):
            if find(i) != find(j) and similar(
                candidates[i].fingerprint, candidates[j].fingerprint, thresholds=thresholds
            ):
                union(i, j)
                merges += 1

            comparison_count += 1
            if pbar is not None and comparison_count % 1000 == 0:
                pbar.update(1000)
            if progress_callback and comparison_count % 10000 == 0:
                progress_callback(comparison_count, total_comparisons)

    if pbar is not None:
        remaining = comparison_count % 1000
        if remaining:
            pbar.update(remaining)
        pbar.close()

    if logger:
        logger.info(f"Merged {merges:,} similar pairs into groups after {total_comparisons:,} comparisons")

    groups: dict[int, list[ImageRecord]] = defaultdict(list)
    for i, record in enumerate(candidates):
        groups[find(i)].append(record)

    similar_groups: list[SimilarGroup] = []
    group_id = start_id
    for group_records in groups.values():
        if len(group_records) > 1:
            similar_groups.append(SimilarGroup(id=group_id, images=group_records))
            group_id += 1

    return similar_groups


__all__ = ['find_similar_groups']
