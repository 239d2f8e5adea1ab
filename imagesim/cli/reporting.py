"""
Report formatting and display for the CLI interface.

Provides functions to print comparison results and similar-image groups in a
human-readable format.
"""

from __future__ import annotations

from ..models import ImageRecord, SimilarGroup, SimilarityStats, format_size


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def print_comparison(path_a: str, path_b: str, verdict: bool, stats: SimilarityStats | None = None) -> None:
    """
    Print the verdict for a pair of images, with statistics when given.

    Args:
        path_a: First image path
        path_b: Second image path
        verdict: Result of the similarity filters
        stats: Optional raw filter statistics
    """
    print(f"{path_a}\n{path_b}")
    print(f"Verdict: {'SIMILAR' if verdict else 'NOT SIMILAR'}")
    if stats is not None:
        print(f"  Sizes:                {stats.size_a} vs {stats.size_b}")
        print(f"  Aspect delta:         {stats.aspect_delta:.2f} px")
        print(f"  Distance^2:           {stats.distance2:.1f}")
        print(f"  Normalized distance^2: {stats.normalized_distance2:.1f}")
        print(f"  Correlation:          {stats.correlation} / {stats.mask_count}")


def print_group_report(groups: list[SimilarGroup], records: list[ImageRecord]) -> None:
    """
    Print a report of similar-image groups.

    Args:
        groups: Groups found by find_similar_groups
        records: All fingerprinted records, for the summary line

    Notes:
        - Groups are numbered starting from 1
        - The largest image of each group is marked with [LARGEST]
    """
    print("\n" + "=" * 70)
    print("SIMILAR IMAGE REPORT")
    print("=" * 70)

    grouped = sum(g.image_count for g in groups)
    print(f"\nImages fingerprinted: {len(records):,}")
    print(f"Similar images found: {grouped:,} files in {len(groups):,} groups")

    if groups:
        _print_section_header("GROUPS")
    for i, group in enumerate(groups, 1):
        print(f"\nGroup {i} ({group.image_count} files, {format_size(group.total_file_size)}):")
        largest = group.largest_image
        for img in group.images:
            marker = "  [LARGEST]" if img == largest else "  [SIMILAR]"
            print(f"{marker} {img.path}")
            print(f"            {img.resolution} | {img.file_size_formatted}")

    print("\n" + "=" * 70)


__all__ = ['print_comparison', 'print_group_report']
