"""
Export functionality for imagesim.

Provides functions to export similar-image groups to TXT or JSON files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TextIO

from ..models import SimilarGroup


def _export_txt(groups: list[SimilarGroup], file_handle: TextIO) -> None:
    """Export groups to TXT format."""
    file_handle.write("SIMILAR IMAGE REPORT\n")
    file_handle.write("=" * 70 + "\n")
    for i, group in enumerate(groups, 1):
        file_handle.write(f"\nGroup {i}:\n")
        for img in group.images:
            file_handle.write(f"  {img.path} ({img.resolution})\n")


def _export_json(groups: list[SimilarGroup], file_handle: TextIO) -> None:
    """Export groups to JSON format, fingerprints included."""
    json.dump({'groups': [group.to_dict() for group in groups]}, file_handle, indent=2)


def export_results(groups: list[SimilarGroup], output_path: Path, export_format: str = 'json') -> None:
    """
    Export similar-image groups to a file.

    Args:
        groups: Groups to export
        output_path: Destination file
        export_format: 'json' or 'txt'

    Raises:
        ValueError: If export_format is not supported
        OSError: If the file cannot be written
    """
    exporters = {'json': _export_json, 'txt': _export_txt}
    if export_format not in exporters:
        raise ValueError(f"Unsupported export format: {export_format}")

    with open(output_path, 'w', encoding='utf-8') as f:
        exporters[export_format](groups, f)


__all__ = ['export_results']
