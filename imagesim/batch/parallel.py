"""
Parallel fingerprinting module for the batch package.

Runs one decode + fingerprint pipeline per file on a thread pool. Workers
share only the immutable mask collection.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Callable

from ..config import DEFAULT_WORKERS
from ..dependencies import progress_bar
from ..exceptions import ImageSimError
from ..fingerprint import MaskCollection, compute_fingerprint, generate_masks
from ..imaging import open_image
from ..models import ImageRecord

_logger = logging.getLogger(__name__)


def fingerprint_path(filepath: str, masks: MaskCollection) -> ImageRecord:
    """
    Fingerprint one file, recording failures on the returned record.

    Args:
        filepath: Path to the image
        masks: Mask collection to fingerprint with

    Returns:
        ImageRecord with either fingerprint or error set
    """
    record = ImageRecord(path=str(filepath))
    try:
        record.file_size = os.path.getsize(filepath)
    except OSError as e:
        record.error = f"File not accessible: {e}"
        return record

    try:
        record.fingerprint = compute_fingerprint(open_image(filepath), masks)
    except ImageSimError as e:
        _logger.debug(f"Fingerprinting failed for {filepath}: {e}")
        record.error = str(e)
    return record


def fingerprint_files(
    filepaths: list[str],
    masks: Optional[MaskCollection] = None,
    max_workers: int = DEFAULT_WORKERS,
    progress_callback: Optional[Callable[[int, int], None]] = None,
    show_progress: bool = True,
    logger: Optional[logging.Logger] = None,
) -> list[ImageRecord]:
    """
    Fingerprint multiple images in parallel.

    Args:
        filepaths: List of image paths to fingerprint
        masks: Mask collection (default collection when None)
        max_workers: Number of parallel workers
        progress_callback: Optional callback(current, total) for progress updates
        show_progress: Whether to show tqdm progress bar
        logger: Optional logger for status messages

    Returns:
        List of ImageRecord objects in the order of filepaths
    """
    if not filepaths:
        return []

    masks = generate_masks() if masks is None else masks
    records: dict[str, ImageRecord] = {}

    pbar = progress_bar(len(filepaths), "Fingerprinting images", "img", enabled=show_progress)

    # Batch progress callbacks (every 100 files or 1 second)
    last_callback_time = time.time()
    callback_batch_size = 100
    callback_interval = 1.0

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(fingerprint_path, path, masks): path
            for path in filepaths
        }

        for i, future in enumerate(as_completed(futures)):
            path = futures[future]
            try:
                records[path] = future.result()
            except Exception as e:
                # Record the failure and keep going
                _logger.warning(f"Unexpected error fingerprinting {path}: {e}")
                records[path] = ImageRecord(path=str(path), error=str(e))

            if pbar is not None:
                pbar.update(1)

            if progress_callback:
                current_time = time.time()
                if (
                    (i + 1) % callback_batch_size == 0
                    or current_time - last_callback_time >= callback_interval
                    or i == len(filepaths) - 1
                ):
                    progress_callback(i + 1, len(filepaths))
                    last_callback_time = current_time

    if pbar is not None:
        pbar.close()

    results = [records[path] for path in filepaths]
    failed = sum(1 for r in results if r.error)
    if logger:
        logger.info(f"Fingerprinted {len(results) - failed:,} of {len(results):,} images")

    return results


__all__ = ['fingerprint_path', 'fingerprint_files']
