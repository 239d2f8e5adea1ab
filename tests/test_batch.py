"""
Unit tests for the batch package: discovery, parallel fingerprinting and grouping.
"""

import logging
from pathlib import Path

import pytest
from PIL import Image

from imagesim import dependencies
from imagesim.dependencies import progress_bar
from imagesim.batch import (
    find_image_files,
    find_similar_groups,
    fingerprint_files,
    fingerprint_path,
    iter_image_files,
    supported_extensions,
)
from imagesim.batch import grouping, parallel
from imagesim.fingerprint import MaskCollection, SimilarityThresholds, generate_masks
from imagesim.models import Fingerprint, ImageRecord, ImageSize


def resolved(path):
    return str(Path(path).resolve())


class TestProgressBar:
    """Test the optional tqdm wrapper."""

    def test_disabled(self):
        assert progress_bar(10, "Testing", "it", enabled=False) is None

    def test_without_tqdm(self, monkeypatch):
        monkeypatch.setattr(dependencies, 'HAS_TQDM', False)
        assert progress_bar(10, "Testing", "it") is None


class TestFindImageFiles:
    """Test find_image_files function."""

    def test_finds_sample_images(self, sample_images, temp_dir):
        files = find_image_files(temp_dir, recursive=False)
        assert files == sorted(resolved(p) for p in sample_images.values())

    def test_ignores_other_extensions(self, temp_dir):
        (temp_dir / "notes.txt").write_text("hello")
        Image.new('RGB', (10, 10), color='green').save(temp_dir / "a.PNG")
        files = find_image_files(temp_dir)
        assert [Path(f).name for f in files] == ["a.PNG"]

    def test_recursive_search(self, temp_dir):
        """Test recursive directory search."""
        subdir = temp_dir / "subdir"
        subdir.mkdir()
        Image.new('RGB', (10, 10), color='green').save(subdir / "test.png")

        assert resolved(subdir / "test.png") in find_image_files(temp_dir, recursive=True)
        assert find_image_files(temp_dir, recursive=False) == []

    def test_empty_directory(self, temp_dir):
        assert find_image_files(temp_dir) == []

    def test_extension_filter(self, sample_images, temp_dir):
        files = find_image_files(temp_dir, extensions=['.JPG'])
        assert [Path(f).name for f in files] == ['flipped.jpg', 'small.jpg']

    def test_supported_extensions(self):
        extensions = supported_extensions()
        assert {'.png', '.jpg', '.gif'} <= extensions
        assert all(ext == ext.lower() for ext in extensions)

    def test_symlinked_file_listed_once(self, temp_dir):
        Image.new('RGB', (10, 10), color='green').save(temp_dir / "a.png")
        (temp_dir / "link.png").symlink_to(temp_dir / "a.png")
        assert list(iter_image_files(temp_dir)) == [(temp_dir / "a.png").resolve()]


class TestFingerprintFiles:
    """Test fingerprint_path and fingerprint_files."""

    def test_fingerprint_path(self, sample_images, masks):
        record = fingerprint_path(sample_images['large'], masks)
        assert record.error is None
        assert record.size == ImageSize(533, 400)
        assert record.file_size > 0

    def test_missing_file_recorded(self, masks):
        record = fingerprint_path("/nonexistent/file.jpg", masks)
        assert record.fingerprint is None
        assert record.error

    def test_corrupted_file_recorded(self, sample_images, masks):
        record = fingerprint_path(sample_images['corrupted'], masks)
        assert record.fingerprint is None
        assert "Not a valid image" in record.error

    def test_keeps_input_order(self, sample_images):
        paths = [sample_images[name] for name in ('red', 'large', 'corrupted', 'small')]
        records = fingerprint_files(paths, max_workers=3, show_progress=False)
        assert [r.path for r in records] == paths
        assert [r.error is None for r in records] == [True, True, False, True]

    def test_matches_sequential(self, sample_images, masks):
        paths = [sample_images['large'], sample_images['small']]
        records = fingerprint_files(paths, masks=masks, max_workers=2, show_progress=False)
        assert [r.fingerprint for r in records] == [fingerprint_path(p, masks).fingerprint for p in paths]

    def test_empty_input(self):
        assert fingerprint_files([], show_progress=False) == []

    def test_progress_callback(self, sample_images):
        calls = []
        paths = list(sample_images.values())
        fingerprint_files(paths, progress_callback=lambda cur, tot: calls.append((cur, tot)), show_progress=False)
        assert calls[-1] == (len(paths), len(paths))

    def test_logger_summary(self, sample_images, caplog):
        logger = logging.getLogger("imagesim.test")
        with caplog.at_level(logging.INFO, logger="imagesim.test"):
            fingerprint_files([sample_images['large'], sample_images['corrupted']], show_progress=False, logger=logger)
        assert "Fingerprinted 1 of 2 images" in caplog.text

    def test_oversized_image_recorded(self, sample_images, masks, monkeypatch):
        monkeypatch.setattr(Image, 'MAX_IMAGE_PIXELS', 1000)
        paths = [sample_images['red'], sample_images['corrupted']]
        records = fingerprint_files(paths, masks=masks, show_progress=False)
        assert [r.path for r in records] == paths
        assert records[0].fingerprint is None
        assert "too large" in records[0].error

    def test_unexpected_worker_error_recorded(self, sample_images, masks, monkeypatch):
        """One failing worker does not abort the batch."""
        def flaky(filepath, masks):
            if filepath == sample_images['red']:
                raise RuntimeError("worker crashed")
            return fingerprint_path(filepath, masks)

        monkeypatch.setattr(parallel, 'fingerprint_path', flaky)
        records = fingerprint_files([sample_images['red'], sample_images['large']], masks=masks, show_progress=False)
        assert records[0].error == "worker crashed"
        assert records[0].fingerprint is None
        assert records[1].error is None

    def test_explicit_empty_mask_collection(self, sample_images):
        empty = MaskCollection(mask_size=24, masks=())
        records = fingerprint_files([sample_images['red']], masks=empty, show_progress=False)
        assert len(records[0].fingerprint) == 0


class TestFindSimilarGroups:
    """Test find_similar_groups function."""

    def test_groups_resized_copies(self, sample_images):
        records = fingerprint_files(list(sample_images.values()), show_progress=False)
        groups = find_similar_groups(records, show_progress=False)
        assert len(groups) == 1
        group = groups[0]
        assert group.id == 1
        assert {img.path for img in group.images} == {sample_images['large'], sample_images['small']}
        assert group.largest_image.path == sample_images['large']

    def test_start_id(self, sample_images):
        records = fingerprint_files([sample_images['large'], sample_images['small']], show_progress=False)
        groups = find_similar_groups(records, start_id=7, show_progress=False)
        assert [g.id for g in groups] == [7]

    def test_no_similar_images(self, sample_images):
        records = fingerprint_files(
            [sample_images['large'], sample_images['flipped'], sample_images['red']],
            show_progress=False,
        )
        assert find_similar_groups(records, show_progress=False) == []

    def test_strict_thresholds_split_group(self, sample_images):
        records = fingerprint_files([sample_images['large'], sample_images['small']], show_progress=False)
        strict = SimilarityThresholds(color_diff=0.1)
        assert find_similar_groups(records, thresholds=strict, show_progress=False) == []

    def test_records_without_fingerprint_skipped(self):
        assert find_similar_groups([ImageRecord(path="a.jpg", error="broken")], show_progress=False) == []

    def test_transitive_grouping(self):
        """A~B and B~C put all three in one group even when A and C differ."""
        size = ImageSize(100, 100)
        records = [
            ImageRecord(path=f"{name}.png", fingerprint=Fingerprint(values=[value] * 484, size=size))
            for name, value in (('a', 100.0), ('b', 120.0), ('c', 140.0))
        ]
        groups = find_similar_groups(records, show_progress=False)
        assert len(groups) == 1
        assert groups[0].image_count == 3

    def test_progress_bar_reaches_total(self, monkeypatch):
        """Comparisons past the last full thousand are still reported to the bar."""
        bars = []

        class RecordingBar:
            def __init__(self, total):
                self.total = total
                self.updates = []
                self.closed = False

            def update(self, n):
                self.updates.append(n)

            def close(self):
                self.closed = True

        def fake_progress_bar(total, desc, unit, enabled=True):
            bars.append(RecordingBar(total))
            return bars[-1]

        monkeypatch.setattr(grouping, 'progress_bar', fake_progress_bar)
        size = ImageSize(10, 10)
        records = [
            ImageRecord(path=f"{i}.png", fingerprint=Fingerprint(values=[100.0] * 484, size=size))
            for i in range(46)
        ]
        find_similar_groups(records, show_progress=True)

        bar = bars[0]
        assert bar.total == 1035
        assert sum(bar.updates) == 1035
        assert bar.closed

    def test_logs_merge_count(self, caplog):
        size = ImageSize(10, 10)
        records = [
            ImageRecord(path=f"{i}.png", fingerprint=Fingerprint(values=[100.0] * 484, size=size))
            for i in range(3)
        ]
        logger = logging.getLogger("imagesim.test")
        with caplog.at_level(logging.INFO, logger="imagesim.test"):
            find_similar_groups(records, show_progress=False, logger=logger)
        assert "Merged 2 similar pairs into groups after 3 comparisons" in caplog.text

    def test_skips_other_mask_collections(self, caplog):
        size = ImageSize(100, 100)
        small_masks = generate_masks(4)
        records = [
            ImageRecord(path="a.png", fingerprint=Fingerprint(values=[1.0] * 484, size=size)),
            ImageRecord(path="b.png", fingerprint=Fingerprint(values=[1.0] * 484, size=size)),
            ImageRecord(path="c.png", fingerprint=Fingerprint(values=[1.0] * len(small_masks), size=size, mask_size=4)),
        ]
        logger = logging.getLogger("imagesim.test")
        with caplog.at_level(logging.WARNING, logger="imagesim.test"):
            groups = find_similar_groups(records, show_progress=False, logger=logger)
        assert [img.path for img in groups[0].images] == ["a.png", "b.png"]
        assert "different mask collection" in caplog.text

    @pytest.mark.parametrize('count', [0, 1])
    def test_too_few_records(self, count):
        size = ImageSize(10, 10)
        records = [ImageRecord(path="a.png", fingerprint=Fingerprint(values=[1.0] * 484, size=size))][:count]
        assert find_similar_groups(records, show_progress=False) == []
