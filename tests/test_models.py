"""
Unit tests for data models and formatting helpers.
"""

import json

import pytest

from imagesim.models import Fingerprint, ImageRecord, ImageSize, SimilarGroup, format_size
from imagesim.utils import export_results, format_fingerprint, format_number


def make_record(path, width=100, height=80, file_size=1000):
    fingerprint = Fingerprint(values=[1.0, 2.0, 3.0], size=ImageSize(width, height), mask_size=3)
    return ImageRecord(path=path, file_size=file_size, fingerprint=fingerprint)


class TestFormatSize:
    """Test format_size function."""

    def test_bytes(self):
        assert format_size(500) == "500.0 B"

    def test_kilobytes(self):
        assert format_size(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_size(1024 * 1024 * 2) == "2.0 MB"

    def test_zero(self):
        assert format_size(0) == "0.0 B"


class TestImageRecord:
    """Test ImageRecord dataclass."""

    def test_properties(self):
        record = make_record("/photos/cat.jpg")
        assert record.filename == "cat.jpg"
        assert record.size == ImageSize(100, 80)
        assert record.resolution == "100x80"
        assert record.file_size_formatted == "1000.0 B"

    def test_without_fingerprint(self):
        record = ImageRecord(path="/photos/broken.jpg", error="bad")
        assert record.size is None
        assert record.resolution == ""

    def test_equality_by_path(self):
        assert make_record("/a.jpg") == make_record("/a.jpg", width=5)
        assert len({make_record("/a.jpg"), make_record("/a.jpg"), make_record("/b.jpg")}) == 2

    def test_dict_round_trip(self):
        record = make_record("/photos/cat.jpg")
        restored = ImageRecord.from_dict(json.loads(json.dumps(record.to_dict())))
        assert restored.fingerprint == record.fingerprint
        assert restored.file_size == record.file_size


class TestSimilarGroup:
    """Test SimilarGroup dataclass."""

    def test_largest_image(self):
        group = SimilarGroup(id=1, images=[make_record("/s.jpg", 50, 40), make_record("/l.jpg", 500, 400)])
        assert group.largest_image.path == "/l.jpg"
        assert group.image_count == 2
        assert group.total_file_size == 2000

    def test_empty_group(self):
        assert SimilarGroup(id=1).largest_image is None

    def test_dict_round_trip(self):
        group = SimilarGroup(id=3, images=[make_record("/a.jpg"), make_record("/b.jpg")])
        data = group.to_dict()
        assert data['largest_path'] == "/a.jpg"
        restored = SimilarGroup.from_dict(data)
        assert restored.id == 3
        assert [img.path for img in restored.images] == ["/a.jpg", "/b.jpg"]


class TestFormatters:
    """Test formatting helpers."""

    def test_format_number(self):
        assert format_number(1234567) == "1,234,567"

    def test_format_fingerprint_truncates(self):
        fingerprint = Fingerprint(values=range(10), size=ImageSize(4, 3))
        text = format_fingerprint(fingerprint, precision=0, limit=3)
        assert text == "4x3 [0, 1, 2, ...] (10 values)"


class TestExportResults:
    """Test export_results function."""

    def test_json(self, temp_dir):
        path = temp_dir / "groups.json"
        export_results([SimilarGroup(id=1, images=[make_record("/a.jpg"), make_record("/b.jpg")])], path)
        data = json.loads(path.read_text())
        assert data['groups'][0]['image_count'] == 2
        assert data['groups'][0]['images'][0]['fingerprint']['values'] == [1.0, 2.0, 3.0]

    def test_txt(self, temp_dir):
        path = temp_dir / "groups.txt"
        export_results([SimilarGroup(id=1, images=[make_record("/a.jpg")])], path, 'txt')
        assert "/a.jpg (100x80)" in path.read_text()

    def test_unknown_format(self, temp_dir):
        with pytest.raises(ValueError):
            export_results([], temp_dir / "groups.csv", 'csv')
