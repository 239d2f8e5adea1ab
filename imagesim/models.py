"""
Data models for imagesim.

Contains the value types passed between the fingerprinting core and the batch
tooling: image sizes, fingerprints, similarity statistics, per-file records and
groups of similar images.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional
import os

import numpy as np

from .config import MASK_SIZE

# Channel names in the order fingerprint indices cycle through them
CHANNELS = ('red', 'green', 'blue')


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


class ImageSize(NamedTuple):
    """Width and height of an image in pixels."""
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class Fingerprint:
    """
    Perceptual fingerprint of an image.

    Attributes:
        values: One mean channel value in [0, 255] per mask. Index i samples
            red when i % 3 == 0, green when i % 3 == 1 and blue when i % 3 == 2.
        size: Original (pre-resample) size of the fingerprinted image
        mask_size: Side of the mask space the fingerprint was computed with
    """
    values: tuple
    size: ImageSize
    mask_size: int = MASK_SIZE

    def __post_init__(self):
        object.__setattr__(self, 'values', tuple(float(v) for v in self.values))
        object.__setattr__(self, 'size', ImageSize(int(self.size[0]), int(self.size[1])))

    def __len__(self) -> int:
        return len(self.values)

    def as_array(self) -> np.ndarray:
        """Return the values as a float64 numpy array."""
        return np.asarray(self.values, dtype=np.float64)

    def channel(self, index: int) -> tuple:
        """Return the subsequence of values sampled from one channel (0, 1 or 2)."""
        if index not in (0, 1, 2):
            raise ValueError(f"Channel index must be 0, 1 or 2, got {index}")
        return self.values[index::3]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'width': self.size.width,
            'height': self.size.height,
            'mask_size': self.mask_size,
            'values': list(self.values),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Fingerprint':
        """Create Fingerprint from dictionary."""
        return cls(
            values=data['values'],
            size=ImageSize(data['width'], data['height']),
            mask_size=data.get('mask_size', MASK_SIZE),
        )


@dataclass(frozen=True)
class SimilarityStats:
    """
    Raw filter statistics for a pair of fingerprints.

    Attributes:
        size_a: Original size of the first image
        size_b: Original size of the second image
        aspect_delta: Height difference in pixels once both images are
            rescaled to the base width
        distance2: Squared Euclidean distance between raw fingerprints
        normalized_distance2: Squared Euclidean distance between normalized
            fingerprints
        correlation: Number of adjacent value pairs moving in the same direction
        mask_count: Fingerprint length
    """
    size_a: ImageSize
    size_b: ImageSize
    aspect_delta: float
    distance2: float
    normalized_distance2: float
    correlation: int
    mask_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'size_a': str(self.size_a),
            'size_b': str(self.size_b),
            'aspect_delta': round(self.aspect_delta, 3),
            'distance2': round(self.distance2, 3),
            'normalized_distance2': round(self.normalized_distance2, 3),
            'correlation': self.correlation,
            'mask_count': self.mask_count,
        }


@dataclass
class ImageRecord:
    """
    Fingerprint of an image file produced by batch processing.

    Attributes:
        path: Full path to the image file
        file_size: Size in bytes
        fingerprint: Computed fingerprint, None if analysis failed
        error: Error message if analysis failed
    """
    path: str
    file_size: int = 0
    fingerprint: Optional[Fingerprint] = None
    error: Optional[str] = None

    def __hash__(self):
        return hash(str(self.path))

    def __eq__(self, other):
        if not isinstance(other, ImageRecord):
            return False
        return str(self.path) == str(other.path)

    @property
    def filename(self) -> str:
        """Return just the filename portion of the path."""
        return os.path.basename(self.path)

    @property
    def size(self) -> Optional[ImageSize]:
        """Return the original image size, if fingerprinted."""
        return self.fingerprint.size if self.fingerprint else None

    @property
    def resolution(self) -> str:
        """Return resolution as 'WxH' string."""
        return str(self.size) if self.size else ""

    @property
    def file_size_formatted(self) -> str:
        """Return human-readable file size."""
        return format_size(self.file_size)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'path': self.path,
            'filename': self.filename,
            'file_size': self.file_size,
            'file_size_formatted': self.file_size_formatted,
            'resolution': self.resolution,
            'fingerprint': self.fingerprint.to_dict() if self.fingerprint else None,
            'error': self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ImageRecord':
        """Create ImageRecord from dictionary."""
        fingerprint = data.get('fingerprint')
        return cls(
            path=data['path'],
            file_size=data.get('file_size', 0),
            fingerprint=Fingerprint.from_dict(fingerprint) if fingerprint else None,
            error=data.get('error'),
        )


@dataclass
class SimilarGroup:
    """
    A group of visually similar images.

    Attributes:
        id: Unique identifier for this group
        images: List of ImageRecord objects in this group
    """
    id: int
    images: list = field(default_factory=list)

    @property
    def image_count(self) -> int:
        """Number of images in this group."""
        return len(self.images)

    @property
    def largest_image(self) -> Optional[ImageRecord]:
        """Returns the image with the most pixels in the group."""
        if not self.images:
            return None
        return max(self.images, key=lambda x: x.size.width * x.size.height if x.size else 0)

    @property
    def total_file_size(self) -> int:
        """Bytes used by all images in the group."""
        return sum(img.file_size for img in self.images)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        largest = self.largest_image
        return {
            'id': self.id,
            'image_count': self.image_count,
            'images': [img.to_dict() for img in self.images],
            'largest_path': largest.path if largest else None,
            'total_file_size': self.total_file_size,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SimilarGroup':
        """Create SimilarGroup from dictionary."""
        images = [ImageRecord.from_dict(img_data) for img_data in data.get('images', [])]
        return cls(id=data['id'], images=images)
