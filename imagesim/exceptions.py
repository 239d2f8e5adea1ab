"""
Exception hierarchy for imagesim.

All errors raised deliberately by the package derive from ImageSimError so
callers can catch them in one place.
"""


class ImageSimError(Exception):
    """Base class for imagesim errors."""


class InvalidSizeError(ImageSimError, ValueError):
    """Raised for zero, negative or otherwise unusable dimensions."""


class FingerprintMismatchError(ImageSimError, ValueError):
    """Raised when fingerprints from different mask collections are compared."""


class ImageDecodeError(ImageSimError):
    """Raised when an image cannot be decoded or encoded."""


__all__ = [
    'ImageSimError',
    'InvalidSizeError',
    'FingerprintMismatchError',
    'ImageDecodeError',
]
