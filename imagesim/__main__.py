"""
Allow running the package with: python -m imagesim

Examples:
    python -m imagesim hash photo.jpg
    python -m imagesim compare a.jpg b.jpg --stats
    python -m imagesim group /path/to/photos
    python -m imagesim config --init
"""

import sys

from .cli import main


if __name__ == '__main__':
    sys.exit(main())
