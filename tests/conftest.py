"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path

import numpy as np
from PIL import Image


def make_scene(width: int, height: int) -> Image.Image:
    """
    Build a smooth synthetic photo.

    Red ramps left to right, green ramps top to bottom and blue follows a
    diagonal sine wave, so the picture is neither symmetric nor periodic.
    """
    u = np.linspace(0.0, 1.0, width)[np.newaxis, :]
    v = np.linspace(0.0, 1.0, height)[:, np.newaxis]
    red = np.broadcast_to(255 * u, (height, width))
    green = np.broadcast_to(255 * v, (height, width))
    blue = 127.5 + 127.5 * np.sin(2 * np.pi * (u + v))
    rgb = np.stack([red, green, blue], axis=2)
    return Image.fromarray(np.round(rgb).astype(np.uint8))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.imagesim configuration."""
    from imagesim.user_config import get_user_config

    monkeypatch.setenv('IMAGESIM_CONFIG_DIR', str(tmp_path / 'config'))
    config = get_user_config()
    config.reload()
    yield config
    config.reload()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture(scope='session')
def scene_images():
    """
    Pillow images of one scene in several variants.

    Returns:
        dict with:
        - large: 533x400 original
        - small: 267x200 proportional downscale
        - flipped: large mirrored left to right
        - distorted: large with its quadrants rolled around
    """
    large = make_scene(533, 400)
    small = large.resize((267, 200), Image.Resampling.LANCZOS)
    flipped = large.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    distorted = Image.fromarray(np.roll(np.asarray(large), (200, 266), axis=(0, 1)))
    return {
        'large': large,
        'small': small,
        'flipped': flipped,
        'distorted': distorted,
    }


@pytest.fixture
def sample_images(temp_dir, scene_images):
    """
    Write the scene variants and a few extra files to disk.

    Returns:
        dict with paths to:
        - large.png, small.jpg, flipped.jpg, distorted.png (scene variants)
        - red.png (uniform red square)
        - corrupted.png (not an image)
    """
    images = {}

    path = temp_dir / "large.png"
    scene_images['large'].save(path, 'PNG')
    images['large'] = str(path)

    path = temp_dir / "small.jpg"
    scene_images['small'].save(path, 'JPEG', quality=90)
    images['small'] = str(path)

    path = temp_dir / "flipped.jpg"
    scene_images['flipped'].save(path, 'JPEG', quality=90)
    images['flipped'] = str(path)

    path = temp_dir / "distorted.png"
    scene_images['distorted'].save(path, 'PNG')
    images['distorted'] = str(path)

    path = temp_dir / "red.png"
    Image.new('RGB', (100, 100), color='red').save(path, 'PNG')
    images['red'] = str(path)

    path = temp_dir / "corrupted.png"
    path.write_text("not an image")
    images['corrupted'] = str(path)

    return images


@pytest.fixture(scope='session')
def masks():
    """Default mask collection."""
    from imagesim.fingerprint import generate_masks

    return generate_masks()
