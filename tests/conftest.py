"""Pytest fixtures for PikPix tests."""

import io
import os
import shutil
import tempfile
from pathlib import Path
from typing import Tuple

import pytest
from PIL import Image

# Keep progress bars out of captured CLI output
os.environ["PIKPIX_SHOW_PROGRESS"] = "false"

from pikpix.config import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    # Cleanup after test
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def image_generator():
    """Generate test images on the fly."""

    def _generate(
        width: int = 100,
        height: int = 100,
        format: str = "PNG",
        color: Tuple[int, ...] = (255, 0, 0),
        mode: str = "RGB",
    ) -> bytes:
        img = Image.new(mode, (width, height), color=color)
        buffer = io.BytesIO()
        img.save(buffer, format=format)
        return buffer.getvalue()

    return _generate


@pytest.fixture
def sample_png(temp_dir, image_generator) -> Path:
    """A 100x100 PNG on disk."""
    path = temp_dir / "sample.png"
    path.write_bytes(image_generator())
    return path


@pytest.fixture
def image_dir(temp_dir, image_generator) -> Path:
    """Directory with three images and one text file."""
    source = temp_dir / "images"
    source.mkdir()
    (source / "red.png").write_bytes(image_generator(color=(255, 0, 0)))
    (source / "green.jpg").write_bytes(
        image_generator(format="JPEG", color=(0, 255, 0))
    )
    (source / "blue.gif").write_bytes(image_generator(format="GIF", color=(0, 0, 255)))
    (source / "notes.txt").write_text("not an image")
    return source
