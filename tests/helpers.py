"""Shared test helpers for format availability and sniffed content types."""

import pytest
from PIL import features

from pikpix.core.conversion.formats.heif_handler import HEIF_AVAILABLE

AVIF_AVAILABLE = features.check("avif")

# Content type each output format is sniffed as
EXPECTED_MIME_TYPES = {
    "heic": {"image/heic", "image/heif"},
    "heif": {"image/heic", "image/heif"},
    "avif": {"image/avif"},
    "jpeg": {"image/jpeg"},
    "png": {"image/png"},
    "tiff": {"image/tiff"},
    "tif": {"image/tiff"},
    "webp": {"image/webp"},
    "gif": {"image/gif"},
    "jp2": {"image/jp2"},
    "jpx": {"image/jp2"},
    "j2k": {"image/j2c"},
    "j2c": {"image/j2c"},
    "svg": {"image/svg+xml"},
}

requires_heif = pytest.mark.skipif(
    not HEIF_AVAILABLE, reason="pillow-heif is not installed"
)


def skip_unavailable(format_name: str) -> None:
    """Skip the current test when the format's codec is missing."""
    if format_name in ("heif", "heic") and not HEIF_AVAILABLE:
        pytest.skip("pillow-heif is not installed")
    if format_name == "avif" and not AVIF_AVAILABLE:
        pytest.skip("Pillow was built without AVIF support")
