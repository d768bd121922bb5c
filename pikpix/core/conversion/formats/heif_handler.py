"""HEIF/HEIC format handler."""

from typing import Any, Dict

import structlog

try:
    import pillow_heif

    # Register HEIF opener with Pillow
    pillow_heif.register_heif_opener()
    HEIF_AVAILABLE = True
except ImportError:
    HEIF_AVAILABLE = False

from pikpix.core.conversion.formats.base import (
    BaseFormatHandler,
    EncodeOptions,
    FormatCapabilities,
)
from pikpix.core.exceptions import CodecError

logger = structlog.get_logger()


class HeifHandler(BaseFormatHandler):
    """Handler for HEIF/HEIC format."""

    capabilities = FormatCapabilities(quality=True, lossless=True)

    def __init__(self):
        """Initialize HEIF handler."""
        super().__init__()
        self.supported_formats = ["heif", "heic"]
        self.format_name = "HEIF"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """Get HEIF-specific encoder parameters."""
        if options.lossless:
            # pillow-heif treats quality -1 as lossless
            return {"quality": -1, "chroma": 444}

        if options.quality is None:
            return {}

        return {"quality": options.quality}

    def save_image(self, image, output_buffer, params) -> None:
        """Save image as HEIF when pillow-heif is installed."""
        if not HEIF_AVAILABLE:
            logger.debug("HEIF encode requested without pillow-heif")
            raise CodecError(
                "HEIF support not available. Install pillow-heif package.",
                details={"format": "HEIF", "operation": "encode"},
            )
        super().save_image(image, output_buffer, params)

    def _supports_transparency(self) -> bool:
        """HEIF supports transparency through alpha channel."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Check if HEIF supports the given color mode."""
        return mode in ("RGB", "RGBA", "L")
