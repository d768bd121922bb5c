"""AVIF format handler."""

from typing import Any, Dict

from PIL import features

from pikpix.core.conversion.formats.base import (
    BaseFormatHandler,
    EncodeOptions,
    FormatCapabilities,
)
from pikpix.core.exceptions import CodecError


class AVIFHandler(BaseFormatHandler):
    """Handler for AVIF format (Pillow's built-in AVIF plugin)."""

    capabilities = FormatCapabilities(quality=True, lossless=True)

    def __init__(self):
        """Initialize AVIF handler."""
        super().__init__()
        self.supported_formats = ["avif"]
        self.format_name = "AVIF"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """Get AVIF-specific encoder parameters."""
        if options.lossless:
            # Full quality with full-resolution chroma is AVIF's lossless path
            return {"quality": 100, "subsampling": "4:4:4", "speed": 0}

        if options.quality is None:
            return {}

        return {"quality": options.quality}

    def save_image(self, image, output_buffer, params) -> None:
        """Save image as AVIF, failing early when libavif is missing."""
        if not features.check("avif"):
            raise CodecError(
                "AVIF support not available. Install a Pillow build with libavif.",
                details={"format": "AVIF", "operation": "encode"},
            )
        super().save_image(image, output_buffer, params)

    def _supports_transparency(self) -> bool:
        """AVIF supports transparency."""
        return True
