"""WebP format handler."""

from typing import Any, Dict

from pikpix.core.conversion.formats.base import (
    BaseFormatHandler,
    EncodeOptions,
    FormatCapabilities,
)


class WebPHandler(BaseFormatHandler):
    """Handler for WebP format."""

    capabilities = FormatCapabilities(quality=True, lossless=True)

    def __init__(self):
        """Initialize WebP handler."""
        super().__init__()
        self.supported_formats = ["webp"]
        self.format_name = "WEBP"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """Get WebP-specific encoder parameters."""
        if options.lossless:
            return {
                "lossless": True,
                # For lossless WebP quality is the compression effort
                "quality": 100 if options.quality is None else options.quality,
                "method": 6,  # Slowest but best compression
            }

        if options.quality is None:
            return {}

        # WebP quality range is 0-100 (same as our range)
        return {"quality": options.quality}

    def _supports_transparency(self) -> bool:
        """WebP supports transparency."""
        return True
