"""PNG format handler."""

from typing import Any, Dict

from pikpix.core.conversion.formats.base import (
    BaseFormatHandler,
    EncodeOptions,
    FormatCapabilities,
)


class PNGHandler(BaseFormatHandler):
    """Handler for PNG format."""

    capabilities = FormatCapabilities(quality=True, lossless=True)

    def __init__(self) -> None:
        """Initialize PNG handler."""
        super().__init__()
        self.supported_formats = ["png"]
        self.format_name = "PNG"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """Get PNG-specific encoder parameters."""
        # PNG is always lossless; lossless mode asks for maximum effort
        if options.lossless:
            return {"compress_level": 9, "optimize": True}

        if options.quality is None:
            return {}

        # PNG uses compression level (0-9) instead of quality
        # Map quality 0-100 to compression 9-0 (inverse relationship)
        compression_level = int(9 - (options.quality / 100) * 9)
        compression_level = max(0, min(9, compression_level))

        return {"compress_level": compression_level}

    def _supports_transparency(self) -> bool:
        """PNG supports transparency."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Check if PNG supports the given color mode."""
        return mode in ("RGB", "RGBA", "L", "LA", "P", "1")
