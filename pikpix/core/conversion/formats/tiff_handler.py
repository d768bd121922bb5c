"""TIFF format handler."""

from typing import Any, Dict

from PIL import Image

from pikpix.core.conversion.formats.base import (
    BaseFormatHandler,
    EncodeOptions,
    FormatCapabilities,
)


class TiffHandler(BaseFormatHandler):
    """Handler for TIFF format."""

    capabilities = FormatCapabilities(quality=True, lossless=True)

    def __init__(self) -> None:
        """Initialize TIFF handler."""
        super().__init__()
        self.supported_formats = ["tiff", "tif"]
        self.format_name = "TIFF"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """Get TIFF-specific encoder parameters."""
        if options.lossless:
            # Use LZW compression for lossless compression
            return {"compression": "tiff_lzw"}

        if options.quality is None:
            return {}

        # Quality only applies to JPEG compression within TIFF
        return {"compression": "jpeg", "quality": options.quality}

    def save_image(self, image, output_buffer, params) -> None:
        """Save image as TIFF."""
        if params.get("compression") == "jpeg" and image.mode not in ("RGB", "L"):
            # JPEG-in-TIFF carries no alpha channel
            background = Image.new("RGB", image.size, (255, 255, 255))
            rgba = image.convert("RGBA")
            background.paste(rgba, mask=rgba.getchannel("A"))
            image = background
        super().save_image(image, output_buffer, params)

    def _supports_transparency(self) -> bool:
        """TIFF supports transparency through alpha channel."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Check if TIFF supports the given color mode."""
        return mode in ("RGB", "RGBA", "L", "LA", "CMYK", "1", "P")
