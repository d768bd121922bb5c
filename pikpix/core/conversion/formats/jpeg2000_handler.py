"""JPEG 2000 format handler."""

from typing import Any, Dict

from pikpix.core.conversion.formats.base import BaseFormatHandler, EncodeOptions

# Formats written as a bare codestream rather than a JP2 container
CODESTREAM_FORMATS = {"j2k", "j2c"}


class JPEG2000Handler(BaseFormatHandler):
    """Handler for JPEG 2000 (JP2 container and J2K codestream)."""

    def __init__(self) -> None:
        """Initialize JPEG 2000 handler."""
        super().__init__()
        self.supported_formats = ["jp2", "jpx", "j2k", "j2c"]
        self.format_name = "JPEG2000"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """Select container or codestream output."""
        return {"no_jp2": format_name.lower() in CODESTREAM_FORMATS}

    def _supports_transparency(self) -> bool:
        """JP2 supports an alpha channel."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Check if the OpenJPEG encoder supports the given color mode."""
        return mode in ("RGB", "RGBA", "L", "LA")
