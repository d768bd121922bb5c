"""GIF format handler."""

from typing import Any, Dict

from pikpix.core.conversion.formats.base import BaseFormatHandler, EncodeOptions


class GifHandler(BaseFormatHandler):
    """Handler for GIF format."""

    def __init__(self) -> None:
        """Initialize GIF handler."""
        super().__init__()
        self.supported_formats = ["gif"]
        self.format_name = "GIF"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """GIF has no tunable encoder parameters here."""
        return {}

    def _supports_transparency(self) -> bool:
        """GIF supports single-colour transparency."""
        return True

    def _supports_mode(self, mode: str) -> bool:
        """Pillow quantizes RGB/RGBA to a palette on save."""
        return mode in ("RGB", "RGBA", "L", "P", "1")
