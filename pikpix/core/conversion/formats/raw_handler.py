"""Raw pixel buffer handler."""

from typing import Any, BinaryIO, Dict

from PIL import Image

from pikpix.core.conversion.formats.base import BaseFormatHandler, EncodeOptions


class RawHandler(BaseFormatHandler):
    """Writes uncompressed interleaved 8-bit pixel data with no header."""

    def __init__(self) -> None:
        """Initialize raw handler."""
        super().__init__()
        self.supported_formats = ["raw"]
        self.format_name = "RAW"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        return {}

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, params: Dict[str, Any]
    ) -> None:
        """Dump the pixel buffer as-is."""
        image = self.prepare_image(image)
        output_buffer.write(image.tobytes())
        output_buffer.seek(0)

    def _supports_transparency(self) -> bool:
        return True

    def _supports_mode(self, mode: str) -> bool:
        return mode in ("RGB", "RGBA", "L", "LA")
