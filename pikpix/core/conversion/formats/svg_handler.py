"""SVG format handler.

Raster pixels cannot be traced into vector paths, so the SVG output embeds the
PNG-encoded image as a data URI sized to the original dimensions.
"""

import base64
from io import BytesIO
from typing import Any, BinaryIO, Dict

from PIL import Image

from pikpix.core.conversion.formats.base import BaseFormatHandler, EncodeOptions
from pikpix.core.exceptions import CodecError

SVG_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<svg xmlns="http://www.w3.org/2000/svg" '
    'xmlns:xlink="http://www.w3.org/1999/xlink" '
    'width="{width}" height="{height}" viewBox="0 0 {width} {height}">\n'
    '  <image width="{width}" height="{height}" '
    'xlink:href="data:image/png;base64,{payload}"/>\n'
    "</svg>\n"
)


class SvgHandler(BaseFormatHandler):
    """Handler for SVG output."""

    def __init__(self) -> None:
        """Initialize SVG handler."""
        super().__init__()
        self.supported_formats = ["svg"]
        self.format_name = "SVG"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        return {}

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, params: Dict[str, Any]
    ) -> None:
        """Wrap a PNG rendition of the image in an SVG document."""
        image = self.prepare_image(image)
        png_buffer = BytesIO()
        try:
            image.save(png_buffer, format="PNG")
        except (OSError, ValueError) as e:
            raise CodecError(
                f"Failed to save image as SVG: {str(e)}",
                details={"format": "SVG", "operation": "encode"},
            )

        payload = base64.b64encode(png_buffer.getvalue()).decode("ascii")
        document = SVG_TEMPLATE.format(
            width=image.width, height=image.height, payload=payload
        )
        output_buffer.write(document.encode("utf-8"))
        output_buffer.seek(0)

    def _supports_transparency(self) -> bool:
        return True

    def _supports_mode(self, mode: str) -> bool:
        return mode in ("RGB", "RGBA", "L", "LA", "P", "1")
