"""JPEG format handler."""

from typing import Any, Dict

import structlog
from PIL import ImageFile

from pikpix.core.conversion.formats.base import (
    BaseFormatHandler,
    EncodeOptions,
    FormatCapabilities,
)

# Enable loading of truncated images
ImageFile.LOAD_TRUNCATED_IMAGES = True

logger = structlog.get_logger()


class JPEGHandler(BaseFormatHandler):
    """Handler for JPEG format."""

    capabilities = FormatCapabilities(
        quality=True,
        lossless=False,
        chroma_subsampling=True,
        adaptive_quantization=True,
    )

    def __init__(self):
        """Initialize JPEG handler."""
        super().__init__()
        self.supported_formats = ["jpeg"]
        self.format_name = "JPEG"

    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """Get JPEG-specific encoder parameters."""
        save_params: Dict[str, Any] = {}
        if options.quality is not None:
            save_params["quality"] = options.quality
        if options.progressive:
            save_params["progressive"] = True
        if options.subsampling is not None:
            save_params["subsampling"] = options.subsampling
        if options.qtables is not None:
            save_params["qtables"] = options.qtables
            logger.debug("Using custom quantization table")
        return save_params

    def _supports_transparency(self) -> bool:
        """JPEG doesn't support transparency."""
        return False

    def _supports_mode(self, mode: str) -> bool:
        """Check if JPEG supports the given color mode."""
        return mode in ("RGB", "L", "CMYK")
