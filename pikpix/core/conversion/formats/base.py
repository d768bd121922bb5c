"""Base format handler interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, List, Optional

from PIL import Image

from pikpix.core.exceptions import CodecError


@dataclass(frozen=True)
class FormatCapabilities:
    """Encoder features a format can honour."""

    quality: bool = False
    lossless: bool = False
    chroma_subsampling: bool = False
    adaptive_quantization: bool = False


@dataclass(frozen=True)
class EncodeOptions:
    """Encoding choices already checked against the target's capabilities."""

    quality: Optional[int] = None
    lossless: bool = False
    progressive: bool = False
    subsampling: Optional[int] = None
    qtables: Optional[List[List[int]]] = None


class BaseFormatHandler(ABC):
    """Abstract base class for format handlers."""

    capabilities = FormatCapabilities()

    def __init__(self) -> None:
        """Initialize format handler."""
        self.supported_formats: list[str] = []
        self.format_name: str = ""

    def can_handle(self, format_name: str) -> bool:
        """Check if this handler can process the given format."""
        return format_name.lower() in self.supported_formats

    @abstractmethod
    def build_save_params(
        self, format_name: str, options: EncodeOptions
    ) -> Dict[str, Any]:
        """Translate encode options into encoder keyword arguments."""

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, params: Dict[str, Any]
    ) -> None:
        """Save image to buffer with the given encoder arguments."""
        image = self.prepare_image(image)
        try:
            image.save(output_buffer, format=self.format_name, **params)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise CodecError(
                f"Failed to save image as {self.format_name}: {str(e)}",
                details={"format": self.format_name, "operation": "encode"},
            )
        output_buffer.seek(0)

    def prepare_image(self, image: Image.Image) -> Image.Image:
        """Prepare image for conversion (e.g., convert color mode if needed)."""
        # Convert unsupported modes to RGB/RGBA first
        if not self._supports_mode(image.mode):
            if "A" in image.getbands() or "transparency" in image.info:
                image = image.convert("RGBA")
            else:
                image = image.convert("RGB")

        # Convert RGBA to RGB for formats that don't support transparency
        if "A" in image.getbands() and not self._supports_transparency():
            # Create white background
            background = Image.new("RGB", image.size, (255, 255, 255))
            rgba = image.convert("RGBA")
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background

        return image

    def _supports_transparency(self) -> bool:
        """Check if format supports transparency."""
        # Override in subclasses
        return False

    def _supports_mode(self, mode: str) -> bool:
        """Check if format supports the given color mode."""
        # Override in subclasses
        return mode in ("RGB", "RGBA")
