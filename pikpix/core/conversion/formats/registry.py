"""Lookup table of output formats and their handlers."""

from typing import Dict, List, Type

from pikpix.core.constants import FORMAT_ALIASES, SUPPORTED_FORMATS
from pikpix.core.conversion.formats.base import BaseFormatHandler, FormatCapabilities


class FormatRegistry:
    """Maps format names to handler instances and their capabilities."""

    def __init__(self) -> None:
        """Initialize the registry with every supported format."""
        self.format_handlers: Dict[str, BaseFormatHandler] = {}
        self._initialize_handlers()

    def _initialize_handlers(self) -> None:
        """Initialize format handlers."""
        # Import handlers here to avoid circular imports
        from pikpix.core.conversion.formats.avif_handler import AVIFHandler
        from pikpix.core.conversion.formats.gif_handler import GifHandler
        from pikpix.core.conversion.formats.heif_handler import HeifHandler
        from pikpix.core.conversion.formats.jpeg2000_handler import JPEG2000Handler
        from pikpix.core.conversion.formats.jpeg_handler import JPEGHandler
        from pikpix.core.conversion.formats.png_handler import PNGHandler
        from pikpix.core.conversion.formats.raw_handler import RawHandler
        from pikpix.core.conversion.formats.svg_handler import SvgHandler
        from pikpix.core.conversion.formats.tiff_handler import TiffHandler
        from pikpix.core.conversion.formats.webp_handler import WebPHandler

        handler_classes: List[Type[BaseFormatHandler]] = [
            HeifHandler,
            AVIFHandler,
            JPEGHandler,
            PNGHandler,
            RawHandler,
            TiffHandler,
            WebPHandler,
            GifHandler,
            JPEG2000Handler,
            SvgHandler,
        ]
        for handler_class in handler_classes:
            self.register_handler(handler_class)

    def register_handler(self, handler_class: Type[BaseFormatHandler]) -> None:
        """Register a handler under every format name it writes."""
        handler = handler_class()
        for format_name in handler.supported_formats:
            self.format_handlers[format_name] = handler

        # Also register all aliases that point to these formats
        for alias, target in FORMAT_ALIASES.items():
            if target in handler.supported_formats:
                self.format_handlers[alias] = handler

    def canonicalize(self, format_name: str) -> str:
        """Resolve format name to canonical name."""
        format_lower = format_name.strip().lower()
        return FORMAT_ALIASES.get(format_lower, format_lower)

    def is_supported_format(self, format_name: str) -> bool:
        return format_name.strip().lower() in SUPPORTED_FORMATS

    def get_handler(self, format_name: str) -> BaseFormatHandler:
        """Get the handler for a format name or alias.

        Raises:
            KeyError: If no handler writes the format
        """
        return self.format_handlers[self.canonicalize(format_name)]

    def capabilities(self, format_name: str) -> FormatCapabilities:
        """Get the encoder features a format supports."""
        return self.get_handler(format_name).capabilities


format_registry = FormatRegistry()
