"""
Format Detection Service - image content sniffing
Detects the MIME type from the bytes themselves, never from a file name or header
"""

import re
from io import BytesIO
from typing import Optional

import structlog
from PIL import Image

from pikpix.core.constants import (
    HEIF_AVIF_BRANDS,
    IMAGE_MAGIC_BYTES,
    PIL_FORMAT_TO_MIME,
    SVG_PROBE_BYTES,
)

logger = structlog.get_logger()

SVG_ROOT_PATTERN = re.compile(rb"<svg[\s>]", re.IGNORECASE)


class FormatDetectionService:
    """Service for detecting image content types from file content."""

    def sniff_content_type(self, data: bytes) -> Optional[str]:
        """
        Detect the MIME type of a byte buffer.

        Args:
            data: Raw file or response body

        Returns:
            The sniffed MIME type, or None when nothing matched
        """
        if not data:
            return None

        # First try: Magic bytes detection (most reliable)
        mime_type = self._detect_by_magic_bytes(data)
        if mime_type:
            logger.debug("Content type detected by magic bytes", mime_type=mime_type)
            return mime_type

        # Second try: XML text carrying an <svg> root
        if self._looks_like_svg(data):
            logger.debug("Content type detected by SVG probe")
            return "image/svg+xml"

        # Third try: PIL detection (good fallback)
        mime_type = self._detect_by_pil(data)
        if mime_type:
            logger.debug("Content type detected by PIL", mime_type=mime_type)
            return mime_type

        logger.debug("Failed to detect content type", size=len(data))
        return None

    def _detect_by_magic_bytes(self, data: bytes) -> Optional[str]:
        """Detect the MIME type using known signatures."""
        # ISO BMFF containers carry their brand after the ftyp box header
        if len(data) >= 12 and data[4:8] == b"ftyp":
            brand = HEIF_AVIF_BRANDS.get(data[8:12])
            if brand:
                return brand

        for signature, mime_type in IMAGE_MAGIC_BYTES.items():
            if data.startswith(signature):
                # Special handling for container formats
                if mime_type == "WebP/RIFF":
                    # Verify it's actually WebP
                    if len(data) >= 12 and data[8:12] == b"WEBP":
                        return "image/webp"
                    # Could be other RIFF format (WAV, AVI)
                    return None
                return mime_type

        return None

    def _looks_like_svg(self, data: bytes) -> bool:
        head = data[:SVG_PROBE_BYTES]
        if head.startswith(b"\xef\xbb\xbf"):
            head = head[3:]
        head = head.lstrip()
        return head.startswith(b"<") and SVG_ROOT_PATTERN.search(head) is not None

    def _detect_by_pil(self, data: bytes) -> Optional[str]:
        """Detect the MIME type using PIL."""
        try:
            with Image.open(BytesIO(data)) as img:
                if img.format:
                    pil_format = img.format.upper()
                    return PIL_FORMAT_TO_MIME.get(
                        pil_format, Image.MIME.get(pil_format)
                    )
        except (OSError, ValueError, SyntaxError) as e:
            logger.debug("PIL detection failed", error=str(e))

        return None


# Singleton instance
format_detection_service = FormatDetectionService()
