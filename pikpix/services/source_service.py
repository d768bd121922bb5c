"""Resolve input specifiers (local files, URLs, directories) into image bytes."""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import httpx
import structlog

from pikpix.config import Settings, get_settings
from pikpix.core.constants import REMOTE_SCHEMES, UNDECODABLE_MIME_TYPES
from pikpix.core.exceptions import InvalidImageError, NetworkError, NotFoundError
from pikpix.services.format_detection_service import format_detection_service

logger = structlog.get_logger()

LOCAL_INVALID_MESSAGE = "The input file is not a valid image."
REMOTE_INVALID_MESSAGE = "The fetched file is not a valid image."


def is_remote(specifier: str) -> bool:
    """Check whether a specifier is an HTTP(S) URL."""
    return specifier.startswith(REMOTE_SCHEMES)


@dataclass(frozen=True)
class ImageAsset:
    """Raw image bytes with the content type sniffed from them.

    Only raster types Pillow can decode are accepted.
    """

    data: bytes
    mime_type: str
    source: str

    def __post_init__(self) -> None:
        mime_type = self.mime_type or ""
        if not mime_type.startswith("image/") or mime_type in UNDECODABLE_MIME_TYPES:
            raise InvalidImageError(
                REMOTE_INVALID_MESSAGE if is_remote(self.source) else LOCAL_INVALID_MESSAGE,
                details={"source": self.source, "mime_type": mime_type},
            )

    @property
    def size(self) -> int:
        return len(self.data)


class SourceResolver:
    """Turns an input specifier into ImageAssets.

    The HTTP client is created on first use and closed with ``aclose`` or by
    leaving the ``async with`` block. Pass ``transport`` to route fetches
    through a custom httpx transport.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "SourceResolver":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.fetch_timeout,
                follow_redirects=self.settings.follow_redirects,
                headers={"User-Agent": self.settings.user_agent},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def resolve(self, specifier: str) -> ImageAsset:
        """
        Resolve a single file or URL into an ImageAsset.

        Args:
            specifier: Local path or http(s) URL

        Returns:
            The image bytes with their sniffed content type

        Raises:
            NotFoundError: If the path does not exist and is not a URL
            NetworkError: If the fetch fails or returns a non-success status
            InvalidImageError: If the bytes are not an image
        """
        path = Path(specifier)
        if path.exists():
            return await self.read_file(specifier)

        if is_remote(specifier):
            data = await self.fetch(specifier)
            return self._to_asset(data, specifier)

        raise NotFoundError(details={"source": specifier})

    def entries(self, directory: str) -> List[Tuple[str, str]]:
        """List (name, path) for each direct entry of a directory.

        The listing is taken once, in the order the filesystem reports it, so
        files written into the directory afterwards are not picked up.
        """
        with os.scandir(directory) as it:
            return [(entry.name, entry.path) for entry in it]

    async def read_file(self, path: str) -> ImageAsset:
        """Read a local file into an ImageAsset."""
        file_path = Path(path)
        if not file_path.is_file():
            raise InvalidImageError(
                LOCAL_INVALID_MESSAGE,
                details={"source": path, "reason": "not a regular file"},
            )

        try:
            data = await asyncio.to_thread(file_path.read_bytes)
        except OSError as e:
            raise InvalidImageError(
                LOCAL_INVALID_MESSAGE, details={"source": path, "reason": str(e)}
            )

        logger.debug("Read input file", source=path, size=len(data))
        return self._to_asset(data, path)

    async def fetch(self, url: str) -> bytes:
        """Fetch the full body of a URL.

        Raises:
            NetworkError: On transport failure or a non-success status
        """
        client = await self._ensure_client()
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Failed to fetch {url}: {str(e)}",
                details={"source": url, "reason": type(e).__name__},
            )

        if not response.is_success:
            raise NetworkError(
                f"Failed to fetch {url}: HTTP {response.status_code}",
                details={"source": url, "status_code": response.status_code},
            )

        logger.debug("Fetched remote input", source=url, size=len(response.content))
        return response.content

    def _to_asset(self, data: bytes, source: str) -> ImageAsset:
        mime_type = format_detection_service.sniff_content_type(data)
        return ImageAsset(data=data, mime_type=mime_type or "", source=source)
