"""Unit tests for the source resolver."""

import httpx
import pytest

from pikpix.config import Settings
from pikpix.core.exceptions import InvalidImageError, NetworkError, NotFoundError
from pikpix.services.source_service import ImageAsset, SourceResolver, is_remote


def resolver_with(handler) -> SourceResolver:
    return SourceResolver(settings=Settings(), transport=httpx.MockTransport(handler))


class TestImageAsset:
    """Test suite for ImageAsset construction."""

    def test_accepts_image_types(self):
        asset = ImageAsset(data=b"abc", mime_type="image/png", source="a.png")
        assert asset.size == 3

    @pytest.mark.parametrize(
        "mime_type", ["", "text/plain", "application/json", "image/svg+xml"]
    )
    def test_rejects_other_types(self, mime_type):
        with pytest.raises(InvalidImageError):
            ImageAsset(data=b"abc", mime_type=mime_type, source="a")

    def test_message_follows_the_source(self):
        with pytest.raises(InvalidImageError) as local:
            ImageAsset(data=b"abc", mime_type="text/plain", source="a.png")
        with pytest.raises(InvalidImageError) as remote:
            ImageAsset(data=b"abc", mime_type="text/plain", source="https://x.test/a")

        assert local.value.message == "The input file is not a valid image."
        assert remote.value.message == "The fetched file is not a valid image."


class TestLocalSources:
    """Test suite for local files and directories."""

    @pytest.mark.asyncio
    async def test_reads_local_file(self, sample_png):
        async with SourceResolver(settings=Settings()) as resolver:
            asset = await resolver.resolve(str(sample_png))

        assert asset.mime_type == "image/png"
        assert asset.data == sample_png.read_bytes()
        assert asset.source == str(sample_png)

    @pytest.mark.asyncio
    async def test_extension_is_ignored(self, temp_dir, image_generator):
        misnamed = temp_dir / "photo.png"
        misnamed.write_bytes(image_generator(format="JPEG"))

        asset = await SourceResolver(settings=Settings()).resolve(str(misnamed))

        assert asset.mime_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_text_file_is_not_an_image(self, temp_dir):
        path = temp_dir / "notes.png"
        path.write_text("hello")

        with pytest.raises(InvalidImageError) as exc_info:
            await SourceResolver(settings=Settings()).resolve(str(path))

        assert exc_info.value.message == "The input file is not a valid image."

    @pytest.mark.asyncio
    async def test_missing_path_is_not_found(self, temp_dir):
        with pytest.raises(NotFoundError) as exc_info:
            await SourceResolver(settings=Settings()).resolve(str(temp_dir / "nope.png"))

        assert exc_info.value.message == "Input path does not exist."

    @pytest.mark.asyncio
    async def test_directory_is_not_a_file(self, temp_dir):
        with pytest.raises(InvalidImageError):
            await SourceResolver(settings=Settings()).read_file(str(temp_dir))

    def test_entries_are_direct(self, image_dir):
        (image_dir / "nested").mkdir()
        (image_dir / "nested" / "deep.png").write_bytes(b"x")
        resolver = SourceResolver(settings=Settings())

        entries = resolver.entries(str(image_dir))

        names = {name for name, _ in entries}
        assert names == {"red.png", "green.jpg", "blue.gif", "notes.txt", "nested"}
        for name, path in entries:
            assert path == str(image_dir / name)

    def test_entries_ignore_files_written_later(self, image_dir):
        resolver = SourceResolver(settings=Settings())

        entries = resolver.entries(str(image_dir))
        (image_dir / "red_1.png").write_bytes(b"x")

        assert len(entries) == 4
        assert "red_1.png" not in {name for name, _ in entries}

    @pytest.mark.asyncio
    async def test_svg_file_is_not_a_valid_image(self, temp_dir):
        path = temp_dir / "logo.svg"
        path.write_text('<svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"></svg>')

        with pytest.raises(InvalidImageError) as exc_info:
            await SourceResolver(settings=Settings()).resolve(str(path))

        assert exc_info.value.message == "The input file is not a valid image."
        assert exc_info.value.details["mime_type"] == "image/svg+xml"


class TestRemoteSources:
    """Test suite for http(s) fetches."""

    def test_is_remote(self):
        assert is_remote("http://example.com/a.png")
        assert is_remote("https://example.com/a.png")
        assert not is_remote("ftp://example.com/a.png")
        assert not is_remote("a.png")

    @pytest.mark.asyncio
    async def test_fetches_image(self, image_generator):
        payload = image_generator(format="WEBP")
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["user_agent"] = request.headers["user-agent"]
            return httpx.Response(
                200, content=payload, headers={"content-type": "text/plain"}
            )

        async with resolver_with(handler) as resolver:
            asset = await resolver.resolve("https://example.com/cat")

        assert asset.mime_type == "image/webp"
        assert asset.data == payload
        assert seen["user_agent"].startswith("pikpix/")

    @pytest.mark.asyncio
    async def test_follows_redirects(self, image_generator):
        payload = image_generator()

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(301, headers={"location": "https://example.com/new"})
            return httpx.Response(200, content=payload)

        async with resolver_with(handler) as resolver:
            asset = await resolver.resolve("https://example.com/old")

        assert asset.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_json_payload_is_not_an_image(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"ok": True}, headers={"content-type": "image/png"}
            )

        async with resolver_with(handler) as resolver:
            with pytest.raises(InvalidImageError) as exc_info:
                await resolver.resolve("https://example.com/api")

        assert "not a valid image." in exc_info.value.message
        assert exc_info.value.message == "The fetched file is not a valid image."

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        async with resolver_with(handler) as resolver:
            with pytest.raises(NetworkError) as exc_info:
                await resolver.resolve("https://example.com/missing.png")

        assert exc_info.value.details["status_code"] == 404
        assert exc_info.value.error_code == "NET001"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with resolver_with(handler) as resolver:
            with pytest.raises(NetworkError):
                await resolver.resolve("http://example.com/a.png")

    @pytest.mark.asyncio
    async def test_client_is_closed_on_exit(self, image_generator):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=image_generator())

        resolver = resolver_with(handler)
        async with resolver:
            await resolver.resolve("https://example.com/a.png")
            assert resolver._client is not None

        assert resolver._client is None
