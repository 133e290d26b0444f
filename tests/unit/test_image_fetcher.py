"""ImageFetcher unit tests."""

import httpx
import pytest

from app.exceptions import ExportError
from app.models import ImageItem
from app.services.image_fetcher import (
    FetchedImage,
    ImageFetcher,
    decode_data_url,
    encode_data_url,
)


@pytest.fixture
def mock_http(monkeypatch, png_bytes):
    """httpx.AsyncClient가 네트워크 대신 MockTransport를 쓰도록 교체합니다."""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        if request.url.path.endswith("missing.png"):
            return httpx.Response(404)
        return httpx.Response(200, content=png_bytes, headers={"content-type": "image/png; charset=binary"})

    original = httpx.AsyncClient

    def client_factory(**kwargs):
        return original(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return requested


class TestDataUrls:
    def test_encode_and_decode(self, png_bytes):
        url = encode_data_url(png_bytes, "image/png")
        assert url.startswith("data:image/png;base64,iVBOR")
        assert decode_data_url(url) == (png_bytes, "image/png")

    def test_percent_encoded_data_url(self):
        assert decode_data_url("data:text/plain,hello%20world") == (b"hello world", "text/plain")

    def test_invalid_data_url(self):
        with pytest.raises(ExportError):
            decode_data_url("data:image/png;base64")

    def test_to_data_url(self):
        image = FetchedImage(title="x", content=b"abc", mime_type="image/gif")
        assert image.to_data_url() == "data:image/gif;base64,YWJj"


class TestImageFetcher:
    async def test_fetch_data_url(self, png_bytes):
        item = ImageItem(title="Flow", url=encode_data_url(png_bytes, "image/png"))

        image = await ImageFetcher(timeout=1).fetch(item)

        assert image.title == "Flow"
        assert image.content == png_bytes
        assert image.mime_type == "image/png"

    async def test_fetch_http(self, mock_http, png_bytes):
        item = ImageItem(title="Remote", url="https://cdn.example.com/flow.png")

        image = await ImageFetcher(timeout=1).fetch(item)

        assert image.content == png_bytes
        assert image.mime_type == "image/png"
        assert mock_http == ["https://cdn.example.com/flow.png"]

    async def test_http_error(self, mock_http):
        item = ImageItem(url="https://cdn.example.com/missing.png")
        with pytest.raises(ExportError):
            await ImageFetcher(timeout=1).fetch(item)

    async def test_blob_url_unsupported(self):
        with pytest.raises(ExportError):
            await ImageFetcher(timeout=1).fetch(ImageItem(url="blob:http://localhost/123"))

    async def test_fetch_all_skips_failures(self, mock_http, png_bytes):
        items = [
            ImageItem(title="ok", url="https://cdn.example.com/ok.png"),
            ImageItem(title="blob", url="blob:http://localhost/123"),
            ImageItem(title="gone", url="https://cdn.example.com/missing.png"),
            ImageItem(title="inline", url=encode_data_url(png_bytes, "image/png")),
        ]

        images = await ImageFetcher(timeout=1).fetch_all(items)

        assert [image.title for image in images] == ["ok", "inline"]
