"""
내보내기용 이미지 로더입니다.

이미지 항목의 url을 바이트로 바꿉니다.
- data: URL → base64 디코딩
- http(s) URL → httpx로 다운로드
- 그 외(blob: 등 브라우저 전용 주소) → ExportError

실패한 이미지는 로그만 남기고 건너뛰며, 문서 조립은 계속됩니다.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote_to_bytes

import httpx

from app.config import get_settings
from app.exceptions import ExportError
from app.models import ImageItem

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[^,;]*)*),(?P<data>.*)$", re.DOTALL)


@dataclass
class FetchedImage:
    """다운로드된 이미지 1건."""
    title: str
    content: bytes
    mime_type: str

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def encode_data_url(content: bytes, mime_type: str) -> str:
    """업로드된 바이트를 data URL로 만듭니다."""
    return FetchedImage(title="", content=content, mime_type=mime_type).to_data_url()


def decode_data_url(url: str) -> tuple[bytes, str]:
    """
    data: URL을 (바이트, MIME 타입)으로 해석합니다.

    Raises:
        ExportError: 형식이 잘못되었거나 base64 디코딩 실패
    """
    match = DATA_URL_PATTERN.match(url)
    if not match:
        raise ExportError("잘못된 data URL입니다", details={"url": url[:64]})

    mime_type = match.group("mime") or "application/octet-stream"
    data = match.group("data")

    if ";base64" not in match.group("params"):
        return unquote_to_bytes(data), mime_type

    try:
        return base64.b64decode(data, validate=False), mime_type
    except (binascii.Error, ValueError) as e:
        raise ExportError("data URL 디코딩 실패", details={"error": str(e)})


class ImageFetcher:
    """이미지 url → 바이트 변환기."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else get_settings().image_fetch_timeout

    async def fetch(self, item: ImageItem) -> FetchedImage:
        """
        이미지 1건을 가져옵니다.

        Raises:
            ExportError: 지원하지 않는 주소, 네트워크/HTTP 실패
        """
        url = item.url or ""

        if url.startswith("data:"):
            content, mime_type = decode_data_url(url)
            return FetchedImage(title=item.title, content=content, mime_type=mime_type)

        if url.startswith(("http://", "https://")):
            try:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url)
                    response.raise_for_status()
            except httpx.HTTPError as e:
                raise ExportError(
                    f"이미지 다운로드 실패: {url}",
                    details={"url": url, "error": str(e)},
                )
            mime_type = response.headers.get("content-type", "image/png").split(";")[0].strip()
            return FetchedImage(title=item.title, content=response.content, mime_type=mime_type)

        raise ExportError(
            f"지원하지 않는 이미지 주소입니다: {url[:32]}",
            details={"url": url[:64]},
        )

    async def fetch_all(self, items: list[ImageItem]) -> list[FetchedImage]:
        """여러 이미지를 순서대로 가져오고, 실패한 항목은 건너뜁니다."""
        fetched = []
        for item in items:
            try:
                fetched.append(await self.fetch(item))
            except ExportError as e:
                logger.warning(f"[ImageFetcher] 이미지 건너뜀 ({item.title or item.id}): {e.message}")
        return fetched
