"""Typed block IR produced by the markdown parser.

HTML 렌더러와 docx 내보내기가 같은 블록 목록을 소비하므로
마크다운 파싱은 한 번만 수행됩니다.
"""

import html
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")


class TableVariant(str, Enum):
    """표 헤더로 판별한 표 종류 (스타일 적용용)."""
    OPERATIONAL = "operational"
    ADDITIONAL_FEATURES = "additional-features"
    TOTAL_INVESTMENT = "total-investment"
    IMPLEMENTATION_TIMELINE = "implementation-timeline"
    GENERIC = "generic"


@dataclass(frozen=True)
class TextRun:
    """강조 정보가 붙은 인라인 텍스트 조각."""
    text: str
    bold: bool = False
    italic: bool = False


@dataclass
class Heading:
    level: int
    runs: list[TextRun]


@dataclass
class Paragraph:
    runs: list[TextRun]


@dataclass
class BulletList:
    items: list[list[TextRun]] = field(default_factory=list)
    ordered: bool = False


@dataclass
class Table:
    header: list[str]
    rows: list[list[str]] = field(default_factory=list)
    variant: TableVariant = TableVariant.GENERIC


@dataclass
class Image:
    alt: str
    url: str


@dataclass
class CodeFence:
    language: str
    code: str
    diagram: bool = False


@dataclass
class RawHtml:
    """이미 HTML로 변환된 블록. 다시 이스케이프하거나 감싸지 않습니다."""
    markup: str

    def text_lines(self) -> list[str]:
        """태그를 뺀 텍스트 줄 (docx 내보내기용)."""
        text = HTML_TAG_PATTERN.sub("", self.markup)
        return [line.strip() for line in html.unescape(text).split("\n") if line.strip()]


Block = Union[Heading, Paragraph, BulletList, Table, Image, CodeFence, RawHtml]


def runs_text(runs: list[TextRun]) -> str:
    """강조 표시를 뺀 순수 텍스트."""
    return "".join(run.text for run in runs)
