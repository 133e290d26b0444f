"""Line-classification markdown parser producing typed blocks.

상태 머신 구조:
┌──────────────────────────────────────────────────────────────────┐
│ 상태           │ 진입 조건                    │ 종료 조건          │
├──────────────────────────────────────────────────────────────────┤
│ NONE           │ 시작 / 블록 종료 후          │ -                  │
│ IN_TABLE       │ 표 행 + 다음 줄이 구분선     │ 표 행이 아닌 줄    │
│ IN_LIST        │ 글머리/번호 줄               │ 빈 줄, 다른 블록   │
│ IN_CODE_FENCE  │ ``` 시작 줄                  │ ``` 종료 줄        │
│ IN_HTML        │ HTML 블록 태그로 시작하는 줄 │ 빈 줄 (pre 밖)     │
└──────────────────────────────────────────────────────────────────┘

NONE 상태에서 이어지는 일반 텍스트 줄은 하나의 문단으로 합쳐집니다.
mermaid 등 다이어그램 코드 블록은 diagram=True 로 표시되며,
본문에 다이어그램 블록이 있으면 "copy this code to ..." 안내 줄은 버립니다.
"""

import re
from enum import Enum
from typing import Iterable, Optional

from app.layers.layer1_prompts.contracts import (
    DIAGRAM_FENCE_LANGUAGES,
    DIAGRAM_INSTRUCTION_PREFIXES,
    HEADED_BULLET_GLYPH,
    BULLET_GLYPH,
)

from .blocks import Block, BulletList, CodeFence, Heading, Image, Paragraph, RawHtml, TextRun
from .headings import match_heading
from .images import IMAGE_LINE_PATTERN
from .inline import parse_inline
from .tables import is_separator_row, is_table_row, parse_table_lines

FENCE_PATTERN = re.compile(r"^\s*```\s*(?P<lang>[\w-]*)\s*$")
HEADING_PATTERN = re.compile(r"^\s*(?P<marks>#{1,3})\s+(?P<text>.+?)\s*#*\s*$")
BULLET_PATTERN = re.compile(
    r"^\s*(?:[" + BULLET_GLYPH + HEADED_BULLET_GLYPH + r"]\s*|\*(?!\*)\s+|-\s+)(?P<text>.*\S.*)$"
)
NUMBERED_PATTERN = re.compile(r"^\s*\d+[.)]\s+(?P<text>.+)$")
DIAGRAM_START_PATTERN = re.compile(r"^\s*(?:flowchart|graph|sequenceDiagram|classDiagram|erDiagram)\b")
# 이미 렌더링된 HTML 블록의 시작 줄 (다시 변환하지 않음)
HTML_BLOCK_PATTERN = re.compile(
    r"^\s*</?(?:h[1-6]|p|ul|ol|li|div|section|table|thead|tbody|tr|th|td|figure|figcaption|pre|blockquote|hr)\b",
    re.IGNORECASE,
)


class ParserState(str, Enum):
    NONE = "none"
    IN_TABLE = "in-table"
    IN_LIST = "in-list"
    IN_CODE_FENCE = "in-code-fence"
    IN_HTML = "in-html"


def is_diagram_instruction(line: str) -> bool:
    lowered = line.strip().lower()
    return any(lowered.startswith(prefix) for prefix in DIAGRAM_INSTRUCTION_PREFIXES)


def _has_diagram_fence(lines: list[str]) -> bool:
    for line in lines:
        match = FENCE_PATTERN.match(line)
        if match and match.group("lang").lower() in DIAGRAM_FENCE_LANGUAGES:
            return True
    return False


class MarkdownParser:
    """
    마크다운 본문을 한 줄씩 분류하여 Block 목록을 만드는 파서.

    Args:
        heading_lines: 제목으로 취급할 닫힌 문자열 집합
            (예: "Revenue Impact:"). 일치하는 줄은 3단계 제목이 됩니다.
    """

    def __init__(self, heading_lines: Iterable[str] = ()):
        self.heading_lines = frozenset(heading_lines)

    def parse(self, content: str) -> list[Block]:
        self._blocks: list[Block] = []
        self._state = ParserState.NONE
        self._paragraph: list[str] = []
        self._list: Optional[BulletList] = None
        self._table_lines: list[str] = []
        self._fence_lang = ""
        self._fence_lines: list[str] = []
        self._html_lines: list[str] = []

        lines = (content or "").replace("\r\n", "\n").split("\n")
        strip_instructions = _has_diagram_fence(lines)

        index = 0
        while index < len(lines):
            line = lines[index]
            next_line = lines[index + 1] if index + 1 < len(lines) else None
            index += self._consume(line, next_line, strip_instructions)

        self._close_all()
        return self._blocks

    def _consume(self, line: str, next_line: Optional[str], strip_instructions: bool) -> int:
        """한 줄을 처리하고 소비한 줄 수를 반환합니다."""
        # 코드 블록 내부
        if self._state == ParserState.IN_CODE_FENCE:
            if FENCE_PATTERN.match(line):
                self._close_fence()
            else:
                self._fence_lines.append(line)
            return 1

        # 이미 HTML로 변환된 블록 내부
        if self._state == ParserState.IN_HTML:
            if line.strip() or self._html_in_pre():
                self._html_lines.append(line)
            else:
                self._close_html()
            return 1

        # 표 내부
        if self._state == ParserState.IN_TABLE:
            if is_table_row(line):
                self._table_lines.append(line)
                return 1
            self._close_table()

        stripped = line.strip()

        if not stripped:
            self._close_paragraph()
            self._close_list()
            return 1

        if HTML_BLOCK_PATTERN.match(line):
            self._close_all()
            self._state = ParserState.IN_HTML
            self._html_lines = [line]
            return 1

        fence = FENCE_PATTERN.match(line)
        if fence:
            self._close_all()
            self._state = ParserState.IN_CODE_FENCE
            self._fence_lang = fence.group("lang").lower()
            self._fence_lines = []
            return 1

        if strip_instructions and is_diagram_instruction(line):
            self._close_paragraph()
            return 1

        if is_table_row(line) and next_line is not None and is_separator_row(next_line):
            self._close_all()
            self._state = ParserState.IN_TABLE
            self._table_lines = [line, next_line]
            return 2

        heading_text = match_heading(stripped, self.heading_lines) if self.heading_lines else None
        if heading_text is not None:
            self._close_all()
            self._blocks.append(Heading(level=3, runs=[TextRun(heading_text)]))
            return 1

        heading = HEADING_PATTERN.match(line)
        if heading:
            self._close_all()
            self._blocks.append(
                Heading(level=len(heading.group("marks")), runs=parse_inline(heading.group("text")))
            )
            return 1

        image = IMAGE_LINE_PATTERN.match(line)
        if image:
            self._close_all()
            self._blocks.append(Image(alt=image.group("alt"), url=image.group("url")))
            return 1

        bullet = BULLET_PATTERN.match(line)
        if bullet:
            self._add_list_item(bullet.group("text").strip(), ordered=False)
            return 1

        numbered = NUMBERED_PATTERN.match(line)
        if numbered:
            self._add_list_item(numbered.group("text").strip(), ordered=True)
            return 1

        # 목록 항목의 이어지는 줄
        if self._state == ParserState.IN_LIST and self._list is not None:
            last = self._list.items[-1]
            self._list.items[-1] = last + parse_inline(" " + stripped)
            return 1

        self._paragraph.append(stripped)
        return 1

    def _add_list_item(self, text: str, ordered: bool) -> None:
        self._close_paragraph()
        if self._list is not None and self._list.ordered != ordered:
            self._close_list()
        if self._list is None:
            self._list = BulletList(ordered=ordered)
            self._state = ParserState.IN_LIST
        self._list.items.append(parse_inline(text))

    def _close_paragraph(self) -> None:
        if self._paragraph:
            self._blocks.append(Paragraph(runs=parse_inline(" ".join(self._paragraph))))
            self._paragraph = []

    def _close_list(self) -> None:
        if self._list is not None:
            self._blocks.append(self._list)
            self._list = None
        if self._state == ParserState.IN_LIST:
            self._state = ParserState.NONE

    def _close_table(self) -> None:
        if self._table_lines:
            self._blocks.append(parse_table_lines(self._table_lines))
            self._table_lines = []
        self._state = ParserState.NONE

    def _close_fence(self) -> None:
        code = "\n".join(self._fence_lines)
        language = self._fence_lang
        diagram = language in DIAGRAM_FENCE_LANGUAGES or (
            not language and bool(DIAGRAM_START_PATTERN.match(code))
        )
        self._blocks.append(CodeFence(language=language, code=code, diagram=diagram))
        self._fence_lines = []
        self._fence_lang = ""
        self._state = ParserState.NONE

    def _html_in_pre(self) -> bool:
        markup = "\n".join(self._html_lines).lower()
        return markup.count("<pre") > markup.count("</pre>")

    def _close_html(self) -> None:
        if self._html_lines:
            self._blocks.append(RawHtml(markup="\n".join(self._html_lines)))
            self._html_lines = []
        self._state = ParserState.NONE

    def _close_all(self) -> None:
        self._close_paragraph()
        self._close_list()
        if self._state == ParserState.IN_TABLE:
            self._close_table()
        elif self._state == ParserState.IN_CODE_FENCE:
            # 닫히지 않은 코드 블록은 끝까지를 내용으로 봅니다.
            self._close_fence()
        elif self._state == ParserState.IN_HTML:
            self._close_html()


def parse_markdown(content: str, heading_lines: Iterable[str] = ()) -> list[Block]:
    """마크다운 본문을 Block 목록으로 변환합니다."""
    return MarkdownParser(heading_lines).parse(content)
