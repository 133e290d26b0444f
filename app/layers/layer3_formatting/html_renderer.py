"""Block IR to HTML fragment renderer."""

import html
import re
from typing import Iterable

from .blocks import Block, BulletList, CodeFence, Heading, Image, Paragraph, RawHtml, Table
from .images import render_figure_html
from .inline import render_runs_html
from .markdown import parse_markdown
from .tables import render_table_html

# 섹션 본문 안의 제목은 문서 제목(h1), 섹션 제목(h2) 아래 단계로 내립니다.
HEADING_OFFSET = 2
MAX_HEADING_TAG = 6

# 그대로 내보내는 HTML 블록에서도 실행 요소는 제거합니다.
ACTIVE_ELEMENT_PATTERN = re.compile(r"<(script|style|iframe)\b.*?(?:</\1\s*>|$)", re.IGNORECASE | re.DOTALL)


def render_block_html(block: Block) -> str:
    if isinstance(block, Heading):
        level = min(block.level + HEADING_OFFSET, MAX_HEADING_TAG)
        return f"<h{level}>{render_runs_html(block.runs)}</h{level}>"

    if isinstance(block, Paragraph):
        return f"<p>{render_runs_html(block.runs)}</p>"

    if isinstance(block, BulletList):
        tag = "ol" if block.ordered else "ul"
        items = "\n".join(f"<li>{render_runs_html(item)}</li>" for item in block.items)
        return f'<{tag} class="proposal-list">\n{items}\n</{tag}>'

    if isinstance(block, Table):
        return render_table_html(block)

    if isinstance(block, Image):
        return render_figure_html(block.alt, block.url)

    if isinstance(block, CodeFence):
        # 다이어그램 코드는 렌더링하지 않습니다 (업로드된 이미지로 대체)
        if block.diagram:
            return ""
        lang_class = f' class="language-{html.escape(block.language)}"' if block.language else ""
        return f"<pre><code{lang_class}>{html.escape(block.code, quote=False)}</code></pre>"

    if isinstance(block, RawHtml):
        return ACTIVE_ELEMENT_PATTERN.sub("", block.markup)

    raise TypeError(f"Unsupported block type: {type(block).__name__}")


def render_blocks_html(blocks: Iterable[Block]) -> str:
    return "\n".join(part for part in (render_block_html(block) for block in blocks) if part)


def render_markdown_html(content: str, heading_lines: Iterable[str] = ()) -> str:
    """마크다운 본문을 HTML 조각으로 변환합니다."""
    return render_blocks_html(parse_markdown(content, heading_lines))
