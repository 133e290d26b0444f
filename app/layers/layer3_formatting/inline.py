"""Inline emphasis parsing (bold/italic) into text runs."""

import html
import re

from .blocks import TextRun

# ***굵은 기울임*** / **굵게** / __굵게__ / *기울임*
INLINE_PATTERN = re.compile(
    r"\*\*\*(?P<bold_italic>[^*]+?)\*\*\*"
    r"|\*\*(?P<bold>.+?)\*\*"
    r"|__(?P<bold_alt>.+?)__"
    r"|(?<![\w*])\*(?P<italic>[^*\s](?:[^*]*[^*\s])?)\*(?![\w*])"
)


def parse_inline(text: str) -> list[TextRun]:
    """
    한 줄의 텍스트를 강조 단위 TextRun 목록으로 나눕니다.

    짝이 맞지 않는 별표는 일반 문자로 남습니다.
    """
    runs: list[TextRun] = []
    position = 0

    for match in INLINE_PATTERN.finditer(text):
        if match.start() > position:
            runs.append(TextRun(text[position:match.start()]))

        if match.group("bold_italic") is not None:
            runs.append(TextRun(match.group("bold_italic"), bold=True, italic=True))
        elif match.group("bold") is not None:
            runs.append(TextRun(match.group("bold"), bold=True))
        elif match.group("bold_alt") is not None:
            runs.append(TextRun(match.group("bold_alt"), bold=True))
        else:
            runs.append(TextRun(match.group("italic"), italic=True))
        position = match.end()

    if position < len(text):
        runs.append(TextRun(text[position:]))

    return [run for run in runs if run.text]


def render_runs_html(runs: list[TextRun]) -> str:
    """TextRun 목록을 이스케이프된 HTML 문자열로 만듭니다."""
    parts = []
    for run in runs:
        text = html.escape(run.text, quote=False)
        if run.italic:
            text = f"<em>{text}</em>"
        if run.bold:
            text = f"<strong>{text}</strong>"
        parts.append(text)
    return "".join(parts)


def inline_html(text: str) -> str:
    return render_runs_html(parse_inline(text))
