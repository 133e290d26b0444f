"""Implementation timeline row normalization.

헤더가 Phase / Duration / Activities 인 표에서 Activities 셀이
여러 줄(또는 여러 행)로 나뉘어 생성된 경우 한 줄로 합칩니다.

처리 규칙:
- 끝에 `|` 가 없는 행은 열린 행으로 보고, `|` 로 끝나는 줄이 나올 때까지
  이어지는 줄(빈 줄 제외)을 모두 흡수합니다.
- 닫힌 행 바로 다음(빈 줄 없이)에 오는 `|` 없는 줄은 Activities 셀에 이어 붙입니다.
- Phase 와 Duration 이 모두 빈 행은 앞 행의 Activities 셀에 합칩니다.
- Activities 셀에서 <br> 태그, `**` 표시, 중복 공백을 제거합니다.
"""

import logging
import re
from typing import Optional

from .blocks import TableVariant
from .tables import classify_table, is_separator_row, is_table_row, split_cells

logger = logging.getLogger(__name__)

LINE_BREAK_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)
WHITESPACE = re.compile(r"\s+")

COLUMN_COUNT = 3
ACTIVITIES_INDEX = 2


def flatten_cell(text: str, strip_bold: bool = False) -> str:
    """셀 텍스트를 한 줄로 만듭니다."""
    text = LINE_BREAK_TAG.sub(" ", text)
    if strip_bold:
        text = text.replace("**", "")
    return WHITESPACE.sub(" ", text).strip()


def _to_row(cells: list[str]) -> list[str]:
    if len(cells) > COLUMN_COUNT:
        cells = cells[:ACTIVITIES_INDEX] + [" ".join(cells[ACTIVITIES_INDEX:])]
    return cells + [""] * (COLUMN_COUNT - len(cells))


def _add_row(rows: list[list[str]], cells: list[str]) -> None:
    row = _to_row(cells)
    if rows and not row[0].strip() and not row[1].strip():
        rows[-1][ACTIVITIES_INDEX] += " " + row[ACTIVITIES_INDEX]
        return
    rows.append(row)


def _format_row(row: list[str]) -> str:
    cells = [flatten_cell(cell, strip_bold=(i == ACTIVITIES_INDEX)) for i, cell in enumerate(row)]
    return "| " + " | ".join(cells) + " |"


def _next_non_blank(lines: list[str], start: int) -> Optional[str]:
    for line in lines[start:]:
        if line.strip():
            return line
    return None


def _collect_rows(lines: list[str], index: int) -> tuple[list[list[str]], int]:
    """
    구분선 다음 줄부터 표가 끝날 때까지 행을 모읍니다.

    Returns:
        (행 목록, 표 다음 줄의 인덱스)
    """
    rows: list[list[str]] = []
    pending: Optional[str] = None
    follows_row = False

    while index < len(lines):
        stripped = lines[index].strip()

        if pending is not None:
            if stripped.startswith("|"):
                _add_row(rows, split_cells(pending + " |"))
                pending = None
                continue
            if stripped:
                pending += " " + stripped
                if stripped.endswith("|"):
                    _add_row(rows, split_cells(pending))
                    pending = None
                    follows_row = True
            index += 1
            continue

        if stripped.startswith("|"):
            if is_table_row(stripped):
                _add_row(rows, split_cells(stripped))
                follows_row = True
            else:
                pending = stripped
            index += 1
            continue

        if not stripped:
            upcoming = _next_non_blank(lines, index)
            if upcoming is None or not upcoming.strip().startswith("|"):
                break
            follows_row = False
            index += 1
            continue

        if follows_row and rows:
            rows[-1][ACTIVITIES_INDEX] += " " + stripped
            index += 1
            continue

        break

    if pending is not None:
        _add_row(rows, split_cells(pending + " |"))

    return rows, index


def normalize_timeline(content: str) -> str:
    """
    타임라인 표의 Activities 셀을 한 줄로 정규화합니다.

    타임라인 표가 아닌 표와 표 밖의 줄은 그대로 둡니다.
    이미 정규화된 입력에 다시 적용해도 결과가 바뀌지 않습니다.
    """
    if not content:
        return content

    lines = content.split("\n")
    output: list[str] = []
    index = 0

    while index < len(lines):
        line = lines[index]
        is_timeline_header = (
            is_table_row(line)
            and index + 1 < len(lines)
            and is_separator_row(lines[index + 1])
            and classify_table(split_cells(line)) == TableVariant.IMPLEMENTATION_TIMELINE
        )
        if not is_timeline_header:
            output.append(line)
            index += 1
            continue

        output.append(line)
        output.append(lines[index + 1])
        rows, index = _collect_rows(lines, index + 2)
        output.extend(_format_row(row) for row in rows)
        logger.debug(f"[Timeline] 타임라인 표 정규화: {len(rows)}행")

    return "\n".join(output)
