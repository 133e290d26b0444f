"""Markdown table detection, classification and HTML rendering.

표 블록 전체(헤더 행 + 구분선 행 + 데이터 행)를 하나의 정규식으로 찾고,
셀을 `|` 로 나눈 뒤 양 끝의 빈 셀만 버립니다.
표 종류는 헤더 셀 텍스트만으로 판별합니다.
"""

import re

from app.layers.layer1_prompts.contracts import (
    ADDITIONAL_FEATURES_COLUMNS,
    OPERATIONAL_COLUMNS,
    TIMELINE_COLUMNS,
    TOTAL_INVESTMENT_COLUMNS,
    TOTAL_ROW_LABELS,
)

from .blocks import Table, TableVariant
from .inline import inline_html

# 헤더 행, 대시가 하나 이상 있는 구분선 행, 0개 이상의 데이터 행
TABLE_PATTERN = re.compile(
    r"^[ \t]*\|.*\|[ \t]*\r?\n"
    r"[ \t]*\|[ \t:|-]*-[ \t:|-]*\|[ \t]*(?:\r?\n|$)"
    r"(?:[ \t]*\|.*\|[ \t]*(?:\r?\n|$))*",
    re.MULTILINE,
)
ROW_PATTERN = re.compile(r"^\s*\|.*\|\s*$")
SEPARATOR_PATTERN = re.compile(r"^\s*\|[\s:|-]*-[\s:|-]*\|\s*$")

# 판별 순서대로 (헤더가 이 컬럼들을 모두 포함하면 해당 종류)
VARIANT_COLUMNS = [
    (TableVariant.IMPLEMENTATION_TIMELINE, TIMELINE_COLUMNS),
    (TableVariant.TOTAL_INVESTMENT, TOTAL_INVESTMENT_COLUMNS),
    (TableVariant.OPERATIONAL, OPERATIONAL_COLUMNS),
    (TableVariant.ADDITIONAL_FEATURES, ADDITIONAL_FEATURES_COLUMNS),
]

VARIANT_CSS_CLASSES = {
    TableVariant.OPERATIONAL: "operational-table",
    TableVariant.ADDITIONAL_FEATURES: "additional-features-table",
    TableVariant.TOTAL_INVESTMENT: "total-investment-table",
    TableVariant.IMPLEMENTATION_TIMELINE: "timeline-table",
    TableVariant.GENERIC: "",
}


def is_table_row(line: str) -> bool:
    return bool(ROW_PATTERN.match(line))


def is_separator_row(line: str) -> bool:
    return bool(SEPARATOR_PATTERN.match(line))


def split_cells(line: str) -> list[str]:
    """행을 셀로 나눕니다. 양 끝의 빈 셀만 버리고 가운데 빈 셀은 유지합니다."""
    cells = [cell.strip() for cell in line.strip().split("|")]
    if cells and cells[0] == "":
        cells = cells[1:]
    if cells and cells[-1] == "":
        cells = cells[:-1]
    return cells


def header_labels(header: list[str]) -> set[str]:
    """굵게 표시(**)를 뺀 헤더 셀 텍스트 집합."""
    return {cell.replace("*", "").strip() for cell in header}


def classify_table(header: list[str]) -> TableVariant:
    """헤더 셀 텍스트로 표 종류를 판별합니다."""
    header_set = header_labels(header)
    for variant, columns in VARIANT_COLUMNS:
        if header_set.issuperset(columns):
            return variant
    return TableVariant.GENERIC


def is_total_row(row: list[str]) -> bool:
    if not row:
        return False
    label = row[0].replace("*", "").strip().lower()
    return any(label.startswith(total.lower()) for total in TOTAL_ROW_LABELS)


def _fit_row(cells: list[str], width: int) -> list[str]:
    """행 길이를 헤더 길이에 맞춥니다. 넘치는 셀은 마지막 셀에 합칩니다."""
    if len(cells) < width:
        return cells + [""] * (width - len(cells))
    if len(cells) > width and width > 0:
        return cells[:width - 1] + [" | ".join(cells[width - 1:])]
    return cells


def parse_table_lines(lines: list[str]) -> Table:
    """헤더 행, 구분선 행, 데이터 행 목록으로 Table을 만듭니다."""
    header = split_cells(lines[0])
    rows = []
    for line in lines[2:]:
        if not line.strip():
            continue
        cells = split_cells(line)
        if any(cells):
            rows.append(_fit_row(cells, len(header)))
    return Table(header=header, rows=rows, variant=classify_table(header))


def parse_markdown_table(block: str) -> Table:
    return parse_table_lines([line for line in block.strip().splitlines() if line.strip()])


def find_tables(content: str) -> list[Table]:
    """본문의 모든 마크다운 표를 구조화된 표로 반환합니다."""
    return [parse_markdown_table(match.group(0)) for match in TABLE_PATTERN.finditer(content or "")]


def render_table_html(table: Table) -> str:
    css_class = "proposal-table table-border"
    extra = VARIANT_CSS_CLASSES[table.variant]
    if extra:
        css_class += f" {extra}"

    parts = [
        '<div class="table-container">',
        f'<table class="{css_class}" data-variant="{table.variant.value}">',
        "<thead>",
        "<tr>",
    ]
    parts.extend(f"<th>{inline_html(cell)}</th>" for cell in table.header)
    parts.extend(["</tr>", "</thead>", "<tbody>"])

    for row in table.rows:
        parts.append('<tr class="total-row">' if is_total_row(row) else "<tr>")
        parts.extend(f"<td>{inline_html(cell)}</td>" for cell in row)
        parts.append("</tr>")

    parts.extend(["</tbody>", "</table>", "</div>"])
    return "\n".join(parts)


def convert_markdown_tables(content: str) -> str:
    """
    본문 안의 마크다운 표를 HTML 표로 치환합니다.

    마크다운 모양의 입력만 대상으로 하므로 출력(HTML)에 다시 적용해도
    결과가 바뀌지 않습니다.
    """
    if not content:
        return content

    def _replace(match: re.Match) -> str:
        trailing = "\n" if match.group(0).endswith("\n") else ""
        return render_table_html(parse_markdown_table(match.group(0))) + trailing

    return TABLE_PATTERN.sub(_replace, content)
