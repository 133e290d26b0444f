"""Markdown table parsing, classification and HTML rendering unit tests."""

import pytest

from app.layers.layer3_formatting import TableVariant
from app.layers.layer3_formatting.tables import (
    classify_table,
    convert_markdown_tables,
    find_tables,
    is_total_row,
    parse_markdown_table,
    split_cells,
)

OPERATIONAL_TABLE = (
    "| Service | Estimated Cost | Notes |\n"
    "|---------|----------------|-------|\n"
    "| Hosting | $ 100 | Cloud |\n"
    "| Total | $ 100 | Estimated |"
)


class TestSplitCells:
    def test_drops_only_boundary_cells(self):
        assert split_cells("| Development Cost |  | $ 2700 |") == ["Development Cost", "", "$ 2700"]


class TestClassifyTable:
    @pytest.mark.parametrize("header, expected", [
        (["Service", "Estimated Cost", "Notes"], TableVariant.OPERATIONAL),
        (["Feature", "Description", "Estimated Cost"], TableVariant.ADDITIONAL_FEATURES),
        (["Investment Component", "Amount", "Notes"], TableVariant.TOTAL_INVESTMENT),
        (["Phase", "Duration", "Activities"], TableVariant.IMPLEMENTATION_TIMELINE),
        (["Component", "Description", "Estimate"], TableVariant.GENERIC),
    ])
    def test_variants(self, header, expected):
        assert classify_table(header) == expected

    def test_bold_header_cells(self):
        assert classify_table(["**Phase**", "**Duration**", "**Activities**"]) == (
            TableVariant.IMPLEMENTATION_TIMELINE
        )


class TestParseMarkdownTable:
    def test_header_and_rows(self):
        table = parse_markdown_table(OPERATIONAL_TABLE)
        assert table.header == ["Service", "Estimated Cost", "Notes"]
        assert table.rows == [["Hosting", "$ 100", "Cloud"], ["Total", "$ 100", "Estimated"]]
        assert table.variant == TableVariant.OPERATIONAL

    def test_short_row_is_padded(self):
        table = parse_markdown_table("| A | B | C |\n|---|---|---|\n| 1 | 2 |")
        assert table.rows == [["1", "2", ""]]

    def test_find_tables_in_prose(self):
        content = "Intro paragraph.\n\n" + OPERATIONAL_TABLE + "\n\nClosing note."
        tables = find_tables(content)
        assert len(tables) == 1
        assert tables[0].variant == TableVariant.OPERATIONAL

    def test_no_table_without_separator(self):
        assert find_tables("| not | a table |\n| just | pipes |") == []


class TestTotalRow:
    def test_total_labels(self):
        assert is_total_row(["Total", "$ 1"])
        assert is_total_row(["**Total Investment**", "$ 1"])
        assert is_total_row(["Development Cost", "", "$ 2700"])
        assert not is_total_row(["Hosting", "$ 1"])


class TestConvertMarkdownTables:
    def test_renders_html_with_variant_class(self):
        html = convert_markdown_tables(OPERATIONAL_TABLE)
        assert '<div class="table-container">' in html
        assert 'class="proposal-table table-border operational-table"' in html
        assert "<th>Estimated Cost</th>" in html
        assert '<tr class="total-row">' in html

    def test_generic_table_has_base_classes_only(self):
        html = convert_markdown_tables("| A | B |\n|---|---|\n| 1 | 2 |")
        assert 'class="proposal-table table-border"' in html
        assert 'data-variant="generic"' in html

    def test_cells_are_escaped(self):
        html = convert_markdown_tables("| A | B |\n|---|---|\n| <script> | **bold** |")
        assert "&lt;script&gt;" in html
        assert "<strong>bold</strong>" in html

    def test_idempotent(self):
        content = "Before\n" + OPERATIONAL_TABLE + "\nAfter"
        once = convert_markdown_tables(content)
        assert convert_markdown_tables(once) == once
        assert once.startswith("Before\n")
        assert once.endswith("After")
