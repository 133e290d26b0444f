"""Section-heading-aware pass unit tests (value propositions, Benefits & ROI)."""

from app.layers.layer3_formatting.headings import (
    format_roi_content,
    format_value_propositions,
    match_heading,
)


class TestMatchHeading:
    def test_exact_match(self):
        assert match_heading("Cost Savings:", ["Cost Savings:"]) == "Cost Savings:"

    def test_bold_wrapped_heading(self):
        assert match_heading("**Cost Savings:**", ["Cost Savings:"]) == "Cost Savings:"

    def test_partial_line_is_not_heading(self):
        assert match_heading("Cost Savings: 20% lower spend", ["Cost Savings:"]) is None


class TestFormatRoiContent:
    def test_blank_line_before_each_heading_except_first(self):
        content = (
            "Revenue Impact:\n"
            "● Faster sales: more orders\n"
            "Cost Savings:\n"
            "● Automation: fewer calls\n"
            "Competitive Advantages:\n"
            "● Speed: first to market"
        )
        assert format_roi_content(content) == (
            "Revenue Impact:\n"
            "● Faster sales: more orders\n"
            "\n"
            "Cost Savings:\n"
            "● Automation: fewer calls\n"
            "\n"
            "Competitive Advantages:\n"
            "● Speed: first to market"
        )

    def test_collapses_extra_blank_lines(self):
        content = "\n\nRevenue Impact:\n\n\n● Growth\n\n\n"
        assert format_roi_content(content) == "Revenue Impact:\n\n● Growth"

    def test_idempotent(self):
        content = "**Revenue Impact:**\n● A\n**Cost Savings:**\n● B"
        once = format_roi_content(content)
        assert format_roi_content(once) == once
        assert once.startswith("Revenue Impact:")


class TestFormatValuePropositions:
    def test_unknown_heading_untouched(self):
        content = "Operational Efficiency:\n● Less manual work\nSomething Else:\n● x"
        assert format_value_propositions(content) == content
