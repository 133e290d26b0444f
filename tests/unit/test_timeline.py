"""Implementation timeline normalization unit tests."""

from app.layers.layer3_formatting.timeline import flatten_cell, normalize_timeline

HEADER = "| Phase | Duration | Activities |\n|-------|----------|------------|\n"


class TestFlattenCell:
    def test_removes_br_and_whitespace(self):
        assert flatten_cell("Wireframes<br>Mockups<br/>  Review") == "Wireframes Mockups Review"

    def test_strips_bold_only_when_requested(self):
        assert flatten_cell("**Launch**", strip_bold=True) == "Launch"
        assert flatten_cell("**Launch**") == "**Launch**"


class TestNormalizeTimeline:
    def test_br_tags_flattened(self):
        content = HEADER + "| Design | 2 weeks | Wireframes<br>Mockups |"
        assert normalize_timeline(content) == HEADER + "| Design | 2 weeks | Wireframes Mockups |"

    def test_open_row_absorbs_lines_across_blank(self):
        content = HEADER + "| Discovery | 1 week | Design\n\nReview |"
        assert normalize_timeline(content) == HEADER + "| Discovery | 1 week | Design Review |"

    def test_continuation_line_after_closed_row(self):
        content = HEADER + "| QA | 2 weeks | Testing |\nRegression suite\n| Launch | 1 week | Go-live |"
        assert normalize_timeline(content) == (
            HEADER + "| QA | 2 weeks | Testing Regression suite |\n| Launch | 1 week | Go-live |"
        )

    def test_row_without_phase_merges_into_previous(self):
        content = HEADER + "| Build | 6 weeks | Frontend |\n|  |  | **Backend** APIs |"
        assert normalize_timeline(content) == HEADER + "| Build | 6 weeks | Frontend Backend APIs |"

    def test_text_after_blank_line_ends_table(self):
        content = HEADER + "| Build | 6 weeks | Code |\n\nEstimates may change."
        assert normalize_timeline(content) == content

    def test_non_timeline_table_untouched(self):
        content = "| Service | Estimated Cost | Notes |\n|---|---|---|\n| Hosting | $ 1 | a<br>b |"
        assert normalize_timeline(content) == content

    def test_idempotent(self):
        content = HEADER + "| Discovery | 1 week | Design\nReview |\n| Build | 6 weeks | **Code**<br>Test |"
        once = normalize_timeline(content)
        assert normalize_timeline(once) == once
        assert once == HEADER + "| Discovery | 1 week | Design Review |\n| Build | 6 weeks | Code Test |"
