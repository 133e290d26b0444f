"""Bullet normalization pass unit tests."""

from app.layers.layer3_formatting.bullets import (
    normalize_bullets,
    parse_bullet_items,
    split_sentences,
)


class TestNormalizeBullets:
    def test_star_bullets_become_glyph(self):
        content = "* First point\n* Second point"
        assert normalize_bullets(content) == "• First point\n• Second point"

    def test_single_line_split_into_sentences(self):
        content = "The portal reduces calls. Customers track orders. Staff save time."
        assert normalize_bullets(content) == (
            "• The portal reduces calls.\n• Customers track orders.\n• Staff save time."
        )

    def test_idempotent(self):
        once = normalize_bullets("* Alpha\n* Beta\nGamma")
        assert normalize_bullets(once) == once

    def test_bold_marker_is_not_a_bullet(self):
        items = parse_bullet_items("**Key:** value\n* item")
        assert items == ["**Key:** value", "item"]

    def test_blank_lines_dropped(self):
        assert normalize_bullets("* One\n\n\n* Two") == "• One\n• Two"

    def test_empty_content(self):
        assert normalize_bullets("") == ""
        assert parse_bullet_items("   \n ") == []


class TestSplitSentences:
    def test_requires_capital_after_period(self):
        assert split_sentences("Version 2.0 ships soon. It is fast.") == [
            "Version 2.0 ships soon.",
            "It is fast.",
        ]

    def test_abbreviation_is_split(self):
        """약어 뒤 대문자에서도 분리되는 알려진 한계."""
        assert split_sentences("Serving U.S. Businesses nationwide.") == [
            "Serving U.S.",
            "Businesses nationwide.",
        ]
