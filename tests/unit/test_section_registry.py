"""Section registry unit tests."""

import pytest

from app.exceptions import InputValidationError
from app.layers.layer3_formatting import TableVariant, classify_table, find_tables
from app.layers.layer1_prompts.section_registry import (
    DEFAULT_SECTIONS,
    GENERIC_SECTION_TYPE,
    SECTION_ORDER,
    SECTION_REGISTRY,
    OutputSchema,
    get_section_spec,
    spec_for_section,
)


def test_default_sections():
    assert DEFAULT_SECTIONS == [
        "executive-summary",
        "project-overview",
        "the-problem",
        "our-solution",
        "key-value-propositions",
    ]


def test_generic_not_in_section_order():
    assert GENERIC_SECTION_TYPE not in SECTION_ORDER
    assert SECTION_ORDER[0] == "executive-summary"


def test_get_section_spec_unknown():
    with pytest.raises(InputValidationError):
        get_section_spec("unknown-section")


def test_spec_for_custom_section_is_generic():
    assert spec_for_section("data-migration-plan").key == GENERIC_SECTION_TYPE
    assert spec_for_section("next-steps").key == "next-steps"


def test_image_collections():
    assert get_section_spec("process-flow-diagram").image_collection == "process-flow-diagram"
    assert get_section_spec("screenshots").generates_text is False


@pytest.mark.parametrize("section_type", [
    key for key, spec in SECTION_REGISTRY.items()
    if spec.schema.kind in ("table", "bullets", "headed-bullets", "numbered", "paragraph")
])
def test_fallback_content_matches_schema(section_type, sample_requirements):
    spec = get_section_spec(section_type)
    content = spec.post_process(spec.fallback(sample_requirements))
    assert spec.schema.matches(content)


class TestOutputSchema:
    def test_table_requires_columns(self):
        schema = OutputSchema("table", columns=("Service", "Estimated Cost", "Notes"))
        assert schema.matches("| Service | Estimated Cost | Notes |\n|---|---|---|\n| Hosting | $ 1 | x |")
        assert not schema.matches("| Item | Cost |\n|---|---|\n| Hosting | $ 1 |")
        assert not schema.matches("Hosting costs $ 1 per month.")

    def test_table_bold_header_cells(self):
        schema = OutputSchema("table", columns=("Phase", "Duration", "Activities"))
        content = "| **Phase** | **Duration** | **Activities** |\n|---|---|---|\n| Build | 6 weeks | Code |"
        assert schema.matches(content)
        assert classify_table(find_tables(content)[0].header) == TableVariant.IMPLEMENTATION_TIMELINE

    def test_bullets_need_more_than_one_item(self):
        schema = OutputSchema("bullets")
        assert schema.matches("* One\n* Two")
        assert not schema.matches("* One")

    def test_headed_bullets(self):
        schema = OutputSchema("headed-bullets", headings=("Revenue Impact:", "Cost Savings:"))
        assert schema.matches("Revenue Impact:\n● a\nCost Savings:\n● b")
        assert not schema.matches("Revenue Impact:\n● a")

    def test_empty_content_never_matches(self):
        assert not OutputSchema("paragraph").matches("   ")

    def test_images_always_match(self):
        assert OutputSchema("images").matches("")
