"""SectionGenerator unit tests."""

import pytest
from unittest.mock import AsyncMock

from app.exceptions import (
    ClaudeAuthenticationError,
    ClaudeRateLimitError,
    GenerationError,
    InputValidationError,
)
from app.layers.layer2_generation import SectionGenerator, SectionRequest, normalize_selection
from app.layers.layer1_prompts.section_registry import DEFAULT_SECTIONS
from app.models import SectionStatus


class TestNormalizeSelection:
    def test_none_uses_defaults(self):
        assert [req.section_id for req in normalize_selection(None)] == DEFAULT_SECTIONS

    def test_strings_and_dicts(self):
        requests = normalize_selection([
            "next-steps",
            {"id": "data-migration", "title": "Data Migration"},
            "next-steps",
        ])
        assert requests == [
            SectionRequest("next-steps"),
            SectionRequest("data-migration", "Data Migration"),
        ]
        assert requests[1].section_type == "generic"

    def test_unknown_without_title(self):
        with pytest.raises(InputValidationError) as exc_info:
            normalize_selection(["pricing-matrix"])
        assert exc_info.value.message == "Unknown section type: pricing-matrix"

    def test_invalid_entry(self):
        with pytest.raises(InputValidationError):
            normalize_selection([42])


class TestGenerateContent:
    async def test_success_is_complete(self, generator, mock_claude_client, sample_requirements):
        mock_claude_client.generate = AsyncMock(return_value="  Our portal helps. It works well.  ")

        result = await generator.generate_content("executive-summary", sample_requirements)

        assert result.content == "Our portal helps. It works well."
        assert result.status == SectionStatus.COMPLETE
        assert result.used_fallback is False
        kwargs = mock_claude_client.generate.call_args.kwargs
        assert kwargs["max_tokens"] == 500
        assert kwargs["temperature"] == 0.7

    async def test_post_process_applied(self, generator, mock_claude_client, sample_requirements):
        mock_claude_client.generate = AsyncMock(return_value="* First\n* Second")

        result = await generator.generate_content("project-overview", sample_requirements)

        assert result.content == "• First\n• Second"

    async def test_schema_mismatch_needs_review(self, generator, mock_claude_client, sample_requirements):
        mock_claude_client.generate = AsyncMock(return_value="Hosting is about $100 a month.")

        result = await generator.generate_content("operational-costs-monthly", sample_requirements)

        assert result.status == SectionStatus.NEEDS_REVIEW

    async def test_image_only_section_skips_client(self, generator, mock_claude_client, sample_requirements):
        result = await generator.generate_content("screenshots", sample_requirements)

        assert result.content == ""
        assert result.status == SectionStatus.COMPLETE
        mock_claude_client.generate.assert_not_called()

    async def test_offline_uses_fallback(self, mock_claude_client, sample_requirements):
        mock_claude_client.is_configured = False
        generator = SectionGenerator(claude_client=mock_claude_client, use_fallback=True)

        result = await generator.generate_content("executive-summary", sample_requirements)

        assert result.used_fallback is True
        assert result.status == SectionStatus.NEEDS_REVIEW
        assert "Customer Portal" in result.content
        mock_claude_client.generate.assert_not_called()


class TestGenerateSections:
    async def test_order_follows_selection(self, generator, sample_requirements):
        selected = ["next-steps", "executive-summary", {"id": "faq", "title": "FAQ"}]

        sections, used_fallback = await generator.generate_sections(sample_requirements, selected)

        assert list(sections) == ["next-steps", "executive-summary", "faq"]
        assert sections["faq"].title == "FAQ"
        assert sections["faq"].section_type == "generic"
        assert sections["executive-summary"].title == "Executive Summary"
        assert all(section.version == 1 and not section.approved for section in sections.values())
        assert used_fallback is False

    async def test_generation_error_falls_back(self, generator, mock_claude_client, sample_requirements):
        mock_claude_client.generate = AsyncMock(side_effect=GenerationError("boom"))

        sections, used_fallback = await generator.generate_sections(sample_requirements, ["the-problem"])

        assert used_fallback is True
        assert sections["the-problem"].status == SectionStatus.NEEDS_REVIEW
        assert sections["the-problem"].content.startswith("Most businesses")

    async def test_generation_error_without_fallback(self, mock_claude_client, sample_requirements):
        mock_claude_client.generate = AsyncMock(side_effect=GenerationError("boom"))
        generator = SectionGenerator(claude_client=mock_claude_client, use_fallback=False)

        with pytest.raises(GenerationError):
            await generator.generate_sections(sample_requirements, ["the-problem"])

    @pytest.mark.parametrize("error", [
        ClaudeAuthenticationError("Invalid API key"),
        ClaudeRateLimitError("Rate limit exceeded"),
    ])
    async def test_auth_and_rate_errors_propagate(self, generator, mock_claude_client, sample_requirements, error):
        mock_claude_client.generate = AsyncMock(side_effect=error)

        with pytest.raises(type(error)):
            await generator.generate_sections(sample_requirements, ["the-problem"])

    async def test_generate_proposal(self, generator, sample_requirements):
        proposal, used_fallback = await generator.generate_proposal(sample_requirements)

        assert list(proposal.sections) == DEFAULT_SECTIONS
        assert proposal.requirements == sample_requirements
        assert proposal.id.startswith("proposal-")
