"""Unit tests for Pydantic data models.

Tests camelCase aliasing, requirement parsing, section state rules,
and JSON serialization of the proposal aggregate.
"""

from app.models import (
    ErrorResponse,
    ImageItem,
    ImageStatus,
    Proposal,
    Requirements,
    Section,
    SectionStatus,
    find_missing_fields,
)
from app.models.proposal import SECTION_ACTIONS


# ---------------------------------------------------------------------------
# Requirements
# ---------------------------------------------------------------------------

class TestRequirements:
    def test_camel_case_input(self, requirements_payload):
        requirements = Requirements.model_validate(requirements_payload)
        assert requirements.company_name == "Acme Digital"
        assert requirements.client_company == "Globex"
        assert requirements.objectives == ["Improve User Experience", "Reduce Operational Costs"]

    def test_snake_case_input(self):
        requirements = Requirements(company_name="Acme", budget_range="<10k")
        assert requirements.budget_range == "<10k"

    def test_extra_flags_ignored(self, requirements_payload):
        requirements_payload.update({"regenerate": True, "sectionType": "next-steps"})
        requirements = Requirements.model_validate(requirements_payload)
        assert "regenerate" not in requirements.model_dump()

    def test_objectives_from_string(self):
        requirements = Requirements.model_validate({"objectives": "A, B ,, C"})
        assert requirements.objectives == ["A", "B", "C"]

    def test_objectives_none(self):
        assert Requirements.model_validate({"objectives": None}).objectives == []

    def test_dump_uses_camel_case(self, sample_requirements):
        data = sample_requirements.model_dump(by_alias=True)
        assert data["projectTitle"] == "Customer Portal"
        assert data["industryType"] == "Retail"


class TestFindMissingFields:
    def test_all_present(self, requirements_payload):
        assert find_missing_fields(requirements_payload) == []

    def test_blank_values_missing_in_order(self):
        payload = {"companyName": " ", "projectTitle": "x", "clientName": None}
        assert find_missing_fields(payload) == [
            "companyName",
            "clientName",
            "projectDescription",
            "budgetRange",
            "timeline",
            "industryType",
        ]


# ---------------------------------------------------------------------------
# Section / Proposal
# ---------------------------------------------------------------------------

class TestSection:
    def test_defaults(self):
        section = Section(id="executive-summary", title="Executive Summary")
        assert section.status == SectionStatus.COMPLETE
        assert section.approved is False
        assert section.version == 1
        assert section.content == ""

    def test_is_approved_requires_status_and_flag(self):
        section = Section(id="a", title="A", approved=True, status=SectionStatus.NEEDS_REVIEW)
        assert not section.is_approved
        section.status = SectionStatus.APPROVED
        assert section.is_approved

    def test_generating_allows_no_action(self):
        assert all(SectionStatus.GENERATING not in allowed for allowed in SECTION_ACTIONS.values())

    def test_status_values(self):
        assert SectionStatus.NEEDS_REVIEW.value == "Needs Review"


class TestProposal:
    def test_json_round_trip_keeps_section_order(self, sample_proposal):
        data = sample_proposal.to_json_dict()
        assert data["sections"]["executive-summary"]["generatedAt"]
        assert data["sections"]["key-value-propositions"]["status"] == "Needs Review"

        restored = Proposal.model_validate(data)
        assert list(restored.sections) == list(sample_proposal.sections)
        assert restored.requirements == sample_proposal.requirements

    def test_touch_updates_timestamp(self, sample_proposal):
        before = sample_proposal.updated_at
        sample_proposal.touch()
        assert sample_proposal.updated_at >= before

    def test_generated_id(self, sample_requirements):
        assert Proposal(requirements=sample_requirements).id.startswith("proposal-")


class TestImageItem:
    def test_defaults(self):
        item = ImageItem(url="https://example.com/a.png")
        assert item.status == ImageStatus.PENDING
        assert len(item.id) == 12
        assert item.to_json_dict()["uploadedAt"]


class TestErrorResponse:
    def test_serialization(self):
        error = ErrorResponse(error="Section not found: x", error_code="ERR_NOT_FOUND")
        data = error.model_dump(mode="json")
        assert data["error"] == "Section not found: x"
        assert data["details"] is None
        assert isinstance(data["timestamp"], str)
