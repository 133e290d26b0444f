"""공유 pytest fixture 모음."""

import base64

import pytest
from unittest.mock import AsyncMock, MagicMock

from app.models import Proposal, Requirements, Section, SectionStatus
from app.services.state_store import InMemoryStateStore, set_state_store


# 1x1 PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@pytest.fixture(autouse=True)
def memory_store():
    """모든 테스트에서 파일 대신 메모리 저장소를 사용합니다."""
    store = InMemoryStateStore()
    set_state_store(store)
    yield store
    set_state_store(None)


@pytest.fixture
def mock_claude_client():
    """ClaudeClient mock fixture (API 키가 설정된 상태)."""
    client = MagicMock()
    client.is_configured = True
    client.generate = AsyncMock(return_value="mocked response")
    return client


@pytest.fixture
def generator(mock_claude_client):
    """mock 클라이언트를 쓰는 SectionGenerator."""
    from app.layers.layer2_generation import SectionGenerator
    return SectionGenerator(claude_client=mock_claude_client, use_fallback=True)


@pytest.fixture
def install_generator(monkeypatch, generator):
    """API 엔드포인트가 쓰는 SectionGenerator 싱글톤을 mock 버전으로 교체합니다."""
    import app.layers.layer2_generation.section_generator as module
    monkeypatch.setattr(module, "_section_generator", generator)
    return generator


@pytest.fixture
def requirements_payload():
    """위저드 폼이 보내는 요구사항 JSON."""
    return {
        "companyName": "Acme Digital",
        "projectTitle": "Customer Portal",
        "clientName": "Jane Doe",
        "clientCompany": "Globex",
        "clientEmail": "jane@globex.example",
        "projectDescription": "A self-service portal for customers to track orders.",
        "country": "United States",
        "currency": "USD",
        "budgetRange": "25-50k",
        "timeline": "2025-06-30",
        "industryType": "Retail",
        "objectives": ["Improve User Experience", "Reduce Operational Costs"],
    }


@pytest.fixture
def sample_requirements(requirements_payload):
    return Requirements.model_validate(requirements_payload)


@pytest.fixture
def sample_proposal(sample_requirements):
    """섹션 3개짜리 Proposal fixture."""
    return Proposal(
        id="proposal-test",
        requirements=sample_requirements,
        sections={
            "executive-summary": Section(
                id="executive-summary",
                title="Executive Summary",
                content="Our Customer Portal helps **Globex** serve customers faster.",
                status=SectionStatus.COMPLETE,
                section_type="executive-summary",
            ),
            "key-value-propositions": Section(
                id="key-value-propositions",
                title="Key Value Propositions",
                content="Operational Efficiency:\n● Automate order tracking.",
                status=SectionStatus.NEEDS_REVIEW,
                section_type="key-value-propositions",
            ),
            "operational-costs-monthly": Section(
                id="operational-costs-monthly",
                title="Operational Costs (Monthly)",
                content=(
                    "| Service | Estimated Cost | Notes |\n"
                    "|---------|----------------|-------|\n"
                    "| Hosting | $ 100 | Cloud |\n"
                    "| Total | $ 100 | Estimated |"
                ),
                status=SectionStatus.COMPLETE,
                section_type="operational-costs-monthly",
            ),
        },
    )


@pytest.fixture
def stored_proposal(memory_store, sample_proposal):
    """저장소에 현재 제안서로 저장된 sample_proposal."""
    from app.services.state_store import CURRENT_PROPOSAL_KEY
    memory_store.set(CURRENT_PROPOSAL_KEY, sample_proposal.to_json_dict())
    return sample_proposal


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
async def async_client():
    """httpx AsyncClient fixture (FastAPI 테스트용)."""
    from httpx import AsyncClient, ASGITransport
    from app.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
