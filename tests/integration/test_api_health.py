"""
API 헬스 체크 및 루트 엔드포인트 통합 테스트.
서버의 기본 응답과 문서 페이지 접근을 확인합니다.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from app.main import app


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def test_root_endpoint(client: AsyncClient):
    """GET / 는 서버 기본 정보(name, version, docs)를 200으로 반환해야 한다."""
    response = await client.get("/")

    assert response.status_code == 200

    data = response.json()
    assert "name" in data
    assert "version" in data
    assert "docs" in data


async def test_docs_endpoint(client: AsyncClient):
    """GET /docs 는 Swagger UI 페이지를 200으로 반환해야 한다."""
    response = await client.get("/docs")

    assert response.status_code == 200


async def test_health_endpoint(client: AsyncClient):
    """GET /api/v1/health 는 healthy 상태를 반환해야 한다."""
    response = await client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_health_detail_endpoint(client: AsyncClient):
    """상세 헬스 체크는 생성 관련 설정을 함께 보여준다."""
    response = await client.get("/api/v1/health/detail")

    assert response.status_code == 200
    config = response.json()["config"]
    assert "claude_model" in config
    assert "use_fallback_content" in config
    assert isinstance(config["api_key_configured"], bool)


async def test_health_detail_reports_store(client: AsyncClient, stored_proposal):
    """상세 헬스 체크는 저장소 종류와 현재 제안서 존재 여부를 보여준다."""
    response = await client.get("/api/v1/health/detail")

    store = response.json()["store"]
    assert store["backend"] == "InMemoryStateStore"
    assert store["has_proposal"] is True
    assert "executive-summary" in response.json()["section_types"]
