"""
헬스 체크(Health Check) 엔드포인트입니다.
서버가 살아서 정상적으로 응답하는지 확인하는 용도입니다.
"""

from fastapi import APIRouter

from app.config import get_settings
from app.services.state_store import CURRENT_PROPOSAL_KEY, get_state_store
from app.layers.layer1_prompts.section_registry import SECTION_ORDER

router = APIRouter()


@router.get("")
async def health_check():
    """서버가 켜져 있으면 {"status": "healthy"}를 반환합니다."""
    return {"status": "healthy"}


@router.get("/detail")
async def health_check_detail():
    """
    상세 상태 확인.
    생성 설정(모델, 재시도 횟수, 샘플 콘텐츠 사용 여부)과
    상태 저장소 종류, 현재 제안서 존재 여부를 함께 보여줍니다.
    """
    settings = get_settings()
    store = get_state_store()
    return {
        "status": "healthy",
        "config": {
            "claude_model": settings.claude_model,
            "max_retries": settings.max_retries,
            "use_fallback_content": settings.use_fallback_content,  # 키가 없을 때 샘플 콘텐츠 사용
            "api_key_configured": bool(settings.anthropic_api_key),
        },
        "store": {
            "backend": type(store).__name__,
            "version": store.version,
            "has_proposal": store.get(CURRENT_PROPOSAL_KEY) is not None,
        },
        "section_types": SECTION_ORDER,
    }
