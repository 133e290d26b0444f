"""
API 라우터 설정 파일입니다.
각 기능별로 나누어진 API 주소들을 하나로 모으는 역할을 합니다.
"""

from fastapi import APIRouter

from app.api.endpoints import health, requirements, proposal

# 메인 API 라우터 생성
api_router = APIRouter()

# 헬스 체크 엔드포인트: 서버 상태 확인용 (/health)
api_router.include_router(
    health.router,
    prefix="/health",
    tags=["health"]
)

# 요구사항 처리 엔드포인트: 섹션 생성 및 단일 섹션 재생성 (/process-requirements)
api_router.include_router(
    requirements.router,
    tags=["requirements"]
)

# 제안서 엔드포인트: 섹션/이미지 검토, 승인 진행률, 내보내기 (/proposal)
api_router.include_router(
    proposal.router,
    prefix="/proposal",
    tags=["proposal"]
)
