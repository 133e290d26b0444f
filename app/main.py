"""
제안서 위저드 백엔드 진입점.

FastAPI 앱을 만들고 라우터, CORS, 예외 핸들러를 연결합니다.
실행: python -m app.main 또는 uvicorn app.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.api.router import api_router
from app.exceptions import ProposalWizardError
from app.models import ErrorResponse
from app.services.state_store import CURRENT_PROPOSAL_KEY, get_state_store

logger = logging.getLogger(__name__)

APP_TITLE = "제안서 위저드"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    시작 시 상태 저장소를 열고 생성 모드(Claude / 샘플 콘텐츠)를 기록합니다.
    종료 시에는 저장소 버전만 남깁니다 (저장은 쓰기마다 즉시 반영됨).
    """
    settings = get_settings()
    logger.info(f"[Startup] {APP_TITLE} {APP_VERSION} ({settings.host}:{settings.port})")

    if settings.anthropic_api_key:
        logger.info(f"[Startup] Claude 모델 사용: {settings.claude_model}")
    elif settings.use_fallback_content:
        logger.warning("[Startup] ANTHROPIC_API_KEY 없음: 모든 섹션을 샘플 콘텐츠로 생성합니다")
    else:
        logger.warning("[Startup] ANTHROPIC_API_KEY 없음: 섹션 생성 요청은 실패합니다")

    store = get_state_store()
    if store.get(CURRENT_PROPOSAL_KEY) is not None:
        logger.info(f"[Startup] 저장된 제안서를 이어서 사용합니다 ({type(store).__name__})")

    yield

    logger.info(f"[Shutdown] 종료 (저장소 버전 {store.version})")


def create_app() -> FastAPI:
    """
    앱 팩토리.

    - /api/v1 아래에 health, process-requirements, proposal 라우터 연결
    - 위저드 프론트엔드 주소(allowed_origins)에 대한 CORS 허용
    - ProposalWizardError → 상태 코드별 ErrorResponse JSON
    """
    settings = get_settings()

    app = FastAPI(
        title=APP_TITLE,
        description="요구사항 입력부터 섹션 검토, 승인, 문서 내보내기까지 이어지는 AI 제안서 작성 도구",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ProposalWizardError)
    async def wizard_error_handler(request: Request, exc: ProposalWizardError):
        if exc.status_code >= 500:
            logger.error(f"[{exc.error_code}] {request.method} {request.url.path}: {exc.message}")
        error = ErrorResponse.from_error(exc)
        return JSONResponse(status_code=exc.status_code, content=error.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.error(f"[Unhandled] {request.method} {request.url.path}: {exc}", exc_info=True)
        error = ErrorResponse(error="Internal server error", error_code="ERR_INTERNAL")
        return JSONResponse(status_code=500, content=error.model_dump(mode="json"))

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


@app.get("/")
async def root():
    """서버 기본 정보."""
    return {
        "name": APP_TITLE,
        "version": APP_VERSION,
        "description": "요구사항으로 제안서 섹션을 생성하고 승인 후 문서로 내보내기",
        "docs": "/docs",
        "api": "/api/v1",
    }


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,  # 개발 모드
    )
