"""Claude Messages API client service for proposal generation.

이 모듈은 anthropic SDK(AsyncAnthropic)를 래핑하여 재시도/에러 분류가
포함된 비동기 텍스트 생성 호출을 제공합니다.

주요 기능:
- generate(): 프롬프트 1건에 대한 텍스트 응답 요청

재시도 전략:
- 최대 max_retries회 시도 (기본값: 3)
- 지수 백오프 (1초, 2초, 4초 ... 최대 10초)
- 401/403(인증), 429(요청 한도)는 재시도 없이 즉시 실패
- 529(과부하), 빈 응답, 기타 오류는 재시도 대상
"""

import asyncio
import logging
from typing import Optional

import anthropic

from app.config import get_settings
from app.exceptions import (
    ClaudeClientError,
    ClaudeAuthenticationError,
    ClaudeRateLimitError,
    ClaudeOverloadedError,
    GenerationError,
)

# 로깅 설정
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# 재시도하지 않는 상태 코드
AUTH_STATUS_CODES = {401, 403}
RATE_LIMIT_STATUS_CODE = 429
OVERLOADED_STATUS_CODE = 529


def classify_error(error: Exception) -> ClaudeClientError:
    """
    SDK/네트워크 예외를 도메인 예외로 분류합니다.

    상태 코드는 anthropic.APIStatusError의 status_code 속성에서 읽으며,
    같은 속성을 가진 다른 예외(테스트용 가짜 예외 포함)도 동일하게 처리합니다.
    """
    if isinstance(error, ClaudeClientError):
        return error

    status_code = getattr(error, "status_code", None)
    message = getattr(error, "message", None) or str(error) or type(error).__name__
    details = {"status_code": status_code, "type": type(error).__name__}

    if status_code in AUTH_STATUS_CODES:
        return ClaudeAuthenticationError(message, details=details)
    if status_code == RATE_LIMIT_STATUS_CODE:
        return ClaudeRateLimitError(message, details=details)
    if status_code == OVERLOADED_STATUS_CODE:
        return ClaudeOverloadedError(message, details=details)
    return ClaudeClientError(message, details=details)


def backoff_delay(attempt: int, base: float = 1.0, cap: float = 10.0) -> float:
    """
    attempt번째 실패 후 대기 시간(초).

    ┌──────────────────────────────────┐
    │ 실패 │ 대기 시간                 │
    ├──────────────────────────────────┤
    │ 1차  │ base                      │
    │ 2차  │ base * 2                  │
    │ 3차  │ base * 4                  │
    │ ...  │ 최대 cap                  │
    └──────────────────────────────────┘
    """
    return min(base * (2 ** (attempt - 1)), cap)


class ClaudeClient:
    """
    Anthropic Claude 래퍼 클래스.

    SDK 클라이언트 핸들은 첫 호출 시 지연 생성되어 이후 호출에서 재사용됩니다
    (연결/자격증명 재사용 목적이며 비즈니스 상태는 가지지 않습니다).

    Attributes:
        _client: AsyncAnthropic 인스턴스 (지연 생성)
        _retry_base_delay: 첫 재시도 대기 시간(초)
        _retry_max_delay: 대기 시간 상한(초)
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.anthropic_api_key
        self._model = model or settings.claude_model
        self._timeout = settings.claude_timeout_seconds
        self._max_retries = settings.max_retries
        self._retry_base_delay = settings.retry_base_delay
        self._retry_max_delay = settings.retry_max_delay
        self._client: Optional[anthropic.AsyncAnthropic] = None

        logger.info(f"[ClaudeClient] 초기화 완료 (model={self._model})")

    @property
    def is_configured(self) -> bool:
        """API 키가 설정되어 있는지 여부."""
        return bool(self._api_key)

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            # 재시도는 이 클래스에서 직접 관리하므로 SDK 자체 재시도는 끕니다.
            self._client = anthropic.AsyncAnthropic(
                api_key=self._api_key,
                timeout=self._timeout,
                max_retries=0,
            )
            logger.info("[ClaudeClient] SDK 클라이언트 생성")
        return self._client

    async def _call_once(self, prompt: str, max_tokens: int, temperature: float) -> str:
        """API를 한 번 호출하고 첫 번째 텍스트 블록을 반환합니다."""
        response = await self._get_client().messages.create(
            model=self._model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )

        text = response.content[0].text if response.content else ""
        if not text or not text.strip():
            raise ClaudeClientError("No content in response", error_code="ERR_CLAUDE_EMPTY")
        return text

    async def generate(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> str:
        """
        프롬프트에 대한 텍스트를 생성합니다.

        Args:
            prompt: Claude에 전송할 프롬프트
            max_tokens: 최대 토큰 수 (기본값: 설정값)
            temperature: 샘플링 온도 (기본값: 설정값)
            max_retries: 최대 시도 횟수 (기본값: 3)

        Returns:
            응답의 첫 번째 텍스트 블록

        Raises:
            ClaudeAuthenticationError: 401/403, 재시도 없음
            ClaudeRateLimitError: 429, 재시도 없음
            GenerationError: 모든 시도 실패 (마지막 실패 메시지 포함)
        """
        settings = get_settings()
        max_tokens = max_tokens or settings.default_max_tokens
        temperature = settings.default_temperature if temperature is None else temperature
        attempts = max(1, self._max_retries if max_retries is None else max_retries)

        last_error: Optional[ClaudeClientError] = None

        for attempt in range(1, attempts + 1):
            try:
                logger.info(f"[ClaudeClient] 시도 {attempt}/{attempts} (prompt={len(prompt)} chars)")
                text = await self._call_once(prompt, max_tokens, temperature)
                logger.info(f"[ClaudeClient] 시도 {attempt} 성공 (응답={len(text)} chars)")
                return text

            except Exception as e:
                error = classify_error(e)
                logger.error(f"[ClaudeClient] 시도 {attempt} 실패: {type(e).__name__}: {error.message}")

                # 인증/요청 한도 오류는 즉시 실패
                if isinstance(error, (ClaudeAuthenticationError, ClaudeRateLimitError)):
                    if error is e:
                        raise
                    raise error from e

                last_error = error
                if attempt < attempts:
                    wait_time = backoff_delay(attempt, self._retry_base_delay, self._retry_max_delay)
                    logger.info(f"[ClaudeClient] {wait_time}초 후 재시도...")
                    await asyncio.sleep(wait_time)

        logger.error(f"[ClaudeClient] 모든 시도 실패: {last_error.message}")
        raise GenerationError(
            f"Failed to generate content after {attempts} attempts: {last_error.message}",
            details={
                "attempts": attempts,
                "last_error_code": last_error.error_code,
                "overloaded": isinstance(last_error, ClaudeOverloadedError),
            },
        )


# Singleton instance for dependency injection
_claude_client: Optional[ClaudeClient] = None


def get_claude_client() -> ClaudeClient:
    """Get or create Claude client singleton."""
    global _claude_client
    if _claude_client is None:
        _claude_client = ClaudeClient()
    return _claude_client
