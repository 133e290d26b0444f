"""
제안서 위저드 커스텀 예외 계층입니다.
각 레이어/서비스별 구조화된 에러 코드, 메시지, HTTP 상태 코드를 제공합니다.
"""

from typing import Optional, Any


class ProposalWizardError(Exception):
    """제안서 위저드 기본 예외 클래스."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class InputValidationError(ProposalWizardError):
    """입력 유효성 검증 에러 (400 응답)."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_INPUT_001", details=details)


class ClaudeClientError(ProposalWizardError):
    """Claude AI 클라이언트 통신 에러 (분류되지 않은 실패)."""

    def __init__(
        self,
        message: str,
        details: Optional[Any] = None,
        error_code: str = "ERR_CLAUDE_001",
    ):
        super().__init__(message, error_code=error_code, details=details)


class ClaudeAuthenticationError(ClaudeClientError):
    """API 키 인증 실패 (401/403). 재시도하지 않습니다."""

    status_code = 401

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, details=details, error_code="ERR_CLAUDE_AUTH")


class ClaudeRateLimitError(ClaudeClientError):
    """요청 한도 초과 (429). 재시도하지 않습니다."""

    status_code = 429

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, details=details, error_code="ERR_CLAUDE_RATE")


class ClaudeOverloadedError(ClaudeClientError):
    """서버 과부하 (529). 재시도 대상입니다."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, details=details, error_code="ERR_CLAUDE_OVERLOAD")


class GenerationError(ProposalWizardError):
    """재시도를 모두 소진한 생성 실패."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_GEN_001", details=details)


class SectionNotFoundError(ProposalWizardError):
    """존재하지 않는 섹션/이미지/제안서 (404 응답)."""

    status_code = 404

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_NOT_FOUND", details=details)


class SectionStateError(ProposalWizardError):
    """허용되지 않는 섹션 상태 전이 (409 응답)."""

    status_code = 409

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_STATE_001", details=details)


class ExportError(ProposalWizardError):
    """내보내기 중 이미지 다운로드/문서 조립 실패."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_EXPORT_001", details=details)


class StorageError(ProposalWizardError):
    """상태 저장소 관련 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_STORE_001", details=details)
