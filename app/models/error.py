"""에러 응답 모델."""

from datetime import datetime
from typing import Optional, Any

from pydantic import BaseModel, Field

from app.exceptions import ProposalWizardError


class ErrorResponse(BaseModel):
    """
    모든 에러 응답의 JSON 본문.

    프론트엔드는 error 값을 그대로 사용자에게 보여줍니다
    (예: "Missing required fields: companyName, timeline").
    """

    error: str = Field(description="사용자에게 그대로 보여줄 에러 메시지")
    error_code: str = Field(description="에러 코드 (예: ERR_INPUT_001)")
    details: Optional[Any] = Field(default=None, description="추가 에러 상세 정보")
    timestamp: datetime = Field(default_factory=datetime.now, description="에러 발생 시각")

    @classmethod
    def from_error(cls, exc: ProposalWizardError) -> "ErrorResponse":
        return cls(error=exc.message, error_code=exc.error_code, details=exc.details)
