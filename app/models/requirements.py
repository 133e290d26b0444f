"""
비즈니스 요구사항 모델입니다.
사용자가 위저드 첫 단계 폼에 입력한 값을 담습니다.
"""

from typing import Optional
from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .common import CamelModel


# 필수 입력 항목 (JSON 키 기준, 에러 메시지에 이 순서대로 표시됩니다)
REQUIRED_FIELDS = [
    "companyName",
    "projectTitle",
    "clientName",
    "projectDescription",
    "budgetRange",
    "timeline",
    "industryType",
]

# 폼에서 선택 가능한 값들
BUDGET_RANGES = ["<10k", "10-25k", "25-50k", "50-100k", "100k+"]
INDUSTRY_TYPES = ["Technology", "Healthcare", "Finance", "Retail", "Education", "Other"]
OBJECTIVE_OPTIONS = [
    "Improve User Experience",
    "Increase Conversion",
    "Reduce Operational Costs",
    "Launch MVP Quickly",
    "Integrate Existing Systems",
    "Enhance Brand Presence",
]


class Requirements(CamelModel):
    """
    제안서 생성 요청 한 건의 요구사항 레코드입니다.

    모든 필드는 선택 사항으로 선언되어 있습니다. 필수 항목 검사는
    API 진입점에서 원본 JSON을 대상으로 수행하므로(누락 목록을 그대로
    돌려주기 위해) 프롬프트 빌더는 일부만 채워진 레코드도 받을 수 있습니다.
    """

    # 요청 본문에 섞여 오는 플래그(regenerate, sectionType 등)는 무시합니다.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    company_name: Optional[str] = Field(None, description="제안사명")
    project_title: Optional[str] = Field(None, description="프로젝트명")
    client_name: Optional[str] = Field(None, description="고객 담당자명")
    client_company: Optional[str] = Field(None, description="고객사명")
    client_email: Optional[str] = Field(None, description="고객 이메일")
    project_description: Optional[str] = Field(None, description="프로젝트 설명")
    country: Optional[str] = Field(None, description="국가")
    currency: Optional[str] = Field(None, description="통화")
    budget_range: Optional[str] = Field(None, description="예산 구간")
    timeline: Optional[str] = Field(None, description="희망 완료일")
    industry_type: Optional[str] = Field(None, description="산업 분류")
    objectives: list[str] = Field(default_factory=list, description="주요 목표")

    @field_validator("objectives", mode="before")
    @classmethod
    def _split_objectives(cls, value):
        """폼이 쉼표로 이어진 문자열을 보내는 경우도 목록으로 변환합니다."""
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


def find_missing_fields(payload: dict) -> list[str]:
    """
    원본 요청 JSON에서 비어있는 필수 항목 이름 목록을 반환합니다.

    None, 빈 문자열, 공백만 있는 문자열은 모두 누락으로 취급합니다.
    """
    missing = []
    for field_name in REQUIRED_FIELDS:
        value = payload.get(field_name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field_name)
    return missing
