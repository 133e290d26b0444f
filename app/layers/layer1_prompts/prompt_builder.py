"""Prompt builder - requirements record to section prompt text.

순수 함수만 제공합니다 (I/O 없음, 부작용 없음).
값이 채워진 요구사항 항목만 레이블이 붙은 한 줄로 넣고,
비어 있는 항목은 자리표시자 없이 생략합니다.
"""

from typing import Optional

from app.exceptions import InputValidationError
from app.models.requirements import Requirements

from .section_registry import GENERIC_SECTION_TYPE, get_section_spec

# (레이블, 필드명) 순서대로 출력됩니다.
REQUIREMENT_LABELS = [
    ("Company", "company_name"),
    ("Project", "project_title"),
    ("Client", "client_name"),
    ("Description", "project_description"),
    ("Country", "country"),
    ("Currency", "currency"),
    ("Budget", "budget_range"),
    ("Timeline", "timeline"),
    ("Industry", "industry_type"),
]


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def _client_value(requirements: Requirements) -> str:
    """담당자명과 고객사명을 "이름 (회사)" 형태로 합칩니다."""
    name = _clean(requirements.client_name)
    company = _clean(requirements.client_company)
    if name and company:
        return f"{name} ({company})"
    return name or company


def build_requirements_block(requirements: Requirements) -> str:
    """
    요구사항을 "Label: value" 줄 목록으로 만듭니다.

    Objectives 줄은 목표가 하나 이상 있을 때만 추가됩니다.
    """
    lines = []
    for label, field_name in REQUIREMENT_LABELS:
        if field_name == "client_name":
            value = _client_value(requirements)
        else:
            value = _clean(getattr(requirements, field_name))
        if value:
            lines.append(f"{label}: {value}")

    objectives = [item.strip() for item in requirements.objectives if item and item.strip()]
    if objectives:
        lines.append(f"Objectives: {', '.join(objectives)}")

    return "\n".join(lines)


def build_prompt(
    section_type: str,
    requirements: Requirements,
    section_title: Optional[str] = None,
) -> str:
    """
    섹션 유형에 맞는 프롬프트를 만듭니다.

    Args:
        section_type: 레지스트리에 등록된 섹션 유형 (예: executive-summary, generic)
        requirements: 요구사항 레코드
        section_title: generic 섹션의 사용자 지정 제목

    Raises:
        InputValidationError: 알 수 없거나 텍스트를 생성하지 않는 섹션 유형
    """
    spec = get_section_spec(section_type)
    if spec.template is None:
        raise InputValidationError(
            f"Section type does not generate text: {section_type}",
            details={"section_type": section_type},
        )

    title = _clean(section_title)
    if section_type == GENERIC_SECTION_TYPE and not title:
        title = spec.title

    return spec.template.format(
        requirements=build_requirements_block(requirements),
        section_title=title,
    )
