"""
요구사항 처리 API입니다.
위저드 폼에서 받은 요구사항으로 제안서 섹션을 생성합니다.

요청 본문 형태:
1. 요구사항만: 기본 섹션 5개를 생성하고 현재 제안서로 저장
2. 요구사항 + selectedSections: 선택한 섹션만 생성하고 저장
3. 요구사항 + regenerate + sectionType(+ sectionTitle): 섹션 본문 1건만 생성해 반환 (저장하지 않음)
"""

import logging

from fastapi import APIRouter, Body

from app.exceptions import InputValidationError
from app.models import ProcessResponse
from app.utils import validate_requirements
from app.layers.layer2_generation import get_section_generator
from app.services.proposal_workflow import get_proposal_workflow

logger = logging.getLogger(__name__)

router = APIRouter()

FALLBACK_NOTICE = " (using fallback content - Claude API key not configured)"


@router.post("/process-requirements")
async def process_requirements(payload: dict = Body(...)) -> dict:
    """
    요구사항을 검증하고 제안서 섹션을 생성합니다.

    에러 응답:
    - 400: 필수 항목 누락 ("Missing required fields: a, b"), 잘못된 값 타입 ("Invalid fields: a")
      또는 알 수 없는 섹션 유형
    - 401: Claude API 키 인증 실패
    - 429: 요청 한도 초과
    - 500: 재시도 소진 등 생성 실패
    """
    requirements = validate_requirements(payload)
    generator = get_section_generator()

    # 단일 섹션 재생성: 본문만 돌려줍니다.
    if payload.get("regenerate") and payload.get("sectionType"):
        section_type = payload["sectionType"]
        logger.info(f"[Requirements] 섹션 재생성 요청: {section_type}")
        generated = await generator.generate_content(
            section_type, requirements, payload.get("sectionTitle")
        )
        return {"success": True, "data": {"content": generated.content}}

    selected = payload.get("selectedSections")
    if selected is not None and not isinstance(selected, list):
        raise InputValidationError("selectedSections must be a list")

    workflow = get_proposal_workflow()
    if selected:
        workflow.set_selected_sections(selected)

    proposal, used_fallback = await generator.generate_proposal(requirements, selected or None)
    workflow.save_proposal(proposal)

    message = "Proposal sections generated successfully"
    if used_fallback and generator.offline:
        message += FALLBACK_NOTICE
    elif used_fallback:
        message += " (some sections use fallback content)"

    return ProcessResponse(message=message, data=proposal.to_json_dict()).to_json_dict()
