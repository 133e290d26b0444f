"""
제안서 검토/승인/내보내기 API입니다.
생성된 제안서의 섹션과 이미지를 하나씩 검토(승인/반려/수정/재생성)하고,
모든 항목이 승인되면 문서로 내보냅니다.
"""

from typing import List, Optional

from fastapi import APIRouter, File, Form, Query, Response, UploadFile
from pydantic import Field

from app.exceptions import InputValidationError
from app.models import CamelModel, ImageStatus
from app.services.proposal_workflow import UploadedImage, get_proposal_workflow
from app.layers.layer1_prompts.section_registry import spec_for_section
from app.layers.layer3_formatting import render_markdown_html

router = APIRouter()


class SelectedSectionsRequest(CamelModel):
    """선택된 섹션 목록 (키 문자열 또는 {id, title})"""
    sections: list


class SectionUpdateRequest(CamelModel):
    """섹션 수정 요청"""
    title: Optional[str] = None
    content: Optional[str] = None


class CustomSectionRequest(CamelModel):
    """사용자 정의 섹션 추가 요청. content가 없으면 제목을 주제로 생성합니다."""
    title: str = Field(..., min_length=1)
    content: Optional[str] = None
    id: Optional[str] = None


class ImageStatusRequest(CamelModel):
    status: ImageStatus


# ==================== 제안서 ====================

@router.get("")
async def get_proposal() -> dict:
    """현재 제안서 전체를 조회합니다."""
    return get_proposal_workflow().require_proposal().to_json_dict()


@router.get("/progress")
async def get_progress() -> dict:
    """섹션 + 이미지 승인 진행률"""
    return get_proposal_workflow().progress().to_json_dict()


@router.get("/selected-sections")
async def get_selected_sections() -> dict:
    return {"sections": get_proposal_workflow().get_selected_sections()}


@router.put("/selected-sections")
async def update_selected_sections(request: SelectedSectionsRequest) -> dict:
    return {"sections": get_proposal_workflow().set_selected_sections(request.sections)}


# ==================== 섹션 ====================

@router.post("/sections", status_code=201)
async def add_custom_section(request: CustomSectionRequest) -> dict:
    section = await get_proposal_workflow().add_custom_section(
        request.title, content=request.content, section_id=request.id
    )
    return section.to_json_dict()


@router.put("/sections/{section_id}")
async def update_section(section_id: str, request: SectionUpdateRequest) -> dict:
    """
    섹션 본문/제목을 수정합니다.
    수정된 섹션은 승인이 해제되고 'Needs Review' 상태가 됩니다.
    """
    section = get_proposal_workflow().edit_section(
        section_id, content=request.content, title=request.title
    )
    return section.to_json_dict()


@router.post("/sections/{section_id}/approve")
async def approve_section(section_id: str) -> dict:
    return get_proposal_workflow().approve_section(section_id).to_json_dict()


@router.post("/sections/{section_id}/reject")
async def reject_section(section_id: str) -> dict:
    return get_proposal_workflow().reject_section(section_id).to_json_dict()


@router.post("/sections/{section_id}/regenerate")
async def regenerate_section(section_id: str) -> dict:
    """
    섹션을 다시 생성합니다.
    실패하면 섹션은 이전 상태로 돌아가고 에러 응답(401/429/500)이 반환됩니다.
    """
    section = await get_proposal_workflow().regenerate_section(section_id)
    return section.to_json_dict()


@router.delete("/sections/{section_id}", status_code=204)
async def delete_section(section_id: str) -> Response:
    get_proposal_workflow().remove_section(section_id)
    return Response(status_code=204)


@router.get("/sections/{section_id}/preview")
async def preview_section(section_id: str) -> dict:
    """섹션 본문을 미리보기용 HTML 조각으로 변환합니다."""
    section = get_proposal_workflow().get_section(section_id)
    spec = spec_for_section(section_id)
    return {
        "id": section.id,
        "title": section.title,
        "html": render_markdown_html(section.content, spec.heading_lines),
    }


# ==================== 이미지 ====================

@router.get("/images/{collection}")
async def list_images(collection: str) -> dict:
    items = get_proposal_workflow().list_images(collection)
    return {"collection": collection, "images": [item.to_json_dict() for item in items]}


@router.post("/images/{collection}", status_code=201)
async def add_images(
    collection: str,
    files: Optional[List[UploadFile]] = File(None),
    url: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
) -> dict:
    """
    이미지를 등록합니다.

    - files: 이미지 파일 업로드 (data URL로 저장, 승인 상태로 등록)
    - url: 원격/data URL 등록 (대기 상태로 등록)
    """
    workflow = get_proposal_workflow()

    if files:
        uploads = [UploadedImage(filename=file.filename or "", content=await file.read()) for file in files]
        items = workflow.upload_images(collection, uploads)
    elif url:
        items = [workflow.add_image(collection, url, title or "")]
    else:
        raise InputValidationError("Provide image files or an image url")

    return {"collection": collection, "images": [item.to_json_dict() for item in items]}


@router.patch("/images/{collection}/{image_id}")
async def update_image_status(collection: str, image_id: str, request: ImageStatusRequest) -> dict:
    item = get_proposal_workflow().set_image_status(collection, image_id, request.status)
    return item.to_json_dict()


@router.post("/images/{collection}/{image_id}/alternative")
async def upload_alternative_image(
    collection: str,
    image_id: str,
    file: UploadFile = File(...),
) -> dict:
    """대체 이미지 업로드: 기존 항목의 이미지를 바꾸고 승인 처리합니다."""
    upload = UploadedImage(filename=file.filename or "", content=await file.read())
    item = get_proposal_workflow().replace_image(collection, image_id, upload)
    return item.to_json_dict()


@router.delete("/images/{collection}/{image_id}", status_code=204)
async def delete_image(collection: str, image_id: str) -> Response:
    get_proposal_workflow().remove_image(collection, image_id)
    return Response(status_code=204)


# ==================== 내보내기 ====================

@router.get("/export")
async def export_proposal(export_format: str = Query("pdf", alias="format")) -> Response:
    """
    승인된 제안서를 내보냅니다.

    - pdf: 인쇄용 HTML (열리면 인쇄 대화상자 표시)
    - docx: Word 문서
    모든 섹션과 이미지가 승인되지 않았으면 파일 없이 204를 반환합니다.
    """
    exported = await get_proposal_workflow().export(export_format)
    if exported is None:
        return Response(status_code=204)

    disposition = "inline" if exported.inline else "attachment"
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'{disposition}; filename="{exported.filename}"'},
    )
