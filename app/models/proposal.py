"""
제안서 및 섹션 관련 데이터 모델입니다.
섹션 상태 머신과 이미지(다이어그램/스크린샷) 항목, 승인 진행률을 정의합니다.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import Field

from .common import CamelModel
from .requirements import Requirements


class SectionStatus(str, Enum):
    """섹션의 상태를 나타냅니다."""
    GENERATING = "Generating"      # 생성 중
    COMPLETE = "Complete"          # 생성 완료
    NEEDS_REVIEW = "Needs Review"  # 검토 필요 (수정/대체 콘텐츠)
    APPROVED = "Approved"          # 승인됨 (내보내기 가능)
    REJECTED = "Rejected"          # 반려됨


# 상태 전이 규칙: 현재 상태 -> 사용자 액션 -> 허용 여부
# Generating 상태에서는 어떤 사용자 액션도 허용되지 않습니다.
SECTION_ACTIONS: dict[str, set[SectionStatus]] = {
    "approve": {SectionStatus.COMPLETE, SectionStatus.NEEDS_REVIEW, SectionStatus.REJECTED},
    "reject": {SectionStatus.COMPLETE, SectionStatus.NEEDS_REVIEW, SectionStatus.APPROVED},
    "edit": {
        SectionStatus.COMPLETE,
        SectionStatus.NEEDS_REVIEW,
        SectionStatus.APPROVED,
        SectionStatus.REJECTED,
    },
    "regenerate": {
        SectionStatus.COMPLETE,
        SectionStatus.NEEDS_REVIEW,
        SectionStatus.APPROVED,
        SectionStatus.REJECTED,
    },
}


class ImageStatus(str, Enum):
    """업로드 이미지의 승인 상태."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Section(CamelModel):
    """제안서의 한 섹션. 각자 독립적인 승인 생명주기를 가집니다."""

    id: str = Field(..., description="섹션 키 (예: executive-summary)")
    title: str = Field(..., description="섹션 제목")
    content: str = Field("", description="마크다운/자유 텍스트 본문")
    status: SectionStatus = Field(SectionStatus.COMPLETE, description="섹션 상태")
    approved: bool = Field(False, description="승인 여부")
    generated_at: datetime = Field(default_factory=datetime.now)
    version: int = Field(1, ge=1, description="재생성 시 증가하는 버전")
    section_type: Optional[str] = Field(None, description="섹션 유형 (사용자 정의 섹션은 generic)")

    @property
    def is_approved(self) -> bool:
        return self.approved and self.status == SectionStatus.APPROVED


class ImageItem(CamelModel):
    """다이어그램/스크린샷 이미지 항목."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    title: str = Field("", description="표시 이름")
    url: str = Field(..., description="data: URL 또는 원격 이미지 주소")
    status: ImageStatus = Field(ImageStatus.PENDING)
    uploaded_at: datetime = Field(default_factory=datetime.now)


class Proposal(CamelModel):
    """요구사항과 생성된 섹션 전체를 묶는 제안서 집합체."""

    id: str = Field(default_factory=lambda: f"proposal-{uuid.uuid4().hex[:12]}")
    requirements: Requirements
    sections: dict[str, Section] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def touch(self) -> None:
        self.updated_at = datetime.now()


class ApprovalProgress(CamelModel):
    """섹션 + 이미지 승인 진행률."""

    approved: int = 0
    total: int = 0
    percent: int = 0
    all_approved: bool = False
    pending_sections: list[str] = Field(default_factory=list)
    pending_images: list[str] = Field(default_factory=list)


class ProcessResponse(CamelModel):
    """process-requirements 엔드포인트의 성공 응답."""

    success: bool = True
    message: str = ""
    data: dict
