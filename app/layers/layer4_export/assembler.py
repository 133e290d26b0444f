"""Export assembler - approved proposal to an ordered export document.

승인된 섹션을 제안서에 저장된 순서대로 훑어 제목, 목차, 섹션별
블록(IR)과 이미지를 모은 ExportDocument를 만듭니다.
HTML/docx 내보내기는 모두 이 문서 하나를 입력으로 받습니다.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from app.models import ImageItem, ImageStatus, Proposal
from app.services.image_fetcher import FetchedImage, ImageFetcher
from app.layers.layer1_prompts.section_registry import spec_for_section
from app.layers.layer3_formatting import Block, parse_markdown

logger = logging.getLogger(__name__)

IMAGES_AND_DIAGRAMS_TITLE = "Images & Diagrams"
DEFAULT_DOCUMENT_TITLE = "Project Proposal"

FILENAME_PATTERN = re.compile(r"[^A-Za-z0-9]+")


@dataclass
class ExportSection:
    id: str
    title: str
    blocks: list[Block] = field(default_factory=list)
    images: list[FetchedImage] = field(default_factory=list)


@dataclass
class ExportDocument:
    """내보내기 직전의 제안서 문서."""
    title: str
    prepared_for: Optional[str] = None
    prepared_by: Optional[str] = None
    sections: list[ExportSection] = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def table_of_contents(self) -> list[str]:
        return [section.title for section in self.sections]

    def filename(self, extension: str) -> str:
        stem = FILENAME_PATTERN.sub("_", self.title).strip("_") or "proposal"
        return f"{stem}.{extension}"


@dataclass
class ExportedFile:
    """내보내기 결과 파일."""
    content: bytes
    media_type: str
    filename: str
    inline: bool = False


def _approved_images(items: list[ImageItem]) -> list[ImageItem]:
    return [item for item in items if item.status == ImageStatus.APPROVED]


async def assemble_document(
    proposal: Proposal,
    section_images: dict[str, list[ImageItem]],
    diagrams: list[ImageItem],
    fetcher: ImageFetcher,
) -> ExportDocument:
    """
    승인된 섹션으로 내보내기 문서를 조립합니다.

    Args:
        proposal: 현재 제안서
        section_images: 섹션 키 → 해당 섹션과 함께 넣을 이미지 목록
        diagrams: 문서 끝 "Images & Diagrams"에 넣을 다이어그램 목록
        fetcher: 이미지 로더 (실패한 이미지는 건너뜀)
    """
    requirements = proposal.requirements
    client = requirements.client_company or requirements.client_name
    document = ExportDocument(
        title=requirements.project_title or DEFAULT_DOCUMENT_TITLE,
        prepared_for=client,
        prepared_by=requirements.company_name,
    )

    for section_id, section in proposal.sections.items():
        if not section.is_approved:
            logger.debug(f"[Assembler] 미승인 섹션 제외: {section_id}")
            continue

        spec = spec_for_section(section_id)
        images = await fetcher.fetch_all(_approved_images(section_images.get(section_id, [])))
        document.sections.append(
            ExportSection(
                id=section_id,
                title=section.title,
                blocks=parse_markdown(section.content, spec.heading_lines),
                images=images,
            )
        )

    approved_diagrams = _approved_images(diagrams)
    if approved_diagrams:
        images = await fetcher.fetch_all(approved_diagrams)
        if images:
            document.sections.append(
                ExportSection(id="images-and-diagrams", title=IMAGES_AND_DIAGRAMS_TITLE, images=images)
            )

    logger.info(f"[Assembler] 내보내기 문서 조립 완료: 섹션 {len(document.sections)}개")
    return document
