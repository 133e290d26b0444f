"""
제안서 위저드 워크플로우 서비스입니다.

상태 저장소에 보관된 현재 제안서를 불러와 사용자 액션을 적용하고
다시 저장하는 일을 담당합니다.

주요 기능:
1. 섹션 상태 머신: 승인 / 반려 / 수정 / 재생성 / 삭제 / 사용자 정의 섹션 추가
2. 이미지 컬렉션: 목록 / 등록 / 업로드 / 상태 변경 / 삭제 / 대체 이미지 업로드
3. 승인 진행률 및 내보내기 가능 여부 판단
4. 내보내기 (인쇄용 HTML, .docx)

섹션 상태 전이:
    Generating → Complete | Needs Review → Approved | Rejected → Needs Review (수정/재생성) → ...
재생성이 실패하면 섹션은 이전 상태/승인 여부로 되돌아가고 에러가 전파됩니다.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import ValidationError

from app.exceptions import InputValidationError, SectionNotFoundError, SectionStateError
from app.models import (
    ApprovalProgress,
    ImageItem,
    ImageStatus,
    Proposal,
    Section,
    SectionStatus,
)
from app.models.proposal import SECTION_ACTIONS
from app.services.image_fetcher import ImageFetcher, encode_data_url
from app.services.state_store import (
    CURRENT_PROPOSAL_KEY,
    PROCESS_FLOW_IMAGES_KEY,
    PROPOSAL_DIAGRAMS_KEY,
    SELECTED_SECTIONS_KEY,
    TECHNICAL_ARCHITECTURE_IMAGES_KEY,
    StateStore,
    get_state_store,
    screenshots_key,
)
from app.utils.validation import validate_file_size, validate_image_count, validate_image_upload
from app.layers.layer1_prompts.section_registry import GENERIC_SECTION_TYPE, spec_for_section
from app.layers.layer2_generation import SectionGenerator, SectionRequest, get_section_generator
from app.layers.layer4_export import (
    ExportedFile,
    assemble_document,
    export_docx,
    export_print_html,
)

logger = logging.getLogger(__name__)


# 이미지 컬렉션 이름 → 저장소 키 (그 외 이름은 screenshots_<섹션 키>)
DIAGRAMS_COLLECTION = "diagrams"
PROCESS_FLOW_COLLECTION = "process-flow-diagram"
TECHNICAL_ARCHITECTURE_COLLECTION = "technical-architecture"

FIXED_COLLECTION_KEYS = {
    DIAGRAMS_COLLECTION: PROPOSAL_DIAGRAMS_KEY,
    PROCESS_FLOW_COLLECTION: PROCESS_FLOW_IMAGES_KEY,
    TECHNICAL_ARCHITECTURE_COLLECTION: TECHNICAL_ARCHITECTURE_IMAGES_KEY,
}

EXPORT_FORMATS = ("pdf", "docx")

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def collection_key(collection: str) -> str:
    """이미지 컬렉션 이름을 저장소 키로 바꿉니다."""
    if not collection or not collection.strip():
        raise InputValidationError("Image collection name is required")
    return FIXED_COLLECTION_KEYS.get(collection) or screenshots_key(collection)


def section_collection(section_id: str) -> str:
    """섹션 본문과 함께 내보낼 이미지 컬렉션 이름."""
    return spec_for_section(section_id).image_collection or section_id


def slugify(title: str) -> str:
    return SLUG_PATTERN.sub("-", title.lower()).strip("-") or "custom-section"


@dataclass
class UploadedImage:
    """업로드 요청으로 받은 이미지 파일 1건."""
    filename: str
    content: bytes


class ProposalWorkflow:
    """현재 제안서에 대한 사용자 액션 처리."""

    def __init__(
        self,
        store: Optional[StateStore] = None,
        generator: Optional[SectionGenerator] = None,
        fetcher: Optional[ImageFetcher] = None,
    ):
        self._store = store
        self._generator = generator
        self._fetcher = fetcher

    # 테스트에서 저장소를 교체할 수 있도록 매번 조회합니다.
    @property
    def store(self) -> StateStore:
        return self._store or get_state_store()

    @property
    def generator(self) -> SectionGenerator:
        return self._generator or get_section_generator()

    @property
    def fetcher(self) -> ImageFetcher:
        if self._fetcher is None:
            self._fetcher = ImageFetcher()
        return self._fetcher

    # ==================== 제안서 ====================

    def load_proposal(self) -> Optional[Proposal]:
        """저장된 제안서를 불러옵니다. 없거나 손상된 경우 None."""
        raw = self.store.get(CURRENT_PROPOSAL_KEY)
        if raw is None:
            return None
        try:
            return Proposal.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"[Workflow] 저장된 제안서가 손상되어 무시합니다: {e.error_count()}개 오류")
            return None

    def require_proposal(self) -> Proposal:
        proposal = self.load_proposal()
        if proposal is None:
            raise SectionNotFoundError("No proposal has been generated yet")
        return proposal

    def save_proposal(self, proposal: Proposal) -> Proposal:
        proposal.touch()
        self.store.set(CURRENT_PROPOSAL_KEY, proposal.to_json_dict())
        return proposal

    def get_selected_sections(self) -> list:
        selected = self.store.get(SELECTED_SECTIONS_KEY, [])
        return selected if isinstance(selected, list) else []

    def set_selected_sections(self, selected: list) -> list:
        self.store.set(SELECTED_SECTIONS_KEY, selected)
        return selected

    # ==================== 섹션 상태 머신 ====================

    @staticmethod
    def _get_section(proposal: Proposal, section_id: str) -> Section:
        section = proposal.sections.get(section_id)
        if section is None:
            raise SectionNotFoundError(
                f"Section not found: {section_id}",
                details={"section_id": section_id},
            )
        return section

    @staticmethod
    def _check_action(section: Section, action: str) -> None:
        if section.status not in SECTION_ACTIONS[action]:
            raise SectionStateError(
                f"Cannot {action} section '{section.id}' while it is {section.status.value}",
                details={"section_id": section.id, "status": section.status.value, "action": action},
            )

    def get_section(self, section_id: str) -> Section:
        return self._get_section(self.require_proposal(), section_id)

    def approve_section(self, section_id: str) -> Section:
        proposal = self.require_proposal()
        section = self._get_section(proposal, section_id)
        self._check_action(section, "approve")

        section.status = SectionStatus.APPROVED
        section.approved = True
        self.save_proposal(proposal)
        logger.info(f"[Workflow] 섹션 승인: {section_id}")
        return section

    def reject_section(self, section_id: str) -> Section:
        proposal = self.require_proposal()
        section = self._get_section(proposal, section_id)
        self._check_action(section, "reject")

        section.status = SectionStatus.REJECTED
        section.approved = False
        self.save_proposal(proposal)
        logger.info(f"[Workflow] 섹션 반려: {section_id}")
        return section

    def edit_section(
        self,
        section_id: str,
        content: Optional[str] = None,
        title: Optional[str] = None,
    ) -> Section:
        """본문/제목 수정. 승인은 해제되고 검토 필요 상태가 됩니다."""
        if content is None and title is None:
            raise InputValidationError("Nothing to update: provide content or title")

        proposal = self.require_proposal()
        section = self._get_section(proposal, section_id)
        self._check_action(section, "edit")

        if content is not None:
            section.content = content
        if title is not None:
            if not title.strip():
                raise InputValidationError("Section title cannot be empty")
            section.title = title.strip()
        section.status = SectionStatus.NEEDS_REVIEW
        section.approved = False
        self.save_proposal(proposal)
        logger.info(f"[Workflow] 섹션 수정: {section_id}")
        return section

    async def regenerate_section(self, section_id: str) -> Section:
        """
        섹션 재생성.

        생성 중에는 Generating 상태가 저장소에 기록되고, 성공하면 버전이
        1 증가합니다. 실패하면 이전 상태로 되돌린 뒤 에러를 그대로 올립니다.
        """
        proposal = self.require_proposal()
        section = self._get_section(proposal, section_id)
        self._check_action(section, "regenerate")

        previous = section.model_copy()
        section.status = SectionStatus.GENERATING
        section.approved = False
        self.save_proposal(proposal)
        logger.info(f"[Workflow] 섹션 재생성 시작: {section_id} (v{previous.version})")

        section_type = section.section_type or SectionRequest(section_id).section_type
        title = section.title if section_type == GENERIC_SECTION_TYPE else None
        try:
            generated = await self.generator.generate_content(
                section_type, proposal.requirements, title
            )
        except Exception:
            logger.error(f"[Workflow] 섹션 재생성 실패, 이전 상태로 복원: {section_id}", exc_info=True)
            self._replace_section(previous)
            raise

        section.content = generated.content
        section.status = generated.status
        section.approved = False
        section.version = previous.version + 1
        section.generated_at = datetime.now()
        self._replace_section(section)
        logger.info(f"[Workflow] 섹션 재생성 완료: {section_id} (v{section.version})")
        return section

    def _replace_section(self, section: Section) -> None:
        """
        생성 대기(await) 이후의 저장.

        대기하는 동안 다른 요청이 다른 섹션을 바꿨을 수 있으므로 저장소에서
        제안서를 다시 읽고 이 섹션만 교체합니다.
        """
        proposal = self.require_proposal()
        if section.id not in proposal.sections:
            logger.warning(f"[Workflow] 생성 중 섹션이 삭제되어 결과를 버립니다: {section.id}")
            raise SectionNotFoundError(
                f"Section not found: {section.id}",
                details={"section_id": section.id},
            )
        proposal.sections[section.id] = section
        self.save_proposal(proposal)

    def remove_section(self, section_id: str) -> None:
        proposal = self.require_proposal()
        self._get_section(proposal, section_id)
        del proposal.sections[section_id]
        self.save_proposal(proposal)
        logger.info(f"[Workflow] 섹션 삭제: {section_id}")

    async def add_custom_section(
        self,
        title: str,
        content: Optional[str] = None,
        section_id: Optional[str] = None,
    ) -> Section:
        """
        사용자 정의(generic) 섹션을 추가합니다.

        본문이 없으면 제목을 주제로 새로 생성합니다. 결과는 항상 Needs Review.
        """
        if not title or not title.strip():
            raise InputValidationError("Section title is required")
        title = title.strip()

        proposal = self.require_proposal()
        if content is None:
            generated = await self.generator.generate_content(
                GENERIC_SECTION_TYPE, proposal.requirements, title
            )
            content = generated.content
            # 생성하는 동안 바뀐 내용을 덮어쓰지 않도록 다시 읽습니다.
            proposal = self.require_proposal()

        base_id = section_id or slugify(title)
        new_id, suffix = base_id, 2
        while new_id in proposal.sections:
            new_id = f"{base_id}-{suffix}"
            suffix += 1

        section = Section(
            id=new_id,
            title=title,
            content=content,
            status=SectionStatus.NEEDS_REVIEW,
            approved=False,
            section_type=GENERIC_SECTION_TYPE,
        )
        proposal.sections[new_id] = section
        self.save_proposal(proposal)
        logger.info(f"[Workflow] 사용자 정의 섹션 추가: {new_id}")
        return section

    # ==================== 이미지 컬렉션 ====================

    def list_images(self, collection: str) -> list[ImageItem]:
        """컬렉션의 이미지 목록. 손상된 항목은 건너뜁니다."""
        raw = self.store.get(collection_key(collection), [])
        if not isinstance(raw, list):
            logger.warning(f"[Workflow] 이미지 목록 형식 오류, 무시: {collection}")
            return []

        items = []
        for entry in raw:
            try:
                items.append(ImageItem.model_validate(entry))
            except ValidationError:
                logger.warning(f"[Workflow] 손상된 이미지 항목 무시: {collection}")
        return items

    def _save_images(self, collection: str, items: list[ImageItem]) -> None:
        self.store.set(collection_key(collection), [item.to_json_dict() for item in items])

    def _find_image(self, items: list[ImageItem], image_id: str) -> ImageItem:
        for item in items:
            if item.id == image_id:
                return item
        raise SectionNotFoundError(
            f"Image not found: {image_id}",
            details={"image_id": image_id},
        )

    def add_image(
        self,
        collection: str,
        url: str,
        title: str = "",
        status: ImageStatus = ImageStatus.PENDING,
    ) -> ImageItem:
        """url로 이미지를 등록합니다 (다이어그램 API 결과 등)."""
        if not url or not url.strip():
            raise InputValidationError("Image url is required")

        items = self.list_images(collection)
        item = ImageItem(title=title, url=url.strip(), status=status)
        items.append(item)
        self._save_images(collection, items)
        return item

    def upload_images(self, collection: str, files: list[UploadedImage]) -> list[ImageItem]:
        """
        이미지 파일을 검증한 뒤 data URL로 저장합니다.

        사용자가 직접 올린 이미지는 승인된 상태로 등록됩니다.
        """
        validate_image_count(len(files))
        validate_file_size(0, total_size=sum(len(f.content) for f in files))

        items = self.list_images(collection)
        added = []
        for upload in files:
            safe_name, mime_type = validate_image_upload(upload.filename, upload.content)
            item = ImageItem(
                title=safe_name,
                url=encode_data_url(upload.content, mime_type),
                status=ImageStatus.APPROVED,
            )
            items.append(item)
            added.append(item)

        self._save_images(collection, items)
        logger.info(f"[Workflow] 이미지 {len(added)}개 업로드: {collection}")
        return added

    def set_image_status(self, collection: str, image_id: str, status: ImageStatus) -> ImageItem:
        items = self.list_images(collection)
        item = self._find_image(items, image_id)
        item.status = status
        self._save_images(collection, items)
        return item

    def replace_image(self, collection: str, image_id: str, upload: UploadedImage) -> ImageItem:
        """대체 이미지 업로드: 기존 항목의 주소를 바꾸고 승인 처리합니다."""
        items = self.list_images(collection)
        item = self._find_image(items, image_id)
        safe_name, mime_type = validate_image_upload(upload.filename, upload.content)

        item.url = encode_data_url(upload.content, mime_type)
        item.title = item.title or safe_name
        item.status = ImageStatus.APPROVED
        item.uploaded_at = datetime.now()
        self._save_images(collection, items)
        logger.info(f"[Workflow] 대체 이미지 등록: {collection}/{image_id}")
        return item

    def remove_image(self, collection: str, image_id: str) -> None:
        items = self.list_images(collection)
        item = self._find_image(items, image_id)
        items.remove(item)
        self._save_images(collection, items)

    def tracked_collections(self, proposal: Proposal) -> list[str]:
        """진행률/내보내기 판단에 포함되는 컬렉션 이름 목록."""
        names = [DIAGRAMS_COLLECTION]
        for section_id in proposal.sections:
            name = section_collection(section_id)
            if name not in names:
                names.append(name)
        return names

    def image_collections(self, proposal: Proposal) -> dict[str, list[ImageItem]]:
        return {name: self.list_images(name) for name in self.tracked_collections(proposal)}

    # ==================== 진행률 / 내보내기 ====================

    def progress(self, proposal: Optional[Proposal] = None) -> ApprovalProgress:
        """섹션 + 이미지 승인 진행률."""
        proposal = proposal or self.require_proposal()

        pending_sections = [
            section_id for section_id, section in proposal.sections.items() if not section.is_approved
        ]
        collections = self.image_collections(proposal)
        pending_images = [
            f"{name}/{item.id}"
            for name, items in collections.items()
            for item in items
            if item.status != ImageStatus.APPROVED
        ]
        total_images = sum(len(items) for items in collections.values())

        total = len(proposal.sections) + total_images
        approved = total - len(pending_sections) - len(pending_images)
        return ApprovalProgress(
            approved=approved,
            total=total,
            percent=round(approved * 100 / total) if total else 0,
            all_approved=bool(proposal.sections) and approved == total,
            pending_sections=pending_sections,
            pending_images=pending_images,
        )

    def is_export_ready(self, proposal: Optional[Proposal] = None) -> bool:
        proposal = proposal or self.load_proposal()
        if proposal is None:
            return False
        return self.progress(proposal).all_approved

    async def export(self, export_format: str) -> Optional[ExportedFile]:
        """
        승인된 제안서를 내보냅니다.

        Returns:
            내보낸 파일, 아직 모든 항목이 승인되지 않았으면 None
        """
        if export_format not in EXPORT_FORMATS:
            raise InputValidationError(
                f"Unsupported export format: {export_format}",
                details={"allowed": list(EXPORT_FORMATS)},
            )

        proposal = self.load_proposal()
        if proposal is None or not self.is_export_ready(proposal):
            logger.info(f"[Workflow] 내보내기 건너뜀: 승인되지 않은 항목이 있습니다 ({export_format})")
            return None

        collections = self.image_collections(proposal)
        section_images = {
            section_id: collections.get(section_collection(section_id), [])
            for section_id in proposal.sections
        }
        document = await assemble_document(
            proposal,
            section_images,
            collections.get(DIAGRAMS_COLLECTION, []),
            self.fetcher,
        )

        if export_format == "docx":
            return export_docx(document)
        return export_print_html(document)


# 싱글톤 인스턴스
_workflow: Optional[ProposalWorkflow] = None


def get_proposal_workflow() -> ProposalWorkflow:
    """ProposalWorkflow 인스턴스를 반환합니다."""
    global _workflow
    if _workflow is None:
        _workflow = ProposalWorkflow()
    return _workflow
