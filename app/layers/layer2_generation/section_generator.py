"""Section generator - requirements to proposal sections via Claude.

이 모듈은 섹션 레지스트리의 선언을 따라 프롬프트를 만들고,
ClaudeClient로 본문을 생성한 뒤 섹션별 포맷 패스를 적용합니다.

생성 흐름:
1. 섹션 유형 확인 (레지스트리)
2. 프롬프트 생성 (layer1 prompt_builder)
3. Claude 호출 (재시도는 ClaudeClient가 담당)
4. 포맷 패스 적용 (불릿 정규화, 제목 패스, 타임라인 정규화)
5. 출력 형식 검사: 만족하면 Complete, 아니면 Needs Review

대체 콘텐츠 정책:
- API 키가 없으면 모든 섹션에 대체 콘텐츠 사용
- 일괄 생성 중 일반 생성 실패가 나면 해당 섹션만 대체 콘텐츠 사용
- 인증(401)/요청 한도(429) 오류는 그대로 전파
- 단일 섹션 재생성은 대체 콘텐츠 없이 오류를 전파
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from app.config import get_settings
from app.exceptions import (
    ClaudeAuthenticationError,
    ClaudeRateLimitError,
    InputValidationError,
    ProposalWizardError,
)
from app.models import Proposal, Requirements, Section, SectionStatus
from app.services.claude_client import ClaudeClient, get_claude_client
from app.layers.layer1_prompts.prompt_builder import build_prompt
from app.layers.layer1_prompts.section_registry import (
    DEFAULT_SECTIONS,
    GENERIC_SECTION_TYPE,
    SECTION_REGISTRY,
    SectionSpec,
    get_section_spec,
)

logger = logging.getLogger(__name__)


@dataclass
class GeneratedContent:
    """섹션 한 개의 생성 결과."""
    content: str
    status: SectionStatus
    used_fallback: bool = False


@dataclass(frozen=True)
class SectionRequest:
    """생성할 섹션 한 개 (키 + 선택적 제목)."""
    section_id: str
    title: Optional[str] = None

    @property
    def section_type(self) -> str:
        return self.section_id if self.section_id in SECTION_REGISTRY else GENERIC_SECTION_TYPE


def normalize_selection(selected: Optional[Iterable[Any]]) -> list[SectionRequest]:
    """
    선택된 섹션 목록을 SectionRequest 목록으로 정리합니다.

    문자열("executive-summary") 또는 {"id": ..., "title": ...} 형태를 모두 받습니다.
    중복 키는 처음 것만 남기며, 레지스트리에 없는 키는 제목이 있어야
    사용자 정의(generic) 섹션으로 인정됩니다.
    """
    if selected is None:
        return [SectionRequest(key) for key in DEFAULT_SECTIONS]

    requests: list[SectionRequest] = []
    seen: set[str] = set()
    for item in selected:
        if isinstance(item, str):
            section_id, title = item, None
        elif isinstance(item, dict):
            section_id, title = item.get("id"), item.get("title")
        else:
            raise InputValidationError(
                "Invalid selected section entry",
                details={"entry": repr(item)},
            )

        if not section_id or not isinstance(section_id, str):
            raise InputValidationError("Selected section is missing an id", details={"entry": item})
        if section_id in seen:
            continue
        if section_id not in SECTION_REGISTRY and not title:
            raise InputValidationError(
                f"Unknown section type: {section_id}",
                details={"section_type": section_id},
            )

        seen.add(section_id)
        requests.append(SectionRequest(section_id, title))

    return requests


class SectionGenerator:
    """요구사항을 기반으로 제안서 섹션 생성."""

    def __init__(
        self,
        claude_client: Optional[ClaudeClient] = None,
        use_fallback: Optional[bool] = None,
    ):
        self.claude_client = claude_client or get_claude_client()
        settings = get_settings()
        self.use_fallback = settings.use_fallback_content if use_fallback is None else use_fallback

    @property
    def offline(self) -> bool:
        """API 키 없이 대체 콘텐츠로 동작하는 상태인지 여부."""
        return self.use_fallback and not self.claude_client.is_configured

    def fallback_content(self, spec: SectionSpec, requirements: Requirements) -> GeneratedContent:
        content = spec.post_process(spec.fallback(requirements))
        status = SectionStatus.COMPLETE if not spec.generates_text else SectionStatus.NEEDS_REVIEW
        return GeneratedContent(content=content, status=status, used_fallback=True)

    async def generate_content(
        self,
        section_type: str,
        requirements: Requirements,
        section_title: Optional[str] = None,
    ) -> GeneratedContent:
        """
        섹션 본문 1건 생성 (대체 콘텐츠 없음, 오류는 그대로 전파).

        Raises:
            ClaudeAuthenticationError / ClaudeRateLimitError / GenerationError
        """
        spec = get_section_spec(section_type)

        # 이미지 전용 섹션은 텍스트를 생성하지 않습니다.
        if not spec.generates_text:
            return GeneratedContent(content="", status=SectionStatus.COMPLETE)

        if self.offline:
            logger.info(f"[SectionGenerator] API 키 없음, 대체 콘텐츠 사용: {section_type}")
            return self.fallback_content(spec, requirements)

        prompt = build_prompt(section_type, requirements, section_title)
        raw = await self.claude_client.generate(
            prompt,
            max_tokens=spec.max_tokens,
            temperature=spec.temperature,
        )

        content = spec.post_process(raw.strip())
        if spec.schema.matches(content):
            status = SectionStatus.COMPLETE
        else:
            logger.warning(f"[SectionGenerator] 출력 형식 불일치, 검토 필요: {section_type}")
            status = SectionStatus.NEEDS_REVIEW

        return GeneratedContent(content=content, status=status)

    async def _generate_with_fallback(
        self,
        request: SectionRequest,
        requirements: Requirements,
    ) -> GeneratedContent:
        try:
            return await self.generate_content(request.section_type, requirements, request.title)
        except (ClaudeAuthenticationError, ClaudeRateLimitError):
            raise
        except ProposalWizardError as e:
            if not self.use_fallback:
                raise
            logger.warning(
                f"[SectionGenerator] {request.section_id} 생성 실패, 대체 콘텐츠 사용: {e.message}"
            )
            return self.fallback_content(get_section_spec(request.section_type), requirements)

    def build_section(
        self,
        request: SectionRequest,
        generated: GeneratedContent,
        version: int = 1,
    ) -> Section:
        spec = get_section_spec(request.section_type)
        return Section(
            id=request.section_id,
            title=request.title or spec.title,
            content=generated.content,
            status=generated.status,
            approved=False,
            generated_at=datetime.now(),
            version=version,
            section_type=request.section_type,
        )

    async def generate_sections(
        self,
        requirements: Requirements,
        selected: Optional[Iterable[Any]] = None,
    ) -> tuple[dict[str, Section], bool]:
        """
        여러 섹션을 동시에 생성합니다.

        각 작업은 서로 다른 키에 결과를 쓰므로 완료 순서와 무관하게
        선택 순서대로 섹션 매핑을 만듭니다.

        Returns:
            (섹션 매핑, 대체 콘텐츠 사용 여부)
        """
        requests = normalize_selection(selected)
        logger.info(f"[SectionGenerator] 섹션 {len(requests)}개 동시 생성 시작")
        start_time = datetime.now()

        results = await asyncio.gather(
            *(self._generate_with_fallback(request, requirements) for request in requests)
        )

        sections = {
            request.section_id: self.build_section(request, generated)
            for request, generated in zip(requests, results)
        }
        used_fallback = any(generated.used_fallback for generated in results)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(f"[SectionGenerator] 섹션 생성 완료: {elapsed:.1f}초 (대체 콘텐츠={used_fallback})")
        return sections, used_fallback

    async def generate_proposal(
        self,
        requirements: Requirements,
        selected: Optional[Iterable[Any]] = None,
    ) -> tuple[Proposal, bool]:
        """요구사항으로 새 제안서를 만듭니다."""
        sections, used_fallback = await self.generate_sections(requirements, selected)
        proposal = Proposal(requirements=requirements, sections=sections)
        logger.info(f"[SectionGenerator] 제안서 생성: {proposal.id}")
        return proposal, used_fallback


# 싱글톤 인스턴스
_section_generator: Optional[SectionGenerator] = None


def get_section_generator() -> SectionGenerator:
    """SectionGenerator 인스턴스를 반환합니다."""
    global _section_generator
    if _section_generator is None:
        _section_generator = SectionGenerator()
    return _section_generator
