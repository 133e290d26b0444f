"""Section type registry.

섹션 유형 하나를 추가하려면 이 모듈의 SECTION_REGISTRY에 SectionSpec 하나만
등록하면 됩니다. 제목, 프롬프트 템플릿, 출력 형식, 토큰 수, 대체 콘텐츠,
생성 직후 적용할 포맷 패스, 미리보기/내보내기 시 제목으로 인식할 줄,
본문과 함께 내보낼 이미지 컬렉션이 모두 여기에 모여 있습니다.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from app.exceptions import InputValidationError
from app.models.requirements import Requirements
from app.layers.layer3_formatting.bullets import normalize_bullets, parse_bullet_items
from app.layers.layer3_formatting.headings import format_roi_content, format_value_propositions
from app.layers.layer3_formatting.tables import find_tables, header_labels
from app.layers.layer3_formatting.timeline import normalize_timeline

from .contracts import (
    ADDITIONAL_FEATURES_COLUMNS,
    DEVELOPMENT_COST_COLUMNS,
    OPERATIONAL_COLUMNS,
    RETAINER_COLUMNS,
    ROI_HEADINGS,
    TIMELINE_COLUMNS,
    TOTAL_INVESTMENT_COLUMNS,
    VALUE_PROPOSITION_HEADINGS,
)
from .prompts import section_prompts as prompts

GENERIC_SECTION_TYPE = "generic"
SCREENSHOTS_SECTION_TYPE = "screenshots"

NUMBERED_LINE = re.compile(r"^\s*\d+[.)]\s+\S", re.MULTILINE)


@dataclass(frozen=True)
class OutputSchema:
    """
    섹션 출력이 따라야 하는 형식.

    kind:
        paragraph / bullets / headed-bullets / numbered / table / diagram / markdown / images
    """
    kind: str
    columns: tuple[str, ...] = ()
    headings: tuple[str, ...] = ()

    def matches(self, content: str) -> bool:
        """생성된 본문이 이 형식을 만족하는지 검사합니다."""
        if self.kind == "images":
            return True
        if not content or not content.strip():
            return False
        if self.kind == "bullets":
            return len(parse_bullet_items(content)) > 1
        if self.kind == "headed-bullets":
            lines = {line.strip() for line in content.splitlines()}
            return all(heading in lines for heading in self.headings)
        if self.kind == "numbered":
            return bool(NUMBERED_LINE.search(content))
        if self.kind == "table":
            return any(
                header_labels(table.header).issuperset(self.columns) for table in find_tables(content)
            )
        if self.kind == "diagram":
            return "```" in content
        if self.kind == "paragraph":
            return not find_tables(content)
        return True


@dataclass(frozen=True)
class SectionSpec:
    """섹션 유형 하나의 선언."""
    key: str
    title: str
    template: Optional[str]
    schema: OutputSchema
    fallback: Callable[[Requirements], str]
    max_tokens: int = 1000
    temperature: float = 0.7
    content_pass: Optional[Callable[[str], str]] = None
    heading_lines: tuple[str, ...] = ()
    image_collection: Optional[str] = None
    default: bool = False

    @property
    def generates_text(self) -> bool:
        return self.template is not None

    def post_process(self, content: str) -> str:
        """생성 직후 적용하는 포맷 패스."""
        if self.content_pass is None or not content:
            return content
        return self.content_pass(content)


# ==================== 대체(샘플) 콘텐츠 ====================

def _project(req: Requirements) -> str:
    return req.project_title or "project"


def _fallback_executive_summary(req: Requirements) -> str:
    return (
        f"Our {_project(req)} is designed to help your business streamline operations and improve efficiency. "
        "Our platform combines modern technology with user-friendly design, helping your business "
        "to achieve better results while reducing operational costs."
    )


def _fallback_project_overview(req: Requirements) -> str:
    client = req.client_company or req.client_name or "the client"
    return "\n".join([
        f"* {req.company_name or 'Our company'} will deliver {_project(req)} to address {client}'s business needs.",
        "* The solution combines modern web technologies with responsive design and backend integration.",
        "* Key features: user management, data processing, and analytics with real-time updates.",
        "* The platform improves operational efficiency by automating processes, reducing manual work, "
        "and providing business insights.",
        "* Success will be defined by delivering a fully functional solution and gaining measurable "
        "business value through improved user experience.",
    ])


def _fallback_the_problem(req: Requirements) -> str:
    return (
        "Most businesses struggle with outdated systems and manual processes that slow down operations "
        "and reduce productivity. This creates inefficiencies that impact customer satisfaction and business growth."
    )


def _fallback_our_solution(req: Requirements) -> str:
    return (
        f"Our {_project(req)} is designed to streamline your business operations while improving user experience. "
        "The platform provides comprehensive functionality to help your business achieve better results "
        "and operational efficiency."
    )


def _fallback_key_features(req: Requirements) -> str:
    groups = [
        ("Core Functionality", ["Essential business operations", "User management and authentication", "Data processing and storage"]),
        ("User Experience", ["Intuitive interface design", "Mobile-responsive layout", "Accessibility compliance"]),
        ("Integration Capabilities", ["Third-party API connections", "Database synchronization", "Real-time data updates"]),
        ("Security & Compliance", ["Data encryption and protection", "User access controls", "Audit trail functionality"]),
        ("Performance & Scalability", ["High-speed processing", "Cloud-based infrastructure", "Scalable architecture"]),
        ("Analytics & Reporting", ["Business intelligence dashboards", "Custom reporting tools", "Performance metrics tracking"]),
    ]
    blocks = []
    for number, (name, items) in enumerate(groups, start=1):
        lines = [f"**{number}. {name}**"] + [f"● {item}" for item in items]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def _fallback_key_value_propositions(req: Requirements) -> str:
    bullets = {
        "Operational Efficiency:": [
            "Streamline business processes and reduce manual work.",
            "Automate repetitive tasks to save time and resources.",
        ],
        "Customer Experience:": [
            "Intuitive interface design improves usability for every user.",
            "Fast, reliable performance on desktop and mobile devices.",
        ],
        "Scalable Growth:": [
            "Flexible architecture grows with your business.",
            "Easy integration with your existing systems.",
        ],
        "Return on Investment:": [
            "Lower operational costs through automation.",
            "Quick implementation delivers a fast time-to-value.",
        ],
    }
    return "\n\n".join(
        "\n".join([heading] + [f"● {item}" for item in bullets[heading]])
        for heading in VALUE_PROPOSITION_HEADINGS
    )


def _fallback_benefits_and_roi(req: Requirements) -> str:
    bullets = {
        "Revenue Impact:": [
            "Faster delivery: new services reach customers sooner.",
            "Better conversion: a smoother experience keeps more customers engaged.",
        ],
        "Cost Savings:": [
            "Automation: manual, repetitive work is reduced.",
            "Maintenance: a modern stack lowers ongoing support effort.",
        ],
        "Competitive Advantages:": [
            "Differentiation: a modern platform sets the business apart.",
            "Insight: real-time reporting supports better decisions.",
        ],
    }
    return "\n\n".join(
        "\n".join([heading] + [f"● {item}" for item in bullets[heading]])
        for heading in ROI_HEADINGS
    )


def _fallback_next_steps(req: Requirements) -> str:
    return "\n".join([
        "1. Project kickoff meeting",
        "2. Requirements finalization",
        "3. Design and development phase",
        "4. Testing and quality assurance",
        "5. Deployment and go-live",
        "6. Training and support",
    ])


def _fallback_development_cost(req: Requirements) -> str:
    return "\n".join([
        "Includes:",
        "* Full front end and back end development",
        "* System testing",
        "* Production migration and DevOps",
        "",
        "| " + " | ".join(DEVELOPMENT_COST_COLUMNS) + " |",
        "|-----------|-------------|----------|",
        "| Front End Development | End-to-end website design and development | $ 500 |",
        "| Back End Development | APIs, data processing and integrations | $ 2000 |",
        "| DevOps | CI/CD workflows and production migration | $ 100 |",
        "| QA/Testing | Validate application flows and admin functionalities | $ 100 |",
        "| Development Cost |  | $ 2700 |",
    ])


def _fallback_additional_features(req: Requirements) -> str:
    return "\n".join([
        "| " + " | ".join(ADDITIONAL_FEATURES_COLUMNS) + " |",
        "|---------|-------------|----------------|",
        "| Analytics Dashboard | Advanced reporting on key business metrics. | $ 1500 |",
        "| Mobile App | Native companion app for customers on the go. | $ 5000 |",
        "| Automated Reporting | Scheduled email reports for stakeholders. | $ 800 |",
    ])


def _fallback_operational_costs(req: Requirements) -> str:
    return "\n".join([
        "| " + " | ".join(OPERATIONAL_COLUMNS) + " |",
        "|---------|----------------|-------|",
        "| Hosting | $ 100 | Cloud hosting with autoscaling |",
        "| Database | $ 50 | Managed database with backups |",
        "| Monitoring | $ 30 | Uptime and error monitoring |",
        "| Total | $ 180 | Estimated, depends on usage |",
    ])


def _fallback_monthly_retainer(req: Requirements) -> str:
    return "\n".join([
        "The monthly retainer covers ongoing support, maintenance, and feature updates.",
        "",
        "| " + " | ".join(RETAINER_COLUMNS) + " |",
        "|-------------------|--------|-------|",
        "| Support Hours | 20 hours | Priority response |",
        "| Maintenance | Included | Security patches and updates |",
        "| Monthly Fee | $ 2000 | Billed monthly |",
    ])


def _fallback_total_investment(req: Requirements) -> str:
    return "\n".join([
        "| " + " | ".join(TOTAL_INVESTMENT_COLUMNS) + " |",
        "|----------------------|--------|-------|",
        "| One Time Development | $ 2700 | Paid by milestone |",
        "| Operational Costs | $ 2160 | 12 months |",
        "| Monthly Retainer | $ 24000 | 12 months |",
        "| Total Investment | $ 28860 | First year |",
    ])


def _fallback_implementation_timeline(req: Requirements) -> str:
    return "\n".join([
        "| " + " | ".join(TIMELINE_COLUMNS) + " |",
        "|-------|----------|------------|",
        "| Requirements Gathering | 2-3 weeks | Finalize requirements |",
        "| Development | 6-8 weeks | Build application |",
        "| Testing and QA | 2-3 weeks | Comprehensive testing |",
        "| Deployment and Go-Live | 1-2 weeks | Production setup |",
        "| Training & Handover | 1 week | Documentation and knowledge transfer |",
        "| Total | 12-16 weeks | Complete project delivery |",
    ])


def _fallback_process_flow(req: Requirements) -> str:
    return (
        "The process flow includes user authentication, data input, processing, validation, storage, "
        "and output generation. The system follows a structured workflow ensuring data integrity and user experience."
    )


def _fallback_technical_architecture(req: Requirements) -> str:
    return (
        "The technical architecture includes a web frontend, a backend API, a relational database, "
        "cloud hosting, and third-party integrations for a scalable and secure solution."
    )


def _fallback_generic(req: Requirements) -> str:
    return f"This section describes how {_project(req)} addresses the client's requirements."


def _fallback_empty(req: Requirements) -> str:
    return ""


# ==================== 레지스트리 ====================

_SPECS = [
    SectionSpec(
        key="executive-summary",
        title="Executive Summary",
        template=prompts.EXECUTIVE_SUMMARY_PROMPT,
        schema=OutputSchema("paragraph"),
        fallback=_fallback_executive_summary,
        max_tokens=500,
        default=True,
    ),
    SectionSpec(
        key="project-overview",
        title="Project Overview",
        template=prompts.PROJECT_OVERVIEW_PROMPT,
        schema=OutputSchema("bullets"),
        fallback=_fallback_project_overview,
        max_tokens=800,
        content_pass=normalize_bullets,
        default=True,
    ),
    SectionSpec(
        key="the-problem",
        title="The Problem",
        template=prompts.THE_PROBLEM_PROMPT,
        schema=OutputSchema("paragraph"),
        fallback=_fallback_the_problem,
        max_tokens=600,
        default=True,
    ),
    SectionSpec(
        key="our-solution",
        title="Our Solution",
        template=prompts.OUR_SOLUTION_PROMPT,
        schema=OutputSchema("paragraph"),
        fallback=_fallback_our_solution,
        max_tokens=600,
        default=True,
    ),
    SectionSpec(
        key="key-features",
        title="Key Features",
        template=prompts.KEY_FEATURES_PROMPT,
        schema=OutputSchema("markdown"),
        fallback=_fallback_key_features,
        max_tokens=1000,
    ),
    SectionSpec(
        key="key-value-propositions",
        title="Key Value Propositions",
        template=prompts.KEY_VALUE_PROPOSITIONS_PROMPT,
        schema=OutputSchema("headed-bullets", headings=VALUE_PROPOSITION_HEADINGS),
        fallback=_fallback_key_value_propositions,
        max_tokens=1000,
        content_pass=format_value_propositions,
        heading_lines=VALUE_PROPOSITION_HEADINGS,
        default=True,
    ),
    SectionSpec(
        key="benefits-and-roi",
        title="Benefits & ROI",
        template=prompts.BENEFITS_AND_ROI_PROMPT,
        schema=OutputSchema("headed-bullets", headings=ROI_HEADINGS),
        fallback=_fallback_benefits_and_roi,
        max_tokens=1200,
        content_pass=format_roi_content,
        heading_lines=ROI_HEADINGS,
    ),
    SectionSpec(
        key="next-steps",
        title="Next Steps",
        template=prompts.NEXT_STEPS_PROMPT,
        schema=OutputSchema("numbered"),
        fallback=_fallback_next_steps,
        max_tokens=600,
    ),
    SectionSpec(
        key="one-time-development-cost",
        title="One Time Development Cost",
        template=prompts.DEVELOPMENT_COST_PROMPT,
        schema=OutputSchema("table", columns=DEVELOPMENT_COST_COLUMNS),
        fallback=_fallback_development_cost,
        max_tokens=1200,
        temperature=0.5,
    ),
    SectionSpec(
        key="additional-features-recommended",
        title="Additional Features Recommended",
        template=prompts.ADDITIONAL_FEATURES_PROMPT,
        schema=OutputSchema("table", columns=ADDITIONAL_FEATURES_COLUMNS),
        fallback=_fallback_additional_features,
        max_tokens=1000,
        temperature=0.5,
    ),
    SectionSpec(
        key="operational-costs-monthly",
        title="Operational Costs (Monthly)",
        template=prompts.OPERATIONAL_COSTS_PROMPT,
        schema=OutputSchema("table", columns=OPERATIONAL_COLUMNS),
        fallback=_fallback_operational_costs,
        max_tokens=1000,
        temperature=0.5,
    ),
    SectionSpec(
        key="monthly-retainer-fee",
        title="Monthly Retainer Fee",
        template=prompts.MONTHLY_RETAINER_PROMPT,
        schema=OutputSchema("table", columns=RETAINER_COLUMNS),
        fallback=_fallback_monthly_retainer,
        max_tokens=800,
        temperature=0.5,
    ),
    SectionSpec(
        key="total-investment-from-client",
        title="Total Investment from Client",
        template=prompts.TOTAL_INVESTMENT_PROMPT,
        schema=OutputSchema("table", columns=TOTAL_INVESTMENT_COLUMNS),
        fallback=_fallback_total_investment,
        max_tokens=800,
        temperature=0.5,
    ),
    SectionSpec(
        key="implementation-timeline",
        title="Implementation Timeline",
        template=prompts.IMPLEMENTATION_TIMELINE_PROMPT,
        schema=OutputSchema("table", columns=TIMELINE_COLUMNS),
        fallback=_fallback_implementation_timeline,
        max_tokens=1200,
        temperature=0.5,
        content_pass=normalize_timeline,
    ),
    SectionSpec(
        key="process-flow-diagram",
        title="Process Flow Diagram",
        template=prompts.PROCESS_FLOW_PROMPT,
        schema=OutputSchema("diagram"),
        fallback=_fallback_process_flow,
        max_tokens=1200,
        image_collection="process-flow-diagram",
    ),
    SectionSpec(
        key="technical-architecture",
        title="Technical Architecture",
        template=prompts.TECHNICAL_ARCHITECTURE_PROMPT,
        schema=OutputSchema("diagram"),
        fallback=_fallback_technical_architecture,
        max_tokens=1500,
        image_collection="technical-architecture",
    ),
    SectionSpec(
        key=SCREENSHOTS_SECTION_TYPE,
        title="Screenshots",
        template=None,
        schema=OutputSchema("images"),
        fallback=_fallback_empty,
        image_collection=SCREENSHOTS_SECTION_TYPE,
    ),
    SectionSpec(
        key=GENERIC_SECTION_TYPE,
        title="Custom Section",
        template=prompts.GENERIC_SECTION_PROMPT,
        schema=OutputSchema("markdown"),
        fallback=_fallback_generic,
        max_tokens=1500,
    ),
]

SECTION_REGISTRY: dict[str, SectionSpec] = {spec.key: spec for spec in _SPECS}

# 목차 순서 (generic 제외)
SECTION_ORDER: list[str] = [spec.key for spec in _SPECS if spec.key != GENERIC_SECTION_TYPE]

# 전체 생성 시 기본으로 만드는 섹션
DEFAULT_SECTIONS: list[str] = [spec.key for spec in _SPECS if spec.default]


def get_section_spec(section_type: str) -> SectionSpec:
    """섹션 유형 선언을 반환합니다. 알 수 없는 유형은 입력 에러입니다."""
    spec = SECTION_REGISTRY.get(section_type)
    if spec is None:
        raise InputValidationError(
            f"Unknown section type: {section_type}",
            details={"section_type": section_type, "known": list(SECTION_REGISTRY)},
        )
    return spec


def spec_for_section(section_id: str) -> SectionSpec:
    """섹션 키로 선언을 찾고, 사용자 정의 섹션이면 generic 선언을 돌려줍니다."""
    return SECTION_REGISTRY.get(section_id) or SECTION_REGISTRY[GENERIC_SECTION_TYPE]
