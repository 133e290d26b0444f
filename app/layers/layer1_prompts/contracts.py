"""Output format contracts shared by prompt templates and the content formatter.

프롬프트 템플릿이 요구하는 표 컬럼명, 제목 문자열, 글머리 기호를 한 곳에 정의합니다.
포맷터의 표 분류기와 제목 인식 패스도 같은 상수를 사용하므로
템플릿과 파서가 서로 어긋나지 않습니다.
"""

# 글머리 기호
BULLET_GLYPH = "•"
HEADED_BULLET_GLYPH = "●"
SOURCE_BULLET_MARKER = "*"

# 표 컬럼 (템플릿에 그대로 삽입되고, 분류기가 헤더와 비교합니다)
OPERATIONAL_COLUMNS = ("Service", "Estimated Cost", "Notes")
ADDITIONAL_FEATURES_COLUMNS = ("Feature", "Description", "Estimated Cost")
TOTAL_INVESTMENT_COLUMNS = ("Investment Component", "Amount", "Notes")
TIMELINE_COLUMNS = ("Phase", "Duration", "Activities")
DEVELOPMENT_COST_COLUMNS = ("Component", "Description", "Estimate")
RETAINER_COLUMNS = ("Pricing Component", "Amount", "Notes")

# 합계 행 첫 번째 셀 (내보내기 시 굵게/음영 처리)
TOTAL_ROW_LABELS = ("Total", "Development Cost", "Total Investment")

# 닫힌 제목 집합 (정확히 일치, 콜론으로 끝남)
ROI_HEADINGS = (
    "Revenue Impact:",
    "Cost Savings:",
    "Competitive Advantages:",
)
VALUE_PROPOSITION_HEADINGS = (
    "Operational Efficiency:",
    "Customer Experience:",
    "Scalable Growth:",
    "Return on Investment:",
)

# 다이어그램 섹션: 코드 블록과 함께 제거되는 안내 문구의 시작 부분
DIAGRAM_FENCE_LANGUAGES = ("mermaid", "diagram", "flowchart")
DIAGRAM_INSTRUCTION_PREFIXES = (
    "copy this code to",
    "copy the code to",
    "copy the code above to",
    "copy the code below to",
    "paste this code into",
    "paste the code into",
)
DIAGRAM_INSTRUCTION_LINE = "Copy this code to https://mermaid.live to render the diagram, then upload the exported image."


def markdown_header(columns: tuple[str, ...]) -> str:
    """컬럼 튜플을 마크다운 표 헤더 + 구분선 두 줄로 만듭니다."""
    header = "| " + " | ".join(columns) + " |"
    separator = "|" + "|".join("-" * (len(col) + 2) for col in columns) + "|"
    return f"{header}\n{separator}"


def format_heading_list(headings: tuple[str, ...]) -> str:
    return ", ".join(f'"{heading}"' for heading in headings)
