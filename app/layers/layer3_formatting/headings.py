"""Section-heading-aware pass for value proposition and ROI content."""

from typing import Iterable, Optional

from app.layers.layer1_prompts.contracts import ROI_HEADINGS, VALUE_PROPOSITION_HEADINGS


def match_heading(line: str, headings: Iterable[str]) -> Optional[str]:
    """
    줄이 닫힌 제목 집합 중 하나와 정확히 일치하면 그 제목을 반환합니다.

    `**Revenue Impact:**` 처럼 굵게 감싼 경우도 같은 제목으로 인식합니다.
    """
    candidate = line.strip()
    if candidate.startswith("**") and candidate.endswith("**"):
        candidate = candidate[2:-2].strip()
    return candidate if candidate in headings else None


def format_headed_content(content: str, headings: Iterable[str]) -> str:
    """
    인식된 제목 앞에 빈 줄 하나를 두고 나머지 줄은 그대로 통과시킵니다.

    연속된 빈 줄은 하나로 줄이고, 앞뒤 빈 줄은 제거합니다.
    """
    if not content:
        return content

    heading_set = frozenset(headings)
    output: list[str] = []

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            if output and output[-1] != "":
                output.append("")
            continue

        heading = match_heading(line, heading_set)
        if heading is not None:
            if output and output[-1] != "":
                output.append("")
            output.append(heading)
        else:
            output.append(line)

    while output and output[-1] == "":
        output.pop()

    return "\n".join(output)


def format_roi_content(content: str) -> str:
    return format_headed_content(content, ROI_HEADINGS)


def format_value_propositions(content: str) -> str:
    return format_headed_content(content, VALUE_PROPOSITION_HEADINGS)
