"""Bullet normalization pass.

`*` 로 시작하는 줄을 `•` 글머리 항목으로 바꿉니다.
글머리 표시가 전혀 없고 내용이 정확히 한 줄이면 문장 경계
(마침표 + 공백 + 대문자)로 나누어 문장마다 항목을 만듭니다.

문장 분리는 최선 노력(best-effort) 방식입니다. "U.S. businesses"처럼
약어 뒤에 대문자가 오면 약어 위치에서도 잘립니다.
"""

import re

from app.layers.layer1_prompts.contracts import BULLET_GLYPH

# `*` 한 개(굵게 표시 `**` 제외) 또는 이미 정규화된 `•`
BULLET_LINE = re.compile(r"^\s*(?:\*(?!\*)|" + re.escape(BULLET_GLYPH) + r")\s*(?P<text>.*)$")
SENTENCE_BOUNDARY = re.compile(r"(?<=\.)\s+(?=[A-Z])")


def split_sentences(text: str) -> list[str]:
    return [sentence.strip() for sentence in SENTENCE_BOUNDARY.split(text) if sentence.strip()]


def parse_bullet_items(content: str) -> list[str]:
    """
    본문을 글머리 항목 텍스트 목록으로 분해합니다.

    - 글머리 표시가 있는 줄: 표시를 떼고 항목으로
    - 표시가 없는 줄: 그대로 항목으로
    - 표시가 전혀 없는 한 줄짜리 본문: 문장 단위로 분리
    """
    if not content:
        return []

    lines = [line.strip() for line in content.splitlines() if line.strip()]
    if not lines:
        return []

    matches = [BULLET_LINE.match(line) for line in lines]
    if not any(matches) and len(lines) == 1:
        return split_sentences(lines[0])

    items = []
    for line, match in zip(lines, matches):
        text = match.group("text").strip() if match else line
        if text:
            items.append(text)
    return items


def normalize_bullets(content: str) -> str:
    """`• 항목` 형식의 줄들로 정규화합니다. 이미 정규화된 입력은 바뀌지 않습니다."""
    if not content:
        return content
    return "\n".join(f"{BULLET_GLYPH} {item}" for item in parse_bullet_items(content))
