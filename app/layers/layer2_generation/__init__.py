"""Layer 2: Section Generation - prompts to proposal sections."""

from .section_generator import (
    GeneratedContent,
    SectionGenerator,
    SectionRequest,
    get_section_generator,
    normalize_selection,
)

__all__ = [
    "GeneratedContent",
    "SectionGenerator",
    "SectionRequest",
    "get_section_generator",
    "normalize_selection",
]
