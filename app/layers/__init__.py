"""Processing layers for the proposal wizard."""

# Note: Import layers individually to avoid circular imports
# Use: from app.layers.layer1_prompts.section_registry import get_section_spec
# Use: from app.layers.layer2_generation import SectionGenerator
# Use: from app.layers.layer3_formatting import parse_markdown
# Use: from app.layers.layer4_export import export_docx

__all__ = [
    "layer1_prompts",
    "layer2_generation",
    "layer3_formatting",
    "layer4_export",
]
