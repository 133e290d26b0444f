"""Layer 3: Content Formatting - normalize generated text for preview and export."""

from .blocks import (
    Block,
    BulletList,
    CodeFence,
    Heading,
    Image,
    Paragraph,
    RawHtml,
    Table,
    TableVariant,
    TextRun,
)
from .bullets import normalize_bullets, parse_bullet_items
from .headings import format_headed_content, format_roi_content, format_value_propositions
from .html_renderer import render_blocks_html, render_markdown_html
from .images import convert_markdown_images
from .markdown import MarkdownParser, parse_markdown
from .tables import classify_table, convert_markdown_tables, find_tables
from .timeline import normalize_timeline

__all__ = [
    "Block",
    "BulletList",
    "CodeFence",
    "Heading",
    "Image",
    "Paragraph",
    "RawHtml",
    "Table",
    "TableVariant",
    "TextRun",
    "normalize_bullets",
    "parse_bullet_items",
    "format_headed_content",
    "format_roi_content",
    "format_value_propositions",
    "render_blocks_html",
    "render_markdown_html",
    "convert_markdown_images",
    "MarkdownParser",
    "parse_markdown",
    "classify_table",
    "convert_markdown_tables",
    "find_tables",
    "normalize_timeline",
]
