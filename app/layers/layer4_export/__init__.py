"""Layer 4: Export - approved proposal to print HTML or .docx."""

from .assembler import (
    IMAGES_AND_DIAGRAMS_TITLE,
    ExportDocument,
    ExportedFile,
    ExportSection,
    assemble_document,
)
from .docx_exporter import DOCX_MEDIA_TYPE, DocxRenderer, export_docx
from .html_exporter import HTML_MEDIA_TYPE, export_print_html, render_print_html

__all__ = [
    "IMAGES_AND_DIAGRAMS_TITLE",
    "ExportDocument",
    "ExportedFile",
    "ExportSection",
    "assemble_document",
    "DOCX_MEDIA_TYPE",
    "DocxRenderer",
    "export_docx",
    "HTML_MEDIA_TYPE",
    "export_print_html",
    "render_print_html",
]
