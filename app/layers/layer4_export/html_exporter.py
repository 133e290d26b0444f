"""Print HTML exporter.

브라우저 인쇄 대화상자로 PDF를 만드는 방식입니다.
이미지는 data URI로 문서 안에 넣고, 문서가 열리면 인쇄 대화상자를 띄웁니다.
"""

import html

from app.layers.layer3_formatting import render_blocks_html
from app.layers.layer3_formatting.images import render_figure_html

from .assembler import ExportDocument, ExportedFile

HTML_MEDIA_TYPE = "text/html; charset=utf-8"

PRINT_STYLES = """
body { font-family: Arial, Helvetica, sans-serif; color: #222; margin: 40px; line-height: 1.5; }
h1 { font-size: 28px; margin-bottom: 4px; }
h2 { font-size: 22px; border-bottom: 2px solid #1f4e79; padding-bottom: 4px; margin-top: 32px; }
.meta { color: #555; margin: 2px 0; }
.toc ol { padding-left: 20px; }
.proposal-section { page-break-inside: auto; }
.table-container { margin: 12px 0; }
.proposal-table { width: 100%; border-collapse: collapse; }
.proposal-table th, .proposal-table td { border: 1px solid #999; padding: 6px 8px; text-align: left; vertical-align: top; }
.proposal-table th { background: #d9d9d9; }
.operational-table th { background: #dce6f1; }
.additional-features-table th { background: #e2efda; }
.total-investment-table th { background: #fce4d6; }
.timeline-table th { background: #ede7f6; }
.proposal-table tr.total-row td { font-weight: bold; background: #f2f2f2; }
.proposal-figure { margin: 16px 0; text-align: center; page-break-inside: avoid; }
.proposal-figure img { max-width: 100%; }
.proposal-figure figcaption { font-style: italic; color: #555; margin-top: 4px; }
@media print { body { margin: 0; } .toc { page-break-after: always; } }
"""


def render_print_html(document: ExportDocument) -> str:
    """내보내기 문서 전체를 인쇄용 HTML 문자열로 만듭니다."""
    parts = [f"<h1>{html.escape(document.title)}</h1>"]
    if document.prepared_for:
        parts.append(f'<p class="meta">Prepared for: {html.escape(document.prepared_for)}</p>')
    if document.prepared_by:
        parts.append(f'<p class="meta">Prepared by: {html.escape(document.prepared_by)}</p>')
    parts.append(f'<p class="meta">Date: {document.generated_at.strftime("%B %d, %Y")}</p>')

    toc_items = "\n".join(
        f'<li><a href="#{html.escape(section.id)}">{html.escape(section.title)}</a></li>'
        for section in document.sections
    )
    parts.append(f'<nav class="toc"><h2>Table of Contents</h2>\n<ol>\n{toc_items}\n</ol></nav>')

    for section in document.sections:
        body = render_blocks_html(section.blocks)
        figures = "\n".join(render_figure_html(image.title, image.to_data_url()) for image in section.images)
        parts.append(
            f'<section class="proposal-section" id="{html.escape(section.id)}">\n'
            f"<h2>{html.escape(section.title)}</h2>\n"
            f"{body}\n{figures}\n</section>"
        )

    body_html = "\n".join(parts)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="utf-8" />\n'
        f"<title>{html.escape(document.title)}</title>\n"
        f"<style>{PRINT_STYLES}</style>\n"
        "</head>\n"
        '<body onload="window.print()">\n'
        f"{body_html}\n"
        "</body>\n</html>\n"
    )


def export_print_html(document: ExportDocument) -> ExportedFile:
    return ExportedFile(
        content=render_print_html(document).encode("utf-8"),
        media_type=HTML_MEDIA_TYPE,
        filename=document.filename("html"),
        inline=True,
    )
