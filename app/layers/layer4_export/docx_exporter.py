"""Word (.docx) exporter built on python-docx.

HTML 내보내기와 같은 블록 IR을 사용합니다.
- 제목/문단/목록: 문서 기본 스타일 (Heading n, List Bullet, List Number)
- 표: 'Table Grid' 스타일, 표 종류별 헤더 음영, 합계 행 굵게 + 음영
- 이미지: 바이트로 삽입, 읽을 수 없는 형식은 로그 후 건너뜀
"""

import io
import logging
from typing import Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.image.exceptions import (
    InvalidImageStreamError,
    UnexpectedEndOfFileError,
    UnrecognizedImageError,
)
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt

from app.config import get_settings
from app.exceptions import ExportError
from app.services.image_fetcher import FetchedImage, decode_data_url
from app.layers.layer3_formatting import (
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
from app.layers.layer3_formatting.blocks import runs_text
from app.layers.layer3_formatting.tables import is_total_row

from .assembler import ExportDocument, ExportedFile

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

# 표 종류별 헤더 행 음영 (HTML 스타일과 같은 색)
HEADER_FILLS = {
    TableVariant.OPERATIONAL: "DCE6F1",
    TableVariant.ADDITIONAL_FEATURES: "E2EFDA",
    TableVariant.TOTAL_INVESTMENT: "FCE4D6",
    TableVariant.IMPLEMENTATION_TIMELINE: "EDE7F6",
    TableVariant.GENERIC: "D9D9D9",
}
TOTAL_ROW_FILL = "F2F2F2"

# 섹션 제목은 Heading 1, 본문 제목은 그 아래 단계
SECTION_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 9


def shade_cell(cell, fill: str) -> None:
    """표 셀 배경색 지정 (w:shd)."""
    tc_pr = cell._tc.get_or_add_tcPr()
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    tc_pr.append(shd)


def _add_runs(paragraph, runs: list[TextRun]) -> None:
    for run in runs:
        docx_run = paragraph.add_run(run.text)
        docx_run.bold = run.bold or None
        docx_run.italic = run.italic or None


def _set_cell_text(cell, text: str, bold: bool = False) -> None:
    cell.text = ""
    run = cell.paragraphs[0].add_run(text)
    run.bold = bold or None


class DocxRenderer:
    """블록 IR → python-docx 문서."""

    def __init__(self, image_width_inches: Optional[float] = None):
        if image_width_inches is None:
            image_width_inches = get_settings().docx_image_width_inches
        self.image_width = Inches(image_width_inches)
        self.doc = Document()

    def render(self, document: ExportDocument) -> bytes:
        self._add_title_page(document)

        for section in document.sections:
            self.doc.add_heading(section.title, level=SECTION_HEADING_LEVEL)
            for block in section.blocks:
                self.add_block(block)
            for image in section.images:
                self.add_image(image)

        buffer = io.BytesIO()
        self.doc.save(buffer)
        return buffer.getvalue()

    def _add_title_page(self, document: ExportDocument) -> None:
        self.doc.add_heading(document.title, level=0)

        meta = self.doc.add_paragraph()
        if document.prepared_for:
            meta.add_run("Prepared for: ").bold = True
            meta.add_run(f"{document.prepared_for}\n")
        if document.prepared_by:
            meta.add_run("Prepared by: ").bold = True
            meta.add_run(f"{document.prepared_by}\n")
        meta.add_run("Date: ").bold = True
        meta.add_run(document.generated_at.strftime("%B %d, %Y"))

        self.doc.add_heading("Table of Contents", level=SECTION_HEADING_LEVEL)
        for title in document.table_of_contents:
            self.doc.add_paragraph(title, style="List Number")
        self.doc.add_page_break()

    def add_block(self, block: Block) -> None:
        if isinstance(block, Heading):
            level = min(SECTION_HEADING_LEVEL + block.level, MAX_HEADING_LEVEL)
            self.doc.add_heading(runs_text(block.runs), level=level)
        elif isinstance(block, Paragraph):
            _add_runs(self.doc.add_paragraph(), block.runs)
        elif isinstance(block, BulletList):
            style = "List Number" if block.ordered else "List Bullet"
            for item in block.items:
                _add_runs(self.doc.add_paragraph(style=style), item)
        elif isinstance(block, Table):
            self.add_table(block)
        elif isinstance(block, Image):
            self.add_markdown_image(block)
        elif isinstance(block, CodeFence):
            if block.diagram:
                return
            run = self.doc.add_paragraph().add_run(block.code)
            run.font.name = "Courier New"
            run.font.size = Pt(9)
        elif isinstance(block, RawHtml):
            for line in block.text_lines():
                self.doc.add_paragraph(line)
        else:
            raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def add_table(self, table: Table) -> None:
        width = len(table.header)
        docx_table = self.doc.add_table(rows=1, cols=width)
        docx_table.style = "Table Grid"

        header_fill = HEADER_FILLS.get(table.variant, HEADER_FILLS[TableVariant.GENERIC])
        for cell, text in zip(docx_table.rows[0].cells, table.header):
            _set_cell_text(cell, text, bold=True)
            shade_cell(cell, header_fill)

        for row in table.rows:
            total = is_total_row(row)
            cells = docx_table.add_row().cells
            for cell, text in zip(cells, row):
                _set_cell_text(cell, text, bold=total)
                if total:
                    shade_cell(cell, TOTAL_ROW_FILL)

        # 표 다음 문단과 붙지 않도록 빈 줄 추가
        self.doc.add_paragraph()

    def add_image(self, image: FetchedImage) -> None:
        try:
            self.doc.add_picture(io.BytesIO(image.content), width=self.image_width)
        except UnrecognizedImageError:
            logger.warning(f"[DocxExporter] 지원하지 않는 이미지 형식, 건너뜀: {image.title}")
            return
        except (InvalidImageStreamError, UnexpectedEndOfFileError) as e:
            # 시그니처는 맞지만 내용이 잘렸거나 손상된 이미지
            logger.warning(f"[DocxExporter] 손상된 이미지, 건너뜀: {image.title} ({type(e).__name__})")
            return

        self.doc.paragraphs[-1].alignment = WD_ALIGN_PARAGRAPH.CENTER
        if image.title:
            caption = self.doc.add_paragraph()
            caption.alignment = WD_ALIGN_PARAGRAPH.CENTER
            caption.add_run(image.title).italic = True

    def add_markdown_image(self, block: Image) -> None:
        """본문 속 마크다운 이미지. data URL만 삽입하고, 그 외에는 캡션만 남깁니다."""
        if block.url.startswith("data:"):
            try:
                content, mime_type = decode_data_url(block.url)
            except ExportError as e:
                logger.warning(f"[DocxExporter] 본문 이미지 디코딩 실패, 건너뜀: {e.message}")
            else:
                self.add_image(FetchedImage(title=block.alt, content=content, mime_type=mime_type))
                return

        if block.alt:
            self.doc.add_paragraph().add_run(block.alt).italic = True


def export_docx(document: ExportDocument) -> ExportedFile:
    return ExportedFile(
        content=DocxRenderer().render(document),
        media_type=DOCX_MEDIA_TYPE,
        filename=document.filename("docx"),
    )
