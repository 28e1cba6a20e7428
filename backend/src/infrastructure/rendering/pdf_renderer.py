"""ReportLab implementation of DocumentRendererPort.

Layout of a declaration (A4):
- title block: bold, centered, pushed down from the top margin
- body: one justified paragraph per line, generous leading, indented first line
- footer: centered lines (place, date, signature)
- letterhead: organization address/contact, small print, centered inside the
  bottom margin of every page
"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from domain.documents.ports.document_renderer_port import DocumentRendererPort
from domain.requests.errors import RenderError

logger = logging.getLogger(__name__)

PAGE_MARGIN = 72
FONT_SIZE = 14
LINE_GAP = 12
TITLE_OFFSET = 140
TITLE_GAP = 64
BODY_INDENT = 60
LETTERHEAD_FONT_SIZE = 9


def split_lines(text: Optional[str]) -> List[str]:
    """Split template text into lines.

    Templates stored through JSON forms often carry the two-character
    sequence backslash-n instead of a real newline; both count as a break.
    """
    if not text:
        return []
    return text.replace("\\n", "\n").splitlines()


class ReportLabDocumentRenderer(DocumentRendererPort):
    """Render declarations to PDF with reportlab's platypus engine."""

    extension = "pdf"
    content_type = "application/pdf"

    def __init__(self, letterhead_lines: Sequence[str] = ()):
        self.letterhead_lines = list(letterhead_lines)

        self.title_style = ParagraphStyle(
            "DeclarationTitle",
            fontName="Times-Bold",
            fontSize=FONT_SIZE,
            leading=FONT_SIZE + 4,
            alignment=TA_CENTER,
        )
        self.body_style = ParagraphStyle(
            "DeclarationBody",
            fontName="Times-Roman",
            fontSize=FONT_SIZE,
            leading=FONT_SIZE + LINE_GAP,
            alignment=TA_JUSTIFY,
            firstLineIndent=BODY_INDENT,
        )
        self.footer_style = ParagraphStyle(
            "DeclarationFooter",
            fontName="Times-Roman",
            fontSize=FONT_SIZE,
            leading=FONT_SIZE + 2,
            alignment=TA_CENTER,
        )

    def render(self, title: str, body: str, footer: str, destination: Path) -> bytes:
        destination = Path(destination)
        story = self._build_story(title, body, footer)

        try:
            doc = SimpleDocTemplate(
                str(destination),
                pagesize=A4,
                leftMargin=PAGE_MARGIN,
                rightMargin=PAGE_MARGIN,
                topMargin=PAGE_MARGIN,
                bottomMargin=PAGE_MARGIN,
                title=title,
            )
            doc.build(
                story,
                onFirstPage=self._draw_letterhead,
                onLaterPages=self._draw_letterhead,
            )
        except Exception as e:
            logger.error(f"Failed to build document {destination}: {e}")
            raise RenderError(f"Could not write document {destination.name}: {e}")

        try:
            data = destination.read_bytes()
        except OSError as e:
            raise RenderError(f"Could not read document {destination.name}: {e}")

        if not data:
            raise RenderError(f"Document {destination.name} is empty")

        logger.debug(f"Rendered document {destination.name} ({len(data)} bytes)")
        return data

    def _build_story(self, title: str, body: str, footer: str) -> list:
        story = [
            Spacer(1, TITLE_OFFSET),
            Paragraph(escape(title or ""), self.title_style),
            Spacer(1, TITLE_GAP),
        ]

        for line in split_lines(body):
            story.append(Paragraph(escape(line.strip()), self.body_style))
            story.append(Spacer(1, FONT_SIZE))

        story.append(Spacer(1, FONT_SIZE))

        for line in split_lines(footer):
            # Blank footer lines keep their height
            story.append(Paragraph(escape(line) or "&nbsp;", self.footer_style))

        return story

    def _draw_letterhead(self, canvas, doc) -> None:
        """Draw the letterhead inside the bottom margin, outside the frame."""
        if not self.letterhead_lines:
            return

        page_width, _ = doc.pagesize
        y = doc.bottomMargin / 2
        canvas.saveState()
        canvas.setFont("Times-Roman", LETTERHEAD_FONT_SIZE)
        for line in self.letterhead_lines:
            canvas.drawCentredString(page_width / 2, y, line)
            y -= LETTERHEAD_FONT_SIZE + 2
        canvas.restoreState()
