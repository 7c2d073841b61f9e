"""
Document rendering.

Turns a ``GenerationRequest`` into a downloadable PDF or plain-text file.
Uses reportlab for PDF generation; page breaks happen automatically when
the body overflows the frame. An answer key, when requested, always starts
on a page of its own.
"""

from __future__ import annotations

import io
from datetime import datetime
from typing import Callable
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer
from reportlab.platypus.flowables import HRFlowable

from ..config.models import RenderSettings
from ..errors import RenderError
from ..utils.logging import get_logger
from .answer_key import split_answer_key
from .classifier import detect_document_type
from .cleanup import (
    INLINE_BOLD,
    Block,
    BlockKind,
    capitalize_title,
    clean_content_for_document,
    strip_inline_markup,
    to_blocks,
)
from .filenames import derive_filename
from .models import DocumentType, GeneratedFile, GenerationRequest, OutputFormat

logger = get_logger(__name__)

PAGE_SIZES = {"a4": A4, "letter": letter}
METADATA_SEPARATOR = " | "
ANSWER_KEY_HEADING = "Answer Key"


def _get_styles(settings: RenderSettings) -> dict[str, ParagraphStyle]:
    """Get paragraph styles for generated documents."""
    styles = getSampleStyleSheet()
    body_leading = settings.body_font_size + 4

    return {
        "Title": ParagraphStyle(
            "DocTitle",
            parent=styles["Heading1"],
            fontName="Helvetica-Bold",
            fontSize=settings.title_font_size,
            leading=settings.title_font_size + 6,
            alignment=TA_CENTER,
            spaceAfter=4,
        ),
        "Meta": ParagraphStyle(
            "DocMeta",
            parent=styles["Normal"],
            fontSize=10,
            leading=13,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#4a5568"),
        ),
        "Timestamp": ParagraphStyle(
            "DocTimestamp",
            parent=styles["Normal"],
            fontSize=8,
            leading=10,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#718096"),
            spaceAfter=12,
        ),
        "Heading": ParagraphStyle(
            "DocHeading",
            parent=styles["Heading2"],
            fontName="Helvetica-Bold",
            fontSize=settings.heading_font_size,
            leading=settings.heading_font_size + 4,
            spaceBefore=6,
            spaceAfter=8,
        ),
        "Body": ParagraphStyle(
            "DocBody",
            parent=styles["Normal"],
            fontName="Helvetica",
            fontSize=settings.body_font_size,
            leading=body_leading,
            spaceAfter=2,
        ),
        "Question": ParagraphStyle(
            "DocQuestion",
            parent=styles["Normal"],
            fontName="Helvetica",
            fontSize=settings.body_font_size,
            leading=body_leading,
            spaceAfter=6,
        ),
    }


def _markup(text: str) -> str:
    """Escape text for a reportlab Paragraph, keeping **bold** runs bold."""
    escaped = escape(text)
    return INLINE_BOLD.sub(lambda m: f"<b>{m.group('text')}</b>", escaped)


class Renderer:
    """Lays out generated material as PDF or plain text."""

    def __init__(
        self,
        settings: RenderSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the renderer.

        Args:
            settings: Page layout settings
            clock: Source of the generation timestamp; defaults to local time
        """
        self.settings = settings or RenderSettings()
        self.clock = clock or datetime.now

    def render(self, request: GenerationRequest) -> GeneratedFile:
        """
        Render a generation request.

        Args:
            request: Title, content, metadata and output options

        Returns:
            GeneratedFile with the document bytes, MIME type and filename

        Raises:
            RenderError: If the output format is not supported
        """
        if not isinstance(request.output_format, OutputFormat):
            raise RenderError(f"Unsupported format: {request.output_format!r}")

        document_type = request.document_type or detect_document_type(request.content)
        split = split_answer_key(request.content)
        body = clean_content_for_document(split.body)

        answer_key = None
        if request.include_answers and split.answer_key:
            answer_key = clean_content_for_document(split.answer_key) or None

        now = self.clock()
        filename = derive_filename(
            document_type, request.subject, request.theme, now.date(), request.output_format
        )

        if request.output_format is OutputFormat.PDF:
            data = self._render_pdf(request, document_type, body, answer_key, now)
        else:
            data = self._render_text(request, body, answer_key, now)

        logger.info(
            f"Rendered {filename} ({len(data)} bytes, type={document_type.value}, "
            f"answer_key={'yes' if answer_key else 'no'})"
        )
        return GeneratedFile(data=data, mime_type=request.output_format.mime_type, filename=filename)

    # -------------------------------------------------------------------------
    # PDF
    # -------------------------------------------------------------------------

    def _render_pdf(
        self,
        request: GenerationRequest,
        document_type: DocumentType,
        body: str,
        answer_key: str | None,
        now: datetime,
    ) -> bytes:
        styles = _get_styles(self.settings)
        title = capitalize_title(request.title)
        elements = []

        # 1. Header
        elements.append(Paragraph(_markup(title), styles["Title"]))
        if request.metadata_fields:
            elements.append(
                Paragraph(escape(METADATA_SEPARATOR.join(request.metadata_fields)), styles["Meta"])
            )
        elements.append(Paragraph(escape(self._timestamp(now)), styles["Timestamp"]))

        # 2. Body
        elements.extend(self._build_blocks(to_blocks(body), styles))

        # 3. Answer space
        if document_type is DocumentType.WORKSHEET:
            elements.extend(self._build_ruled_lines())

        # 4. Answer key, never on a page the student works from
        if answer_key:
            elements.append(PageBreak())
            elements.append(Paragraph(ANSWER_KEY_HEADING, styles["Heading"]))
            elements.extend(self._build_blocks(to_blocks(answer_key), styles))

        margin = self.settings.margin_mm * mm
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=PAGE_SIZES[self.settings.page_size],
            rightMargin=margin,
            leftMargin=margin,
            topMargin=margin,
            bottomMargin=margin,
            title=title,
            subject=document_type.value,
            creator="studydocs",
        )
        doc.build(elements)
        return buffer.getvalue()

    @staticmethod
    def _build_blocks(blocks: list[Block], styles: dict[str, ParagraphStyle]) -> list:
        elements = []
        for block in blocks:
            if block.kind is BlockKind.BLANK:
                elements.append(Spacer(1, 3 * mm))
            elif block.kind is BlockKind.HEADING:
                elements.append(Paragraph(_markup(block.text), styles["Heading"]))
            elif block.kind is BlockKind.QUESTION:
                elements.append(Paragraph(_markup(block.text.strip()), styles["Question"]))
            else:
                elements.append(Paragraph(_markup(block.text.strip()), styles["Body"]))
        return elements

    def _build_ruled_lines(self) -> list:
        elements = [Spacer(1, 10 * mm)]
        for _ in range(self.settings.ruled_lines):
            elements.append(
                HRFlowable(
                    width="100%",
                    thickness=0.5,
                    color=colors.HexColor("#c8c8c8"),
                    spaceBefore=9 * mm,
                    spaceAfter=0,
                )
            )
        return elements

    # -------------------------------------------------------------------------
    # Plain text
    # -------------------------------------------------------------------------

    def _render_text(
        self,
        request: GenerationRequest,
        body: str,
        answer_key: str | None,
        now: datetime,
    ) -> bytes:
        title = capitalize_title(request.title)
        lines = [title, "-" * len(title)]
        if request.metadata_fields:
            lines.append(METADATA_SEPARATOR.join(request.metadata_fields))
        lines.append(self._timestamp(now))
        lines.append("")
        lines.extend(self._text_lines(to_blocks(body)))

        if answer_key:
            lines.extend(["", ANSWER_KEY_HEADING.upper(), "-" * len(ANSWER_KEY_HEADING)])
            lines.extend(self._text_lines(to_blocks(answer_key)))

        content = "\n".join(lines).rstrip() + "\n"
        return content.encode("utf-8")

    @staticmethod
    def _text_lines(blocks: list[Block]) -> list[str]:
        lines: list[str] = []
        for block in blocks:
            if block.kind is BlockKind.BLANK:
                if lines and lines[-1] != "":
                    lines.append("")
            elif block.kind is BlockKind.HEADING:
                if lines and lines[-1] != "":
                    lines.append("")
                lines.extend([block.text, ""])
            elif block.kind is BlockKind.QUESTION:
                lines.extend([strip_inline_markup(block.text), ""])
            else:
                lines.append(strip_inline_markup(block.text))
        while lines and lines[-1] == "":
            lines.pop()
        return lines

    @staticmethod
    def _timestamp(now: datetime) -> str:
        return f"Generated {now.strftime('%Y-%m-%d %H:%M')}"
