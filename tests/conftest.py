"""Pytest configuration and fixtures.

Builds real documents in memory: PDFs with reportlab, DOCX packages with
python-docx, so decoders are exercised against the libraries' own output.
"""

import io
from datetime import datetime

import docx
import pytest
from pypdf import PdfReader, PdfWriter
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from studydocs.extraction import UploadedFile


def build_pdf(pages: list[list[str]]) -> bytes:
    """One PDF page per entry, each line drawn at its own height."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buffer.getvalue()


def build_docx(items: list) -> bytes:
    """Strings become paragraphs, lists of rows become tables."""
    document = docx.Document()
    for item in items:
        if isinstance(item, str):
            document.add_paragraph(item)
        else:
            table = document.add_table(rows=len(item), cols=len(item[0]))
            for r, row in enumerate(item):
                for c, value in enumerate(row):
                    table.cell(r, c).text = value
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def encrypt_pdf(data: bytes, user_password: str) -> bytes:
    reader = PdfReader(io.BytesIO(data))
    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)
    writer.encrypt(user_password=user_password, owner_password="owner-secret")
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


# ============================================================================
# Documents
# ============================================================================


@pytest.fixture
def two_page_pdf():
    """A text PDF with distinct content on each page."""
    return build_pdf([
        ["Chapter one covers fractions.", "Halves and quarters."],
        ["Chapter two covers decimals.", "Tenths and hundredths."],
    ])


@pytest.fixture
def blank_pdf():
    """A valid PDF whose only page carries no text, like a scan."""
    return build_pdf([[]])


@pytest.fixture
def encrypted_pdf(two_page_pdf):
    """A PDF that needs a user password to open."""
    return encrypt_pdf(two_page_pdf, "s3cret")


@pytest.fixture
def sample_docx():
    """A DOCX with a table between two paragraphs."""
    return build_docx([
        "My summer essay starts here.",
        [["Word", "Meaning"], ["arid", "very dry"]],
        "And it ends with this paragraph.",
    ])


# ============================================================================
# Uploads and clocks
# ============================================================================


@pytest.fixture
def make_upload():
    """Factory for UploadedFile with the declared size taken from the data."""

    def _make(name: str, media_type: str, data: bytes, size_bytes: int | None = None):
        return UploadedFile(
            name=name,
            media_type=media_type,
            size_bytes=len(data) if size_bytes is None else size_bytes,
            data=data,
        )

    return _make


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-01-15 09:30."""
    return lambda: datetime(2024, 1, 15, 9, 30)


def pdf_page_texts(data: bytes) -> list[str]:
    """Text of each page of a rendered PDF."""
    return [page.extract_text() or "" for page in PdfReader(io.BytesIO(data)).pages]
