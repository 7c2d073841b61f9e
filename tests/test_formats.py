"""Tests for format registry and detection."""

from studydocs.extraction.formats import (
    MB,
    Container,
    SupportedFormat,
    normalize_media_type,
    resolve_format,
    sniff_container,
    supported_extensions_text,
    supported_formats,
    validate_upload,
)

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class TestResolveFormat:
    """Tests for media type and extension resolution."""

    def test_each_registered_media_type(self):
        """Every registry media type resolves to its own format."""
        for fmt in SupportedFormat:
            assert resolve_format(fmt.media_type, None) is fmt

    def test_media_type_parameters_are_ignored(self):
        """A charset parameter does not prevent resolution."""
        assert resolve_format("text/plain; charset=utf-8", None) is SupportedFormat.PLAIN_TEXT
        assert resolve_format("Application/PDF", None) is SupportedFormat.PORTABLE_DOCUMENT

    def test_extension_fallback(self):
        """A generic media type falls back to the file extension."""
        assert resolve_format("application/octet-stream", "Essay.DOCX") is SupportedFormat.MODERN_WORD_DOC
        assert resolve_format("", "notes.txt") is SupportedFormat.PLAIN_TEXT
        assert resolve_format(None, "old.doc") is SupportedFormat.LEGACY_WORD_DOC

    def test_media_type_wins_over_extension(self):
        """The declared media type is tried before the extension."""
        assert resolve_format("application/pdf", "misnamed.txt") is SupportedFormat.PORTABLE_DOCUMENT

    def test_unsupported(self):
        """Unknown types and extensions do not resolve."""
        assert resolve_format("image/png", "photo.png") is None
        assert resolve_format(None, "README") is None
        assert resolve_format(None, None) is None

    def test_normalize_media_type(self):
        assert normalize_media_type(" TEXT/Plain ; charset=latin-1") == "text/plain"
        assert normalize_media_type(None) == ""


class TestRegistry:
    """Tests for registry contents exposed to collaborators."""

    def test_limits(self):
        """Size ceilings and minimum text lengths per format."""
        assert SupportedFormat.PLAIN_TEXT.max_size_bytes == 5 * MB
        assert SupportedFormat.PLAIN_TEXT.min_text_length == 1
        for fmt in (
            SupportedFormat.LEGACY_WORD_DOC,
            SupportedFormat.MODERN_WORD_DOC,
            SupportedFormat.PORTABLE_DOCUMENT,
        ):
            assert fmt.max_size_bytes == 10 * MB
            assert fmt.min_text_length == 10

    def test_supported_formats_rows(self):
        rows = supported_formats()
        assert [row["extension"] for row in rows] == ["txt", "doc", "docx", "pdf"]
        assert rows[2]["media_type"] == DOCX_TYPE

    def test_supported_extensions_text(self):
        assert supported_extensions_text() == ".txt, .doc, .docx, .pdf"


class TestValidateUpload:
    """Tests for pre-validation messages."""

    def test_valid_upload(self):
        assert validate_upload("lesson.pdf", "application/pdf", 1024) is None

    def test_too_large_message(self):
        message = validate_upload("lesson.pdf", "application/pdf", 11 * MB)
        assert message == "File too large. Maximum size for PDF documents: 10MB"

    def test_text_file_limit(self):
        message = validate_upload("notes.txt", "text/plain", 5 * MB + 1)
        assert message == "File too large. Maximum size for Text files: 5MB"

    def test_unsupported_message_lists_extensions(self):
        message = validate_upload("photo.png", "image/png", 10)
        assert message.startswith("File type not supported")
        assert ".txt, .doc, .docx, .pdf" in message


class TestSniffContainer:
    """Tests for magic byte detection."""

    def test_pdf(self):
        assert sniff_container(b"%PDF-1.7\n...") is Container.PDF

    def test_zip(self, sample_docx):
        assert sniff_container(sample_docx) is Container.ZIP

    def test_ole2(self):
        assert sniff_container(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 8) is Container.OLE2

    def test_unknown(self):
        assert sniff_container(b"plain words") is Container.UNKNOWN
        assert sniff_container(b"") is Container.UNKNOWN
