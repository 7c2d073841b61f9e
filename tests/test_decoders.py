"""Tests for plain-text and Word decoders."""

import subprocess

import pytest

from studydocs.config import LegacyDocSettings, PlainTextSettings
from studydocs.extraction import (
    LegacyWordDecoder,
    MalformedStructureError,
    ModernWordDecoder,
    PdfExtractionChain,
    PlainTextDecoder,
    SupportedFormat,
    TransientFailureError,
    decoder_for,
    default_decoders,
)


class TestPlainTextDecoder:
    """Tests for text file decoding."""

    def test_utf8(self):
        decoded = PlainTextDecoder().decode("Café notes".encode("utf-8"), "notes.txt")
        assert decoded.text == "Café notes"
        assert decoded.warnings == ()

    def test_utf8_bom_is_dropped(self):
        decoded = PlainTextDecoder().decode(b"\xef\xbb\xbfHello", "notes.txt")
        assert decoded.text == "Hello"

    def test_detected_encoding(self, monkeypatch):
        """Non-UTF-8 bytes are decoded with a confident chardet guess."""
        monkeypatch.setattr(
            "chardet.detect", lambda data: {"encoding": "windows-1252", "confidence": 0.9}
        )
        decoded = PlainTextDecoder().decode("Crème brûlée".encode("cp1252"), "menu.txt")
        assert decoded.text == "Crème brûlée"
        assert decoded.warnings == ("Decoded as windows-1252 instead of UTF-8",)

    def test_low_confidence_falls_back_to_replacement(self, monkeypatch):
        monkeypatch.setattr(
            "chardet.detect", lambda data: {"encoding": "windows-1252", "confidence": 0.3}
        )
        decoder = PlainTextDecoder(PlainTextSettings(min_confidence=0.7))
        decoded = decoder.decode(b"caf\xe9", "menu.txt")
        assert decoded.text == "caf\ufffd"
        assert "replaced" in decoded.warnings[0]

    def test_empty_bytes(self):
        """Emptiness is left to the orchestrator."""
        assert PlainTextDecoder().decode(b"", "empty.txt").text == ""


class TestModernWordDecoder:
    """Tests for DOCX decoding."""

    def test_paragraphs_and_tables_in_body_order(self, sample_docx):
        decoded = ModernWordDecoder().decode(sample_docx, "essay.docx")
        text = decoded.text
        assert text.index("My summer essay") < text.index("arid | very dry")
        assert text.index("arid | very dry") < text.index("And it ends")
        assert "Word | Meaning" in text

    def test_table_warning(self, sample_docx):
        decoded = ModernWordDecoder().decode(sample_docx, "essay.docx")
        assert decoded.warnings == ("Flattened 1 table(s) into text",)

    def test_corrupt_package(self):
        with pytest.raises(MalformedStructureError) as exc_info:
            ModernWordDecoder().decode(b"PK\x03\x04 not really a zip", "broken.docx")
        assert exc_info.value.file_name == "broken.docx"
        assert exc_info.value.cause is not None


def completed(returncode: int, stdout: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


OLE2_BYTES = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64


class TestLegacyWordDecoder:
    """Tests for .doc decoding."""

    def test_docx_uploaded_as_doc(self, sample_docx):
        """An OOXML package labelled .doc is read structurally."""
        decoded = LegacyWordDecoder().decode(sample_docx, "essay.doc")
        assert "My summer essay starts here." in decoded.text
        assert "Read as .docx package" in decoded.warnings

    def test_antiword_output(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", lambda *a, **kw: completed(0, "Text from antiword\n"))
        decoder = LegacyWordDecoder(LegacyDocSettings(converters=("antiword",)))
        decoded = decoder.decode(OLE2_BYTES, "old.doc")
        assert decoded.text == "Text from antiword"
        assert decoded.warnings == ("Extracted using antiword",)

    def test_missing_converter_is_skipped(self, monkeypatch):
        """A converter that is not installed falls through to the next one."""
        calls = []

        def fake_run(command, **kwargs):
            calls.append(command[0])
            if command[0] == "antiword":
                raise FileNotFoundError(command[0])
            return completed(0, "Text from catdoc")

        monkeypatch.setattr(subprocess, "run", fake_run)
        decoder = LegacyWordDecoder(LegacyDocSettings(converters=("antiword", "catdoc")))
        assert decoder.decode(OLE2_BYTES, "old.doc").text == "Text from catdoc"
        assert calls == ["antiword", "catdoc"]

    def test_no_converter_available(self, monkeypatch):
        def fake_run(command, **kwargs):
            raise FileNotFoundError(command[0])

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(TransientFailureError):
            LegacyWordDecoder().decode(OLE2_BYTES, "old.doc")

    def test_all_converters_reject(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", lambda *a, **kw: completed(1))
        decoder = LegacyWordDecoder(LegacyDocSettings(converters=("antiword", "catdoc")))
        with pytest.raises(MalformedStructureError):
            decoder.decode(OLE2_BYTES, "old.doc")

    def test_timeout_counts_as_attempt(self, monkeypatch):
        def fake_run(command, **kwargs):
            raise subprocess.TimeoutExpired(command, kwargs.get("timeout"))

        monkeypatch.setattr(subprocess, "run", fake_run)
        decoder = LegacyWordDecoder(LegacyDocSettings(converters=("catdoc",), timeout_seconds=1))
        with pytest.raises(MalformedStructureError):
            decoder.decode(OLE2_BYTES, "old.doc")

    def test_libreoffice_without_output_is_rejected(self, monkeypatch):
        monkeypatch.setattr(subprocess, "run", lambda *a, **kw: completed(0))
        decoder = LegacyWordDecoder(LegacyDocSettings(converters=("libreoffice",)))
        with pytest.raises(MalformedStructureError):
            decoder.decode(OLE2_BYTES, "old.doc")


class TestDecoderRegistry:
    """Tests for decoder selection."""

    def test_every_format_has_a_decoder(self):
        decoders = default_decoders()
        for fmt in SupportedFormat:
            assert decoder_for(fmt, decoders) is decoders[fmt]

    def test_pdf_uses_extraction_chain(self):
        decoders = default_decoders()
        assert isinstance(decoders[SupportedFormat.PORTABLE_DOCUMENT], PdfExtractionChain)

    def test_missing_decoder(self):
        with pytest.raises(LookupError):
            decoder_for(SupportedFormat.PLAIN_TEXT, {})
