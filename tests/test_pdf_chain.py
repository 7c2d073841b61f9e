"""Tests for the two-stage PDF extraction chain."""

from unittest.mock import Mock

import pytest

from studydocs.config import PdfSettings
from studydocs.extraction import (
    MalformedStructureError,
    NoReadableTextError,
    PasswordProtectedError,
    PdfExtractionChain,
    PdfminerStage,
    PypdfPageStage,
    StageResult,
)
from studydocs.extraction import pdf as pdf_module
from studydocs.extraction.pdf import TextRun, join_runs

from conftest import build_pdf


def stub_stage(name: str, result: StageResult) -> Mock:
    stage = Mock()
    stage.name = name
    stage.run.return_value = result
    return stage


class TestJoinRuns:
    """Tests for page text assembly."""

    def test_space_between_runs(self):
        runs = [TextRun("Hello"), TextRun("world")]
        assert join_runs(runs) == "Hello world"

    def test_newline_after_line_ending_run(self):
        runs = [TextRun("First line\n"), TextRun("Second"), TextRun("line")]
        assert join_runs(runs) == "First line\nSecond line"

    def test_whitespace_runs_collapse(self):
        runs = [TextRun("A"), TextRun("   "), TextRun("B\n")]
        assert join_runs(runs) == "A B"


class TestPypdfPageStage:
    """Tests for the primary page-model stage."""

    def test_pages_in_order(self, two_page_pdf):
        result = PypdfPageStage(PdfSettings()).run(two_page_pdf)
        assert result.error is None
        assert result.pages_total == 2
        assert result.text.index("Chapter one") < result.text.index("Chapter two")
        assert "\n\n" in result.text

    def test_failing_page_is_skipped(self, monkeypatch):
        """One broken page does not lose the others."""
        data = build_pdf([
            ["Page one has plenty of text."],
            ["Page two will fail."],
            ["Page three has plenty of text."],
        ])
        real_page_runs = pdf_module.page_runs
        calls = {"n": 0}

        def flaky_page_runs(page):
            calls["n"] += 1
            if calls["n"] == 2:
                raise ValueError("bad content stream")
            return real_page_runs(page)

        monkeypatch.setattr(pdf_module, "page_runs", flaky_page_runs)
        result = PypdfPageStage(PdfSettings()).run(data)

        assert result.pages_failed == 1
        assert "Page one" in result.text
        assert "Page three" in result.text
        assert "Page two" not in result.text
        assert any("page 2" in warning for warning in result.warnings)

    def test_garbage_is_malformed(self):
        result = PypdfPageStage(PdfSettings()).run(b"this is not a pdf at all")
        assert isinstance(result.error, MalformedStructureError)
        assert not result.opened

    def test_encrypted_without_password(self, encrypted_pdf):
        result = PypdfPageStage(PdfSettings()).run(encrypted_pdf)
        assert isinstance(result.error, PasswordProtectedError)

    def test_encrypted_with_configured_password(self, encrypted_pdf):
        result = PypdfPageStage(PdfSettings(password="s3cret")).run(encrypted_pdf)
        assert result.error is None
        assert "Chapter one" in result.text


class TestPdfminerStage:
    """Tests for the fallback stage."""

    def test_reads_text(self, two_page_pdf):
        result = PdfminerStage(PdfSettings()).run(two_page_pdf)
        assert result.error is None
        assert "Chapter one covers fractions." in result.text
        assert "Chapter two covers decimals." in result.text


class TestPdfExtractionChain:
    """Tests for stage sequencing and failure classification."""

    def test_primary_output_is_used(self, two_page_pdf):
        decoded = PdfExtractionChain().decode(two_page_pdf, "lesson.pdf")
        assert "Chapter one covers fractions." in decoded.text
        assert "Halves and quarters." in decoded.text

    def test_fallback_not_run_when_primary_clears(self):
        primary = stub_stage("primary", StageResult("primary", text="Plenty of primary text"))
        fallback = stub_stage("fallback", StageResult("fallback", text="Fallback text here"))
        decoded = PdfExtractionChain(primary=primary, fallback=fallback).decode(b"%PDF", "a.pdf")
        assert decoded.text == "Plenty of primary text"
        fallback.run.assert_not_called()

    def test_fallback_replaces_short_primary(self):
        primary = stub_stage("primary", StageResult("primary", text="tiny"))
        fallback = stub_stage("fallback", StageResult("fallback", text="Recovered by the fallback"))
        decoded = PdfExtractionChain(primary=primary, fallback=fallback).decode(b"%PDF", "a.pdf")
        assert decoded.text == "Recovered by the fallback"
        assert "tiny" not in decoded.text
        assert decoded.warnings[-1].startswith("Text recovered by")

    def test_fallback_after_primary_error(self):
        primary = stub_stage(
            "primary", StageResult("primary", error=MalformedStructureError("xref broken"))
        )
        fallback = stub_stage("fallback", StageResult("fallback", text="Fallback could read it"))
        decoded = PdfExtractionChain(primary=primary, fallback=fallback).decode(b"%PDF", "a.pdf")
        assert decoded.text == "Fallback could read it"

    def test_scanned_document(self, blank_pdf):
        with pytest.raises(NoReadableTextError) as exc_info:
            PdfExtractionChain().decode(blank_pdf, "scan.pdf")
        assert "scanned image" in exc_info.value.user_message
        assert exc_info.value.file_name == "scan.pdf"

    def test_malformed_when_no_stage_opens(self):
        with pytest.raises(MalformedStructureError):
            PdfExtractionChain().decode(b"this is not a pdf at all", "broken.pdf")

    def test_password_protected(self, encrypted_pdf):
        with pytest.raises(PasswordProtectedError):
            PdfExtractionChain().decode(encrypted_pdf, "locked.pdf")

    def test_password_wins_over_malformed(self):
        primary = stub_stage("primary", StageResult("primary", error=PasswordProtectedError("locked")))
        fallback = stub_stage(
            "fallback", StageResult("fallback", error=MalformedStructureError("bad"))
        )
        with pytest.raises(PasswordProtectedError):
            PdfExtractionChain(primary=primary, fallback=fallback).decode(b"%PDF", "a.pdf")

    def test_opened_but_short_is_no_readable_text(self):
        primary = stub_stage("primary", StageResult("primary", text="abc"))
        fallback = stub_stage(
            "fallback", StageResult("fallback", error=MalformedStructureError("bad"))
        )
        with pytest.raises(NoReadableTextError):
            PdfExtractionChain(primary=primary, fallback=fallback).decode(b"%PDF", "a.pdf")

