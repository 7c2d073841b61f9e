"""
Two-stage PDF text extraction.

Stage one walks the page model with pypdf, page by page, and tolerates
individual pages that fail. If its output is too short to be useful, stage
two runs pdfminer.six over the whole buffer and, if that output is long
enough, replaces the first result entirely. Each stage reports a
``StageResult`` instead of raising, so the decision between them stays in
``PdfExtractionChain.decode``.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Protocol

from pdfminer.high_level import extract_text as pdfminer_extract_text
from pdfminer.layout import LAParams
from pdfminer.pdfdocument import PDFEncryptionError, PDFPasswordIncorrect
from pdfminer.pdfparser import PDFSyntaxError
from pdfminer.psparser import PSException
from pypdf import PdfReader
from pypdf.errors import DependencyError, FileNotDecryptedError, PyPdfError

from ..config.models import PdfSettings
from ..utils.logging import get_logger
from .errors import (
    ErrorKind,
    ExtractionError,
    MalformedStructureError,
    NoReadableTextError,
    PasswordProtectedError,
    TransientFailureError,
    most_specific,
)
from .formats import SupportedFormat
from .models import DecodedText

logger = get_logger(__name__)

PRIMARY = "pypdf"
FALLBACK = "pdfminer"

# Exceptions that mean "these bytes are not a readable PDF container"
PYPDF_PARSE_ERRORS = (PyPdfError, ValueError, KeyError, IndexError, TypeError, AttributeError)
PDFMINER_PARSE_ERRORS = (PDFSyntaxError, PSException, ValueError, KeyError, IndexError, TypeError)


# -----------------------------------------------------------------------------
# Data Classes
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class TextRun:
    """A run of text as positioned on the page."""

    text: str
    x: float = 0.0
    y: float = 0.0

    @property
    def ends_line(self) -> bool:
        return self.text.endswith("\n")


@dataclass
class StageResult:
    """Output of one extraction stage."""

    stage: str
    text: str = ""
    error: ExtractionError | None = None
    pages_total: int = 0
    pages_failed: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def opened(self) -> bool:
        """True if the stage could open the container at all."""
        return self.error is None

    def clears(self, min_length: int) -> bool:
        return self.error is None and len(self.text.strip()) >= min_length


class ExtractionStage(Protocol):
    name: str

    def run(self, data: bytes) -> StageResult: ...


# -----------------------------------------------------------------------------
# Page text assembly
# -----------------------------------------------------------------------------


def join_runs(runs: list[TextRun]) -> str:
    """
    Join the runs of one page.

    Runs are separated by a single space, except that a run ending at a line
    boundary is followed by a newline instead.
    """
    parts = []
    for run in runs:
        body = run.text.rstrip("\r\n")
        parts.append(body + ("\n" if run.ends_line else " "))
    text = "".join(parts)
    # Tidy the seams left by runs that were only whitespace
    lines = [" ".join(line.split()) for line in text.split("\n")]
    return "\n".join(lines).strip()


def page_runs(page) -> list[TextRun]:
    """Collect the positioned text runs of a pypdf page in content order."""
    runs: list[TextRun] = []

    def visitor(text, cm, tm, font_dict, font_size):
        if text:
            runs.append(TextRun(text=text, x=float(tm[4]), y=float(tm[5])))

    plain = page.extract_text(visitor_text=visitor)

    if not runs and plain:
        # Some content streams produce text without visitor callbacks
        runs = [TextRun(text=line + "\n") for line in plain.splitlines()]
    return runs


# -----------------------------------------------------------------------------
# Stages
# -----------------------------------------------------------------------------


class PypdfPageStage:
    """Primary stage: page-model extraction with pypdf."""

    name = PRIMARY

    def __init__(self, settings: PdfSettings):
        self.settings = settings

    def run(self, data: bytes) -> StageResult:
        result = StageResult(stage=self.name)

        try:
            reader = PdfReader(io.BytesIO(data), strict=self.settings.strict)
            if reader.is_encrypted and not self._decrypt(reader):
                result.error = PasswordProtectedError("PDF requires a password")
                return result
            pages = list(reader.pages)
        except (FileNotDecryptedError, DependencyError) as e:
            result.error = PasswordProtectedError(
                f"PDF could not be decrypted: {e}", cause=e
            )
            return result
        except PYPDF_PARSE_ERRORS as e:
            result.error = MalformedStructureError(f"pypdf could not open PDF: {e}", cause=e)
            return result
        except Exception as e:
            logger.exception("Unexpected pypdf failure while opening PDF")
            result.error = TransientFailureError(f"pypdf failed: {e}", cause=e)
            return result

        result.pages_total = len(pages)
        page_texts = []

        # Strict physical order, no page selection
        for number, page in enumerate(pages, 1):
            try:
                page_text = join_runs(page_runs(page))
            except Exception as e:
                result.pages_failed += 1
                warning = f"Could not extract text from page {number}: {e}"
                result.warnings.append(warning)
                logger.warning(warning)
                continue
            if page_text:
                page_texts.append(page_text)

        result.text = "\n\n".join(page_texts)
        return result

    def _decrypt(self, reader: PdfReader) -> bool:
        """Try the configured password (empty by default for owner-only locks)."""
        return bool(reader.decrypt(self.settings.password))


class PdfminerStage:
    """Fallback stage: whole-document extraction with pdfminer.six."""

    name = FALLBACK

    def __init__(self, settings: PdfSettings):
        self.settings = settings

    def run(self, data: bytes) -> StageResult:
        result = StageResult(stage=self.name)
        laparams = LAParams(
            line_margin=self.settings.line_margin,
            char_margin=self.settings.char_margin,
            boxes_flow=self.settings.boxes_flow,
        )

        try:
            text = pdfminer_extract_text(
                io.BytesIO(data),
                password=self.settings.password,
                laparams=laparams,
            )
        except (PDFPasswordIncorrect, PDFEncryptionError) as e:
            result.error = PasswordProtectedError(f"pdfminer could not decrypt PDF: {e}", cause=e)
            return result
        except PDFMINER_PARSE_ERRORS as e:
            result.error = MalformedStructureError(f"pdfminer could not parse PDF: {e}", cause=e)
            return result
        except Exception as e:
            logger.exception("Unexpected pdfminer failure")
            result.error = TransientFailureError(f"pdfminer failed: {e}", cause=e)
            return result

        # pdfminer separates pages with form feeds
        pages = [page.strip() for page in text.split("\f")]
        result.text = "\n\n".join(page for page in pages if page)
        return result


# -----------------------------------------------------------------------------
# Chain
# -----------------------------------------------------------------------------


class PdfExtractionChain:
    """Decoder for PDFs: primary stage, minimum-length gate, fallback stage."""

    def __init__(
        self,
        settings: PdfSettings | None = None,
        primary: ExtractionStage | None = None,
        fallback: ExtractionStage | None = None,
        min_length: int | None = None,
    ):
        self.settings = settings or PdfSettings()
        self.primary = primary or PypdfPageStage(self.settings)
        self.fallback = fallback or PdfminerStage(self.settings)
        self.min_length = (
            min_length if min_length is not None
            else SupportedFormat.PORTABLE_DOCUMENT.min_text_length
        )

    def decode(self, data: bytes, file_name: str) -> DecodedText:
        """
        Extract text from PDF bytes.

        Args:
            data: Raw PDF bytes
            file_name: Original file name, for diagnostics

        Returns:
            DecodedText from whichever stage cleared the minimum length

        Raises:
            ExtractionError: PasswordProtected, MalformedStructure or
                NoReadableText when neither stage produced enough text
        """
        primary = self.primary.run(data)
        self._log_stage(primary, file_name)

        # The fallback must not start until the primary output has been judged
        if primary.clears(self.min_length):
            return DecodedText(primary.text.strip(), tuple(primary.warnings))

        logger.info(
            f"Primary PDF stage yielded {len(primary.text.strip())} chars for "
            f"{file_name}; trying {self.fallback.name}"
        )
        fallback = self.fallback.run(data)
        self._log_stage(fallback, file_name)

        warnings = tuple(primary.warnings + fallback.warnings)
        if fallback.clears(self.min_length):
            return DecodedText(
                fallback.text.strip(),
                warnings + (f"Text recovered by {self.fallback.name} fallback",),
            )

        raise self._classify_failure([primary, fallback]).with_context(
            file_name=file_name, format=SupportedFormat.PORTABLE_DOCUMENT
        )

    def _classify_failure(self, stages: list[StageResult]) -> ExtractionError:
        errors = [s.error for s in stages if s.error is not None]

        for error in errors:
            if error.kind is ErrorKind.PASSWORD_PROTECTED:
                return error

        if len(errors) == len(stages) and all(
            e.kind is ErrorKind.MALFORMED_STRUCTURE for e in errors
        ):
            return errors[0]

        if any(s.opened for s in stages):
            # Usually a scanned or image-only document
            return NoReadableTextError(
                "PDF contains no extractable text",
                user_message=(
                    "PDF appears to contain no readable text. It may be a scanned "
                    "image or an empty document."
                ),
            )

        return most_specific(errors)

    @staticmethod
    def _log_stage(stage: StageResult, file_name: str) -> None:
        if stage.error is not None:
            logger.warning(
                f"PDF stage {stage.stage} failed for {file_name}: "
                f"{stage.error.kind.value} ({stage.error.detail})"
            )
        else:
            logger.debug(
                f"PDF stage {stage.stage} for {file_name}: {len(stage.text)} chars, "
                f"{stage.pages_failed}/{stage.pages_total} pages failed"
            )
