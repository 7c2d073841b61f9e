"""
Format decoders.

One decoder per ``SupportedFormat``. A decoder turns raw bytes into text or
raises an ``ExtractionError``; validating the text (minimum length,
trimming) is left to the orchestrator.
"""

from __future__ import annotations

import io
import subprocess
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, Protocol

import chardet
import docx
from docx.oxml.ns import qn
from docx.table import Table
from docx.text.paragraph import Paragraph

from ..config.models import ExtractionSettings, LegacyDocSettings, PlainTextSettings
from ..utils.logging import get_logger
from .errors import MalformedStructureError, TransientFailureError
from .formats import Container, SupportedFormat, sniff_container
from .models import DecodedText
from .pdf import PdfExtractionChain

logger = get_logger(__name__)


class Decoder(Protocol):
    """Capability shared by all decoders: bytes in, text out."""

    def decode(self, data: bytes, file_name: str) -> DecodedText: ...


# -----------------------------------------------------------------------------
# Plain text
# -----------------------------------------------------------------------------


class PlainTextDecoder:
    """Decodes text files as UTF-8, with charset detection for legacy files."""

    def __init__(self, settings: PlainTextSettings | None = None):
        self.settings = settings or PlainTextSettings()

    def decode(self, data: bytes, file_name: str) -> DecodedText:
        text = _try_decode(data, "utf-8-sig")
        if text is not None:
            return DecodedText(text)

        detected = chardet.detect(data[:100_000])
        encoding = detected.get("encoding")
        confidence = detected.get("confidence") or 0.0
        if encoding and confidence >= self.settings.min_confidence:
            text = _try_decode(data, encoding)
            if text is not None:
                logger.info(f"Decoded {file_name} as {encoding} (confidence {confidence:.2f})")
                return DecodedText(text, (f"Decoded as {encoding} instead of UTF-8",))

        return DecodedText(
            data.decode("utf-8", errors="replace"),
            ("Some characters could not be decoded and were replaced",),
        )


def _try_decode(data: bytes, encoding: str) -> str | None:
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        return None


# -----------------------------------------------------------------------------
# Word documents
# -----------------------------------------------------------------------------


class ModernWordDecoder:
    """Reads paragraph and table text from .docx packages with python-docx."""

    def decode(self, data: bytes, file_name: str) -> DecodedText:
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as e:
            raise MalformedStructureError(
                f"Invalid or corrupted DOCX package: {e}",
                file_name=file_name,
                cause=e,
            ) from e

        warnings = []
        text_parts = []
        table_count = 0

        # Body order, so tables stay between the paragraphs around them
        for child in document.element.body.iterchildren():
            if child.tag == qn("w:p"):
                text = Paragraph(child, document).text
                if text.strip():
                    text_parts.append(text)
            elif child.tag == qn("w:tbl"):
                table_text = _extract_table_text(Table(child, document))
                if table_text:
                    text_parts.append(table_text)
                    table_count += 1

        if table_count:
            warnings.append(f"Flattened {table_count} table(s) into text")
        if document.inline_shapes:
            warnings.append(f"Skipped {len(document.inline_shapes)} embedded image(s)")

        for warning in warnings:
            logger.warning(f"DOCX processing warning for {file_name}: {warning}")

        return DecodedText("\n\n".join(text_parts), tuple(warnings))


def _extract_table_text(table: Table) -> str:
    """Extract text from a DOCX table."""
    rows = []
    for row in table.rows:
        cells = [cell.text.strip() for cell in row.cells]
        if any(cells):
            rows.append(" | ".join(cells))
    return "\n".join(rows) if rows else ""


ConverterRunner = Callable[[Path, Path, int], "str | None"]


class LegacyWordDecoder:
    """
    Reads Word 97-2003 .doc files.

    Many ".doc" uploads are really .docx packages; those go straight to the
    structural reader. Real OLE2 documents are converted with LibreOffice
    (then read structurally), or dumped with antiword or catdoc, in the
    configured order.
    """

    def __init__(
        self,
        settings: LegacyDocSettings | None = None,
        modern: ModernWordDecoder | None = None,
    ):
        self.settings = settings or LegacyDocSettings()
        self.modern = modern or ModernWordDecoder()
        self.runners: dict[str, ConverterRunner] = {
            "libreoffice": self._run_libreoffice,
            "antiword": self._run_antiword,
            "catdoc": self._run_catdoc,
        }

    def decode(self, data: bytes, file_name: str) -> DecodedText:
        if sniff_container(data) is Container.ZIP:
            logger.info(f"{file_name} is an OOXML package despite its .doc type")
            decoded = self.modern.decode(data, file_name)
            return DecodedText(
                decoded.text,
                decoded.warnings + ("Read as .docx package",),
            )

        attempted = False
        converted_empty = False

        with tempfile.TemporaryDirectory() as tmpdir:
            workdir = Path(tmpdir)
            source = workdir / "upload.doc"
            source.write_bytes(data)

            for name in self.settings.converters:
                runner = self.runners[name]
                try:
                    text = runner(source, workdir, self.settings.timeout_seconds)
                except FileNotFoundError:
                    logger.debug(f"{name} not found, trying alternatives")
                    continue
                except subprocess.TimeoutExpired:
                    attempted = True
                    logger.warning(f"{name} timed out on {file_name}")
                    continue

                attempted = True
                if text is None:
                    logger.warning(f"{name} could not convert {file_name}")
                    continue
                if text.strip():
                    return DecodedText(text.strip(), (f"Extracted using {name}",))
                converted_empty = True

        if converted_empty:
            return DecodedText("", ("Converters produced no text",))

        if not attempted:
            raise TransientFailureError(
                "No .doc converter available (install LibreOffice, antiword or catdoc)",
                file_name=file_name,
                user_message=(
                    "Older Word documents cannot be processed right now. "
                    "Please save the file as .docx and try again."
                ),
            )

        raise MalformedStructureError(
            "All .doc converters rejected the file",
            file_name=file_name,
            user_message=(
                "DOC file appears to be damaged or is not a valid Word document."
            ),
        )

    def _run_libreoffice(self, source: Path, workdir: Path, timeout: int) -> str | None:
        outdir = workdir / "converted"
        result = subprocess.run(
            [
                "libreoffice",
                "--headless",
                "--convert-to", "docx",
                "--outdir", str(outdir),
                str(source),
            ],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        docx_path = outdir / (source.stem + ".docx")
        if result.returncode != 0 or not docx_path.exists():
            return None
        return self.modern.decode(docx_path.read_bytes(), source.name).text

    @staticmethod
    def _run_antiword(source: Path, workdir: Path, timeout: int) -> str | None:
        return _run_dump_tool(["antiword", str(source)], timeout)

    @staticmethod
    def _run_catdoc(source: Path, workdir: Path, timeout: int) -> str | None:
        return _run_dump_tool(["catdoc", str(source)], timeout)


def _run_dump_tool(command: list[str], timeout: int) -> str | None:
    result = subprocess.run(
        command,
        capture_output=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
    )
    if result.returncode != 0:
        return None
    return result.stdout


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------


def default_decoders(settings: ExtractionSettings | None = None) -> dict[SupportedFormat, Decoder]:
    """Build one decoder per supported format."""
    settings = settings or ExtractionSettings()
    modern = ModernWordDecoder()
    return {
        SupportedFormat.PLAIN_TEXT: PlainTextDecoder(settings.plain_text),
        SupportedFormat.LEGACY_WORD_DOC: LegacyWordDecoder(settings.legacy_doc, modern),
        SupportedFormat.MODERN_WORD_DOC: modern,
        SupportedFormat.PORTABLE_DOCUMENT: PdfExtractionChain(settings.pdf),
    }


def decoder_for(fmt: SupportedFormat, decoders: Mapping[SupportedFormat, Decoder]) -> Decoder:
    """Select the decoder for a format; every format must have one."""
    try:
        return decoders[fmt]
    except KeyError:
        raise LookupError(f"No decoder registered for {fmt.name}") from None
