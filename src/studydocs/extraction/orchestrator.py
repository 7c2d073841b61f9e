"""
Extraction orchestrator.

Validates an upload, resolves its format, runs the matching decoder and
checks that what came back is real content. Expected failures come back as
a failed ``ExtractionResult``; callers never see decoder internals.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping

from ..config.models import PipelineConfig
from ..utils.logging import get_logger, log_event
from .decoders import Decoder, decoder_for, default_decoders
from .errors import (
    ExtractionError,
    NoReadableTextError,
    TooLargeError,
    TransientFailureError,
    UnsupportedFormatError,
)
from .formats import SupportedFormat, resolve_format, supported_extensions_text
from .models import DecodedText, ExtractionResult, UploadedFile

logger = get_logger(__name__)


def normalize_extracted_text(text: str) -> str:
    """Normalise line endings, drop NUL characters and trim."""
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "")
    return text.strip()


class ExtractionOrchestrator:
    """
    Turns uploaded files into validated plain text.

    Holds no per-call state, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        decoders: Mapping[SupportedFormat, Decoder] | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Pipeline configuration, built once by the host
            decoders: Decoder per format; defaults to the built-in decoders
        """
        self.config = config or PipelineConfig()
        self.decoders = decoders if decoders is not None else default_decoders(self.config.extraction)

    def extract(self, upload: UploadedFile) -> ExtractionResult:
        """
        Extract text from an uploaded file.

        Args:
            upload: File name, declared media type, declared size and bytes

        Returns:
            ExtractionResult holding either the text or a typed error
        """
        started = time.perf_counter()
        fmt = resolve_format(upload.media_type, upload.name)
        warnings: tuple[str, ...] = ()

        try:
            if fmt is None:
                raise UnsupportedFormatError(
                    f"Unsupported media type {upload.media_type!r}",
                    user_message=(
                        f"File type not supported. Supported formats: "
                        f"{supported_extensions_text()}"
                    ),
                )

            self._check_size(upload, fmt)

            decoded = self._decode(upload, fmt)
            warnings = decoded.warnings
            text = self._validate(decoded.text, fmt)
            text, truncated = self._truncate(text)
            if truncated:
                warnings += (f"Text truncated to {len(text)} characters",)

        except ExtractionError as error:
            error.with_context(file_name=upload.name, format=fmt)
            result = ExtractionResult.fail(
                error, elapsed_ms=self._elapsed(started), warnings=warnings
            )
            self._report(upload, result)
            return result

        result = ExtractionResult.ok(
            upload.name,
            text,
            fmt,
            elapsed_ms=self._elapsed(started),
            warnings=warnings,
        )
        self._report(upload, result)
        return result

    def _check_size(self, upload: UploadedFile, fmt: SupportedFormat) -> None:
        size = max(upload.size_bytes, len(upload.data))
        if size > fmt.max_size_bytes:
            raise TooLargeError(
                f"{size} bytes exceeds {fmt.max_size_bytes} for {fmt.extension}",
                user_message=(
                    f"File too large. Maximum size for {fmt.display_name}: "
                    f"{fmt.spec.max_size_mb}MB"
                ),
            )

    def _decode(self, upload: UploadedFile, fmt: SupportedFormat) -> DecodedText:
        try:
            decoder = decoder_for(fmt, self.decoders)
            return decoder.decode(upload.data, upload.name)
        except ExtractionError:
            raise
        except Exception as e:
            logger.error(
                f"Unexpected {fmt.extension} decoder failure for {upload.name}",
                exc_info=True,
            )
            raise TransientFailureError(
                f"{type(e).__name__} while decoding", cause=e
            ) from e

    def _validate(self, text: str, fmt: SupportedFormat) -> str:
        text = normalize_extracted_text(text)
        if len(text) < fmt.min_text_length:
            if fmt is SupportedFormat.PLAIN_TEXT:
                message = "Text file appears to be empty."
            else:
                message = (
                    f"{fmt.extension.upper()} file appears to contain no readable text."
                )
            raise NoReadableTextError(
                f"{len(text)} chars after trimming, minimum {fmt.min_text_length}",
                user_message=message,
            )
        return text

    def _truncate(self, text: str) -> tuple[str, bool]:
        limit = self.config.extraction.max_extracted_chars
        if limit is None or len(text) <= limit:
            return text, False
        return text[:limit].rstrip(), True

    @staticmethod
    def _elapsed(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    @staticmethod
    def _report(upload: UploadedFile, result: ExtractionResult) -> None:
        if result.succeeded:
            log_event(
                logger,
                "extraction.completed",
                file_name=upload.name,
                size_bytes=upload.size_bytes,
                format=result.format.extension,
                elapsed_ms=result.elapsed_ms,
                outcome="ok",
                chars=len(result.text),
                warnings=len(result.warnings) or None,
            )
        else:
            log_event(
                logger,
                "extraction.failed",
                level=logging.WARNING,
                file_name=upload.name,
                size_bytes=upload.size_bytes,
                format=result.format.extension if result.format else None,
                elapsed_ms=result.elapsed_ms,
                outcome="error",
                error_kind=result.error.kind.value,
                detail=result.error.detail,
            )


def extract(upload: UploadedFile, config: PipelineConfig | None = None) -> ExtractionResult:
    """Extract text from an upload with a one-off orchestrator."""
    return ExtractionOrchestrator(config).extract(upload)
