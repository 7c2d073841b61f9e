"""Data classes passed into and out of the extraction engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import ErrorKind, ExtractionError
from .formats import SupportedFormat


@dataclass(frozen=True)
class UploadedFile:
    """An upload as handed over by the upload-handling collaborator."""

    name: str
    media_type: str
    size_bytes: int
    data: bytes = field(repr=False)

    @classmethod
    def from_bytes(cls, name: str, media_type: str, data: bytes) -> "UploadedFile":
        return cls(name=name, media_type=media_type, size_bytes=len(data), data=data)


@dataclass(frozen=True)
class DecodedText:
    """Raw output of a decoder, before the orchestrator validates it."""

    text: str
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of one extraction call.

    Exactly one of ``text`` and ``error`` is set. A successful result always
    holds trimmed text at least as long as the format's minimum.
    """

    file_name: str
    text: str | None = None
    error: ExtractionError | None = None
    format: SupportedFormat | None = None
    elapsed_ms: float = 0.0
    warnings: tuple[str, ...] = ()

    def __post_init__(self):
        if (self.text is None) == (self.error is None):
            raise ValueError("ExtractionResult needs exactly one of text or error")

    @classmethod
    def ok(
        cls,
        file_name: str,
        text: str,
        format: SupportedFormat,
        elapsed_ms: float = 0.0,
        warnings: tuple[str, ...] = (),
    ) -> "ExtractionResult":
        return cls(
            file_name=file_name,
            text=text,
            format=format,
            elapsed_ms=elapsed_ms,
            warnings=warnings,
        )

    @classmethod
    def fail(
        cls,
        error: ExtractionError,
        elapsed_ms: float = 0.0,
        warnings: tuple[str, ...] = (),
    ) -> "ExtractionResult":
        return cls(
            file_name=error.file_name or "",
            error=error,
            format=error.format,
            elapsed_ms=elapsed_ms,
            warnings=warnings,
        )

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.error.kind if self.error else None

    @property
    def message(self) -> str | None:
        """User-facing failure message, None on success."""
        return self.error.user_message if self.error else None

    @property
    def word_count(self) -> int:
        return len(self.text.split()) if self.text else 0

    def raise_for_error(self) -> str:
        """Return the text, or raise the stored ExtractionError."""
        if self.error is not None:
            raise self.error
        return self.text
