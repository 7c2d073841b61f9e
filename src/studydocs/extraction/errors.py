"""
Extraction error taxonomy.

Every failure of the extraction engine is one of six kinds. Decoders raise
the matching ``ExtractionError`` subclass; the orchestrator turns it into a
failed ``ExtractionResult``. ``user_message`` is safe to show to end users,
while ``cause`` keeps the underlying parser exception for logs only.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from ..errors import StudydocsError

if TYPE_CHECKING:
    from .formats import SupportedFormat


class ErrorKind(Enum):
    """Kinds of extraction failure."""

    UNSUPPORTED_FORMAT = "unsupported_format"
    TOO_LARGE = "too_large"
    MALFORMED_STRUCTURE = "malformed_structure"
    PASSWORD_PROTECTED = "password_protected"
    NO_READABLE_TEXT = "no_readable_text"
    TRANSIENT_FAILURE = "transient_failure"

    @property
    def specificity(self) -> int:
        """Rank used when several failures compete; higher is more specific."""
        return _SPECIFICITY[self]


_SPECIFICITY = {
    ErrorKind.TRANSIENT_FAILURE: 0,
    ErrorKind.NO_READABLE_TEXT: 1,
    ErrorKind.MALFORMED_STRUCTURE: 2,
    ErrorKind.PASSWORD_PROTECTED: 3,
    ErrorKind.TOO_LARGE: 4,
    ErrorKind.UNSUPPORTED_FORMAT: 5,
}


class ExtractionError(StudydocsError):
    """Text could not be extracted from an uploaded file."""

    kind: ErrorKind = ErrorKind.TRANSIENT_FAILURE
    default_message = "The file could not be processed. Please try again."

    def __init__(
        self,
        detail: str = "",
        *,
        file_name: str | None = None,
        format: SupportedFormat | None = None,
        user_message: str | None = None,
        cause: BaseException | None = None,
    ):
        self.detail = detail or self.default_message
        self.file_name = file_name
        self.format = format
        self.user_message = user_message or self.default_message
        self.cause = cause
        super().__init__(self.detail)

    def with_context(
        self,
        file_name: str | None = None,
        format: SupportedFormat | None = None,
    ) -> ExtractionError:
        """Fill in file name and format where the raiser did not know them."""
        if self.file_name is None:
            self.file_name = file_name
        if self.format is None:
            self.format = format
        return self

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"file_name={self.file_name!r}, detail={self.detail!r})"
        )


class UnsupportedFormatError(ExtractionError):
    """File type is not one of the supported formats."""

    kind = ErrorKind.UNSUPPORTED_FORMAT
    default_message = "File type not supported."


class TooLargeError(ExtractionError):
    """File exceeds the size ceiling of its format."""

    kind = ErrorKind.TOO_LARGE
    default_message = "File too large."


class MalformedStructureError(ExtractionError):
    """File could not be opened as a valid document of its format."""

    kind = ErrorKind.MALFORMED_STRUCTURE
    default_message = "The file appears to be damaged or is not a valid document."


class PasswordProtectedError(ExtractionError):
    """Document is encrypted and cannot be opened without a password."""

    kind = ErrorKind.PASSWORD_PROTECTED
    default_message = "The document is password protected. Remove the password and upload it again."


class NoReadableTextError(ExtractionError):
    """Document opened fine but yielded no usable text."""

    kind = ErrorKind.NO_READABLE_TEXT
    default_message = (
        "No readable text was found. The file may be empty or a scanned image."
    )


class TransientFailureError(ExtractionError):
    """Unexpected failure that may succeed on a later attempt."""

    kind = ErrorKind.TRANSIENT_FAILURE


def most_specific(errors: list[ExtractionError]) -> ExtractionError | None:
    """Pick the most specific error; earlier errors win ties."""
    best: ExtractionError | None = None
    for error in errors:
        if best is None or error.kind.specificity > best.kind.specificity:
            best = error
    return best
