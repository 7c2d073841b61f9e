"""
Supported upload formats and format detection.

The registry below is the only place that knows which files can be
processed. UI collaborators read it through ``supported_formats()`` to show
"supported formats" text and to pre-validate uploads; the orchestrator
resolves every upload through ``resolve_format()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..utils.files import get_file_extension

MB = 1024 * 1024


@dataclass(frozen=True)
class FormatSpec:
    """Static description of one supported format."""

    media_type: str
    extension: str
    display_name: str
    max_size_bytes: int
    min_text_length: int

    @property
    def max_size_mb(self) -> int:
        return round(self.max_size_bytes / MB)


class SupportedFormat(Enum):
    """Formats the extraction engine can decode."""

    PLAIN_TEXT = FormatSpec("text/plain", "txt", "Text files", 5 * MB, 1)
    LEGACY_WORD_DOC = FormatSpec(
        "application/msword", "doc", "Word documents (older)", 10 * MB, 10
    )
    MODERN_WORD_DOC = FormatSpec(
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "docx",
        "Word documents (newer)",
        10 * MB,
        10,
    )
    PORTABLE_DOCUMENT = FormatSpec("application/pdf", "pdf", "PDF documents", 10 * MB, 10)

    @property
    def spec(self) -> FormatSpec:
        return self.value

    @property
    def media_type(self) -> str:
        return self.value.media_type

    @property
    def extension(self) -> str:
        return self.value.extension

    @property
    def display_name(self) -> str:
        return self.value.display_name

    @property
    def max_size_bytes(self) -> int:
        return self.value.max_size_bytes

    @property
    def min_text_length(self) -> int:
        return self.value.min_text_length


MEDIA_TYPE_MAP: dict[str, SupportedFormat] = {f.media_type: f for f in SupportedFormat}
EXTENSION_MAP: dict[str, SupportedFormat] = {f.extension: f for f in SupportedFormat}


# -----------------------------------------------------------------------------
# Container signatures
# -----------------------------------------------------------------------------


class Container(Enum):
    """Physical container detected from leading bytes."""

    PDF = "pdf"
    ZIP = "zip"
    OLE2 = "ole2"
    UNKNOWN = "unknown"


# Format: (signature_bytes, container)
MAGIC_SIGNATURES: list[tuple[bytes, Container]] = [
    (b"%PDF", Container.PDF),
    # OOXML documents (docx) are ZIP packages
    (b"PK\x03\x04", Container.ZIP),
    # Legacy Microsoft Office compound document
    (b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1", Container.OLE2),
]


def sniff_container(data: bytes) -> Container:
    """Detect the physical container from magic bytes."""
    for signature, container in MAGIC_SIGNATURES:
        if data.startswith(signature):
            return container
    return Container.UNKNOWN


# -----------------------------------------------------------------------------
# Detection
# -----------------------------------------------------------------------------


def normalize_media_type(media_type: str | None) -> str:
    """Lower-case a media type and drop parameters such as ``charset``."""
    if not media_type:
        return ""
    return media_type.split(";", 1)[0].strip().lower()


def detect_by_media_type(media_type: str | None) -> SupportedFormat | None:
    return MEDIA_TYPE_MAP.get(normalize_media_type(media_type))


def detect_by_extension(file_name: str | None) -> SupportedFormat | None:
    if not file_name:
        return None
    return EXTENSION_MAP.get(get_file_extension(file_name))


def resolve_format(media_type: str | None, file_name: str | None = None) -> SupportedFormat | None:
    """
    Resolve an upload to a supported format.

    The declared media type is tried first; browsers often send an empty or
    generic type, so the file-name extension is matched against the same
    registry as a fallback.

    Args:
        media_type: Declared media type of the upload
        file_name: Original file name

    Returns:
        The matching SupportedFormat, or None if the file is not processable
    """
    return detect_by_media_type(media_type) or detect_by_extension(file_name)


def supported_formats() -> list[dict[str, object]]:
    """Registry rows for collaborators that present or pre-check formats."""
    return [
        {
            "media_type": f.media_type,
            "extension": f.extension,
            "display_name": f.display_name,
            "max_size_bytes": f.max_size_bytes,
        }
        for f in SupportedFormat
    ]


def supported_extensions_text() -> str:
    """Comma-separated list of supported extensions, e.g. ``.txt, .pdf``."""
    return ", ".join(f".{f.extension}" for f in SupportedFormat)


def validate_upload(file_name: str, media_type: str | None, size_bytes: int) -> str | None:
    """
    Pre-validate an upload before any bytes are read.

    Args:
        file_name: Original file name
        media_type: Declared media type
        size_bytes: Declared size

    Returns:
        None if the upload can be processed, otherwise a short message
        suitable for display
    """
    fmt = resolve_format(media_type, file_name)
    if fmt is None:
        return f"File type not supported. Supported formats: {supported_extensions_text()}"

    if size_bytes > fmt.max_size_bytes:
        return f"File too large. Maximum size for {fmt.display_name}: {fmt.spec.max_size_mb}MB"

    return None
