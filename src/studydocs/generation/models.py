"""Data models for document generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DocumentType(Enum):
    """Kinds of generated learning material."""

    WORKSHEET = "worksheet"
    PRACTICE_TEST = "practice-test"
    ACTIVITY = "activity"
    SUMMARY = "summary"
    CUSTOM = "custom"

    @property
    def slug(self) -> str:
        """Filename-safe form, e.g. ``practice_test``."""
        return self.value.replace("-", "_")


class OutputFormat(Enum):
    """Output formats the renderer can produce."""

    PDF = "pdf"
    TEXT = "txt"

    @property
    def mime_type(self) -> str:
        return {"pdf": "application/pdf", "txt": "text/plain"}[self.value]

    @property
    def extension(self) -> str:
        return self.value


@dataclass(frozen=True)
class ClassifiedContent:
    """Document type and metadata inferred from text."""

    document_type: DocumentType = DocumentType.CUSTOM
    subject: str | None = None
    grade: str | None = None
    theme: str | None = None

    @property
    def tags(self) -> dict[str, str]:
        """Only the metadata fields that were inferred."""
        values = {"subject": self.subject, "grade": self.grade, "theme": self.theme}
        return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True)
class SplitContent:
    """Student-facing body and the answer key separated from it."""

    body: str
    answer_key: str | None = None

    @property
    def has_answer_key(self) -> bool:
        return self.answer_key is not None


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the renderer needs to produce one document."""

    title: str
    content: str
    document_type: DocumentType | None = None
    subject: str | None = None
    grade: str | None = None
    theme: str | None = None
    include_answers: bool = False
    output_format: OutputFormat = OutputFormat.PDF

    @property
    def metadata_fields(self) -> list[str]:
        """Subject, grade and theme in display order, skipping unset ones."""
        return [
            value.strip()
            for value in (self.subject, self.grade, self.theme)
            if value is not None and value.strip()
        ]


@dataclass(frozen=True)
class GeneratedFile:
    """A rendered document, handed to the caller for storage or download."""

    data: bytes = field(repr=False)
    mime_type: str
    filename: str

    @property
    def size_bytes(self) -> int:
        return len(self.data)
