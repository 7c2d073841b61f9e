"""Configuration data models."""

from dataclasses import dataclass, field
from typing import Any

from ..errors import ConfigError

DEFAULT_CONVERTERS = ("libreoffice", "antiword", "catdoc")
PAGE_SIZES = ("letter", "a4")


@dataclass(frozen=True)
class PdfSettings:
    """Settings for the two-stage PDF reader."""

    strict: bool = False
    password: str = ""
    # pdfminer layout analysis for the fallback stage
    line_margin: float = 0.5
    char_margin: float = 2.0
    boxes_flow: float | None = 0.5

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PdfSettings":
        return cls(
            strict=data.get("strict", False),
            password=data.get("password", ""),
            line_margin=float(data.get("line_margin", 0.5)),
            char_margin=float(data.get("char_margin", 2.0)),
            boxes_flow=data.get("boxes_flow", 0.5),
        )


@dataclass(frozen=True)
class LegacyDocSettings:
    """External converters used for .doc files, tried in order."""

    converters: tuple[str, ...] = DEFAULT_CONVERTERS
    timeout_seconds: int = 60

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LegacyDocSettings":
        converters = tuple(data.get("converters", DEFAULT_CONVERTERS))
        unknown = [c for c in converters if c not in DEFAULT_CONVERTERS]
        if unknown:
            raise ConfigError(f"Unknown .doc converters: {', '.join(unknown)}")
        return cls(
            converters=converters,
            timeout_seconds=int(data.get("timeout_seconds", 60)),
        )


@dataclass(frozen=True)
class PlainTextSettings:
    """Settings for plain-text decoding."""

    # chardet guesses below this confidence are ignored
    min_confidence: float = 0.7

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlainTextSettings":
        return cls(min_confidence=float(data.get("min_confidence", 0.7)))


@dataclass(frozen=True)
class ExtractionSettings:
    """Orchestrator-level extraction settings."""

    max_extracted_chars: int | None = 50_000
    pdf: PdfSettings = field(default_factory=PdfSettings)
    legacy_doc: LegacyDocSettings = field(default_factory=LegacyDocSettings)
    plain_text: PlainTextSettings = field(default_factory=PlainTextSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExtractionSettings":
        return cls(
            max_extracted_chars=data.get("max_extracted_chars", 50_000),
            pdf=PdfSettings.from_dict(data.get("pdf") or {}),
            legacy_doc=LegacyDocSettings.from_dict(data.get("legacy_doc") or {}),
            plain_text=PlainTextSettings.from_dict(data.get("plain_text") or {}),
        )


@dataclass(frozen=True)
class RenderSettings:
    """Page layout for generated PDF documents."""

    page_size: str = "a4"
    margin_mm: float = 20.0
    title_font_size: int = 18
    body_font_size: int = 12
    heading_font_size: int = 14
    ruled_lines: int = 5

    def __post_init__(self):
        if self.page_size not in PAGE_SIZES:
            raise ConfigError(
                f"Unknown page size '{self.page_size}'. Allowed: {', '.join(PAGE_SIZES)}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RenderSettings":
        return cls(
            page_size=str(data.get("page_size", "a4")).lower(),
            margin_mm=float(data.get("margin_mm", 20.0)),
            title_font_size=int(data.get("title_font_size", 18)),
            body_font_size=int(data.get("body_font_size", 12)),
            heading_font_size=int(data.get("heading_font_size", 14)),
            ruled_lines=int(data.get("ruled_lines", 5)),
        )


@dataclass(frozen=True)
class PipelineConfig:
    """Complete studydocs configuration, built once and injected."""

    extraction: ExtractionSettings = field(default_factory=ExtractionSettings)
    render: RenderSettings = field(default_factory=RenderSettings)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PipelineConfig":
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping")
        return cls(
            extraction=ExtractionSettings.from_dict(data.get("extraction") or {}),
            render=RenderSettings.from_dict(data.get("render") or {}),
        )
