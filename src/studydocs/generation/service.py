"""
Generation entry point.

Fills in whatever the caller left unset from the content itself, then
renders the document.
"""

from __future__ import annotations

from ..config.models import PipelineConfig
from ..utils.logging import get_logger
from .classifier import classify
from .models import DocumentType, GeneratedFile, GenerationRequest, OutputFormat
from .renderer import Renderer

logger = get_logger(__name__)


def build_request(
    title: str,
    content: str,
    document_type: DocumentType | None = None,
    subject: str | None = None,
    grade: str | None = None,
    theme: str | None = None,
    include_answers: bool = False,
    output_format: OutputFormat = OutputFormat.PDF,
) -> GenerationRequest:
    """
    Build a generation request, inferring absent fields from the content.

    Explicitly supplied values always win over inferred ones.
    """
    inferred = classify(content)

    request = GenerationRequest(
        title=title,
        content=content,
        document_type=document_type or inferred.document_type,
        subject=subject if subject is not None else inferred.subject,
        grade=grade if grade is not None else inferred.grade,
        theme=theme if theme is not None else inferred.theme,
        include_answers=include_answers,
        output_format=output_format,
    )
    logger.debug(
        f"Built request: type={request.document_type.value}, "
        f"tags={', '.join(request.metadata_fields) or 'none'}"
    )
    return request


def generate_document(
    title: str,
    content: str,
    document_type: DocumentType | None = None,
    subject: str | None = None,
    grade: str | None = None,
    theme: str | None = None,
    include_answers: bool = False,
    output_format: OutputFormat = OutputFormat.PDF,
    config: PipelineConfig | None = None,
    renderer: Renderer | None = None,
) -> GeneratedFile:
    """
    Render generated text as a downloadable document.

    Args:
        title: Document title
        content: Generated text, possibly with an answer key
        document_type: Overrides the inferred type
        subject: Overrides the inferred subject
        grade: Overrides the inferred grade
        theme: Overrides the inferred theme
        include_answers: Append the answer key on its own page
        output_format: PDF or plain text
        config: Pipeline configuration; render settings are taken from it
        renderer: Pre-built renderer, takes precedence over ``config``

    Returns:
        GeneratedFile ready for storage or download
    """
    request = build_request(
        title,
        content,
        document_type=document_type,
        subject=subject,
        grade=grade,
        theme=theme,
        include_answers=include_answers,
        output_format=output_format,
    )
    if renderer is None:
        renderer = Renderer((config or PipelineConfig()).render)
    return renderer.render(request)
