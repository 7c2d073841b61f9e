"""Filenames for generated documents."""

from __future__ import annotations

from datetime import date

from ..utils.files import slugify_segment
from .models import DocumentType, OutputFormat


def derive_filename(
    document_type: DocumentType,
    subject: str | None,
    theme: str | None,
    on_date: date,
    output_format: OutputFormat = OutputFormat.PDF,
) -> str:
    """
    Build ``{type}_{subject}_{theme}_{date}.{ext}``.

    Subject and theme segments are left out when unset or blank. The same
    inputs always give the same name.

    Example:
        >>> derive_filename(DocumentType.WORKSHEET, "Math", None, date(2024, 1, 15))
        'worksheet_math_2024-01-15.pdf'
    """
    segments = [document_type.slug]
    for value in (subject, theme):
        if value is not None:
            slug = slugify_segment(value)
            if slug:
                segments.append(slug)
    segments.append(on_date.isoformat())
    return f"{'_'.join(segments)}.{output_format.extension}"
