"""
Generation engine.

Classifies generated text, separates its answer key and renders it as a
PDF or plain-text document.
"""

from .answer_key import END_MARKER, START_MARKER, join_answer_key, split_answer_key
from .classifier import RULES_VERSION, classify, detect_document_type, extract_metadata
from .cleanup import capitalize_title, clean_content_for_document
from .filenames import derive_filename
from .models import (
    ClassifiedContent,
    DocumentType,
    GeneratedFile,
    GenerationRequest,
    OutputFormat,
    SplitContent,
)
from .renderer import Renderer
from .service import build_request, generate_document

__all__ = [
    # Models
    "ClassifiedContent",
    "DocumentType",
    "GeneratedFile",
    "GenerationRequest",
    "OutputFormat",
    "SplitContent",
    # Classification
    "RULES_VERSION",
    "classify",
    "detect_document_type",
    "extract_metadata",
    # Answer keys
    "START_MARKER",
    "END_MARKER",
    "join_answer_key",
    "split_answer_key",
    # Rendering
    "Renderer",
    "build_request",
    "capitalize_title",
    "clean_content_for_document",
    "derive_filename",
    "generate_document",
]
