"""
studydocs

Document ingestion and generation for learning materials: extracts text
from uploaded PDF, Word and plain-text files, and renders worksheets,
practice tests and activities from generated text.
"""

__version__ = "0.1.0"

from .extraction import ErrorKind, ExtractionOrchestrator, ExtractionResult, UploadedFile, extract
from .generation import (
    DocumentType,
    GeneratedFile,
    GenerationRequest,
    OutputFormat,
    Renderer,
    classify,
    generate_document,
    split_answer_key,
)

__all__ = [
    "ErrorKind",
    "ExtractionOrchestrator",
    "ExtractionResult",
    "UploadedFile",
    "extract",
    "DocumentType",
    "GeneratedFile",
    "GenerationRequest",
    "OutputFormat",
    "Renderer",
    "classify",
    "generate_document",
    "split_answer_key",
]
