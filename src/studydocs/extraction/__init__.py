"""
Extraction engine.

Resolves uploaded files to a supported format, decodes them to plain text
and validates the result.
"""

from .decoders import (
    Decoder,
    LegacyWordDecoder,
    ModernWordDecoder,
    PlainTextDecoder,
    decoder_for,
    default_decoders,
)
from .errors import (
    ErrorKind,
    ExtractionError,
    MalformedStructureError,
    NoReadableTextError,
    PasswordProtectedError,
    TooLargeError,
    TransientFailureError,
    UnsupportedFormatError,
)
from .formats import (
    FormatSpec,
    SupportedFormat,
    resolve_format,
    supported_extensions_text,
    supported_formats,
    validate_upload,
)
from .models import DecodedText, ExtractionResult, UploadedFile
from .orchestrator import ExtractionOrchestrator, extract
from .pdf import PdfExtractionChain, PdfminerStage, PypdfPageStage, StageResult

__all__ = [
    # Decoders
    "Decoder",
    "LegacyWordDecoder",
    "ModernWordDecoder",
    "PlainTextDecoder",
    "PdfExtractionChain",
    "PypdfPageStage",
    "PdfminerStage",
    "StageResult",
    "decoder_for",
    "default_decoders",
    # Errors
    "ErrorKind",
    "ExtractionError",
    "MalformedStructureError",
    "NoReadableTextError",
    "PasswordProtectedError",
    "TooLargeError",
    "TransientFailureError",
    "UnsupportedFormatError",
    # Formats
    "FormatSpec",
    "SupportedFormat",
    "resolve_format",
    "supported_extensions_text",
    "supported_formats",
    "validate_upload",
    # Orchestration
    "DecodedText",
    "ExtractionResult",
    "UploadedFile",
    "ExtractionOrchestrator",
    "extract",
]
