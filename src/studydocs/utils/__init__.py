"""
Utility module.

Logging setup, structured diagnostic events and filename helpers.
"""

from .logging import setup_logging, get_logger, log_event
from .files import safe_filename, slugify_segment, get_file_extension

__all__ = [
    "setup_logging",
    "get_logger",
    "log_event",
    "safe_filename",
    "slugify_segment",
    "get_file_extension",
]
