"""Filename helpers."""

import re
import unicodedata
from pathlib import PurePath


def safe_filename(name: str, max_length: int = 255) -> str:
    """Convert a string to a safe filename.

    Removes or replaces characters that are problematic in filenames
    across different operating systems.

    Args:
        name: Original filename or string
        max_length: Maximum length of the resulting filename

    Returns:
        Safe filename string
    """
    # Normalize unicode characters
    name = unicodedata.normalize("NFKD", name)
    name = name.encode("ascii", "ignore").decode("ascii")

    name = re.sub(r"\s+", "_", name)

    name = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "", name)

    name = name.strip(". ")

    if len(name) > max_length:
        name = name[:max_length]

    if not name:
        name = "unnamed"

    return name


def slugify_segment(value: str) -> str:
    """Lower-case a filename segment and join its words with underscores.

    ``"Language Arts"`` becomes ``"language_arts"``. Returns an empty
    string when nothing usable is left.
    """
    value = value.strip().lower()
    ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    if not re.search(r"[a-z0-9]", ascii_value):
        return ""
    return safe_filename(value)


def get_file_extension(name: str) -> str:
    """Get the file extension in lowercase without the dot.

    Args:
        name: File name or path

    Returns:
        Lowercase extension without dot, or empty string
    """
    return PurePath(name).suffix.lower().lstrip(".")
