"""
Content classification for generated text.

Document type and metadata are inferred with ordered rule tables, evaluated
first-match-wins. Rule order decides the outcome when a text matches more
than one rule, so the tables are part of the public behaviour: bump
``RULES_VERSION`` whenever an entry is added, removed or reordered.

Keywords match whole words only, not raw substrings: "testing" and
"latest" are not test keywords, and neither is "reviewed" a summary one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from .models import ClassifiedContent, DocumentType

RULES_VERSION = 1


@dataclass(frozen=True)
class Rule:
    """A pattern and the value it yields.

    ``label`` of None means the value is derived from the pattern's
    ``value`` group.
    """

    pattern: re.Pattern
    label: str | None = None


def _rx(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


# -----------------------------------------------------------------------------
# Document type
# -----------------------------------------------------------------------------

# Priority: worksheet > practice test > activity > summary > custom
DOCUMENT_TYPE_RULES: tuple[tuple[re.Pattern, DocumentType], ...] = (
    (_rx(r"\bworksheets?\b|\bpractice\s+problems?\b"), DocumentType.WORKSHEET),
    (_rx(r"\b(?:tests?|quiz(?:zes)?|exams?)\b"), DocumentType.PRACTICE_TEST),
    (_rx(r"\b(?:activit(?:y|ies)|games?)\b"), DocumentType.ACTIVITY),
    (_rx(r"\b(?:summar(?:y|ies)|review)\b"), DocumentType.SUMMARY),
)


# -----------------------------------------------------------------------------
# Metadata
# -----------------------------------------------------------------------------

# Words that show a subject or theme is what the material is about
_CONTEXT = (
    r"(?:[\s-]+(?:themed?|worksheets?|practice|tests?|quiz(?:zes)?|"
    r"activit(?:y|ies)|problems|lessons?|review|games?)\b)"
)

SUBJECT_LABELS = {
    "math": "Math",
    "mathematics": "Math",
    "reading": "Reading",
    "literacy": "Reading",
    "science": "Science",
    "history": "History",
    "social studies": "History",
    "english": "Language Arts",
    "language arts": "Language Arts",
}

SUBJECT_RULES: tuple[Rule, ...] = (
    Rule(_rx(
        r"\bsubject\s*:\s*(?P<value>mathematics|math|reading|literacy|science|history|"
        r"social\s+studies|english|language\s+arts)\b"
    )),
    Rule(_rx(rf"\b(?:mathematics|math){_CONTEXT}"), "Math"),
    Rule(_rx(rf"\b(?:reading|literacy){_CONTEXT}"), "Reading"),
    Rule(_rx(rf"\bscience{_CONTEXT}"), "Science"),
    Rule(_rx(rf"\b(?:history|social\s+studies){_CONTEXT}"), "History"),
    Rule(_rx(rf"\b(?:english|language\s+arts){_CONTEXT}"), "Language Arts"),
)

GRADE_RULES: tuple[Rule, ...] = (
    Rule(_rx(r"\bgrade\s*(?:level)?\s*:\s*(?P<value>pre-?k|k|kindergarten|\d{1,2})\b")),
    Rule(_rx(r"\b(?P<value>\d{1,2})(?:st|nd|rd|th)[\s-]+grade\b")),
    Rule(_rx(r"\bgrade\s+(?P<value>\d{1,2})\b")),
    Rule(_rx(r"\b(?:pre-?k|pre-?kindergarten|preschool)\b"), "Pre-K"),
    Rule(_rx(r"\bkindergarten\b"), "Kindergarten"),
)

THEME_LABELS = {
    "dinosaur": "Dinosaurs",
    "space": "Space",
    "astronaut": "Space",
    "planet": "Space",
    "ocean": "Ocean",
    "underwater": "Ocean",
    "marine": "Ocean",
    "animal": "Animals",
    "robot": "Robots",
    "superhero": "Superheroes",
}

THEME_RULES: tuple[Rule, ...] = (
    Rule(_rx(
        r"\btheme\s*:\s*(?P<value>dinosaurs?|space|astronauts?|planets?|ocean|underwater|"
        r"marine|animals?|robots?|superhero(?:es)?)\b"
    )),
    Rule(_rx(rf"\bdinosaurs?{_CONTEXT}"), "Dinosaurs"),
    Rule(_rx(rf"\b(?:space|astronauts?|planets?){_CONTEXT}"), "Space"),
    Rule(_rx(rf"\b(?:ocean|underwater|marine){_CONTEXT}"), "Ocean"),
    Rule(_rx(rf"\banimals?{_CONTEXT}"), "Animals"),
    Rule(_rx(rf"\brobots?{_CONTEXT}"), "Robots"),
    Rule(_rx(rf"\bsuperhero(?:es)?{_CONTEXT}"), "Superheroes"),
)


def _subject_label(value: str) -> str:
    return SUBJECT_LABELS[" ".join(value.lower().split())]


def _grade_label(value: str) -> str:
    value = value.lower()
    if value.isdigit():
        return f"Grade {int(value)}"
    if value in ("k", "kindergarten"):
        return "Kindergarten"
    return "Pre-K"


def _theme_label(value: str) -> str:
    value = value.lower()
    if value.endswith("es") and value[:-2] in THEME_LABELS:
        return THEME_LABELS[value[:-2]]
    if value.endswith("s") and value[:-1] in THEME_LABELS:
        return THEME_LABELS[value[:-1]]
    return THEME_LABELS[value]


def first_match(rules: tuple[Rule, ...], text: str, to_label: Callable[[str], str]) -> str | None:
    """Value of the first rule that matches; later rules are not evaluated."""
    for rule in rules:
        match = rule.pattern.search(text)
        if match:
            return rule.label or to_label(match.group("value"))
    return None


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def detect_document_type(text: str) -> DocumentType:
    """Infer the document type; ``CUSTOM`` when no rule matches."""
    if not text or not text.strip():
        return DocumentType.CUSTOM
    for pattern, document_type in DOCUMENT_TYPE_RULES:
        if pattern.search(text):
            return document_type
    return DocumentType.CUSTOM


def extract_metadata(text: str) -> dict[str, str]:
    """
    Infer subject, grade and theme.

    Only fields with a matching rule are present in the result, so an
    absent key means "unknown", never "empty".
    """
    if not text or not text.strip():
        return {}

    found = {
        "subject": first_match(SUBJECT_RULES, text, _subject_label),
        "grade": first_match(GRADE_RULES, text, _grade_label),
        "theme": first_match(THEME_RULES, text, _theme_label),
    }
    return {key: value for key, value in found.items() if value is not None}


def classify(text: str) -> ClassifiedContent:
    """Classify text into a document type plus optional metadata."""
    metadata = extract_metadata(text)
    return ClassifiedContent(
        document_type=detect_document_type(text),
        subject=metadata.get("subject"),
        grade=metadata.get("grade"),
        theme=metadata.get("theme"),
    )
