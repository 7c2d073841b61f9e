"""
Clean chat-formatted text for print and break it into layout blocks.

Generated text arrives formatted for a chat window: emoji, decorative
rules, markdown markers and sign-off phrases. None of that belongs on a
worksheet.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

EMOJI_PATTERN = re.compile(
    "["
    "\U0001F000-\U0001FAFF"  # pictographs, emoticons, transport, symbols
    "\u2600-\u26FF"  # miscellaneous symbols
    "\u2705\u2728\u274C\u2753\u2757\u2B50\u2B55"
    "\uFE0F\u200D"  # variation selector, zero-width joiner
    "]+"
)

# Line-level patterns applied in order
CLEANUP_RULES: tuple[tuple[re.Pattern, str], ...] = (
    # Decorative separators
    (re.compile(r"^[ \t]*(?:-{3,}|_{3,}|={3,}|\*{3,})[ \t]*$", re.MULTILINE), ""),
    # Leftover marker labels such as [ANSWER_KEY_START], not option letters like [A]
    (re.compile(r"^[ \t]*\[[A-Z][A-Z_]{2,}\][ \t]*", re.MULTILINE), ""),
    # Standardise bullet glyphs
    (re.compile(r"^([ \t]*)[\u2022\u25E6\u25AA\u25AB\u25CF][ \t]*", re.MULTILINE), "\\1\u2022 "),
    # Chat lead-ins describing what was generated
    (re.compile(
        r"(?:practice\s+tests?|worksheets?|activities)\s+with\s+a\s+focus\s+on\s+[^.\n]*\.?",
        re.IGNORECASE,
    ), ""),
    # Chat sign-offs
    (re.compile(
        r"(?:great job working on these problems|keep up the great work|"
        r"you're doing amazing|way to go)!*",
        re.IGNORECASE,
    ), ""),
    (re.compile(r"!{2,}"), "!"),
    (re.compile(r"\?{2,}"), "?"),
    (re.compile(r"[ \t]+([.!?])(?=\s|$)"), r"\1"),
    (re.compile(r"[ \t]+$", re.MULTILINE), ""),
    (re.compile(r"\n{3,}"), "\n\n"),
)

HEADING_PATTERNS = (
    re.compile(r"^\*\*(?P<text>.+?)\*\*:?$"),
    re.compile(r"^__(?P<text>.+?)__:?$"),
    re.compile(r"^#{1,6}[ \t]+(?P<text>.+?)[ \t#]*$"),
)
QUESTION_PATTERN = re.compile(r"^\d+[.)][ \t]")
INLINE_BOLD = re.compile(r"\*\*(?P<text>[^*\n]+?)\*\*")


def clean_content_for_document(text: str | None) -> str:
    """
    Strip chat decoration from generated text.

    Heading markup (``**Heading**``, ``## Heading``) is kept so that
    ``to_blocks`` can still recognise headings.
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = EMOJI_PATTERN.sub("", text)
    for pattern, replacement in CLEANUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def capitalize_title(title: str) -> str:
    """Upper-case the first letter of every word, leaving the rest as typed."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), title.strip())


def strip_inline_markup(text: str) -> str:
    return INLINE_BOLD.sub(lambda m: m.group("text"), text)


# -----------------------------------------------------------------------------
# Layout blocks
# -----------------------------------------------------------------------------


class BlockKind(Enum):
    HEADING = "heading"
    QUESTION = "question"
    TEXT = "text"
    BLANK = "blank"


@dataclass(frozen=True)
class Block:
    kind: BlockKind
    text: str = ""


def to_blocks(text: str) -> list[Block]:
    """Split cleaned text into headings, numbered questions, text and gaps."""
    blocks: list[Block] = []

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            # One gap is enough, and none at the start
            if blocks and blocks[-1].kind is not BlockKind.BLANK:
                blocks.append(Block(BlockKind.BLANK))
            continue

        for pattern in HEADING_PATTERNS:
            match = pattern.match(line)
            if match:
                heading = strip_inline_markup(match.group("text")).strip().rstrip(":").strip()
                blocks.append(Block(BlockKind.HEADING, heading))
                break
        else:
            kind = BlockKind.QUESTION if QUESTION_PATTERN.match(line) else BlockKind.TEXT
            blocks.append(Block(kind, raw.rstrip()))

    while blocks and blocks[-1].kind is BlockKind.BLANK:
        blocks.pop()
    return blocks
