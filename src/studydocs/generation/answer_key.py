"""
Answer-key separation.

Generated material usually carries its answers along with the questions.
They are pulled out so the renderer can keep them off the student's pages:
first every ``[ANSWER_KEY_START] ... [ANSWER_KEY_END]`` section, then
anything from an "Answer Key" / "Answers" heading to the end of the text.
Splitting an already-split body returns it unchanged.
"""

from __future__ import annotations

import re

from .models import SplitContent

START_MARKER = "[ANSWER_KEY_START]"
END_MARKER = "[ANSWER_KEY_END]"

# A heading line: optional markdown decoration, the label, then either a
# colon (inline answers may follow) or the end of the line.
HEADING_PATTERN = re.compile(
    r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\*\*|__)?"
    r"(?:answer[ \t]+key|answer[ \t]+sheet|answers)"
    r"(?:\*\*|__)?[ \t]*(?P<colon>:)?[ \t]*(?:\*\*|__)?(?P<rest>[^\n]*)$",
    re.IGNORECASE | re.MULTILINE,
)


def _extract_marked_sections(text: str) -> tuple[str, list[str], bool]:
    """Remove every well-ordered marker pair; return body, keys and whether any matched."""
    body_parts = []
    keys = []
    pos = 0

    while True:
        start = text.find(START_MARKER, pos)
        if start == -1:
            break
        end = text.find(END_MARKER, start + len(START_MARKER))
        if end == -1:
            break
        body_parts.append(text[pos:start])
        keys.append(text[start + len(START_MARKER):end].strip())
        pos = end + len(END_MARKER)

    if not keys:
        return text, [], False

    body_parts.append(text[pos:])
    body = "\n\n".join(part.strip() for part in body_parts if part.strip())
    return body, keys, True


def _find_heading(text: str) -> re.Match | None:
    for match in HEADING_PATTERN.finditer(text):
        # "Answers should be written in pencil" is a sentence, not a heading
        if match.group("colon") or not match.group("rest").strip():
            return match
    return None


def _split_at_heading(text: str) -> tuple[str, str | None, bool]:
    match = _find_heading(text)
    if match is None:
        return text, None, False

    inline = match.group("rest").strip()
    following = text[match.end():].strip()
    key = "\n".join(part for part in (inline, following) if part)
    return text[:match.start()], key, True


def split_answer_key(text: str) -> SplitContent:
    """
    Separate the answer key from the student-facing body.

    Args:
        text: Generated text, possibly containing an answer key

    Returns:
        SplitContent with the trimmed body and the answer key, or None as
        the key when the text has none
    """
    if not text or not text.strip():
        return SplitContent(body="")

    body, keys, marked = _extract_marked_sections(text)
    body, heading_key, headed = _split_at_heading(body)

    if not marked and not headed:
        return SplitContent(body=text.strip())

    if heading_key:
        keys.append(heading_key)
    answer_key = "\n\n".join(key for key in keys if key)

    return SplitContent(body=body.strip(), answer_key=answer_key or None)


def join_answer_key(split: SplitContent) -> str:
    """Re-assemble a split document with the key between markers."""
    if split.answer_key is None:
        return split.body
    return f"{split.body}\n\n{START_MARKER}\n{split.answer_key}\n{END_MARKER}".strip()
