"""Literal, case-insensitive query highlighting for display strings."""

import re

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"

# Already highlighted segments are passed through untouched
_MARKED_SEGMENT = re.compile(f"({re.escape(MARK_OPEN)}.*?{re.escape(MARK_CLOSE)})", re.DOTALL)


def highlight_text(text: str | None, query: str) -> str:
    """Wrap every case-insensitive occurrence of ``query`` in <mark> tags.

    The query is matched literally, so metacharacters like ``.`` or ``*``
    never act as patterns. Re-applying the same query is a no-op.
    """
    if not text:
        return ""
    if not query:
        return text

    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    segments = _MARKED_SEGMENT.split(text)
    # split() with one group alternates plain text (even) and marked segments (odd)
    return "".join(
        segment if i % 2 else pattern.sub(rf"{MARK_OPEN}\1{MARK_CLOSE}", segment)
        for i, segment in enumerate(segments)
    )
