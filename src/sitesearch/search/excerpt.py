"""Excerpt extraction around the first query match in a document body."""

from __future__ import annotations

ELLIPSIS = "..."
DEFAULT_MAX_LENGTH = 150
# Characters of context kept before the first match
LEAD_CONTEXT = 40


def first_match(content: str, query: str) -> int:
    """Return the earliest position where any query token occurs, or -1."""
    lowered = content.lower()
    first = -1
    for token in query.lower().split():
        pos = lowered.find(token)
        if pos != -1 and (first == -1 or pos < first):
            first = pos
    return first


def extract(content: str, query: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Return a window of `content` of at most `max_length` characters.

    The window starts up to 40 characters before the first match. Ellipsis
    markers are added on each side where the window cuts the content. With no
    match the leading slice of the content is returned instead.
    """
    if not content or not query:
        return ""

    pos = first_match(content, query)
    if pos == -1:
        head = content[:max_length]
        return head + ELLIPSIS if len(content) > max_length else head

    # Windows narrower than the lead context split it evenly around the match
    lead = LEAD_CONTEXT if max_length > LEAD_CONTEXT else max(0, max_length) // 2
    start = max(0, pos - lead)
    end = min(len(content), pos + max_length - lead)
    excerpt = content[start:end]
    if start > 0:
        excerpt = ELLIPSIS + excerpt
    if end < len(content):
        excerpt = excerpt + ELLIPSIS
    return excerpt
