"""Emphasis markup for query matches.

Tokens are applied one after another, each pass running over the output of
the previous one. Two tokens that overlap in the text are therefore wrapped
twice, and a later token can match inside markup added by an earlier pass
(e.g. "ar" inside "<mark>"). Ranking never depends on this output.
"""

from __future__ import annotations

import re

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"
MIN_TOKEN_LENGTH = 2


def highlight(text: str, query: str) -> str:
    if not text or not query:
        return text

    result = text
    for token in query.lower().split():
        if len(token) < MIN_TOKEN_LENGTH:
            continue
        pattern = re.compile(f"({re.escape(token)})", re.IGNORECASE)
        result = pattern.sub(rf"{MARK_OPEN}\1{MARK_CLOSE}", result)
    return result
