"""Linear keyword scoring over an in-memory index.

Each query token contributes fixed weights depending on where it occurs in a
document. No stemming, fuzzy matching or term statistics are involved, so the
same (index, query) pair always yields the same ordered output.
"""

from __future__ import annotations

from typing import List, Sequence

from sitesearch.search.base_search import Document, ScoredResult

TITLE_WEIGHT = 10
TITLE_PREFIX_WEIGHT = 5
URL_WEIGHT = 3
CONTENT_WEIGHT = 1

MAX_RESULTS = 10
MIN_QUERY_LENGTH = 2


def normalize_query(query: str | None) -> str:
    return (query or "").lower().strip()


def tokenize(query: str | None) -> List[str]:
    """Split a query into lowercased whitespace-delimited tokens."""
    return normalize_query(query).split()


def is_searchable(query: str | None, *, min_length: int = MIN_QUERY_LENGTH) -> bool:
    """Return True when the query has enough significant characters to score."""
    return len(normalize_query(query)) >= min_length


def score_document(doc: Document, tokens: Sequence[str]) -> int:
    title = (doc.title or "").lower()
    url = (doc.url or "").lower()
    content = (doc.content or "").lower()

    total = 0
    for token in tokens:
        if token in title:
            total += TITLE_WEIGHT
            if title.startswith(token):
                total += TITLE_PREFIX_WEIGHT
        if token in url:
            total += URL_WEIGHT
        if token in content:
            total += CONTENT_WEIGHT
    return total


def score(
    index: Sequence[Document],
    query: str | None,
    *,
    limit: int = MAX_RESULTS,
    min_length: int = MIN_QUERY_LENGTH,
) -> List[ScoredResult]:
    """Rank documents against a free-text query.

    Returns at most `limit` results with a positive score, sorted by score
    descending. Ties keep their relative order from `index`.
    """
    if not is_searchable(query, min_length=min_length):
        return []

    tokens = tokenize(query)
    scored = [ScoredResult(document=doc, score=score_document(doc, tokens)) for doc in index]
    matches = [r for r in scored if r.score > 0]
    # sorted() is stable
    matches = sorted(matches, key=lambda r: r.score, reverse=True)
    return matches[: max(0, int(limit))]
