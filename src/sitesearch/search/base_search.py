"""Core data model shared by the search components.

Documents are immutable once loaded; an index is an ordered tuple of them.
Scored and rendered results are derived per query and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class Document:
    """One indexable page."""

    title: str = ""
    url: str = ""
    content: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Document":
        """Build a document from an index entry, treating missing fields as empty."""
        return cls(
            title=_as_text(data.get("title")),
            url=_as_text(data.get("url")),
            content=_as_text(data.get("content")),
        )

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url, "content": self.content}


# Ordered; url is the de facto key but uniqueness is not enforced.
Index = Tuple[Document, ...]


@dataclass(frozen=True, slots=True)
class ScoredResult:
    """A document paired with its relevance score for one query."""

    document: Document
    score: int


@dataclass(frozen=True, slots=True)
class RenderedResult:
    """Record handed to the renderer for each visible result, in rank order."""

    url: str
    highlighted_title: str
    highlighted_excerpt: str


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
