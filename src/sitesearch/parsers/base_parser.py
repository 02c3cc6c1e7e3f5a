"""Abstract base classes and data structures for page parsers.

Parsers turn a rendered or source page (HTML, Markdown) into plain text, a
title and a heading outline, which the index builder flattens into a
searchable `Document`.

Concrete implementations should subclass `BaseParser` and implement
`can_parse()` and `parse()`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass(slots=True)
class SectionInfo:
    """Represents a heading within a page.

    Attributes
    ----------
    title: str
        The human-readable heading text.
    level: int
        A hierarchical level where 1 is top-level (H1), 2 is H2, etc.
    """

    title: str
    level: int


@dataclass(slots=True)
class ParsedDocument:
    """Container for parsed page outputs."""

    title: str = ""
    text: str = ""
    sections: List[SectionInfo] = field(default_factory=list)


class BaseParser(ABC):
    """Abstract parser interface."""

    @abstractmethod
    def can_parse(self, path: Path) -> bool:
        """Return True if this parser can handle the given file/path."""

    @abstractmethod
    def parse(self, path: Path) -> ParsedDocument:
        """Parse the file and return a `ParsedDocument`.

        Implementations should raise `sitesearch.exceptions.ParsingError` on failure.
        """
        raise NotImplementedError
