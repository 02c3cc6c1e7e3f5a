"""Navigation snapshots: the link set a fallback index is synthesized from.

In the browser this is the live DOM; here it is either a rendered page parsed
with BeautifulSoup or a plain list of links supplied by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Protocol, Sequence

from bs4 import BeautifulSoup  # type: ignore[import-untyped]

from sitesearch.parsers.html_parser import collapse_whitespace
from sitesearch.search.base_search import Document, Index

DEFAULT_NAV_SELECTOR = "a.nav-link"


@dataclass(frozen=True, slots=True)
class NavLink:
    text: str
    href: str


class NavigationSnapshot(Protocol):
    """Supplies the navigation links currently rendered on the page."""

    def links(self) -> Sequence[NavLink]:
        ...


class StaticNavigationSnapshot:
    """Snapshot over an in-memory list of links."""

    def __init__(self, links: Iterable[NavLink]) -> None:
        self._links = list(links)

    def links(self) -> Sequence[NavLink]:
        return list(self._links)


class HTMLNavigationSnapshot:
    """Snapshot of the navigation links found in a rendered HTML page."""

    def __init__(self, html: str, *, selector: str = DEFAULT_NAV_SELECTOR) -> None:
        self._html = html
        self._selector = selector

    def links(self) -> Sequence[NavLink]:
        soup = BeautifulSoup(self._html or "", "html.parser")
        out: List[NavLink] = []
        for a in soup.select(self._selector):
            out.append(NavLink(text=collapse_whitespace(a.get_text(" ")), href=str(a.get("href") or "")))
        return out


def index_from_snapshot(snapshot: NavigationSnapshot) -> Index:
    """Build a title/url-only index, one document per navigation link."""
    return tuple(
        Document(title=link.text.strip(), url=link.href, content="") for link in snapshot.links()
    )
