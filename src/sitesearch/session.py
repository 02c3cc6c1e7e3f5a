"""Per-page search session state.

A session owns the index (through its loader) and the navigation state.
Callers construct one per page and pass it to the controller, so nothing is
kept at module scope and a session can be discarded with the page.
"""

from __future__ import annotations

from typing import List, Optional

from sitesearch.config import IndexConfig, SearchConfig
from sitesearch.index.loader import IndexLoader
from sitesearch.index.snapshot import NavigationSnapshot
from sitesearch.navigation import NavigationController, NavigationState
from sitesearch.search import excerpt, highlight, scoring
from sitesearch.search.base_search import Index, RenderedResult, ScoredResult

UNTITLED = "Untitled"


class SearchSession:
    """Index and navigation state for one page session."""

    def __init__(
        self,
        loader: IndexLoader,
        *,
        search_config: Optional[SearchConfig] = None,
        navigation: Optional[NavigationController] = None,
    ) -> None:
        self.loader = loader
        self.config = search_config or SearchConfig()
        self.navigation = navigation or NavigationController()

    @classmethod
    def from_config(
        cls,
        index_config: IndexConfig,
        search_config: Optional[SearchConfig] = None,
        *,
        snapshot: Optional[NavigationSnapshot] = None,
    ) -> "SearchSession":
        loader = IndexLoader(
            base_url=index_config.base_url,
            index_path=index_config.index_path,
            snapshot=snapshot,
            nav_selector=index_config.nav_link_selector,
            timeout=index_config.fetch_timeout,
        )
        return cls(loader, search_config=search_config)

    @property
    def index(self) -> Optional[Index]:
        return self.loader.index

    @property
    def state(self) -> NavigationState:
        return self.navigation.state

    async def ensure_index(self) -> Index:
        return await self.loader.load()

    def is_searchable(self, query: str) -> bool:
        return scoring.is_searchable(query, min_length=self.config.min_query_length)

    def score(self, query: str) -> List[ScoredResult]:
        """Score the query against the loaded index; empty while not loaded."""
        index = self.loader.index
        if index is None:
            return []
        return scoring.score(
            index,
            query,
            limit=self.config.max_results,
            min_length=self.config.min_query_length,
        )

    def render(self, results: List[ScoredResult], query: str) -> List[RenderedResult]:
        """Highlight each result's title and excerpt for display, keeping rank order."""
        rendered: List[RenderedResult] = []
        for result in results:
            doc = result.document
            snippet = excerpt.extract(doc.content or "", query, self.config.excerpt_length)
            rendered.append(
                RenderedResult(
                    url=doc.url,
                    highlighted_title=highlight.highlight(doc.title or UNTITLED, query),
                    highlighted_excerpt=highlight.highlight(snippet, query),
                )
            )
        return rendered
