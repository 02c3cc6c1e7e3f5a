"""Session-scoped index loading with a fallback to navigation links.

The loader fetches the precomputed JSON index once per session. Concurrent
callers share a single in-flight fetch, and once resolved the index is served
from memory and never refreshed. When the index cannot be fetched or parsed
the loader synthesizes a title/url-only index from the site's navigation
links instead; callers never see the failure.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Literal, Optional

import httpx

from sitesearch.exceptions import IndexUnavailable, ParsingError
from sitesearch.index.snapshot import (
    DEFAULT_NAV_SELECTOR,
    HTMLNavigationSnapshot,
    NavigationSnapshot,
    index_from_snapshot,
)
from sitesearch.search.base_search import Document, Index

logger = logging.getLogger(__name__)

DEFAULT_INDEX_PATH = "/search.json"

IndexSource = Literal["remote", "fallback"]


def parse_index_payload(payload: Any) -> Index:
    """Convert a decoded index document into an Index.

    The payload must be a JSON array. Object entries become documents with
    missing fields treated as empty strings; any other entry is skipped.
    """
    if not isinstance(payload, list):
        raise ParsingError(f"Index payload must be a JSON array, got {type(payload).__name__}")
    docs: List[Document] = []
    for item in payload:
        if isinstance(item, dict):
            docs.append(Document.from_mapping(item))
    return tuple(docs)


class IndexLoader:
    """Loads the search index at most once per session.

    Parameters
    ----------
    base_url:
        Site root the index path and navigation page are resolved against.
    index_path:
        Location of the precomputed index, relative to `base_url` or absolute.
    snapshot:
        Navigation links used for the fallback index. When omitted, the links
        are read from the page at `base_url` using `nav_selector`.
    timeout:
        Optional fetch timeout in seconds. None waits indefinitely.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        index_path: str = DEFAULT_INDEX_PATH,
        snapshot: Optional[NavigationSnapshot] = None,
        nav_selector: str = DEFAULT_NAV_SELECTOR,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url or ""
        self.index_path = index_path
        self.nav_selector = nav_selector
        self.timeout = timeout
        self._snapshot = snapshot
        self._index: Optional[Index] = None
        self._source: Optional[IndexSource] = None
        self._task: Optional[asyncio.Task[Index]] = None

    @property
    def index(self) -> Optional[Index]:
        return self._index

    @property
    def source(self) -> Optional[IndexSource]:
        return self._source

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    @property
    def is_loading(self) -> bool:
        return self._task is not None and not self._task.done()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            follow_redirects=True,
        )

    async def load(self) -> Index:
        """Return the session index, fetching it on first use.

        A caller that is cancelled while waiting does not cancel the shared
        fetch; its result still lands in the cache.
        """
        if self._index is not None:
            return self._index
        if self._task is None:
            self._task = asyncio.create_task(self._load())
        return await asyncio.shield(self._task)

    async def _load(self) -> Index:
        try:
            index = await self._fetch_index()
            source: IndexSource = "remote"
        except IndexUnavailable as exc:
            logger.warning("Search index not found, using fallback: %s", exc)
            source = "fallback"
            try:
                index = await self._fallback_index()
            except Exception:
                # Search stays usable with an empty index; no retry this session
                logger.warning("Fallback index could not be built", exc_info=True)
                index = ()
        self._index = index
        self._source = source
        logger.info("Search index loaded from %s with %d documents", source, len(index))
        return index

    async def _fetch_index(self) -> Index:
        try:
            async with self._client() as client:
                resp = await client.get(self.index_path)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise IndexUnavailable(f"Fetching {self.index_path} failed: {exc}") from exc
        if not resp.is_success:
            raise IndexUnavailable(f"{self.index_path} returned HTTP {resp.status_code}")
        try:
            return parse_index_payload(resp.json())
        except (ValueError, ParsingError) as exc:
            raise IndexUnavailable(f"Malformed index at {self.index_path}: {exc}") from exc

    async def _fallback_index(self) -> Index:
        snapshot = self._snapshot
        if snapshot is None:
            snapshot = await self._fetch_navigation_snapshot()
        if snapshot is None:
            return ()
        return index_from_snapshot(snapshot)

    async def _fetch_navigation_snapshot(self) -> Optional[NavigationSnapshot]:
        if not self.base_url:
            return None
        try:
            async with self._client() as client:
                resp = await client.get("")
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Navigation page unavailable, fallback index is empty: %s", exc)
            return None
        return HTMLNavigationSnapshot(resp.text, selector=self.nav_selector)
