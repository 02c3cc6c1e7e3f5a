"""Site search tools for FastMCP.

Query a published documentation site's search index, inspect what the
session loaded, and build an index from a local site directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastmcp import FastMCP

from sitesearch.index.builder import build_index, write_index
from sitesearch.search import excerpt
from sitesearch.session import SearchSession


def _get_session(get_state: Callable[[], Any]) -> SearchSession:
    state = get_state()
    session = getattr(state, "session", None) if state is not None else None
    if session is None:
        raise RuntimeError(
            "Site search is not configured. Set SITESEARCH_INDEX__BASE_URL in the environment/.env."
        )
    return session


def _resolve_output(get_state: Callable[[], Any], output: str) -> Path:
    state = get_state()
    cfg = getattr(state, "settings", None) if state is not None else None
    cfg = getattr(cfg, "index", None)
    out_dir = getattr(cfg, "build_output_dir", None)
    if not out_dir:
        raise RuntimeError(
            "No output directory configured. Set SITESEARCH_INDEX__BUILD_OUTPUT_DIR to write indexes."
        )
    root = Path(out_dir).resolve()
    target = (root / output).resolve()
    if not target.is_relative_to(root):
        raise PermissionError(f"Output '{output}' is outside the allowed directory {root}")
    return target


def register_site_search_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register site search tools on the given FastMCP instance.

    The `get_state` callable should return an object with attribute
    `session` holding a `SearchSession`.
    """

    @mcp.tool
    async def site_search(query: str, k: Optional[int] = None) -> List[Dict[str, Any]]:
        """Search the site and return ranked results with excerpts.

        Parameters
        ----------
        query: str
            Free-text query; fewer than 2 significant characters returns nothing.
        k: int | None
            Maximum number of results (never more than the configured cap).
        """
        session = _get_session(get_state)
        await session.ensure_index()
        scored = session.score(query)
        if k is not None:
            scored = scored[: max(0, int(k))]
        rendered = session.render(scored, query)
        out: List[Dict[str, Any]] = []
        for result, view in zip(scored, rendered):
            doc = result.document
            out.append(
                {
                    "title": doc.title,
                    "url": doc.url,
                    "score": result.score,
                    "excerpt": excerpt.extract(
                        doc.content, query, session.config.excerpt_length
                    ),
                    "highlighted_title": view.highlighted_title,
                    "highlighted_excerpt": view.highlighted_excerpt,
                }
            )
        return out

    @mcp.tool
    def site_index_status() -> Dict[str, Any]:
        """Report whether the index is loaded, where it came from and its size."""
        session = _get_session(get_state)
        index = session.index
        return {
            "loaded": index is not None,
            "source": session.loader.source,
            "documents": len(index) if index is not None else 0,
        }

    @mcp.tool
    def site_index_build(
        site_dir: str, base_url: str = "/", output: Optional[str] = None
    ) -> Dict[str, Any]:
        """Build a search index from a local site directory.

        Parses HTML and Markdown pages under `site_dir`. When `output` is
        given the index is written there as JSON; it is resolved against the
        configured build output directory and may not leave it.
        """
        start = (site_dir or "").strip()
        if not start:
            raise ValueError("site_dir is required")
        target = _resolve_output(get_state, output) if output else None
        index = build_index(start, base_url=base_url or "/")
        written = str(write_index(index, target)) if target is not None else None
        return {"documents": len(index), "output": written}
