"""sitesearch MCP server entrypoint using FastMCP.

Exposes search over a published documentation site.
Run with:
  - sitesearch-mcp
  - or: python -m sitesearch.mcp.server (ensure PYTHONPATH includes ./src)
"""
from __future__ import annotations

import logging
from typing import Optional

from fastmcp import FastMCP

from sitesearch.config import Settings, load_settings
from sitesearch.mcp.tools import register_site_search_tools
from sitesearch.session import SearchSession

logger = logging.getLogger(__name__)


class AppState:
    """Application state shared by MCP tools."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.session: Optional[SearchSession] = None

    def init_session(self) -> None:
        """Create the search session from configuration."""
        cfg = self.settings.index
        if cfg.base_url:
            self.session = SearchSession.from_config(cfg, self.settings.search)
        else:
            logger.warning("No site base URL configured; site_search is unavailable")
            self.session = None


# Global state and server instance
_state: Optional[AppState] = None
mcp = FastMCP("sitesearch MCP Server")


# ----- Tools -----

@mcp.tool
def health() -> str:
    """Simple health check tool."""
    return "ok"


# ----- Entrypoint -----

def main() -> None:
    """Initialize state and run the MCP server."""
    global _state
    settings = load_settings()
    logging.basicConfig(
        level=settings.app.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _state = AppState(settings)
    _state.init_session()
    register_site_search_tools(mcp, get_state=lambda: _state)
    # Choose transport based on configuration: stdio (default), http, or sse
    transport = settings.app.transport
    if transport in ("http", "sse"):
        mcp.run(transport=transport, host=settings.app.host, port=settings.app.port)
    else:
        mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
