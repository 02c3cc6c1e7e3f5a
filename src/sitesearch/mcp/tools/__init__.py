"""Tool registration modules for the sitesearch MCP server."""

from .site_search import register_site_search_tools

__all__ = ["register_site_search_tools"]
