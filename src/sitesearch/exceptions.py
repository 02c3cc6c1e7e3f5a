"""Custom exception hierarchy for sitesearch.

Runtime search never raises to its caller: an unavailable index is recovered
by the loader's fallback, and short or unmatched queries are view states
rather than errors. These exceptions mark the internal failure points and the
build-time tooling.
"""

from __future__ import annotations


class SiteSearchError(Exception):
    """Base class for all sitesearch exceptions."""


class ParsingError(SiteSearchError):
    """Raised when a page or index payload fails to parse."""


class SearchError(SiteSearchError):
    """Raised for search indexing/query issues."""


class IndexUnavailable(SearchError):
    """Raised when the precomputed index cannot be fetched or parsed.

    The loader catches this and synthesizes a fallback index instead.
    """


class IndexBuildError(SearchError):
    """Raised when an index cannot be built from a site directory."""
