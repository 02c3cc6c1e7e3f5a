"""Build-time generation of the precomputed search index.

Walks a built site (HTML) or a source tree (Markdown), parses every page and
writes the JSON array the loader fetches at runtime.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Sequence, Union

from sitesearch.exceptions import IndexBuildError, ParsingError
from sitesearch.index.loader import parse_index_payload
from sitesearch.parsers.base_parser import BaseParser, ParsedDocument
from sitesearch.parsers.html_parser import HTMLParser
from sitesearch.parsers.markdown_parser import MarkdownParser
from sitesearch.search.base_search import Document, Index

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Directories that never hold publishable pages
SKIP_DIRS = {".git", "node_modules", ".jekyll-cache", ".sass-cache", "vendor"}


def page_url(relative: PurePosixPath, base_url: str = "/") -> str:
    """Map a page's path inside the site to the URL it is served at.

    `index.html` maps to its directory, Markdown sources map to `.html`.
    """
    base = "/" + base_url.strip("/") if base_url.strip("/") else ""
    if relative.suffix.lower() in {".md", ".markdown"}:
        relative = relative.with_suffix(".html")
    if relative.name == "index.html":
        parent = relative.parent.as_posix()
        return f"{base}/" if parent == "." else f"{base}/{parent}/"
    return f"{base}/{relative.as_posix()}"


def _iter_pages(site_dir: Path) -> Iterable[Path]:
    for path in sorted(site_dir.rglob("*")):
        rel_parts = path.relative_to(site_dir).parts
        if any(part in SKIP_DIRS or part.startswith("_") for part in rel_parts[:-1]):
            continue
        if path.is_file():
            yield path


def _page_title(parsed: ParsedDocument, path: Path) -> str:
    # Pages headed only by h4-h6 still get their first heading as a title
    if parsed.title:
        return parsed.title
    if parsed.sections:
        return parsed.sections[0].title
    return path.stem


def build_index(
    site_dir: PathLike,
    *,
    base_url: str = "/",
    parsers: Optional[Sequence[BaseParser]] = None,
) -> Index:
    """Parse every page under `site_dir` into a Document, in path order.

    Pages that fail to parse are skipped with a warning.
    """
    root = Path(site_dir)
    if not root.is_dir():
        raise IndexBuildError(f"Site directory not found: {root}")
    active = list(parsers) if parsers is not None else [HTMLParser(), MarkdownParser()]

    docs: List[Document] = []
    for path in _iter_pages(root):
        parser = next((p for p in active if p.can_parse(path)), None)
        if parser is None:
            continue
        try:
            parsed = parser.parse(path)
        except ParsingError as exc:
            logger.warning("Skipping %s: %s", path, exc)
            continue
        relative = PurePosixPath(path.relative_to(root).as_posix())
        docs.append(
            Document(
                title=_page_title(parsed, path),
                url=page_url(relative, base_url),
                content=parsed.text,
            )
        )
    logger.info("Built search index with %d documents from %s", len(docs), root)
    return tuple(docs)


def write_index(index: Index, output: PathLike) -> Path:
    """Write the index as the JSON array served at the index path."""
    out = Path(output)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(
            json.dumps([doc.to_dict() for doc in index], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    except OSError as exc:
        raise IndexBuildError(f"Cannot write index to {out}: {exc}") from exc
    return out


def read_index(path: PathLike) -> Index:
    """Read an index file written by `write_index` (or any compatible generator)."""
    src = Path(path)
    try:
        payload = json.loads(src.read_text(encoding="utf-8"))
        return parse_index_payload(payload)
    except (OSError, ValueError, ParsingError) as exc:
        raise IndexBuildError(f"Cannot read index from {src}: {exc}") from exc
