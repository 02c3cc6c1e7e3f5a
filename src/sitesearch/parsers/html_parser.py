"""HTML parser for turning rendered site pages into a `ParsedDocument`.

Only the page's main text is kept: scripts, styles and site chrome
(navigation, header, footer) are dropped so that every page does not match
every query through the shared sidebar.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from bs4 import BeautifulSoup  # type: ignore[import-untyped]

from sitesearch.exceptions import ParsingError

from .base_parser import BaseParser, ParsedDocument, SectionInfo

_CHROME_TAGS = ["script", "style", "noscript", "nav", "header", "footer", "aside"]
_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


class HTMLParser(BaseParser):
    """Parser for HTML content."""

    def can_parse(self, path: Path) -> bool:
        return path.suffix.lower() in {".html", ".htm"}

    def parse(self, path: Path) -> ParsedDocument:
        """Parse an HTML file from disk."""
        try:
            html = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ParsingError(f"Cannot read {path}: {exc}") from exc
        return self.parse_html_content(html)

    def parse_html_content(self, html: str) -> ParsedDocument:
        """Parse HTML string content into a `ParsedDocument`.

        Headings h1-h6 are collected as sections in document order. The title
        prefers `<title>`, then the first h1-h3 section.
        """
        soup = BeautifulSoup(html, "html.parser")

        sections: List[SectionInfo] = []
        for tag in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
            heading_text = collapse_whitespace(tag.get_text(" "))
            if heading_text:
                sections.append(SectionInfo(title=heading_text, level=int(tag.name[1])))

        title = ""
        title_tag = soup.find("title")
        if title_tag is not None:
            title = collapse_whitespace(title_tag.get_text(" "))
        if not title:
            title = next((s.title for s in sections if s.level <= 3), "")

        for tag in soup.find_all(_CHROME_TAGS):
            # Nested chrome goes away with its parent
            if not tag.decomposed:
                tag.decompose()
        if soup.head is not None:
            soup.head.decompose()
        # Prefer the main content region when the layout marks one
        body = soup.find("main") or soup.find("article") or soup
        text = collapse_whitespace(body.get_text(" "))

        return ParsedDocument(title=title, text=text, sections=sections)
