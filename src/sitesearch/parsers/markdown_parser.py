"""Markdown parser that converts Markdown source pages into a ParsedDocument.

Implementation note: we convert Markdown to HTML using the `markdown` library
(extensions enabled for tables and fenced code), then reuse `HTMLParser`
logic to extract text and heading sections for consistency with built pages.
A leading YAML front matter block is stripped first; its `title:` key, when
present, wins over the first heading.
"""

from __future__ import annotations

import re
from pathlib import Path

import markdown as md  # type: ignore[import-untyped]
import yaml

from sitesearch.exceptions import ParsingError

from .base_parser import BaseParser, ParsedDocument
from .html_parser import HTMLParser

_FRONT_MATTER = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)


class MarkdownParser(BaseParser):
    """Parser for `.md` and `.markdown` files or content strings."""

    def __init__(self) -> None:
        # Reuse HTML parsing logic for headings/text
        self._html = HTMLParser()
        self._extensions = [
            "tables",
            "fenced_code",
            "sane_lists",
        ]

    def can_parse(self, path: Path) -> bool:
        return path.suffix.lower() in {".md", ".markdown"}

    def parse(self, path: Path) -> ParsedDocument:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ParsingError(f"Cannot read {path}: {exc}") from exc
        return self.parse_markdown_content(text)

    def parse_markdown_content(
        self, markdown_text: str) -> ParsedDocument:
        front_title = ""
        match = _FRONT_MATTER.match(markdown_text)
        if match:
            front_title = _front_matter_title(match.group(1))
            markdown_text = markdown_text[match.end():]

        html = md.markdown(markdown_text, extensions=self._extensions)
        doc = self._html.parse_html_content(html)
        if front_title:
            doc.title = front_title
        return doc


def _front_matter_title(block: str) -> str:
    # Malformed front matter only costs the title; the body is still indexed
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError:
        return ""
    if not isinstance(data, dict):
        return ""
    title = data.get("title")
    return str(title).strip() if title is not None else ""
