"""Queryable document tree over a raw HTML submission.

Wraps a BeautifulSoup tree built with the ``html.parser`` builder, which
records the source line and column of every opening tag it reads. Those
positions are converted to character offsets so callers can reason about
where an element was written in the source.

That builder never adds elements the author left out. When a document is
written with <html> or <head> but without <body>, the content region still
exists for an HTML5 reader, so it is reported as present with an unknown
offset.
"""
from __future__ import annotations

import re
import warnings
from typing import Optional

import structlog
from bs4 import BeautifulSoup, Comment, MarkupResemblesLocatorWarning, ParserRejectedMarkup
from bs4.element import Declaration, Doctype, ProcessingInstruction, Tag

logger = structlog.get_logger(__name__)

BLOCK_TAGS = ("p", "h1", "h2", "h3", "li", "div")
LIST_TAGS = ("ul", "ol")
HIDDEN_TEXT_TAGS = frozenset({"head", "title", "script", "style", "template", "noscript"})
NON_TEXT_TYPES = (Comment, Doctype, Declaration, ProcessingInstruction)

_WHITESPACE = re.compile(r"\s+")

CONTENT_REGION = "body"
DOCUMENT_SHELL = ("html", "head")


class DocumentModel:
    """Parsed view of a submission queryable by tag name."""

    def __init__(self, raw_text: str, soup: Optional[BeautifulSoup] = None):
        self.raw_text = raw_text
        self.rejected = False
        self.rejection_reason = ""
        self.soup = soup if soup is not None else self._parse(raw_text)
        self._line_starts = _line_starts(raw_text)
        self.implied = self._implied_regions()

    def _parse(self, raw_text: str) -> BeautifulSoup:
        with warnings.catch_warnings():
            # Short prose submissions can look like a filename to bs4.
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            try:
                return BeautifulSoup(raw_text, "html.parser")
            except ParserRejectedMarkup as e:
                logger.warning("markup_rejected", error=str(e))
                self.rejected = True
                self.rejection_reason = str(e)
                return BeautifulSoup("", "html.parser")

    def _implied_regions(self) -> frozenset[str]:
        if self.soup.find(CONTENT_REGION) is None and self.soup.find(list(DOCUMENT_SHELL)) is not None:
            return frozenset({CONTENT_REGION})
        return frozenset()

    # -- element queries -------------------------------------------------

    def find_all(self, tag: str) -> list[Tag]:
        return self.soup.find_all(tag)

    def count(self, tag: str) -> int:
        return len(self.find_all(tag))

    def exists(self, tag: str) -> bool:
        return tag in self.implied or self.soup.find(tag) is not None

    def text(self, tag: str) -> str:
        """Trimmed concatenated text of every element with this tag."""
        return "".join(el.get_text() for el in self.find_all(tag)).strip()

    def has_nonempty(self, tag: str) -> bool:
        return self.exists(tag) and bool(self.text(tag))

    def list_has_items(self) -> bool:
        """True if some list container has at least one direct list item."""
        for container in self.soup.find_all(list(LIST_TAGS)):
            if container.find("li", recursive=False) is not None:
                return True
        return False

    def has_block_element(self) -> bool:
        return self.soup.find(list(BLOCK_TAGS)) is not None

    def title(self) -> str:
        el = self.soup.find("title")
        return el.get_text().strip() if el is not None else ""

    def comments(self) -> list[str]:
        return [str(c) for c in self.soup.find_all(string=lambda s: isinstance(s, Comment))]

    def visible_text(self) -> str:
        """Rendered-ish text with whitespace collapsed and trimmed."""
        parts: list[str] = []
        for string in self.soup.find_all(string=True):
            if isinstance(string, NON_TEXT_TYPES):
                continue
            if _is_hidden(string):
                continue
            parts.append(str(string))
        return _WHITESPACE.sub(" ", "".join(parts)).strip()

    # -- source locations ------------------------------------------------

    def location(self, tag: str) -> Optional[int]:
        """Offset of the first element's opening tag, or None if unknown.

        None means the parser recorded no position for the node, or the
        element is an implied region the author never wrote. It is not the
        same as offset 0.
        """
        el = self.soup.find(tag)
        if el is None:
            return None
        return self.offset_of(el)

    def offset_of(self, el: Tag) -> Optional[int]:
        line = getattr(el, "sourceline", None)
        column = getattr(el, "sourcepos", None)
        if line is None or column is None:
            return None
        if line < 1 or line > len(self._line_starts):
            return None
        return self._line_starts[line - 1] + column


def _is_hidden(string) -> bool:
    # A <body> nested under an unclosed <head> still holds visible text.
    for parent in string.parents:
        if parent.name == CONTENT_REGION:
            return False
        if parent.name in HIDDEN_TEXT_TAGS:
            return True
    return False


def _line_starts(text: str) -> list[int]:
    starts = [0]
    for match in re.finditer("\n", text):
        starts.append(match.end())
    return starts
