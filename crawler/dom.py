"""
Queryable snapshot of a parsed HTML document.

Wraps a BeautifulSoup tree and answers every lookup with a value or an
empty default: no query on the snapshot raises, whatever the markup or
the selector looks like.
"""
from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def parse_html(html: str) -> "DomSnapshot":
    """Build a snapshot from raw HTML, tolerating any malformed input."""
    try:
        soup = BeautifulSoup(html or "", "lxml")
    except Exception:
        soup = BeautifulSoup(html or "", "html.parser")
    return DomSnapshot(soup)


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


class DomSnapshot:
    def __init__(self, soup: BeautifulSoup):
        self._soup = soup

    # ── Element lookups ───────────────────────────────────────────────────────

    def select(self, selector: str) -> list[Tag]:
        try:
            return self._soup.select(selector)
        except (SelectorSyntaxError, ValueError) as exc:
            logger.debug("Ignoring invalid selector %r: %s", selector, exc)
            return []

    def first(self, selector: str) -> Optional[Tag]:
        matches = self.select(selector)
        return matches[0] if matches else None

    def count(self, selector: str) -> int:
        return len(self.select(selector))

    def exists(self, selector: str) -> bool:
        return self.first(selector) is not None

    # ── Attributes ────────────────────────────────────────────────────────────

    def attr(self, selector: str, name: str, default: str = "") -> str:
        """Attribute of the first match, or `default` if either is missing."""
        element = self.first(selector)
        if element is None:
            return default
        return attr_text(element, name, default)

    def attr_values(self, selector: str, name: str) -> Iterator[str]:
        for element in self.select(selector):
            value = attr_text(element, name)
            if value:
                yield value

    # ── Text ──────────────────────────────────────────────────────────────────

    def text(self, selector: Optional[str] = None) -> str:
        """Concatenated text of every match (whole document if no selector)."""
        if selector is None:
            return self._soup.get_text()
        return "".join(el.get_text() for el in self.select(selector))

    def texts(self, selector: str) -> Iterator[str]:
        for element in self.select(selector):
            yield element.get_text()

    @property
    def body_text(self) -> str:
        body = self._soup.find("body")
        if body is not None:
            return body.get_text()
        return self._soup.get_text()

    @property
    def element_count(self) -> int:
        return len(self._soup.find_all(True))


def attr_text(element: Tag, name: str, default: str = "") -> str:
    """Attribute value as a string; multi-valued attributes (rel, class) are space-joined."""
    value = element.get(name)
    if value is None:
        return default
    if isinstance(value, list):
        return " ".join(value)
    return str(value)
