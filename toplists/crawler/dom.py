"""Serialised DOM snapshots parsed with BeautifulSoup."""
from __future__ import annotations

import urllib.parse
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup, Tag


@dataclass
class DomSnapshot:
    """The rendered HTML of a page together with the URL it was loaded from.

    Link and table heuristics run against this snapshot instead of the live
    page, so they can be exercised with canned HTML.
    """

    url: str
    html: str
    _soup: Optional[BeautifulSoup] = field(default=None, init=False, repr=False)

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html or "", "html5lib")
        return self._soup

    @property
    def base_url(self) -> str:
        base = self.soup.find("base", href=True)
        if isinstance(base, Tag):
            return urllib.parse.urljoin(self.url, str(base["href"]).strip())
        return self.url

    def resolve(self, raw: str | None) -> str:
        """Return the absolute URL of *raw* the way ``anchor.href`` reports it."""

        if not raw:
            return ""
        raw = raw.strip()
        if not raw:
            return ""
        try:
            return urllib.parse.urljoin(self.base_url, raw)
        except ValueError:
            return raw


def element_text(element: Tag | None) -> str:
    """Trimmed text content of *element* (``""`` for ``None``)."""

    if element is None:
        return ""
    return element.get_text().strip()


__all__ = ["DomSnapshot", "element_text"]
