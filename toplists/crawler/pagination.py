"""Pagination links of a toplist (e.g. "101-200", "201-300")."""
from __future__ import annotations

from typing import List

from bs4 import Tag

from . import config
from .dom import DomSnapshot, element_text
from .models import LinkRef
from .selectors_toplists import TOPLIST_SELECTORS, ToplistSelectors
from .session import BrowserSession, snapshot
from .utils import log_line


class PaginationResolver:
    def __init__(self, selectors: ToplistSelectors = TOPLIST_SELECTORS) -> None:
        self.selectors = selectors

    def resolve_in(self, dom: DomSnapshot) -> List[LinkRef]:
        """Links inside the pagination control in DOM order; ``[]`` when there is none."""

        table = dom.soup.find("table", id=self.selectors.pagination_table_id)
        if not isinstance(table, Tag):
            return []

        links: List[LinkRef] = []
        for anchor in table.find_all("a", href=True):
            href = dom.resolve(anchor.get("href"))
            if href and config.TOPLIST_PATH_FRAGMENT in href:
                links.append(LinkRef(href=href, label=element_text(anchor)))
        return links

    def resolve(self, session: BrowserSession) -> List[LinkRef]:
        log_line("  Checking for pagination...")
        links = self.resolve_in(snapshot(session))
        if links:
            log_line(f"  Found {len(links)} pagination pages")
        else:
            log_line("  No pagination found")
        return links


__all__ = ["PaginationResolver"]
