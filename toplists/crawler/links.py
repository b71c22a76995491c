"""Toplist link discovery on the listing index page."""
from __future__ import annotations

from typing import Callable, Iterable, List, Sequence, Tuple

from bs4 import Tag

from . import config
from .dom import DomSnapshot, element_text
from .logging_utils import _scraper_event
from .models import LinkRef
from .selectors_toplists import TOPLIST_SELECTORS, ToplistSelectors
from .session import BrowserSession, snapshot
from .utils import log_line

LinkStrategy = Callable[[DomSnapshot], List[LinkRef]]


def _qualifying_links(dom: DomSnapshot, anchors: Iterable[Tag]) -> List[LinkRef]:
    links: List[LinkRef] = []
    for anchor in anchors:
        href = dom.resolve(anchor.get("href"))
        if href and config.TOPLIST_PATH_FRAGMENT in href:
            links.append(LinkRef(href=href, label=element_text(anchor)))
    return links


def selector_strategy(selector: str) -> LinkStrategy:
    """Strategy returning qualifying anchors matched by one CSS selector."""

    def _strategy(dom: DomSnapshot) -> List[LinkRef]:
        return _qualifying_links(dom, dom.soup.select(selector))

    _strategy.__name__ = f"select({selector})"
    return _strategy


def fallback_strategy(dom: DomSnapshot) -> List[LinkRef]:
    """Every anchor on the page pointing at a toplist, except the bare index."""

    suffix = "/" + config.TOPLIST_PATH_FRAGMENT
    return [
        link
        for link in _qualifying_links(dom, dom.soup.find_all("a"))
        if not link.href.endswith(suffix)
    ]


def dedupe_links(links: Iterable[LinkRef]) -> List[LinkRef]:
    """Drop repeated hrefs, keeping the first occurrence."""

    seen: set[str] = set()
    unique: List[LinkRef] = []
    for link in links:
        if link.href in seen:
            continue
        seen.add(link.href)
        unique.append(link)
    return unique


def run_strategies(
    dom: DomSnapshot, strategies: Sequence[LinkStrategy]
) -> Tuple[List[LinkRef], str | None]:
    """Return the links of the first strategy yielding any, and that strategy's name."""

    for strategy in strategies:
        links = strategy(dom)
        if links:
            return links, getattr(strategy, "__name__", None)
    return [], None


class LinkDiscoverer:
    def __init__(self, selectors: ToplistSelectors = TOPLIST_SELECTORS) -> None:
        self.strategies: Tuple[LinkStrategy, ...] = tuple(
            selector_strategy(sel) for sel in selectors.link_selectors
        ) + (fallback_strategy,)

    def discover_in(self, dom: DomSnapshot) -> List[LinkRef]:
        links, strategy_name = run_strategies(dom, self.strategies)
        unique = dedupe_links(links)
        _scraper_event(
            "links",
            strategy=strategy_name,
            found=len(links),
            unique=len(unique),
        )
        return unique

    def discover(self, session: BrowserSession) -> List[LinkRef]:
        log_line("Getting toplist links...")
        links = self.discover_in(snapshot(session))
        log_line(f"Found {len(links)} toplist links")
        return links


__all__ = [
    "LinkDiscoverer",
    "LinkStrategy",
    "selector_strategy",
    "fallback_strategy",
    "dedupe_links",
    "run_strategies",
]
