from __future__ import annotations

from toplists.crawler import selectors_toplists
from toplists.crawler.links import LinkDiscoverer


def test_toplist_selectors_defaults() -> None:
    selectors = selectors_toplists.TOPLIST_SELECTORS

    assert selectors.link_selectors[0] == "div.linkArrow a"
    assert selectors.link_selectors[-1] == 'div[class*="arrow"] a'
    assert len(selectors.link_selectors) == 7
    assert selectors.pagination_table_id == "paginationTable"
    assert selectors.header_label_attribute == "data-label"


def test_challenge_markers_defaults() -> None:
    markers = selectors_toplists.CHALLENGE_MARKERS

    assert "just a moment" in markers.title_markers
    assert "verify you are human" in markers.body_markers
    assert "#challenge-form" in markers.element_selectors


def test_discoverer_tries_selectors_then_fallback() -> None:
    strategies = LinkDiscoverer().strategies

    assert len(strategies) == len(selectors_toplists.TOPLIST_SELECTORS.link_selectors) + 1
