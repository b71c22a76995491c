from __future__ import annotations

from toplists.crawler.dom import DomSnapshot
from toplists.crawler.links import LinkDiscoverer, dedupe_links, fallback_strategy
from toplists.crawler.models import LinkRef
from tests.fake_session import FakeSession, html_page

INDEX_URL = "https://www.enr.com/toplists"


def _discover(html: str) -> list[LinkRef]:
    return LinkDiscoverer().discover_in(DomSnapshot(url=INDEX_URL, html=html))


def test_link_arrow_strategy_wins_and_resolves_relative_hrefs() -> None:
    html = html_page(
        '<div class="linkArrow"><a href="/toplists/2025-Top-500-Design-Firms"> Top 500 Design Firms </a></div>',
        '<div class="linkArrow"><a href="/toplists/2025-Top-400-Contractors">Top 400 Contractors</a></div>',
        '<a href="/toplists/2025-Top-225-International-Contractors">Not picked: later strategy</a>',
    )

    links = _discover(html)

    assert links == [
        LinkRef("https://www.enr.com/toplists/2025-Top-500-Design-Firms", "Top 500 Design Firms"),
        LinkRef("https://www.enr.com/toplists/2025-Top-400-Contractors", "Top 400 Contractors"),
    ]


def test_strategy_without_qualifying_anchor_falls_through() -> None:
    # linkArrow anchors exist but none point at a toplist, so the next
    # strategy is consulted.
    html = html_page(
        '<div class="linkArrow"><a href="/about">About ENR</a></div>',
        '<a href="https://www.enr.com/toplists/2025-Top-600-Specialty-Contractors">Specialty</a>',
    )

    links = _discover(html)

    assert [link.label for link in links] == ["Specialty"]


def test_discovery_never_returns_duplicates_and_keeps_first_seen_order() -> None:
    html = html_page(
        '<div class="linkArrow"><a href="/toplists/B">B first</a></div>',
        '<div class="linkArrow"><a href="/toplists/A">A</a></div>',
        '<div class="linkArrow"><a href="https://www.enr.com/toplists/B">B again</a></div>',
    )

    links = _discover(html)

    assert [link.href for link in links] == [
        "https://www.enr.com/toplists/B",
        "https://www.enr.com/toplists/A",
    ]
    assert links[0].label == "B first"


def test_fallback_excludes_bare_index_url() -> None:
    dom = DomSnapshot(
        url="https://www.enr.com/",
        html=html_page(
            '<span><a href="/toplists">All toplists</a></span>',
            '<span><a href="/toplists/2025-Top-100-Green-Contractors">Green</a></span>',
        ),
    )

    links = fallback_strategy(dom)

    assert [link.href for link in links] == [
        "https://www.enr.com/toplists/2025-Top-100-Green-Contractors"
    ]


def test_base_href_is_honoured() -> None:
    html = (
        '<html><head><base href="https://cdn.enr.com/"></head><body>'
        '<div class="linkArrow"><a href="toplists/2025-Top-500">Top 500</a></div>'
        "</body></html>"
    )

    links = _discover(html)

    assert links[0].href == "https://cdn.enr.com/toplists/2025-Top-500"


def test_no_qualifying_anchor_returns_empty() -> None:
    assert _discover(html_page('<a href="/news">News</a>', "<a>no href</a>")) == []


def test_dedupe_links() -> None:
    links = [LinkRef("u1", "a"), LinkRef("u2", "b"), LinkRef("u1", "c")]
    assert dedupe_links(links) == [LinkRef("u1", "a"), LinkRef("u2", "b")]


def test_discover_reads_current_page() -> None:
    session = FakeSession(
        {INDEX_URL: html_page('<div class="linkArrow"><a href="/toplists/X">X</a></div>')}
    )
    session.navigate(INDEX_URL, timeout_ms=1000)

    assert LinkDiscoverer().discover(session) == [LinkRef("https://www.enr.com/toplists/X", "X")]
