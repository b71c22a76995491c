from __future__ import annotations

"""Selectors and markers for the ENR toplists pages."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ToplistSelectors:
    """Site-specific selector hints for the toplists index and list pages.

    The index page links each toplist through an "arrow" link block, but the
    markup has changed class names over time, so the link selectors are tried
    in order and the first one producing a qualifying anchor wins.
    """

    link_selectors: Tuple[str, ...] = (
        "div.linkArrow a",
        ".linkArrow a",
        'a[href*="toplists"]',
        'a[href*="rankings"]',
        "a.link-arrow",
        ".link-arrow a",
        'div[class*="arrow"] a',
    )
    pagination_table_id: str = "paginationTable"
    header_cell_selector: str = "thead th"
    header_label_attribute: str = "data-label"
    body_row_selector: str = "tbody tr"


@dataclass(frozen=True)
class ChallengeMarkers:
    """Literal markers of the anti-bot interstitial (compared lower-case)."""

    title_markers: Tuple[str, ...] = ("just a moment", "verify")
    body_markers: Tuple[str, ...] = ("verify you are human", "checking your browser")
    element_selectors: Tuple[str, ...] = (
        "#challenge-form",
        ".ray_id",
        '[name="cf_captcha_kind"]',
    )


TOPLIST_SELECTORS = ToplistSelectors()
CHALLENGE_MARKERS = ChallengeMarkers()

__all__ = [
    "ToplistSelectors",
    "ChallengeMarkers",
    "TOPLIST_SELECTORS",
    "CHALLENGE_MARKERS",
]
