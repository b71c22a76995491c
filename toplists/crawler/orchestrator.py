"""Top-level crawl loop over every discovered toplist."""
from __future__ import annotations

from typing import Callable, List, Optional

from . import config, diagnostics
from .challenge import ChallengeGate
from .crawler import PageCrawler
from .error_codes import ChallengeNotClearedError, CrawlError, ErrorCode, IndexPageError
from .links import LinkDiscoverer
from .logging_utils import _scraper_event
from .models import LinkRef, ToplistResult
from .session import BrowserSession
from .utils import log_line

Capture = Callable[[BrowserSession, str], object]


class CrawlOrchestrator:
    def __init__(
        self,
        *,
        gate: Optional[ChallengeGate] = None,
        discoverer: Optional[LinkDiscoverer] = None,
        crawler: Optional[PageCrawler] = None,
        capture: Optional[Capture] = None,
        home_url: Optional[str] = None,
        index_url: Optional[str] = None,
    ) -> None:
        self.gate = gate or ChallengeGate()
        self.discoverer = discoverer or LinkDiscoverer()
        self.crawler = crawler or PageCrawler(gate=self.gate)
        self.capture = capture or diagnostics.capture
        self.home_url = home_url or config.HOME_URL
        self.index_url = index_url or config.INDEX_URL

    def _open_index_page(
        self, session: BrowserSession, url: str, *, wait_until: str, timeout_seconds: int
    ) -> None:
        try:
            session.navigate(url, wait_until=wait_until, timeout_ms=timeout_seconds * 1000)
        except CrawlError as exc:
            raise IndexPageError(ErrorCode.INDEX_UNREACHABLE, f"Could not load {url}: {exc}") from exc

    def open_index(self, session: BrowserSession) -> List[LinkRef]:
        """Load the homepage and toplists index and return the discovered toplist links.

        Raises :class:`IndexPageError` when either page cannot be loaded or its
        challenge is never cleared.
        """

        log_line("Step 1: Loading homepage...")
        self._open_index_page(
            session,
            self.home_url,
            wait_until="domcontentloaded",
            timeout_seconds=config.HOME_NAV_TIMEOUT_SECONDS,
        )
        try:
            session.wait_for_selector("body", timeout_ms=config.BODY_WAIT_SECONDS * 1000)
        except CrawlError as exc:
            raise IndexPageError(exc.error_code, f"Homepage body never appeared: {exc}") from exc
        session.pause(config.HOME_SETTLE_SECONDS)

        if not self.gate.clear(session):
            raise ChallengeNotClearedError(self.home_url)
        session.pause(config.INDEX_SETTLE_SECONDS)

        log_line("Step 2: Navigating to toplists page...")
        self._open_index_page(
            session,
            self.index_url,
            wait_until="networkidle",
            timeout_seconds=config.PAGE_NAV_TIMEOUT_SECONDS,
        )
        if not self.gate.clear(session):
            raise ChallengeNotClearedError(self.index_url)
        session.pause(config.INDEX_SETTLE_SECONDS)

        links = self.discoverer.discover(session)
        if not links:
            log_line("No toplist links found!")
            self.capture(session, "debug-no-links")
        return links

    def run(self, session: BrowserSession) -> List[ToplistResult]:
        links = self.open_index(session)

        log_line(f"Step 3: Crawling {len(links)} toplist pages...")
        results: List[ToplistResult] = []
        for index, link in enumerate(links, start=1):
            log_line(f"[{'=' * 60}]")
            log_line(f"[{index}/{len(links)}]")
            try:
                result = self.crawler.crawl_list(session, link.href, link.label)
            except Exception as exc:  # noqa: BLE001
                log_line(f"  Error crawling {link.href}: {exc}")
                _scraper_event("error", phase="list", url=link.href, error=str(exc))
                result = None

            if result is not None:
                results.append(result)

            session.pause(config.BETWEEN_LISTS_DELAY_SECONDS)

        _scraper_event(
            "run",
            lists_found=len(links),
            lists_with_rows=len(results),
            total_rows=sum(r.row_count for r in results),
        )
        return results


__all__ = ["CrawlOrchestrator"]
