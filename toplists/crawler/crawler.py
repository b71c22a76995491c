"""Crawl one toplist: its main page and every pagination page."""
from __future__ import annotations

from typing import List, Optional

from . import config
from .challenge import ChallengeGate
from .error_codes import CrawlError, ErrorCode
from .extractor import TableExtractor
from .logging_utils import _scraper_event
from .models import LinkRef, PageAttempt, ToplistResult
from .pagination import PaginationResolver
from .session import BrowserSession
from .utils import log_line


class PageCrawler:
    def __init__(
        self,
        *,
        gate: Optional[ChallengeGate] = None,
        pagination: Optional[PaginationResolver] = None,
        extractor: Optional[TableExtractor] = None,
    ) -> None:
        self.gate = gate or ChallengeGate()
        self.pagination = pagination or PaginationResolver()
        self.extractor = extractor or TableExtractor()

    def _load(self, session: BrowserSession, url: str) -> None:
        session.navigate(
            url,
            wait_until="domcontentloaded",
            timeout_ms=config.PAGE_NAV_TIMEOUT_SECONDS * 1000,
        )
        if not self.gate.clear(session):
            # Known limitation: extraction still runs and may read the challenge page.
            _scraper_event("challenge", step="not_cleared", url=url)
        session.pause(config.DYNAMIC_CONTENT_SECONDS)

    def _crawl_pagination_page(
        self, session: BrowserSession, page_number: int, link: LinkRef
    ) -> PageAttempt:
        log_line(f"  Processing page {page_number} ({link.label})...")
        log_line(f"     URL: {link.href}")
        try:
            self._load(session, link.href)
            extraction = self.extractor.extract(session)
        except CrawlError as exc:
            log_line(f"     Error crawling pagination page: {exc}")
            return PageAttempt.skipped(page_number, link, reason=exc.error_code, message=str(exc))
        except Exception as exc:  # noqa: BLE001
            log_line(f"     Error crawling pagination page: {exc}")
            return PageAttempt.skipped(page_number, link, reason=ErrorCode.INTERNAL, message=str(exc))

        return PageAttempt(
            page_number=page_number,
            url=link.href,
            label=link.label,
            rows=extraction.rows,
        )

    def crawl_list(self, session: BrowserSession, url: str, list_name: str) -> Optional[ToplistResult]:
        """Return the merged rows of every page of the toplist, or ``None`` if it yielded none."""

        log_line(f"Crawling: {list_name}")
        log_line(f"URL: {url}")

        try:
            self._load(session, url)
        except CrawlError as exc:
            log_line(f"  Error crawling {url}: {exc}")
            _scraper_event("error", phase="list", url=url, error_code=exc.error_code, error=str(exc))
            return None

        pagination_links = self.pagination.resolve(session)

        log_line("  Processing page 1...")
        main_page = self.extractor.extract(session)
        attempts: List[PageAttempt] = [
            PageAttempt(page_number=1, url=url, label=list_name, rows=main_page.rows)
        ]

        for offset, link in enumerate(pagination_links):
            attempts.append(self._crawl_pagination_page(session, offset + 2, link))
            session.pause(config.PAGINATION_DELAY_SECONDS)

        result = ToplistResult.from_attempts(list_name, url, attempts)
        skipped = [attempt for attempt in attempts if not attempt.ok]
        _scraper_event(
            "list",
            url=url,
            rows=result.row_count,
            pages=result.page_count,
            skipped_pages=len(skipped),
        )

        if result.row_count == 0:
            log_line("  No rows collected for this list")
            return None

        log_line(f"  Total rows collected: {result.row_count}")
        return result


__all__ = ["PageCrawler"]
