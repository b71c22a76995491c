"""Browsing-session capability shared by every crawl component.

A single session (one page/tab) is created per run and passed explicitly to
each component; nothing navigates concurrently. Backend errors are mapped to
:class:`~toplists.crawler.error_codes.CrawlError` here so the components only
deal with one exception type.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from playwright.sync_api import (
    BrowserContext,
    Error as PWError,
    Page,
    TimeoutError as PWTimeout,
)

from .dom import DomSnapshot
from .error_codes import CrawlError, ErrorCode
from .logging_utils import _scraper_event


class BrowserSession(Protocol):
    @property
    def url(self) -> str: ...

    def navigate(self, url: str, *, wait_until: str = "domcontentloaded", timeout_ms: int) -> None: ...

    def evaluate(self, script: str) -> Any: ...

    def wait_for_selector(self, selector: str, *, timeout_ms: int) -> None: ...

    def content(self) -> str: ...

    def pause(self, seconds: float) -> None: ...

    def screenshot(self, path: Path) -> None: ...

    def cookies(self) -> List[Dict[str, Any]]: ...

    def add_cookies(self, cookies: List[Dict[str, Any]]) -> None: ...


def snapshot(session: BrowserSession) -> DomSnapshot:
    """Serialise the session's current page into a :class:`DomSnapshot`."""

    return DomSnapshot(url=session.url, html=session.content())


def _is_target_closed_error(exc: Exception) -> bool:
    """Return ``True`` if *exc* indicates the Playwright target is gone."""

    message = str(exc)
    return any(
        marker in message
        for marker in (
            "Target closed",
            "Target crashed",
            "has been closed",
            "Execution context was destroyed",
        )
    )


class PlaywrightSession:
    """:class:`BrowserSession` backed by a Playwright sync ``Page``."""

    def __init__(self, page: Page, context: Optional[BrowserContext] = None) -> None:
        self.page = page
        self.context = context or page.context

    @property
    def url(self) -> str:
        return self.page.url

    def navigate(self, url: str, *, wait_until: str = "domcontentloaded", timeout_ms: int) -> None:
        _scraper_event("nav", step="goto", url=url, wait_until=wait_until)
        try:
            self.page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PWTimeout as exc:
            _scraper_event("error", phase="nav", step="goto_timeout", url=url, error=str(exc))
            raise CrawlError(ErrorCode.NAVIGATION_TIMEOUT, f"goto({url!r}) timed out: {exc}") from exc
        except PWError as exc:
            step = "goto_target_closed" if _is_target_closed_error(exc) else "goto_error"
            _scraper_event("error", phase="nav", step=step, url=url, error=str(exc))
            raise CrawlError(ErrorCode.NAVIGATION_ERROR, f"goto({url!r}) failed: {exc}") from exc

    def evaluate(self, script: str) -> Any:
        try:
            return self.page.evaluate(script)
        except PWError as exc:
            raise CrawlError(ErrorCode.EVALUATION_ERROR, f"evaluate failed: {exc}") from exc

    def wait_for_selector(self, selector: str, *, timeout_ms: int) -> None:
        try:
            self.page.wait_for_selector(selector, timeout=timeout_ms)
        except PWTimeout as exc:
            raise CrawlError(
                ErrorCode.SELECTOR_TIMEOUT, f"selector {selector!r} not found in {timeout_ms}ms"
            ) from exc
        except PWError as exc:
            raise CrawlError(ErrorCode.EVALUATION_ERROR, f"wait_for_selector failed: {exc}") from exc

    def content(self) -> str:
        try:
            return self.page.content()
        except PWError as exc:
            raise CrawlError(ErrorCode.EVALUATION_ERROR, f"content() failed: {exc}") from exc

    def pause(self, seconds: float) -> None:
        """Wait for ``seconds`` only if the page remains open."""

        if seconds is None or seconds <= 0:
            return
        if not self.page.is_closed():
            self.page.wait_for_timeout(int(seconds * 1000))

    def screenshot(self, path: Path) -> None:
        self.page.screenshot(path=str(path), full_page=True)

    def cookies(self) -> List[Dict[str, Any]]:
        return [dict(cookie) for cookie in self.context.cookies()]

    def add_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        if cookies:
            self.context.add_cookies(cookies)  # type: ignore[arg-type]


__all__ = ["BrowserSession", "PlaywrightSession", "snapshot"]
