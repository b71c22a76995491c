"""Browser bootstrap: launch Chromium and hand out one session per run."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from playwright.sync_api import sync_playwright

from . import config
from .logging_utils import _scraper_event
from .selenium_session import SeleniumSession, make_driver
from .session import BrowserSession, PlaywrightSession
from .utils import log_line

BACKENDS = config.BROWSER_BACKENDS

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
]
HIDE_WEBDRIVER_SCRIPT = "Object.defineProperty(navigator, 'webdriver', {get: () => false});"


@contextmanager
def _playwright_session(headless: bool) -> Iterator[BrowserSession]:
    with sync_playwright() as pw:
        browser = pw.chromium.launch(
            headless=headless,
            executable_path=config.CHROME_PATH,
            args=LAUNCH_ARGS,
        )
        context = browser.new_context(
            user_agent=config.UA,
            locale="en-US",
            viewport={"width": 1368, "height": 900},
        )
        try:
            context.add_init_script(HIDE_WEBDRIVER_SCRIPT)
            page = context.new_page()
            if page is None:
                raise RuntimeError("Failed to create Playwright page")
            yield PlaywrightSession(page, context)
        finally:
            try:
                context.close()
            finally:
                browser.close()


@contextmanager
def _selenium_session(headless: bool) -> Iterator[BrowserSession]:
    session = SeleniumSession(make_driver(headless=headless))
    try:
        yield session
    finally:
        session.close()


@contextmanager
def open_session(
    *, backend: Optional[str] = None, headless: Optional[bool] = None
) -> Iterator[BrowserSession]:
    """Launch the configured browser backend and yield a single-page session."""

    backend = (backend or config.BROWSER_BACKEND).strip().lower()
    headless = config.HEADLESS if headless is None else headless
    if backend not in BACKENDS:
        raise ValueError(f"Unknown browser backend {backend!r}; expected one of {BACKENDS}")

    _scraper_event("browser", step="launch", backend=backend, headless=headless)
    log_line(f"Launching {backend} browser (headless={headless})")
    factory = _selenium_session if backend == "selenium" else _playwright_session
    with factory(headless) as session:
        yield session


__all__ = ["open_session", "BACKENDS"]
