"""Selenium backend for the browsing-session capability."""
from __future__ import annotations

import time
import urllib.parse
from pathlib import Path
from typing import Any, Dict, List

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from . import config
from .error_codes import CrawlError, ErrorCode
from .logging_utils import _scraper_event
from .utils import log_line

# Selenium only accepts these keys when adding a cookie.
_SELENIUM_COOKIE_KEYS = {"name", "value", "path", "domain", "secure", "httpOnly", "expiry", "sameSite"}


def make_driver(*, headless: bool | None = None) -> WebDriver:
    """Instantiate a Chrome WebDriver configured like the Playwright backend."""
    chrome_options = Options()
    if config.CHROME_PATH:
        chrome_options.binary_location = config.CHROME_PATH
    if config.HEADLESS if headless is None else headless:
        chrome_options.add_argument("--headless=new")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-setuid-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument("--disable-blink-features=AutomationControlled")
    chrome_options.add_argument("--window-size=1368,900")
    chrome_options.add_argument(f"--user-agent={config.UA}")
    driver = webdriver.Chrome(options=chrome_options)
    driver.execute_cdp_cmd(
        "Page.addScriptToEvaluateOnNewDocument",
        {"source": "Object.defineProperty(navigator, 'webdriver', {get: () => undefined});"},
    )
    return driver


def _to_selenium_cookie(cookie: Dict[str, Any]) -> Dict[str, Any]:
    converted = {k: v for k, v in cookie.items() if k in _SELENIUM_COOKIE_KEYS}
    expires = cookie.get("expires")
    if "expiry" not in converted and isinstance(expires, (int, float)) and expires > 0:
        converted["expiry"] = int(expires)
    return converted


class SeleniumSession:
    """:class:`~toplists.crawler.session.BrowserSession` backed by a WebDriver.

    WebDriver can only set cookies for the domain currently loaded, so cookies
    added before the first navigation are held back and replayed (followed by
    a reload) once a page of their domain is open.
    """

    def __init__(self, driver: WebDriver) -> None:
        self.driver = driver
        self._pending_cookies: List[Dict[str, Any]] = []

    @property
    def url(self) -> str:
        return self.driver.current_url

    def navigate(self, url: str, *, wait_until: str = "domcontentloaded", timeout_ms: int) -> None:
        _scraper_event("nav", step="goto", url=url, wait_until=wait_until, backend="selenium")
        try:
            self.driver.set_page_load_timeout(max(1, timeout_ms // 1000))
            self.driver.get(url)
            if self._pending_cookies:
                self._flush_pending_cookies()
        except TimeoutException as exc:
            _scraper_event("error", phase="nav", step="goto_timeout", url=url, error=str(exc))
            raise CrawlError(ErrorCode.NAVIGATION_TIMEOUT, f"get({url!r}) timed out") from exc
        except WebDriverException as exc:
            _scraper_event("error", phase="nav", step="goto_error", url=url, error=str(exc))
            raise CrawlError(ErrorCode.NAVIGATION_ERROR, f"get({url!r}) failed: {exc.msg}") from exc

    def _flush_pending_cookies(self) -> None:
        host = urllib.parse.urlparse(self.driver.current_url).hostname or ""
        remaining: List[Dict[str, Any]] = []
        added = 0
        for cookie in self._pending_cookies:
            domain = str(cookie.get("domain") or "").lstrip(".")
            if domain and not host.endswith(domain):
                remaining.append(cookie)
                continue
            try:
                self.driver.add_cookie(_to_selenium_cookie(cookie))
                added += 1
            except WebDriverException as exc:
                log_line(f"[COOKIES] Skipping cookie {cookie.get('name')!r}: {exc.msg}")
        self._pending_cookies = remaining
        if added:
            log_line(f"[COOKIES] Replayed {added} cookies for {host}; reloading")
            self.driver.refresh()

    def evaluate(self, script: str) -> Any:
        try:
            return self.driver.execute_script(f"return ({script})();")
        except WebDriverException as exc:
            raise CrawlError(ErrorCode.EVALUATION_ERROR, f"execute_script failed: {exc.msg}") from exc

    def wait_for_selector(self, selector: str, *, timeout_ms: int) -> None:
        try:
            WebDriverWait(self.driver, timeout_ms / 1000).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, selector))
            )
        except TimeoutException as exc:
            raise CrawlError(
                ErrorCode.SELECTOR_TIMEOUT, f"selector {selector!r} not found in {timeout_ms}ms"
            ) from exc
        except WebDriverException as exc:
            raise CrawlError(ErrorCode.EVALUATION_ERROR, f"wait failed: {exc.msg}") from exc

    def content(self) -> str:
        try:
            return self.driver.page_source
        except WebDriverException as exc:
            raise CrawlError(ErrorCode.EVALUATION_ERROR, f"page_source failed: {exc.msg}") from exc

    def pause(self, seconds: float) -> None:
        if seconds and seconds > 0:
            time.sleep(seconds)

    def screenshot(self, path: Path) -> None:
        self.driver.save_screenshot(str(path))

    def cookies(self) -> List[Dict[str, Any]]:
        return list(self.driver.get_cookies())

    def add_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        self._pending_cookies.extend(cookies)

    def close(self) -> None:
        self.driver.quit()


__all__ = ["make_driver", "SeleniumSession"]
