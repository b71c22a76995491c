"""Helpers for replaying and persisting the browser session's cookies."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from . import config
from .utils import load_json_file, log_line, save_json_file

# Keys accepted by BrowserContext.add_cookies; anything else a previous
# session wrote (size, session, priority, ...) is dropped on load.
_COOKIE_KEYS = ("name", "value", "url", "domain", "path", "expires", "httpOnly", "secure", "sameSite")
_SAME_SITE = {"strict": "Strict", "lax": "Lax", "none": "None"}


def normalize_cookie(raw: Any) -> Optional[Dict[str, Any]]:
    """Return a cookie dict safe to replay, or ``None`` if *raw* is unusable."""

    if not isinstance(raw, dict):
        return None
    if not raw.get("name") or "value" not in raw:
        return None
    if not raw.get("url") and not raw.get("domain"):
        return None

    cookie = {key: raw[key] for key in _COOKIE_KEYS if key in raw}
    if cookie.get("domain"):
        cookie.pop("url", None)
        cookie.setdefault("path", "/")

    same_site = cookie.pop("sameSite", None)
    if isinstance(same_site, str) and same_site.lower() in _SAME_SITE:
        cookie["sameSite"] = _SAME_SITE[same_site.lower()]

    expires = cookie.get("expires")
    if not isinstance(expires, (int, float)) or expires <= 0:
        cookie.pop("expires", None)
    return cookie


def load_cookies(path: Optional[Path] = None) -> List[Dict[str, Any]]:
    """Load persisted cookies; a missing or malformed file yields ``[]``."""

    path = Path(path or config.COOKIES_FILE)
    if not path.exists():
        return []

    payload = load_json_file(path, default=None)
    if not isinstance(payload, list):
        log_line(f"[COOKIES] Ignoring malformed cookie file {path}")
        return []

    cookies = [cookie for cookie in map(normalize_cookie, payload) if cookie is not None]
    log_line(f"[COOKIES] Loaded {len(cookies)} cookies from {path}")
    return cookies


def save_cookies(cookies: List[Dict[str, Any]], path: Optional[Path] = None) -> Path:
    """Persist *cookies* as pretty JSON."""

    path = Path(path or config.COOKIES_FILE)
    save_json_file(path, list(cookies))
    log_line(f"[COOKIES] Saved {len(cookies)} cookies to {path}")
    return path


__all__ = ["normalize_cookie", "load_cookies", "save_cookies"]
