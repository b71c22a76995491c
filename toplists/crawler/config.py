"""Configuration constants for the ENR toplists crawler."""
from __future__ import annotations

import os
from pathlib import Path

DATA_DIR: Path = Path(os.getenv("TOPLISTS_DATA_DIR", "data"))
OUTPUT_DIR: Path = DATA_DIR / "enr-data"
LOG_DIR: Path = DATA_DIR / "logs"
LOG_FILE: Path = LOG_DIR / "latest.log"
DEBUG_DIR: Path = DATA_DIR / "debug"
COOKIES_FILE: Path = DATA_DIR / "enr-cookies.json"
SUMMARY_FILENAME: str = "summary.json"

HOME_URL: str = os.getenv("TOPLISTS_HOME_URL", "https://www.enr.com/")
INDEX_URL: str = os.getenv("TOPLISTS_INDEX_URL", "https://www.enr.com/toplists")

# Fragment every toplist (and pagination) URL must contain.
TOPLIST_PATH_FRAGMENT: str = "toplists"

CANONICAL_HEADERS: tuple[str, ...] = ("RANK 2025", "RANK 2024", "Company Name", "Location")

UA: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_BACKENDS: tuple[str, ...] = ("playwright", "selenium")
BROWSER_BACKEND: str = os.getenv("TOPLISTS_BROWSER_BACKEND", "playwright").strip().lower()
HEADLESS: bool = os.getenv("TOPLISTS_HEADLESS", "0").strip().lower() not in {"0", "false"}
CHROME_PATH: str | None = os.getenv("TOPLISTS_CHROME_PATH") or None


def _parse_timeout_seconds(env_var: str, default: int, *, minimum: int = 1) -> int:
    """Parse a timeout value in seconds from the environment with bounds."""

    try:
        value = int(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    return max(minimum, value)


# Navigation timeouts (seconds)
HOME_NAV_TIMEOUT_SECONDS: int = _parse_timeout_seconds("TOPLISTS_HOME_NAV_TIMEOUT_SECONDS", 90)
PAGE_NAV_TIMEOUT_SECONDS: int = _parse_timeout_seconds("TOPLISTS_PAGE_NAV_TIMEOUT_SECONDS", 60)
# Selector waits
BODY_WAIT_SECONDS: int = _parse_timeout_seconds("TOPLISTS_BODY_WAIT_SECONDS", 10)
TABLE_WAIT_SECONDS: int = _parse_timeout_seconds("TOPLISTS_TABLE_WAIT_SECONDS", 10)
CHALLENGE_BODY_WAIT_SECONDS: int = 5

# Challenge polling
CHALLENGE_POLL_SECONDS: float = 2.0
CHALLENGE_MAX_ATTEMPTS: int = 60
CHALLENGE_SETTLE_SECONDS: float = 2.0
CHALLENGE_LOG_EVERY: int = 5
# A failed first inspection is read as "no challenge"; polling failures are
# always read as "still challenged".
CHALLENGE_FIRST_ERROR_ASSUMES_CLEAR: bool = (
    os.getenv("TOPLISTS_CHALLENGE_FIRST_ERROR_ASSUMES_CLEAR", "1").strip().lower()
    not in {"0", "false"}
)

# Fixed pacing between fetches (seconds)
HOME_SETTLE_SECONDS: float = 2.0
INDEX_SETTLE_SECONDS: float = 3.0
DYNAMIC_CONTENT_SECONDS: float = 2.0
PAGINATION_DELAY_SECONDS: float = 1.5
BETWEEN_LISTS_DELAY_SECONDS: float = 2.0


__all__ = [
    "DATA_DIR",
    "OUTPUT_DIR",
    "LOG_DIR",
    "DEBUG_DIR",
    "COOKIES_FILE",
    "HOME_URL",
    "INDEX_URL",
    "TOPLIST_PATH_FRAGMENT",
    "CANONICAL_HEADERS",
]
