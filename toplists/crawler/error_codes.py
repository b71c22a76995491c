from __future__ import annotations

"""Error code taxonomy for crawl failures.

Codes appear in structured logs and on skipped page attempts so a run can
explain why a page or list produced no rows.
"""


class ErrorCode:
    NAVIGATION_TIMEOUT = "navigation_timeout"
    NAVIGATION_ERROR = "navigation_error"
    SELECTOR_TIMEOUT = "selector_timeout"
    EVALUATION_ERROR = "evaluation_error"
    CHALLENGE_TIMEOUT = "challenge_timeout"
    INDEX_UNREACHABLE = "index_unreachable"
    INTERNAL = "internal_error"


class CrawlError(Exception):
    def __init__(self, error_code: str, message: str) -> None:
        super().__init__(message)
        self.error_code = error_code

    def __str__(self) -> str:  # pragma: no cover - inherited behaviour
        return str(self.args[0]) if self.args else ""


class IndexPageError(CrawlError):
    """The homepage or toplists index could not be loaded; the run cannot continue."""


class ChallengeNotClearedError(IndexPageError):
    def __init__(self, url: str) -> None:
        super().__init__(ErrorCode.CHALLENGE_TIMEOUT, f"Challenge on {url} was not cleared")
        self.url = url


__all__ = ["ErrorCode", "CrawlError", "IndexPageError", "ChallengeNotClearedError"]
