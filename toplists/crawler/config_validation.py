from __future__ import annotations

from typing import Literal

from . import config
from .logging_utils import _scraper_event
from .utils import log_line

Entrypoint = Literal["cli", "tests"]


def _raise_config_error(message: str, *, entrypoint: Entrypoint, error: str) -> None:
    _scraper_event(
        "error",
        phase="config",
        context="runtime_validation",
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ValueError(message)


def validate_runtime_config(entrypoint: Entrypoint) -> None:
    """Validate runtime configuration for the given entrypoint.

    Raises ``ValueError`` when a blocking misconfiguration is detected.
    """

    if config.BROWSER_BACKEND not in config.BROWSER_BACKENDS:
        _raise_config_error(
            f"TOPLISTS_BROWSER_BACKEND must be one of {list(config.BROWSER_BACKENDS)}.",
            entrypoint=entrypoint,
            error="unknown_backend",
        )

    if config.TOPLIST_PATH_FRAGMENT not in config.INDEX_URL:
        _raise_config_error(
            "TOPLISTS_INDEX_URL must point at the toplists index.",
            entrypoint=entrypoint,
            error="index_url_invalid",
        )

    timeout_fields = [
        ("HOME_NAV_TIMEOUT_SECONDS", config.HOME_NAV_TIMEOUT_SECONDS),
        ("PAGE_NAV_TIMEOUT_SECONDS", config.PAGE_NAV_TIMEOUT_SECONDS),
        ("BODY_WAIT_SECONDS", config.BODY_WAIT_SECONDS),
        ("TABLE_WAIT_SECONDS", config.TABLE_WAIT_SECONDS),
    ]

    for field_name, value in timeout_fields:
        if value <= 0:
            _raise_config_error(
                f"{field_name} must be greater than zero.",
                entrypoint=entrypoint,
                error="invalid_timeout",
            )

    if config.CHALLENGE_MAX_ATTEMPTS < 1 or config.CHALLENGE_POLL_SECONDS <= 0:
        _raise_config_error(
            "Challenge polling needs at least one attempt and a positive interval.",
            entrypoint=entrypoint,
            error="invalid_challenge_poll",
        )


__all__ = ["validate_runtime_config", "Entrypoint"]
