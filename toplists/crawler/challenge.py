"""Detection of, and waiting out, the anti-bot interstitial.

The crawler never solves the challenge itself. When one is detected the gate
polls the page until a human (or the site) clears it, or gives up after a
fixed number of attempts.

Inspection failures are deliberately handled asymmetrically:

* on the first check, an evaluation error is read as "no challenge" and the
  gate reports the page as clear (``CHALLENGE_FIRST_ERROR_ASSUMES_CLEAR``);
* while polling, an evaluation error is read as "still challenged".

A transient error on first load can therefore let a real challenge page
through to extraction. The behaviour is kept as-is and can be switched off
through configuration, in which case a first-check error enters polling.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from . import config
from .error_codes import CrawlError
from .logging_utils import _scraper_event
from .selectors_toplists import CHALLENGE_MARKERS, ChallengeMarkers
from .session import BrowserSession
from .utils import log_line

_SNAPSHOT_SCRIPT = """
(selectors) => {
    const body = document.body;
    return {
        title: document.title || '',
        bodyText: body && body.innerText ? body.innerText : '',
        hasBody: !!body,
        hasChallengeForm: document.querySelector(selectors[0]) !== null,
        hasRayId: document.querySelector(selectors[1]) !== null,
        hasCaptchaKind: document.querySelector(selectors[2]) !== null,
    };
}
"""


@dataclass(frozen=True)
class ChallengeSnapshot:
    title: str = ""
    body_text: str = ""
    has_body: bool = True
    has_challenge_form: bool = False
    has_ray_id: bool = False
    has_captcha_kind: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> "ChallengeSnapshot":
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected challenge snapshot payload: {payload!r}")
        return cls(
            title=str(payload.get("title") or ""),
            body_text=str(payload.get("bodyText") or ""),
            has_body=bool(payload.get("hasBody")),
            has_challenge_form=bool(payload.get("hasChallengeForm")),
            has_ray_id=bool(payload.get("hasRayId")),
            has_captcha_kind=bool(payload.get("hasCaptchaKind")),
        )


def has_challenge_text(snap: ChallengeSnapshot, markers: ChallengeMarkers = CHALLENGE_MARKERS) -> bool:
    title = snap.title.lower()
    body = snap.body_text.lower()
    return any(m in title for m in markers.title_markers) or any(
        m in body for m in markers.body_markers
    )


def has_challenge_elements(snap: ChallengeSnapshot) -> bool:
    return snap.has_challenge_form or snap.has_ray_id or snap.has_captcha_kind


def is_challenge(snap: ChallengeSnapshot, markers: ChallengeMarkers = CHALLENGE_MARKERS) -> bool:
    """Initial check: text markers or challenge-only elements. No body means no challenge."""

    if not snap.has_body:
        return False
    return has_challenge_text(snap, markers) or has_challenge_elements(snap)


def still_on_challenge(snap: ChallengeSnapshot, markers: ChallengeMarkers = CHALLENGE_MARKERS) -> bool:
    """Polling check: text markers only. No body means still challenged."""

    if not snap.has_body:
        return True
    return has_challenge_text(snap, markers)


class ChallengeGate:
    def __init__(
        self,
        *,
        markers: ChallengeMarkers = CHALLENGE_MARKERS,
        poll_seconds: float | None = None,
        max_attempts: int | None = None,
        settle_seconds: float | None = None,
        first_error_assumes_clear: bool | None = None,
    ) -> None:
        self.markers = markers
        self.poll_seconds = config.CHALLENGE_POLL_SECONDS if poll_seconds is None else poll_seconds
        self.max_attempts = config.CHALLENGE_MAX_ATTEMPTS if max_attempts is None else max_attempts
        self.settle_seconds = (
            config.CHALLENGE_SETTLE_SECONDS if settle_seconds is None else settle_seconds
        )
        self.first_error_assumes_clear = (
            config.CHALLENGE_FIRST_ERROR_ASSUMES_CLEAR
            if first_error_assumes_clear is None
            else first_error_assumes_clear
        )

    def _snapshot(self, session: BrowserSession) -> ChallengeSnapshot:
        selectors = list(self.markers.element_selectors)
        script = f"() => ({_SNAPSHOT_SCRIPT.strip()})({json.dumps(selectors)})"
        return ChallengeSnapshot.from_payload(session.evaluate(script))

    def _initial_check(self, session: BrowserSession) -> Optional[bool]:
        """Return whether a challenge is showing, or ``None`` if inspection failed."""

        try:
            session.wait_for_selector(
                "body", timeout_ms=config.CHALLENGE_BODY_WAIT_SECONDS * 1000
            )
        except CrawlError:
            pass

        try:
            return is_challenge(self._snapshot(session), self.markers)
        except Exception as exc:  # noqa: BLE001
            log_line(f"[CHALLENGE] Error checking for challenge: {exc}")
            _scraper_event("error", phase="challenge", step="initial_check", error=str(exc))
            return None

    def _poll_once(self, session: BrowserSession) -> bool:
        try:
            return still_on_challenge(self._snapshot(session), self.markers)
        except Exception:  # noqa: BLE001
            return True

    def clear(self, session: BrowserSession) -> bool:
        """Return ``True`` once the page is free of the challenge, ``False`` on timeout."""

        log_line("Checking for Cloudflare challenge...")
        detected = self._initial_check(session)

        if detected is None:
            if self.first_error_assumes_clear:
                log_line("[CHALLENGE] Inspection failed on first check; assuming no challenge")
                return True
            detected = True

        if not detected:
            log_line("No Cloudflare challenge detected")
            return True

        log_line("Cloudflare challenge detected!")
        log_line("Please complete the verification in the browser window...")
        _scraper_event("challenge", step="detected", url=session.url)

        attempts = 0
        while attempts < self.max_attempts:
            session.pause(self.poll_seconds)

            if not self._poll_once(session):
                log_line("Challenge completed! Continuing...")
                _scraper_event("challenge", step="cleared", attempts=attempts + 1)
                session.pause(self.settle_seconds)
                return True

            attempts += 1
            if attempts % config.CHALLENGE_LOG_EVERY == 0:
                elapsed = attempts * self.poll_seconds
                log_line(f"Still waiting... ({elapsed:g}s elapsed)")

        log_line("Timeout waiting for challenge completion")
        _scraper_event("challenge", step="timeout", attempts=attempts)
        return False


__all__ = [
    "ChallengeSnapshot",
    "ChallengeGate",
    "has_challenge_text",
    "has_challenge_elements",
    "is_challenge",
    "still_on_challenge",
]
