"""Debug artefacts captured when a crawl goes wrong."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from . import config
from .session import BrowserSession
from .utils import log_line


def capture(session: BrowserSession, stem: str, *, debug_dir: Optional[Path] = None) -> Dict[str, Path]:
    """Save ``<stem>.png`` and ``<stem>.html`` for the current page.

    Best effort: each artefact that fails is logged and left out of the
    returned mapping.
    """

    target_dir = Path(debug_dir or config.DEBUG_DIR)
    saved: Dict[str, Path] = {}

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log_line(f"Failed to create debug directory {target_dir}: {exc}")
        return saved

    screenshot_path = target_dir / f"{stem}.png"
    try:
        session.screenshot(screenshot_path)
        saved["screenshot"] = screenshot_path
        log_line(f"Saved debug screenshot -> {screenshot_path}")
    except Exception as exc:  # noqa: BLE001
        log_line(f"Failed to save debug screenshot: {exc}")

    html_path = target_dir / f"{stem}.html"
    try:
        html_path.write_text(session.content(), encoding="utf-8")
        saved["html"] = html_path
        log_line(f"Saved debug HTML -> {html_path}")
    except Exception as exc:  # noqa: BLE001
        log_line(f"Failed to save debug HTML: {exc}")

    return saved


__all__ = ["capture"]
