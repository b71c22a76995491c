"""Playwright-based crawler for the ENR toplists.

Workflow:

- Launch Chromium (headful by default so a human can clear the Cloudflare
  check) and replay cookies from the previous run.
- Load https://www.enr.com/ and https://www.enr.com/toplists, waiting out the
  challenge on each.
- Discover every toplist link on the index page.
- For each toplist, extract the ranking tables of its main page and every
  pagination page ("101-200", "201-300", ...).
- Write one JSON file per toplist plus ``summary.json`` and save cookies.

Only a failure of the homepage/index (navigation, or a challenge that never
clears) aborts the run; single lists and pages are skipped and logged.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from . import config, diagnostics
from .browser import open_session
from .config_validation import validate_runtime_config
from .cookies import load_cookies, save_cookies
from .error_codes import CrawlError
from .logging_utils import _scraper_event
from .models import ToplistResult
from .orchestrator import CrawlOrchestrator
from .utils import ensure_dirs, log_line, setup_run_logger
from .writer import write_results


def format_summary(results: Sequence[ToplistResult]) -> List[str]:
    """Human-readable crawl summary lines."""

    lines = [
        "=" * 70,
        "CRAWL SUMMARY",
        f"Total lists crawled: {len(results)}",
        f"Total rows extracted: {sum(r.row_count for r in results)}",
        "",
        "Results by list:",
    ]
    for index, result in enumerate(results, start=1):
        pages = f" ({result.page_count} pages)" if result.page_count > 1 else ""
        lines.append(f"  {index}. {result.list_name}: {result.row_count} rows{pages}")
    lines.append("=" * 70)
    return lines


def run_crawl(
    *,
    backend: Optional[str] = None,
    headless: Optional[bool] = None,
    output_dir: Optional[Path] = None,
    cookies_path: Optional[Path] = None,
    orchestrator: Optional[CrawlOrchestrator] = None,
) -> Dict[str, Any]:
    """Public entrypoint: crawl every toplist and write the results.

    Raises :class:`~toplists.crawler.error_codes.IndexPageError` (or any
    unexpected error) when the run cannot get past the index pages; an
    ``error-screenshot`` is captured first.
    """

    ensure_dirs()
    log_path = setup_run_logger()
    orchestrator = orchestrator or CrawlOrchestrator()
    cookies_path = Path(cookies_path or config.COOKIES_FILE)
    log_line("Starting ENR toplists crawler...")

    with open_session(backend=backend, headless=headless) as session:
        session.add_cookies(load_cookies(cookies_path))

        try:
            results = orchestrator.run(session)
        except Exception as exc:
            log_line(f"Error: {exc}")
            _scraper_event(
                "error",
                phase="run",
                error_code=getattr(exc, "error_code", None),
                error=str(exc),
            )
            diagnostics.capture(session, "error-screenshot")
            raise

        log_line("SAVING RESULTS...")
        written = write_results(results, output_dir)

        try:
            save_cookies(session.cookies(), cookies_path)
        except Exception as exc:  # noqa: BLE001
            log_line(f"[COOKIES][WARN] Unable to save cookies: {exc}")

    for line in format_summary(results):
        log_line(line)

    return {
        "total_lists": len(results),
        "total_rows": sum(r.row_count for r in results),
        "files": [str(item.path) for item in written],
        "log_file": str(log_path),
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crawl the ENR toplists")
    parser.add_argument(
        "--backend",
        choices=list(config.BROWSER_BACKENDS),
        default=None,
        help="Browser automation backend (default: TOPLISTS_BROWSER_BACKEND or playwright).",
    )
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run the browser headless. Headful is the default so the challenge can be solved by hand.",
    )
    parser.add_argument("--output-dir", type=Path, default=None)
    parser.add_argument("--cookies", dest="cookies_path", type=Path, default=None)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point. Returns 0 on success and 1 when the crawl failed."""

    args = _build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        validate_runtime_config("cli")
        summary = run_crawl(
            backend=args.backend,
            headless=args.headless,
            output_dir=args.output_dir,
            cookies_path=args.cookies_path,
        )
    except CrawlError as exc:
        log_line(f"Failed to crawl: {exc}")
        return 1
    except Exception as exc:  # noqa: BLE001
        log_line(f"Failed to crawl: {type(exc).__name__}: {exc}")
        return 1

    log_line(f"Total lists found: {summary['total_lists']}")
    return 0


__all__ = ["run_crawl", "format_summary", "main"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
