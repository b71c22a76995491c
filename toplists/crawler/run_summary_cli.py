from __future__ import annotations

"""CLI helper for printing the summary of the last crawl."""

import argparse
from pathlib import Path
from typing import Sequence

from . import config
from .utils import load_json_file


def _build_parser() -> argparse.ArgumentParser:
    """Return an argument parser for the run summary CLI."""

    parser = argparse.ArgumentParser(
        description="Show the summary written by the last toplists crawl.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory holding summary.json (default: the configured output directory).",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the run summary CLI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    output_dir = args.output_dir or config.OUTPUT_DIR
    summary_path = Path(output_dir) / config.SUMMARY_FILENAME
    summary = load_json_file(summary_path, default=None)
    if not isinstance(summary, dict):
        parser.error(f"No crawl summary found at {summary_path}")

    print(f"Crawl {summary.get('crawlDate', '?')}")
    print(f"  lists: {summary.get('totalLists', 0)}")
    print(f"  rows: {summary.get('totalRows', 0)}")

    files = summary.get("files") or []
    if files:
        print("\nLists:")
        for entry in files:
            pages = entry.get("paginatedPages", 1)
            suffix = f" ({pages} pages)" if pages and pages > 1 else ""
            print(f"  {entry.get('listName')}: {entry.get('rowCount', 0)} rows{suffix} -> {entry.get('filename')}")

    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
