"""Persist crawl results: one JSON file per toplist plus a summary index."""
from __future__ import annotations

import urllib.parse
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from . import config
from .models import ToplistResult
from .utils import ensure_dirs, log_line, now_iso, save_json_file, slugify_list_name


@dataclass
class WrittenFile:
    filename: str
    path: Path
    result: ToplistResult


def filename_stem(result: ToplistResult) -> str:
    """Last path segment of the list URL (e.g. ``2025-Top-500-Design-Firms``).

    Falls back to the slugified list name when the URL ends in the bare
    toplists index or has no usable segment.
    """

    path = urllib.parse.urlparse(result.url).path
    last = path.rstrip("/").rsplit("/", 1)[-1] if path else ""
    if last and last != config.TOPLIST_PATH_FRAGMENT:
        return last
    return slugify_list_name(result.list_name) or "toplist"


def list_payload(result: ToplistResult, crawl_date: str) -> Dict[str, Any]:
    return {
        "crawlDate": crawl_date,
        "listName": result.list_name,
        "url": result.url,
        "totalRows": result.row_count,
        "paginatedPages": result.page_count,
        "headers": list(config.CANONICAL_HEADERS),
        "data": result.records(),
    }


def summary_payload(written: Sequence[WrittenFile], crawl_date: str) -> Dict[str, Any]:
    return {
        "crawlDate": crawl_date,
        "totalLists": len(written),
        "totalRows": sum(item.result.row_count for item in written),
        "files": [
            {
                "filename": item.filename,
                "listName": item.result.list_name,
                "url": item.result.url,
                "rowCount": item.result.row_count,
                "paginatedPages": item.result.page_count,
            }
            for item in written
        ],
    }


def write_results(
    results: Sequence[ToplistResult], output_dir: Optional[Path] = None
) -> List[WrittenFile]:
    """Write every result and ``summary.json`` under *output_dir*."""

    if output_dir is None:
        ensure_dirs()
        output_dir = config.OUTPUT_DIR
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    crawl_date = now_iso()
    used: set[str] = {config.SUMMARY_FILENAME}
    written: List[WrittenFile] = []

    for result in results:
        stem = filename_stem(result)
        filename = f"{stem}.json"
        suffix = 2
        while filename in used:
            filename = f"{stem}-{suffix}.json"
            suffix += 1
        used.add(filename)

        path = output_dir / filename
        save_json_file(path, list_payload(result, crawl_date))
        log_line(f"Saved: {path} ({result.row_count} rows)")
        written.append(WrittenFile(filename=filename, path=path, result=result))

    summary_path = output_dir / config.SUMMARY_FILENAME
    save_json_file(summary_path, summary_payload(written, crawl_date))
    log_line(f"Saved: {summary_path} (index file)")
    return written


__all__ = ["WrittenFile", "filename_stem", "list_payload", "summary_payload", "write_results"]
