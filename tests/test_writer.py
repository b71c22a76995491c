from __future__ import annotations

import json
from pathlib import Path

from toplists.crawler import config
from toplists.crawler.models import PageAttempt, TableRow, ToplistResult
from toplists.crawler.writer import filename_stem, write_results


def _result(url: str, name: str, rows, pages: int = 1) -> ToplistResult:
    attempts = [PageAttempt(page_number=1, url=url, rows=list(rows))]
    attempts += [PageAttempt(page_number=n, url=f"{url}-{n}") for n in range(2, pages + 1)]
    return ToplistResult.from_attempts(name, url, attempts)


def test_filename_comes_from_last_url_segment() -> None:
    result = _result("https://www.enr.com/toplists/2025-Top-500-Design-Firms-Preview?x=1", "Top 500", [])
    assert filename_stem(result) == "2025-Top-500-Design-Firms-Preview"


def test_filename_falls_back_to_slug_of_list_name() -> None:
    assert filename_stem(_result("https://www.enr.com/toplists/", "Top 400 Contractors!", [])) == "Top-400-Contractors"
    assert filename_stem(_result("https://www.enr.com", "", [])) == "toplist"


def test_write_results_payload_and_summary(tmp_path: Path) -> None:
    rows = [
        TableRow(company_name="AECOM", location="Dallas, Texas", rank_2025="1", rank_2024="1"),
        TableRow(company_name="Jacobs", location="Dallas, Texas", rank_2025="2"),
    ]
    result = _result("https://www.enr.com/toplists/2025-Top-500-Design-Firms", "Top 500 Design Firms", rows, pages=3)

    written = write_results([result], tmp_path)

    assert [item.filename for item in written] == ["2025-Top-500-Design-Firms.json"]
    payload = json.loads((tmp_path / "2025-Top-500-Design-Firms.json").read_text(encoding="utf-8"))
    assert payload["listName"] == "Top 500 Design Firms"
    assert payload["url"] == "https://www.enr.com/toplists/2025-Top-500-Design-Firms"
    assert payload["totalRows"] == 2
    assert payload["paginatedPages"] == 3
    assert payload["headers"] == ["RANK 2025", "RANK 2024", "Company Name", "Location"]
    assert payload["data"][1] == {"RANK 2025": "2", "Company Name": "Jacobs", "Location": "Dallas, Texas"}
    assert payload["crawlDate"].endswith("Z")

    summary = json.loads((tmp_path / config.SUMMARY_FILENAME).read_text(encoding="utf-8"))
    assert summary["totalLists"] == 1
    assert summary["totalRows"] == 2
    assert summary["files"][0]["filename"] == "2025-Top-500-Design-Firms.json"
    assert summary["crawlDate"] == payload["crawlDate"]


def test_colliding_filenames_get_numeric_suffix(tmp_path: Path) -> None:
    first = _result("https://www.enr.com/toplists/2025-Top-500", "A", [TableRow("AECOM")])
    second = _result("https://www.enr.com/rankings/2025-Top-500", "B", [TableRow("Jacobs")])
    summary_named = _result("https://www.enr.com/toplists/summary", "C", [TableRow("Fluor")])

    written = write_results([first, second, summary_named], tmp_path)

    assert [item.filename for item in written] == [
        "2025-Top-500.json",
        "2025-Top-500-2.json",
        "summary-2.json",
    ]
    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert summary["totalLists"] == 3


def test_write_results_defaults_to_configured_output_dir() -> None:
    written = write_results([_result("https://www.enr.com/toplists/X", "X", [TableRow("AECOM")])])

    assert written[0].path == config.OUTPUT_DIR / "X.json"
    assert (config.OUTPUT_DIR / config.SUMMARY_FILENAME).exists()


def test_empty_run_still_writes_summary(tmp_path: Path) -> None:
    assert write_results([], tmp_path) == []

    summary = json.loads((tmp_path / "summary.json").read_text(encoding="utf-8"))
    assert summary["totalLists"] == 0
    assert summary["files"] == []
