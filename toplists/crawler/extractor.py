"""Ranking-table extraction.

Toplist pages render one or more ranking tables whose headers vary between
lists and years ("RANK 2025", "Rank\n2025", "RANK RANK 2024", "RANK 2023",
"FIRMS", ...). Some pages also render broken header text while carrying the
correct label in a ``data-label`` attribute, which therefore takes
precedence.

Every row is normalised to the canonical record: both rank columns when the
table has them, plus the firm cell split into company name and location.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from bs4 import Tag

from . import config
from .dom import DomSnapshot, element_text
from .error_codes import CrawlError
from .logging_utils import _scraper_event
from .models import PageExtraction, TableRow
from .selectors_toplists import TOPLIST_SELECTORS, ToplistSelectors
from .session import BrowserSession, snapshot
from .utils import log_line

_WHITESPACE = re.compile(r"\s+")
FIRM_HEADERS = {"FIRM", "FIRMS"}


@dataclass(frozen=True)
class ColumnMap:
    firm: int
    rank_2025: Optional[int] = None
    rank_2024: Optional[int] = None


def normalize_header(text: str) -> str:
    return _WHITESPACE.sub("", text.upper())


def header_labels(table: Tag, selectors: ToplistSelectors = TOPLIST_SELECTORS) -> List[str]:
    """Header texts of *table*, preferring a non-blank label attribute over the text."""

    labels: List[str] = []
    for th in table.select(selectors.header_cell_selector):
        label = element_text(th)
        attr = th.get(selectors.header_label_attribute)
        if isinstance(attr, str) and attr.strip():
            label = attr.strip()
        labels.append(label)
    return labels


def resolve_columns(headers: Sequence[str]) -> Optional[ColumnMap]:
    """Map header labels to column indices; ``None`` when there is no firm column.

    A later "RANK 2025" column replaces an earlier one, while the first
    "RANK 2024"/"RANK 2023" column is kept. A header counting as rank 2025 is
    never also considered for rank 2024.
    """

    rank_2025: Optional[int] = None
    rank_2024: Optional[int] = None
    firm: Optional[int] = None

    for idx, header in enumerate(headers):
        normalized = normalize_header(header)
        if "RANK" in normalized and "2025" in normalized:
            rank_2025 = idx
        elif "RANK" in normalized and ("2024" in normalized or "2023" in normalized):
            if rank_2024 is None:
                rank_2024 = idx
        if normalized in FIRM_HEADERS:
            firm = idx

    if firm is None:
        return None
    return ColumnMap(firm=firm, rank_2025=rank_2025, rank_2024=rank_2024)


def split_firm(text: str) -> Tuple[str, str]:
    """Split ``"Company, City, State"`` into ``("Company", "City, State")``."""

    text = text.strip()
    if "," not in text:
        return text, ""
    parts = [part.strip() for part in text.split(",")]
    return parts[0], ", ".join(parts[1:])


def _cell_text(cells: Sequence[Tag], index: Optional[int]) -> Optional[str]:
    if index is None or index >= len(cells):
        return None
    return element_text(cells[index])


def extract_rows(table: Tag, columns: ColumnMap, selectors: ToplistSelectors = TOPLIST_SELECTORS) -> List[TableRow]:
    rows: List[TableRow] = []
    for tr in table.select(selectors.body_row_selector):
        cells = tr.find_all("td")
        if not cells:
            continue

        firm_text = _cell_text(cells, columns.firm)
        if firm_text is None:
            continue

        company_name, location = split_firm(firm_text)
        rows.append(
            TableRow(
                company_name=company_name,
                location=location,
                rank_2025=_cell_text(cells, columns.rank_2025),
                rank_2024=_cell_text(cells, columns.rank_2024),
            )
        )
    return rows


def data_tables(dom: DomSnapshot, selectors: ToplistSelectors = TOPLIST_SELECTORS) -> List[Tag]:
    """Every table on the page except the pagination control."""

    return [
        table
        for table in dom.soup.find_all("table")
        if table.get("id") != selectors.pagination_table_id
    ]


def extract_page(dom: DomSnapshot, selectors: ToplistSelectors = TOPLIST_SELECTORS) -> PageExtraction:
    """Extract canonical rows from every qualifying table of *dom*."""

    extraction = PageExtraction()
    for table_index, table in enumerate(data_tables(dom, selectors)):
        headers = header_labels(table, selectors)
        if not headers:
            continue

        columns = resolve_columns(headers)
        if columns is None:
            _scraper_event("table", step="skip_no_firm", table_index=table_index, headers=headers)
            continue

        rows = extract_rows(table, columns, selectors)
        if rows:
            extraction.rows.extend(rows)
            extraction.tables_found += 1
    return extraction


class TableExtractor:
    def __init__(
        self,
        selectors: ToplistSelectors = TOPLIST_SELECTORS,
        *,
        table_wait_seconds: int | None = None,
    ) -> None:
        self.selectors = selectors
        self.table_wait_seconds = (
            config.TABLE_WAIT_SECONDS if table_wait_seconds is None else table_wait_seconds
        )

    def extract(self, session: BrowserSession) -> PageExtraction:
        """Extract the current page's rows; any failure yields an empty extraction."""

        log_line("    Extracting table data...")
        try:
            try:
                session.wait_for_selector("table", timeout_ms=self.table_wait_seconds * 1000)
            except CrawlError as exc:
                log_line("    No tables found on this page")
                _scraper_event("table", step="wait_for_table_timeout", error=str(exc))
                return PageExtraction.empty()

            extraction = extract_page(snapshot(session), self.selectors)
        except Exception as exc:  # noqa: BLE001
            log_line(f"    Error extracting table data: {exc}")
            _scraper_event("error", phase="table", step="extract", error=str(exc))
            return PageExtraction.empty()

        if extraction.rows:
            log_line(
                f"    Extracted {len(extraction.rows)} rows from {extraction.tables_found} table(s)"
            )
        else:
            log_line("    No valid data tables found")
        return extraction


__all__ = [
    "ColumnMap",
    "TableExtractor",
    "normalize_header",
    "header_labels",
    "resolve_columns",
    "split_firm",
    "extract_rows",
    "data_tables",
    "extract_page",
]
