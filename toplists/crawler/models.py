"""Value types passed between the crawl components."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class LinkRef:
    """A discovered anchor. Identity is ``href``."""

    href: str
    label: str = ""


@dataclass
class TableRow:
    company_name: str
    location: str = ""
    rank_2025: Optional[str] = None
    rank_2024: Optional[str] = None

    def to_record(self) -> Dict[str, str]:
        """Return the canonical record; absent rank columns are omitted."""

        record: Dict[str, str] = {}
        if self.rank_2025 is not None:
            record["RANK 2025"] = self.rank_2025
        if self.rank_2024 is not None:
            record["RANK 2024"] = self.rank_2024
        record["Company Name"] = self.company_name
        record["Location"] = self.location
        return record


@dataclass
class PageExtraction:
    rows: List[TableRow] = field(default_factory=list)
    tables_found: int = 0

    @classmethod
    def empty(cls) -> "PageExtraction":
        return cls()


@dataclass
class PageAttempt:
    """Outcome of visiting one page of a toplist.

    A successful attempt carries the page's rows (possibly none); a skipped
    attempt carries the error code and message that caused the skip.
    """

    page_number: int
    url: str
    label: str = ""
    rows: List[TableRow] = field(default_factory=list)
    skipped_reason: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.skipped_reason is None

    @classmethod
    def skipped(
        cls, page_number: int, link: LinkRef, *, reason: str, message: str
    ) -> "PageAttempt":
        return cls(
            page_number=page_number,
            url=link.href,
            label=link.label,
            skipped_reason=reason,
            error_message=message,
        )


@dataclass
class ToplistResult:
    list_name: str
    url: str
    rows: List[TableRow]
    page_count: int = 1
    attempts: List[PageAttempt] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @classmethod
    def from_attempts(
        cls, list_name: str, url: str, attempts: List[PageAttempt]
    ) -> "ToplistResult":
        rows: List[TableRow] = []
        for attempt in attempts:
            rows.extend(attempt.rows)
        return cls(
            list_name=list_name,
            url=url,
            rows=rows,
            page_count=max(1, len(attempts)),
            attempts=list(attempts),
        )

    def records(self) -> List[Dict[str, Any]]:
        return [row.to_record() for row in self.rows]


__all__ = ["LinkRef", "TableRow", "PageExtraction", "PageAttempt", "ToplistResult"]
