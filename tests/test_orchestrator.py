from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from toplists.crawler import config
from toplists.crawler.challenge import ChallengeGate
from toplists.crawler.error_codes import (
    ChallengeNotClearedError,
    ErrorCode,
    IndexPageError,
)
from toplists.crawler.models import PageAttempt, TableRow, ToplistResult
from toplists.crawler.orchestrator import CrawlOrchestrator
from tests.fake_session import CHALLENGE_PAGE, FakeSession, html_page

HOME_URL = "https://www.enr.com/"
INDEX_URL = "https://www.enr.com/toplists"

INDEX_HTML = html_page(
    '<div class="linkArrow"><a href="/toplists/2025-Top-500-Design-Firms">Top 500 Design Firms</a></div>',
    '<div class="linkArrow"><a href="/toplists/2025-Top-400-Contractors">Top 400 Contractors</a></div>',
    '<div class="linkArrow"><a href="/toplists/2025-Top-100-Green">Top 100 Green</a></div>',
)


class StubCrawler:
    """Returns canned results per list URL; an exception instance is raised."""

    def __init__(self, outcomes: dict) -> None:
        self.outcomes = outcomes
        self.calls: List[Tuple[str, str]] = []

    def crawl_list(self, session, url: str, list_name: str) -> Optional[ToplistResult]:
        self.calls.append((url, list_name))
        outcome = self.outcomes.get(url)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _result(url: str, name: str, *companies: str) -> ToplistResult:
    rows = [TableRow(company_name=company) for company in companies]
    return ToplistResult.from_attempts(name, url, [PageAttempt(page_number=1, url=url, rows=rows)])


def _orchestrator(crawler=None, captures=None, gate=None) -> CrawlOrchestrator:
    def _capture(session, stem):
        if captures is not None:
            captures.append(stem)

    return CrawlOrchestrator(
        gate=gate,
        crawler=crawler or StubCrawler({}),
        capture=_capture,
        home_url=HOME_URL,
        index_url=INDEX_URL,
    )


def test_results_keep_discovery_order_and_skip_failed_lists() -> None:
    first = "https://www.enr.com/toplists/2025-Top-500-Design-Firms"
    second = "https://www.enr.com/toplists/2025-Top-400-Contractors"
    third = "https://www.enr.com/toplists/2025-Top-100-Green"
    crawler = StubCrawler(
        {
            first: _result(first, "Top 500 Design Firms", "AECOM", "Jacobs"),
            second: RuntimeError("page crashed"),
            third: _result(third, "Top 100 Green", "Skanska"),
        }
    )
    session = FakeSession({HOME_URL: html_page("home"), INDEX_URL: INDEX_HTML})

    results = _orchestrator(crawler).run(session)

    assert [result.list_name for result in results] == ["Top 500 Design Firms", "Top 100 Green"]
    assert [url for url, _ in crawler.calls] == [first, second, third]
    assert session.pauses.count(config.BETWEEN_LISTS_DELAY_SECONDS) >= 3


def test_lists_without_rows_are_omitted() -> None:
    first = "https://www.enr.com/toplists/2025-Top-500-Design-Firms"
    crawler = StubCrawler({first: _result(first, "Top 500 Design Firms", "AECOM")})
    session = FakeSession({HOME_URL: html_page("home"), INDEX_URL: INDEX_HTML})

    results = _orchestrator(crawler).run(session)

    assert len(results) == 1
    assert len(crawler.calls) == 3


def test_open_index_visits_home_then_index() -> None:
    session = FakeSession({HOME_URL: html_page("home"), INDEX_URL: INDEX_HTML})

    links = _orchestrator().open_index(session)

    assert session.visits == [HOME_URL, INDEX_URL]
    assert [link.label for link in links] == [
        "Top 500 Design Firms",
        "Top 400 Contractors",
        "Top 100 Green",
    ]
    assert session.pauses == [
        config.HOME_SETTLE_SECONDS,
        config.INDEX_SETTLE_SECONDS,
        config.INDEX_SETTLE_SECONDS,
    ]


def test_unreachable_index_is_fatal() -> None:
    session = FakeSession({HOME_URL: html_page("home")}, failing_navigation={INDEX_URL})

    with pytest.raises(IndexPageError) as excinfo:
        _orchestrator().run(session)

    assert excinfo.value.error_code == ErrorCode.INDEX_UNREACHABLE


def test_unreachable_homepage_is_fatal() -> None:
    session = FakeSession({}, failing_navigation={HOME_URL})

    with pytest.raises(IndexPageError):
        _orchestrator().open_index(session)

    assert session.visits == [HOME_URL]


def test_uncleared_homepage_challenge_is_fatal() -> None:
    session = FakeSession(
        {HOME_URL: html_page("home"), INDEX_URL: INDEX_HTML},
        evaluations={HOME_URL: [CHALLENGE_PAGE] * 5},
    )
    gate = ChallengeGate(poll_seconds=1.0, settle_seconds=1.0, max_attempts=3)

    with pytest.raises(ChallengeNotClearedError) as excinfo:
        _orchestrator(gate=gate).run(session)

    assert excinfo.value.url == HOME_URL
    assert excinfo.value.error_code == ErrorCode.CHALLENGE_TIMEOUT
    assert INDEX_URL not in session.visits


def test_uncleared_index_challenge_is_fatal() -> None:
    session = FakeSession(
        {HOME_URL: html_page("home"), INDEX_URL: INDEX_HTML},
        evaluations={INDEX_URL: [CHALLENGE_PAGE] * 5},
    )
    gate = ChallengeGate(poll_seconds=1.0, settle_seconds=1.0, max_attempts=3)

    with pytest.raises(ChallengeNotClearedError) as excinfo:
        _orchestrator(gate=gate).open_index(session)

    assert excinfo.value.url == INDEX_URL


def test_no_links_captures_debug_artefacts_and_crawls_nothing() -> None:
    captures: List[str] = []
    crawler = StubCrawler({})
    session = FakeSession({HOME_URL: html_page("home"), INDEX_URL: html_page("<p>empty</p>")})

    results = _orchestrator(crawler, captures).run(session)

    assert results == []
    assert captures == ["debug-no-links"]
    assert crawler.calls == []
