from toplists.crawler import config, logging_utils, utils


def test_scraper_event_label_and_phase(monkeypatch):
    events: list[str] = []
    monkeypatch.setattr(logging_utils, "log_line", lambda msg: events.append(msg))

    logging_utils._scraper_event("challenge", phase="index", step="detected")

    assert events
    line = events[-1]
    assert line.startswith("[SCRAPER][CHALLENGE]")
    assert "phase='index'" in line
    assert "step='detected'" in line


def test_scraper_event_phase_only(monkeypatch):
    events: list[str] = []
    monkeypatch.setattr(logging_utils, "log_line", lambda msg: events.append(msg))

    logging_utils._scraper_event(phase="list", rows=3)

    assert events == ["[SCRAPER][LIST] rows=3"]


def test_log_line_writes_to_run_log():
    log_path = utils.setup_run_logger()
    utils.log_line("Crawling: Top 500 Design Firms")

    assert log_path.parent == config.LOG_DIR
    assert log_path.name.startswith("crawl_")
    assert utils.get_current_log_path() == log_path
    assert "Crawling: Top 500 Design Firms" in log_path.read_text(encoding="utf-8")


def test_slugify_list_name():
    assert utils.slugify_list_name("  Top 500 Design Firms (2025) ") == "Top-500-Design-Firms-2025"
    assert utils.slugify_list_name("!!!") == ""
