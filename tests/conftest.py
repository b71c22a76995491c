from __future__ import annotations

from pathlib import Path

import pytest

from toplists.crawler import config, utils


@pytest.fixture(autouse=True)
def _configure_temp_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every data path at ``tmp_path`` and restart the logger there."""

    data_dir = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    monkeypatch.setattr(config, "OUTPUT_DIR", data_dir / "enr-data")
    monkeypatch.setattr(config, "LOG_DIR", data_dir / "logs")
    monkeypatch.setattr(config, "LOG_FILE", data_dir / "logs" / "latest.log")
    monkeypatch.setattr(config, "DEBUG_DIR", data_dir / "debug")
    monkeypatch.setattr(config, "COOKIES_FILE", data_dir / "enr-cookies.json")
    utils._configure_logger(config.LOG_FILE)
    return data_dir
