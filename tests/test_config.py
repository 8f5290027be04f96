# tests/test_config.py

from __future__ import annotations

import os
from pathlib import Path

import pytest

from taskflow.config import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("TASKFLOW_"):
            monkeypatch.delenv(name)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "TaskFlow"
    assert s.data_dir == Path(".local/taskflow")
    assert s.db_path == Path(".local/taskflow") / "taskflow.sqlite3"
    assert s.export_dir == Path(".local/taskflow") / "exports"
    assert s.autosave_interval == 30.0
    assert s.search_debounce == 0.3
    assert s.history_limit == 50
    assert s.confirm_destructive is True


def test_paths_follow_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKFLOW_DATA_DIR", str(tmp_path))
    s = Settings.from_env()
    assert s.db_path == tmp_path / "taskflow.sqlite3"
    assert s.export_dir == tmp_path / "exports"

    monkeypatch.setenv("TASKFLOW_DB_PATH", str(tmp_path / "other.db"))
    assert Settings.from_env().db_path == tmp_path / "other.db"


def test_invalid_numbers_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKFLOW_HISTORY_LIMIT", "lots")
    monkeypatch.setenv("TASKFLOW_AUTOSAVE_INTERVAL", "0")
    monkeypatch.setenv("TASKFLOW_CONFIRM_DESTRUCTIVE", "off")
    s = Settings.from_env()
    assert s.history_limit == 50
    assert s.autosave_interval == 1.0
    assert s.confirm_destructive is False
