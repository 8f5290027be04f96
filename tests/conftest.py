# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.cli.bootstrap import create_initial_state
from taskflow.core.state import AppState

from .fakes import FixedClock, MemoryKV

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="TaskFlow",
        log_level="DEBUG",
        data_dir=tmp_path,
        db_path=tmp_path / "taskflow.sqlite3",
        export_dir=tmp_path / "exports",
        autosave_interval=0.01,
        search_debounce=0.01,
        history_limit=50,
        default_category="Personal",
        confirm_destructive=True,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def kv() -> MemoryKV:
    return MemoryKV()


@pytest.fixture()
def state(settings: SimpleNamespace, kv: MemoryKV, clock: FixedClock) -> AppState:
    """
    AppState wired with an in-memory key-value store, a fixed clock and a
    confirmation prompt that always says yes.
    """
    return create_initial_state(settings=settings, kv=kv, confirm=lambda _q: True, clock=clock)
