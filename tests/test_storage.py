# tests/test_storage.py

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from taskflow.errors import PersistenceError
from taskflow.storage.gateway import PersistenceGateway
from taskflow.storage.kv_store import SqliteKeyValueStore
from taskflow.tasks.task_models import Theme, UserSettings, ViewMode
from taskflow.tasks.task_store import TaskStore

from .conftest import NOW
from .fakes import FailingKV, FixedClock, MemoryKV


def test_sqlite_kv_set_get_overwrite_delete(tmp_path: Path) -> None:
    kv = SqliteKeyValueStore(tmp_path / "nested" / "kv.sqlite3")
    assert kv.get("tasks") is None

    kv.set("tasks", "[]")
    kv.set("tasks", '[{"text": "x"}]')
    assert kv.get("tasks") == '[{"text": "x"}]'
    assert kv.keys() == ["tasks"]

    # a second instance sees the same data
    assert SqliteKeyValueStore(kv.path).get("tasks") == '[{"text": "x"}]'

    kv.delete("tasks")
    assert kv.get("tasks") is None


def test_tasks_survive_a_save_load_cycle() -> None:
    kv = MemoryKV()
    gateway = PersistenceGateway(kv, clock=FixedClock(NOW))
    store = TaskStore(clock=FixedClock(NOW))
    a = store.add("pay rent", "Urgent", date(2026, 11, 1))
    store.add("stretch")
    store.toggle_completed(a.id)

    gateway.save_tasks(store.all())
    record = json.loads(kv.data["tasks"])[1]
    assert record["dueDate"] == "2026-11-01"
    assert record["createdAt"].endswith("Z")
    assert set(record) == {"id", "text", "completed", "category", "dueDate", "createdAt", "completedAt", "priority"}

    assert gateway.load_tasks() == store.all()


@pytest.mark.parametrize("raw", [None, "not json", '{"a": 1}', "42"])
def test_load_tasks_degrades_to_empty(raw: str | None) -> None:
    kv = MemoryKV({} if raw is None else {"tasks": raw})
    assert PersistenceGateway(kv).load_tasks() == []


def test_load_tasks_skips_bad_records_and_repairs_completion() -> None:
    payload = [
        {"id": "1", "text": "ok", "completed": True, "createdAt": "2026-10-01T10:00:00.000Z"},
        {"id": "2", "text": "   "},
        "garbage",
        {"id": "3", "text": "stale", "completed": False, "completedAt": "2026-10-02T10:00:00Z", "priority": 9},
    ]
    tasks = PersistenceGateway(MemoryKV({"tasks": json.dumps(payload)}), clock=FixedClock(NOW)).load_tasks()

    assert [t.id for t in tasks] == ["1", "3"]
    assert tasks[0].completed_at is not None
    assert tasks[1].completed_at is None
    assert tasks[1].priority == 5


def test_settings_defaults_for_missing_or_malformed_fields() -> None:
    kv = MemoryKV({"settings": json.dumps({"theme": "neon", "autoSave": "yes", "viewMode": "grid"})})
    prefs = PersistenceGateway(kv).load_settings()
    assert prefs.theme == Theme.LIGHT
    assert prefs.auto_save is True
    assert prefs.view_mode == ViewMode.GRID

    assert PersistenceGateway(MemoryKV()).load_settings() == UserSettings()


def test_settings_theme_and_first_run_keys() -> None:
    kv = MemoryKV()
    gateway = PersistenceGateway(kv)

    gateway.save_settings(UserSettings(theme=Theme.DARK, sound_effects=True))
    assert gateway.load_settings().sound_effects is True

    assert gateway.load_theme() is None
    gateway.save_theme(Theme.DARK)
    assert kv.data["theme"] == "dark"
    assert gateway.load_theme() == Theme.DARK

    assert gateway.has_visited() is False
    gateway.mark_visited()
    assert gateway.has_visited() is True


def test_write_failures_raise_persistence_error() -> None:
    gateway = PersistenceGateway(FailingKV())
    with pytest.raises(PersistenceError):
        gateway.save_tasks([])
    with pytest.raises(PersistenceError):
        gateway.save_settings(UserSettings())
