# tests/test_history.py

from __future__ import annotations

from taskflow.tasks.history import HistoryManager
from taskflow.tasks.task_models import Task

from .conftest import NOW


def _tasks(*texts: str) -> list[Task]:
    return [Task(id=str(i), text=t, created_at=NOW, priority=1) for i, t in enumerate(texts)]


def test_undo_returns_a_deep_copy_of_the_prior_collection() -> None:
    history = HistoryManager()
    live = _tasks("a", "b")
    history.record_before_mutation("toggle task", live)

    before = _tasks("a", "b")
    live[0].completed = True  # in-place mutation after the snapshot

    entry = history.undo(live)
    assert entry is not None
    assert entry.action == "toggle task"
    assert entry.tasks == before
    assert history.can_redo


def test_redo_restores_post_mutation_state() -> None:
    history = HistoryManager()
    history.record_before_mutation("add task", _tasks("a"))
    after = _tasks("b", "a")

    undone = history.undo(after)
    assert undone is not None
    redone = history.redo(undone.tasks)
    assert redone is not None
    assert redone.tasks == after
    assert history.undo_depth() == 1


def test_nothing_to_undo_or_redo() -> None:
    history = HistoryManager()
    assert history.undo([]) is None
    assert history.redo([]) is None


def test_undo_stack_is_capped_and_evicts_oldest() -> None:
    history = HistoryManager(limit=50)
    for i in range(51):
        history.record_before_mutation(f"action {i}", [])
    assert history.undo_depth() == 50

    labels = []
    while (entry := history.undo([])) is not None:
        labels.append(entry.action)
    assert labels[0] == "action 50"
    assert labels[-1] == "action 1"
    assert "action 0" not in labels


def test_new_mutation_clears_redo() -> None:
    history = HistoryManager()
    history.record_before_mutation("a", [])
    history.record_before_mutation("b", [])
    history.undo([])
    assert history.redo_depth() == 1

    history.record_before_mutation("c", [])
    assert history.redo_depth() == 0
    assert not history.can_redo


def test_redo_respects_the_cap() -> None:
    history = HistoryManager(limit=2)
    history.record_before_mutation("a", [])
    history.record_before_mutation("b", [])
    history.undo([])
    history.record_before_mutation("c", [])  # clears redo, depth back to 2
    history.undo([])
    history.redo([])
    assert history.undo_depth() <= 2
