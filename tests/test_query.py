# tests/test_query.py

from __future__ import annotations

from datetime import date, timedelta

import pytest

from taskflow.tasks.query import compute_stats, view
from taskflow.tasks.task_models import Task

from .conftest import NOW


def _task(tid: str, text: str, *, minutes: int = 0, category: str = "Personal", **kw) -> Task:
    return Task(
        id=tid,
        text=text,
        created_at=NOW + timedelta(minutes=minutes),
        priority=1,
        category=category,
        **kw,
    )


@pytest.fixture()
def tasks() -> list[Task]:
    # store order: newest first
    return [
        _task("4", "banana bread", minutes=3, category="Shopping"),
        _task("3", "Quarterly report", minutes=2, category="Work", due_date=date(2026, 10, 20)),
        _task("2", "call mom", minutes=1, completed=True, completed_at=NOW, due_date=date(2026, 10, 18)),
        _task("1", "Apple pie", minutes=0, category="Work"),
    ]


def _ids(items: list[Task]) -> list[str]:
    return [t.id for t in items]


def test_default_view_is_newest_first(tasks: list[Task]) -> None:
    assert _ids(view(tasks)) == ["4", "3", "2", "1"]
    assert _ids(view(tasks, sort="oldest")) == ["1", "2", "3", "4"]


def test_status_and_category_filters(tasks: list[Task]) -> None:
    completed = view(tasks, status_filter="completed")
    assert completed and all(t.completed for t in completed)

    pending = view(tasks, status_filter="pending")
    assert all(not t.completed for t in pending)

    work = view(tasks, category="Work")
    assert _ids(work) == ["3", "1"]
    assert all(t.category == "Work" for t in work)

    for result in (completed, pending, work):
        assert set(_ids(result)) <= set(_ids(tasks))


def test_search_matches_text_or_category_case_insensitively(tasks: list[Task]) -> None:
    assert _ids(view(tasks, search_query="REPORT")) == ["3"]
    assert _ids(view(tasks, search_query="work")) == ["3", "1"]
    assert view(tasks, search_query="zzz") == []


def test_due_date_sort_puts_undated_last(tasks: list[Task]) -> None:
    result = view(tasks, sort="due-date")
    assert _ids(result) == ["2", "3", "4", "1"]
    dated = [t.due_date is not None for t in result]
    assert dated == sorted(dated, reverse=True)


def test_text_sorts(tasks: list[Task]) -> None:
    assert _ids(view(tasks, sort="alphabetical")) == ["1", "4", "2", "3"]
    assert [t.category for t in view(tasks, sort="category")] == ["Personal", "Shopping", "Work", "Work"]


def test_unknown_sort_falls_back_to_newest(tasks: list[Task]) -> None:
    assert _ids(view(tasks, sort="bogus")) == ["4", "3", "2", "1"]


def test_view_does_not_mutate_input(tasks: list[Task]) -> None:
    before = list(tasks)
    view(tasks, status_filter="pending", sort="alphabetical")
    assert tasks == before


def test_compute_stats(tasks: list[Task]) -> None:
    tasks.append(_task("5", "overdue thing", due_date=date(2026, 10, 10)))
    stats = compute_stats(tasks, NOW)
    assert stats.total == 5
    assert stats.completed == 1
    assert stats.pending == 4
    assert stats.overdue == 1
    # overdue counts as due soon too; completed "call mom" does not
    assert stats.due_soon == 1
    assert stats.completion_rate == 20


def test_compute_stats_empty() -> None:
    stats = compute_stats([], NOW)
    assert stats.total == 0
    assert stats.completion_rate == 0
