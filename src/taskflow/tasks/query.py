# src/taskflow/tasks/query.py

from __future__ import annotations

import locale
from collections.abc import Sequence
from datetime import datetime, timedelta

from .task_models import SortKey, StatusFilter, Task, TaskStats, due_datetime

ALL_CATEGORIES = "all"


def _text_key(s: str) -> str:
    # Collate with the process locale (C locale degrades to code point order).
    return locale.strxfrm(s.casefold())


def _matches_search(task: Task, needle: str) -> bool:
    return needle in task.text.casefold() or needle in task.category.casefold()


def _sort(tasks: list[Task], sort: SortKey) -> list[Task]:
    if sort == SortKey.OLDEST:
        return sorted(tasks, key=lambda t: t.created_at)
    if sort == SortKey.DUE_DATE:
        # Undated tasks go last and compare equal to each other (stable sort keeps store order).
        return sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or datetime.min.date()))
    if sort == SortKey.CATEGORY:
        return sorted(tasks, key=lambda t: _text_key(t.category))
    if sort == SortKey.ALPHABETICAL:
        return sorted(tasks, key=lambda t: _text_key(t.text))
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)


def view(
    tasks: Sequence[Task],
    status_filter: StatusFilter | str = StatusFilter.ALL,
    category: str = ALL_CATEGORIES,
    search_query: str = "",
    sort: SortKey | str = SortKey.NEWEST,
) -> list[Task]:
    """
    Derive the visible task list: search, then status filter, then category
    filter, then sort. Never mutates ``tasks``.
    """
    out = list(tasks)

    needle = (search_query or "").strip().casefold()
    if needle:
        out = [t for t in out if _matches_search(t, needle)]

    status = StatusFilter(status_filter) if status_filter in {f.value for f in StatusFilter} else StatusFilter.ALL
    if status == StatusFilter.COMPLETED:
        out = [t for t in out if t.completed]
    elif status == StatusFilter.PENDING:
        out = [t for t in out if not t.completed]

    if category and category != ALL_CATEGORIES:
        out = [t for t in out if t.category == category]

    key = SortKey(sort) if sort in {s.value for s in SortKey} else SortKey.NEWEST
    return _sort(out, key)


def compute_stats(tasks: Sequence[Task], now: datetime) -> TaskStats:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    overdue = sum(1 for t in tasks if t.is_overdue(now))
    soon_limit = now + timedelta(days=1)
    due_soon = sum(
        1
        for t in tasks
        if not t.completed and t.due_date is not None and due_datetime(t.due_date, now) <= soon_limit
    )
    rate = round(completed / total * 100) if total else 0
    return TaskStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        due_soon=due_soon,
        completion_rate=rate,
    )
