# src/taskflow/tasks/task_store.py

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime

from ..errors import NotFoundError
from .priority import calculate_priority
from .task_models import DEFAULT_CATEGORY, Task, normalize_text, utcnow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TaskStore:
    """
    In-memory, ordered task collection (newest first).

    This is the source of truth while the app runs; durability is handled by
    the persistence gateway. The store has no notion of history: callers
    snapshot it before mutating when they want undo.

    Ids are millisecond timestamps rendered as strings, bumped so that each new
    id is strictly greater than every id issued before and never collides with
    a task already present (including loaded or imported ones).
    """

    def __init__(self, tasks: Iterable[Task] | None = None, *, clock: Clock = utcnow) -> None:
        self._clock = clock
        self._tasks: list[Task] = []
        self._last_id = 0
        if tasks:
            self.replace_all(tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- ids ----

    def _note_id(self, task_id: str) -> None:
        if task_id.isdigit():
            self._last_id = max(self._last_id, int(task_id))

    def _allocate_id(self) -> str:
        now_ms = int(self._clock().timestamp() * 1000)
        candidate = max(now_ms, self._last_id + 1)
        taken = {t.id for t in self._tasks}
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise NotFoundError(task_id)

    # ---- queries ----

    def all(self) -> list[Task]:
        """Shallow list copy in insertion order; callers must not mutate the tasks."""
        return list(self._tasks)

    def get(self, task_id: str) -> Task:
        return self._tasks[self._index_of(task_id)]

    def snapshot(self) -> list[Task]:
        return copy.deepcopy(self._tasks)

    # ---- mutations ----

    def add(self, text: str, category: str | None = None, due_date: date | None = None) -> Task:
        clean = normalize_text(text)
        cat = (category or "").strip() or DEFAULT_CATEGORY
        now = self._clock()

        task = Task(
            id=self._allocate_id(),
            text=clean,
            created_at=now,
            priority=calculate_priority(cat, due_date, now),
            category=cat,
            due_date=due_date,
        )
        self._tasks.insert(0, task)
        logger.debug("Task added id=%s category=%s due=%s priority=%s", task.id, cat, due_date, task.priority)
        return task

    def edit(self, task_id: str, new_text: str) -> Task:
        task = self.get(task_id)
        clean = normalize_text(new_text)
        if clean != task.text:
            task.text = clean
            logger.debug("Task edited id=%s", task_id)
        return task

    def toggle_completed(self, task_id: str) -> Task:
        task = self.get(task_id)
        task.completed = not task.completed
        task.completed_at = self._clock() if task.completed else None
        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
        return task

    def remove(self, task_id: str) -> Task:
        task = self._tasks.pop(self._index_of(task_id))
        logger.debug("Task removed id=%s", task_id)
        return task

    def clear_completed(self) -> int:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if not t.completed]
        removed = before - len(self._tasks)
        logger.debug("Cleared completed tasks removed=%s", removed)
        return removed

    def clear_all(self) -> int:
        removed = len(self._tasks)
        self._tasks = []
        logger.debug("Cleared all tasks removed=%s", removed)
        return removed

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in a whole collection (undo/redo, initial load). Blank or duplicate ids are reassigned."""
        self._tasks = []
        self._append(tasks)

    def extend(self, tasks: Iterable[Task]) -> list[Task]:
        """Append tasks after the existing ones, reassigning blank or colliding ids."""
        return self._append(tasks)

    def _append(self, tasks: Iterable[Task]) -> list[Task]:
        added: list[Task] = []
        taken = {t.id for t in self._tasks}
        for task in tasks:
            if not task.id or task.id in taken:
                task.id = self._allocate_id()
            self._note_id(task.id)
            taken.add(task.id)
            self._tasks.append(task)
            added.append(task)
        return added
