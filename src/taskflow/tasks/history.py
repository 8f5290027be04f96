# src/taskflow/tasks/history.py

from __future__ import annotations

import copy
import logging
import time
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    action: str
    tasks: list[Task]
    timestamp: float


class HistoryManager:
    """
    Snapshot-based undo/redo.

    Each entry holds a deep copy of the whole task collection, because the
    store mutates task objects in place after the snapshot is taken.

    - undo stack is capped (oldest evicted first)
    - redo stack is uncapped and cleared by every new mutation
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._limit = max(1, int(limit))
        self._undo: deque[HistoryEntry] = deque()
        self._redo: list[HistoryEntry] = []

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo_depth(self) -> int:
        return len(self._undo)

    def redo_depth(self) -> int:
        return len(self._redo)

    def _entry(self, action: str, tasks: Sequence[Task]) -> HistoryEntry:
        return HistoryEntry(action=action, tasks=copy.deepcopy(list(tasks)), timestamp=time.time())

    def _push_undo(self, entry: HistoryEntry) -> None:
        self._undo.append(entry)
        while len(self._undo) > self._limit:
            evicted = self._undo.popleft()
            logger.debug("History full; evicted oldest entry action=%s", evicted.action)

    def record_before_mutation(self, action: str, current_tasks: Sequence[Task]) -> None:
        self._push_undo(self._entry(action, current_tasks))
        self._redo.clear()

    def undo(self, current_tasks: Sequence[Task]) -> HistoryEntry | None:
        """Pop the latest snapshot; None means there is nothing to undo."""
        if not self._undo:
            return None
        entry = self._undo.pop()
        self._redo.append(self._entry("restore", current_tasks))
        logger.debug("Undo action=%s", entry.action)
        return entry

    def redo(self, current_tasks: Sequence[Task]) -> HistoryEntry | None:
        """Pop the latest undone snapshot; None means there is nothing to redo."""
        if not self._redo:
            return None
        entry = self._redo.pop()
        self._push_undo(self._entry("undo", current_tasks))
        logger.debug("Redo")
        return entry

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
