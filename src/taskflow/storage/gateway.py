# src/taskflow/storage/gateway.py

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from ..core.ports import Clock, KeyValueStore
from ..errors import PersistenceError, ValidationError
from ..tasks.task_models import (
    Task,
    Theme,
    UserSettings,
    task_from_record,
    task_to_record,
    utcnow,
)

logger = logging.getLogger(__name__)

TASKS_KEY = "tasks"
SETTINGS_KEY = "settings"
THEME_KEY = "theme"
VISITED_KEY = "hasVisited"


class PersistenceGateway:
    """
    Maps the in-memory model onto the key-value store.

    Reads never fail: missing or malformed data degrades to an empty task list
    or default settings (logged). Writes raise PersistenceError; the caller
    decides how to surface it, the in-memory state stays authoritative.
    """

    def __init__(self, kv: KeyValueStore, *, clock: Clock = utcnow) -> None:
        self._kv = kv
        self._clock = clock

    # ---- low-level helpers ----

    def _read_json(self, key: str) -> Any:
        try:
            raw = self._kv.get(key)
        except PersistenceError:
            logger.exception("Failed to read %s from storage; using defaults.", key)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Stored %s is not valid JSON; ignoring it.", key)
            return None

    def _write_json(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot encode {key}: {e}") from e
        self._kv.set(key, payload)

    # ---- tasks ----

    def load_tasks(self) -> list[Task]:
        data = self._read_json(TASKS_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Stored tasks are not a list (%s); starting empty.", type(data).__name__)
            return []

        now = self._clock()
        tasks: list[Task] = []
        skipped = 0
        for raw in data:
            try:
                tasks.append(task_from_record(raw, now=now))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.warning("Skipped %d malformed stored task record(s).", skipped)
        logger.info("Loaded %d task(s) from storage.", len(tasks))
        return tasks

    def save_tasks(self, tasks: Sequence[Task]) -> None:
        self._write_json(TASKS_KEY, [task_to_record(t) for t in tasks])
        logger.debug("Tasks saved: %d task(s)", len(tasks))

    # ---- settings ----

    def load_settings(self) -> UserSettings:
        return UserSettings.from_record(self._read_json(SETTINGS_KEY))

    def save_settings(self, settings: UserSettings) -> None:
        self._write_json(SETTINGS_KEY, settings.to_record())

    # ---- theme / first run ----

    def load_theme(self) -> Theme | None:
        """Theme saved on its own key, or None when it was never stored."""
        try:
            raw = self._kv.get(THEME_KEY)
        except PersistenceError:
            logger.exception("Failed to read theme from storage.")
            return None
        return Theme.from_db(raw) if raw is not None else None

    def save_theme(self, theme: Theme) -> None:
        self._kv.set(THEME_KEY, theme.value)

    def has_visited(self) -> bool:
        try:
            return self._kv.get(VISITED_KEY) is not None
        except PersistenceError:
            logger.exception("Failed to read first-run flag.")
            return True

    def mark_visited(self) -> None:
        self._kv.set(VISITED_KEY, "true")
