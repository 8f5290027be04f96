# src/taskflow/core/scheduler.py

"""
Timed work on the event loop.

- run_autosave: a small polling loop that flushes tasks and settings while
  auto-save is enabled.
- Debouncer: one cancellable pending callback; scheduling again replaces it,
  so only the latest call in a quiet window runs.

Everything here runs on the asyncio loop thread, the same thread that
executes commands, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from ..errors import PersistenceError
from .state import AppState

logger = logging.getLogger(__name__)


def save_all(state: AppState) -> None:
    """Flush tasks and settings. Raises PersistenceError."""
    state.gateway.save_tasks(state.store.all())
    state.gateway.save_settings(state.user_settings)


async def run_autosave(state: AppState, *, interval_seconds: float = 30.0) -> None:
    """
    Every interval_seconds, when state.user_settings.auto_save is on:
    - save the full task list (overwrite, last write wins)
    - save user settings

    Failures are logged and retried on the next tick.
    To stop it, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        await asyncio.sleep(sleep_s)

        if not state.user_settings.auto_save:
            continue

        try:
            save_all(state)
            logger.debug("Auto-save done tasks=%d", len(state.store))
        except PersistenceError:
            logger.exception("Auto-save failed")


class Debouncer:
    """Run only the most recent of a burst of calls, ``delay`` seconds after the last one."""

    def __init__(self, delay: float) -> None:
        self._delay = max(0.0, float(delay))
        self._handle: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        """Must be called from a running event loop."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire, callback, args)
        return self._handle

    def cancel(self) -> bool:
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def _fire(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._handle = None
        try:
            callback(*args)
        except Exception:
            logger.exception("Debounced callback failed")
