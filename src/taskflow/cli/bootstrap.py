# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage, store, history),
- restores persisted tasks, user settings and theme.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import ConfirmPrompt, KeyValueStore
from ..core.scheduler import Debouncer, save_all
from ..core.state import AppState
from ..errors import PersistenceError
from ..storage.gateway import PersistenceGateway
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.history import HistoryManager
from ..tasks.task_models import utcnow
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.export_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    kv: KeyValueStore | None = None,
    confirm: ConfirmPrompt | None = None,
    clock=utcnow,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and storage injectable makes the app easy to test and
    avoids hidden global config reads. If settings is None, falls back to
    get_settings(); if kv is None, opens the SQLite store at settings.db_path.
    """
    if settings is None:
        settings = get_settings()

    if kv is None:
        _ensure_local_dirs(settings)
        kv = SqliteKeyValueStore(settings.db_path)

    gateway = PersistenceGateway(kv, clock=clock)

    user_settings = gateway.load_settings()
    # The standalone theme key wins over the settings record.
    theme = gateway.load_theme()
    if theme is not None:
        user_settings.theme = theme

    state = AppState(
        settings=settings,
        store=TaskStore(gateway.load_tasks(), clock=clock),
        history=HistoryManager(limit=getattr(settings, "history_limit", 50)),
        gateway=gateway,
        user_settings=user_settings,
        clock=clock,
        confirm=confirm,
        search_debouncer=Debouncer(getattr(settings, "search_debounce", 0.3)),
    )

    if len(state.store) == 0 and not gateway.has_visited():
        state.first_run = True
        try:
            gateway.mark_visited()
        except PersistenceError:
            logger.exception("Failed to store first-run flag.")

    logger.info(
        "State ready tasks=%d theme=%s auto_save=%s first_run=%s",
        len(state.store),
        user_settings.theme.value,
        user_settings.auto_save,
        state.first_run,
    )
    return state


def shutdown_state(state: AppState) -> None:
    """Best-effort final flush (no exceptions should escape)."""
    try:
        save_all(state)
        logger.info("Saved %d task(s) on shutdown.", len(state.store))
    except PersistenceError:
        logger.exception("Failed to save on shutdown.")
