# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..storage.gateway import PersistenceGateway
from ..tasks.history import HistoryManager
from ..tasks.query import ALL_CATEGORIES
from ..tasks.task_models import SortKey, StatusFilter, UserSettings, utcnow
from ..tasks.task_store import TaskStore
from .ports import Clock, ConfirmPrompt

if TYPE_CHECKING:
    from .scheduler import Debouncer


@dataclass
class AppState:
    """
    Everything one running app instance owns.

    Commands take the state explicitly; nothing lives in module globals, so
    tests can build as many independent instances as they like.
    """

    # Store Settings on the state for easy access in other modules.
    settings: Any

    store: TaskStore
    history: HistoryManager
    gateway: PersistenceGateway
    user_settings: UserSettings = field(default_factory=UserSettings)

    clock: Clock = utcnow
    # Without a prompt, destructive commands are abandoned unless confirmation is disabled in settings.
    confirm: ConfirmPrompt | None = None
    search_debouncer: Debouncer | None = None

    # ---- current view criteria ----
    status_filter: StatusFilter = StatusFilter.ALL
    category: str = ALL_CATEGORIES
    search_query: str = ""
    sort: SortKey = SortKey.NEWEST

    first_run: bool = False
