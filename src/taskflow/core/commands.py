# src/taskflow/core/commands.py

"""
Commands exposed to the presentation adapter.

Every command takes the AppState explicitly and returns a CommandResult
with the refreshed view, so the adapter can redraw without reaching into
the store. Store-mutating commands follow one protocol:

1. validate (no state touched on failure)
2. confirm, for destructive commands
3. record a history snapshot of the pre-mutation collection
4. mutate the store
5. flush to durable storage (failure is reported, never fatal)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

from ..errors import ImportFormatError, NotFoundError, PersistenceError, ValidationError
from ..storage.transfer import ExportFile, build_export, parse_import
from ..tasks.query import ALL_CATEGORIES, compute_stats, view
from ..tasks.task_models import (
    SortKey,
    StatusFilter,
    Task,
    TaskStats,
    Theme,
    ViewMode,
    normalize_text,
    parse_due_date,
)
from .state import AppState

logger = logging.getLogger(__name__)


class NotificationLevel(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    level: NotificationLevel = NotificationLevel.INFO


@dataclass(frozen=True, slots=True)
class CommandResult:
    ok: bool
    view: list[Task]
    stats: TaskStats
    notifications: tuple[Notification, ...] = ()
    noop: bool = False
    task: Task | None = None
    export: ExportFile | None = None
    extra: dict[str, object] = field(default_factory=dict)


# ---- helpers ----


def current_view(state: AppState) -> list[Task]:
    return view(
        state.store.all(),
        status_filter=state.status_filter,
        category=state.category,
        search_query=state.search_query,
        sort=state.sort,
    )


def _result(
    state: AppState,
    *notifications: Notification | None,
    ok: bool = True,
    noop: bool = False,
    task: Task | None = None,
    export: ExportFile | None = None,
) -> CommandResult:
    return CommandResult(
        ok=ok,
        view=current_view(state),
        stats=compute_stats(state.store.all(), state.clock()),
        notifications=tuple(n for n in notifications if n is not None),
        noop=noop,
        task=task,
        export=export,
    )


def current_result(state: AppState) -> CommandResult:
    """The current view and stats, with no command applied."""
    return _result(state)


def _fail(state: AppState, message: str) -> CommandResult:
    return _result(state, Notification(message, NotificationLevel.ERROR), ok=False)


def _persist_tasks(state: AppState) -> Notification | None:
    try:
        state.gateway.save_tasks(state.store.all())
    except PersistenceError:
        logger.exception("Error saving tasks")
        return Notification("Error saving tasks!", NotificationLevel.ERROR)
    return None


def _persist_settings(state: AppState, *, theme: bool = False) -> Notification | None:
    try:
        state.gateway.save_settings(state.user_settings)
        if theme:
            state.gateway.save_theme(state.user_settings.theme)
    except PersistenceError:
        logger.exception("Error saving settings")
        return Notification("Error saving settings!", NotificationLevel.ERROR)
    return None


def _confirmed(state: AppState, question: str) -> bool:
    if not getattr(state.settings, "confirm_destructive", True):
        return True
    if state.confirm is None:
        return False
    return bool(state.confirm(question))


def _cancelled(state: AppState) -> CommandResult:
    return _result(state, Notification("Cancelled.", NotificationLevel.INFO), noop=True)


# ---- task commands ----


def add_task(
    state: AppState,
    text: str,
    category: str | None = None,
    due_date: date | str | None = None,
) -> CommandResult:
    try:
        normalize_text(text)
        due = parse_due_date(due_date)
    except ValidationError as e:
        return _fail(state, str(e))

    cat = (category or "").strip() or getattr(state.settings, "default_category", None)

    state.history.record_before_mutation("add task", state.store.all())
    task = state.store.add(text, cat, due)
    return _result(
        state,
        Notification("Task added successfully!", NotificationLevel.SUCCESS),
        _persist_tasks(state),
        task=task,
    )


def edit_task(state: AppState, task_id: str, new_text: str) -> CommandResult:
    try:
        task = state.store.get(task_id)
        clean = normalize_text(new_text)
    except (NotFoundError, ValidationError) as e:
        return _fail(state, str(e))

    if clean == task.text:
        return _result(state, noop=True, task=task)

    state.history.record_before_mutation("edit task", state.store.all())
    task = state.store.edit(task_id, clean)
    return _result(
        state,
        Notification("Task updated successfully!", NotificationLevel.SUCCESS),
        _persist_tasks(state),
        task=task,
    )


def toggle_task(state: AppState, task_id: str) -> CommandResult:
    try:
        state.store.get(task_id)
    except NotFoundError as e:
        return _fail(state, str(e))

    state.history.record_before_mutation("toggle task", state.store.all())
    task = state.store.toggle_completed(task_id)
    msg = Notification("Task completed!", NotificationLevel.SUCCESS) if task.completed else Notification(
        "Task reopened", NotificationLevel.INFO
    )
    return _result(state, msg, _persist_tasks(state), task=task)


def remove_task(state: AppState, task_id: str) -> CommandResult:
    try:
        state.store.get(task_id)
    except NotFoundError as e:
        return _fail(state, str(e))

    if not _confirmed(state, "Are you sure you want to delete this task?"):
        return _cancelled(state)

    state.history.record_before_mutation("delete task", state.store.all())
    task = state.store.remove(task_id)
    return _result(
        state,
        Notification("Task deleted successfully!", NotificationLevel.SUCCESS),
        _persist_tasks(state),
        task=task,
    )


def clear_completed(state: AppState) -> CommandResult:
    if not _confirmed(state, "Are you sure you want to clear all completed tasks?"):
        return _cancelled(state)

    state.history.record_before_mutation("clear completed tasks", state.store.all())
    removed = state.store.clear_completed()
    res = _result(
        state,
        Notification("Completed tasks cleared!", NotificationLevel.SUCCESS),
        _persist_tasks(state),
    )
    res.extra["removed"] = removed
    return res


def clear_all(state: AppState) -> CommandResult:
    if not _confirmed(state, "Are you sure you want to clear all tasks? This action cannot be undone."):
        return _cancelled(state)

    state.history.record_before_mutation("clear all tasks", state.store.all())
    removed = state.store.clear_all()
    res = _result(
        state,
        Notification("All tasks cleared!", NotificationLevel.SUCCESS),
        _persist_tasks(state),
    )
    res.extra["removed"] = removed
    return res


def undo(state: AppState) -> CommandResult:
    entry = state.history.undo(state.store.all())
    if entry is None:
        return _result(state, Notification("Nothing to undo", NotificationLevel.INFO), noop=True)
    state.store.replace_all(entry.tasks)
    return _result(
        state,
        Notification(f"Undid {entry.action}", NotificationLevel.SUCCESS),
        _persist_tasks(state),
    )


def redo(state: AppState) -> CommandResult:
    entry = state.history.redo(state.store.all())
    if entry is None:
        return _result(state, Notification("Nothing to redo", NotificationLevel.INFO), noop=True)
    state.store.replace_all(entry.tasks)
    return _result(
        state,
        Notification("Redid action", NotificationLevel.SUCCESS),
        _persist_tasks(state),
    )


# ---- view criteria ----


def set_filter(state: AppState, status_filter: str) -> CommandResult:
    try:
        state.status_filter = StatusFilter.parse(status_filter)
    except ValidationError as e:
        return _fail(state, str(e))
    return _result(state)


def set_category(state: AppState, category: str) -> CommandResult:
    state.category = (category or "").strip() or ALL_CATEGORIES
    return _result(state)


def set_sort(state: AppState, sort: str) -> CommandResult:
    try:
        state.sort = SortKey.parse(sort)
    except ValidationError as e:
        return _fail(state, str(e))
    return _result(state)


def set_search_query(state: AppState, query: str) -> CommandResult:
    state.search_query = (query or "").strip().lower()
    return _result(state)


def schedule_search(
    state: AppState,
    query: str,
    on_result: Callable[[CommandResult], None],
) -> None:
    """
    Search-as-you-type: apply ``query`` after the debounce delay, replacing any
    pending query. Only the most recent keystroke's callback runs.
    Must be called from the running event loop.
    """
    if state.search_debouncer is None:
        on_result(set_search_query(state, query))
        return
    state.search_debouncer.schedule(lambda: on_result(set_search_query(state, query)))


# ---- transfer ----


def export_tasks(state: AppState) -> CommandResult:
    export = build_export(state.store.all(), state.clock())
    if export is None:
        return _result(state, Notification("No tasks to export!", NotificationLevel.INFO), noop=True)
    return _result(
        state,
        Notification("Tasks exported as text file!", NotificationLevel.SUCCESS),
        export=export,
    )


def import_tasks(state: AppState, payload: str | bytes) -> CommandResult:
    try:
        batch = parse_import(payload, state.clock())
    except ImportFormatError as e:
        logger.info("Import rejected: %s", e)
        return _fail(state, "Invalid file format!")

    if not batch.tasks:
        return _result(state, Notification("No valid tasks found in file.", NotificationLevel.INFO), noop=True)

    state.history.record_before_mutation("import tasks", state.store.all())
    added = state.store.extend(batch.tasks)
    skipped = (
        Notification(f"Skipped {batch.skipped} invalid record(s).", NotificationLevel.INFO)
        if batch.skipped
        else None
    )
    res = _result(
        state,
        Notification(f"Imported {len(added)} task(s) successfully!", NotificationLevel.SUCCESS),
        skipped,
        _persist_tasks(state),
    )
    res.extra["imported"] = len(added)
    return res


# ---- user settings ----


def toggle_theme(state: AppState) -> CommandResult:
    prefs = state.user_settings
    prefs.theme = Theme.DARK if prefs.theme == Theme.LIGHT else Theme.LIGHT
    return _result(
        state,
        Notification(f"Theme: {prefs.theme.value}", NotificationLevel.INFO),
        _persist_settings(state, theme=True),
    )


def set_view_mode(state: AppState, mode: str) -> CommandResult:
    try:
        state.user_settings.view_mode = ViewMode((mode or "").strip().lower())
    except ValueError:
        return _fail(state, f"Unknown view mode: {mode}")
    return _result(state, _persist_settings(state))


TOGGLEABLE_SETTINGS = ("auto_save", "notifications", "sound_effects")


def toggle_setting(state: AppState, name: str) -> CommandResult:
    key = (name or "").strip().lower().replace("-", "_")
    if key not in TOGGLEABLE_SETTINGS:
        return _fail(state, f"Unknown setting: {name}")
    value = not getattr(state.user_settings, key)
    setattr(state.user_settings, key, value)
    return _result(
        state,
        Notification(f"{key} is now {'ON' if value else 'OFF'}", NotificationLevel.INFO),
        _persist_settings(state),
    )
