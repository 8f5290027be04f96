# src/taskflow/connectors/rendering.py

"""Plain-text rendering of views for the console connector."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from ..core.commands import Notification, NotificationLevel
from ..core.state import AppState
from ..tasks.query import ALL_CATEGORIES
from ..tasks.task_models import StatusFilter, Task, TaskStats, ViewMode

_LEVEL_TAG = {
    NotificationLevel.SUCCESS: "OK",
    NotificationLevel.INFO: "INFO",
    NotificationLevel.ERROR: "ERROR",
}


def format_relative(created: datetime, now: datetime) -> str:
    seconds = (now - created).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return created.astimezone().strftime("%Y-%m-%d")


def empty_state_message(state: AppState) -> tuple[str, str]:
    """(title, subtitle) shown when the current view is empty."""
    if state.search_query:
        return "No tasks found", f'No tasks match "{state.search_query}". Try adjusting your search.'
    if len(state.store) == 0:
        return "Ready to be productive?", "Create your first task and start organizing your workflow."
    if state.status_filter == StatusFilter.COMPLETED:
        return "No completed tasks yet", "Complete some tasks to see them here!"
    if state.status_filter == StatusFilter.PENDING:
        return "All caught up!", "You have no pending tasks. Great job!"
    if state.category != ALL_CATEGORIES:
        return (
            f"No {state.category.lower()} tasks",
            f"Create a task in the {state.category} category to see it here.",
        )
    return "No tasks match your filters", "Try changing your filter settings."


def _task_line(task: Task, now: datetime) -> str:
    mark = "x" if task.completed else ("!" if task.is_overdue(now) else " ")
    due = f" due {task.due_date.isoformat()}" if task.due_date else ""
    return (
        f"[{mark}] {task.id}  P{task.priority} {task.text}"
        f"  ({task.category}{due}, {format_relative(task.created_at, now)})"
    )


def render_view(state: AppState, tasks: Sequence[Task]) -> str:
    now = state.clock()
    if not tasks:
        title, subtitle = empty_state_message(state)
        return f"{title}\n  {subtitle}"

    if state.user_settings.view_mode == ViewMode.GRID:
        cells = [f"{'[x]' if t.completed else '[ ]'} {t.text[:24]:<24}" for t in tasks]
        return "\n".join("  ".join(cells[i : i + 3]) for i in range(0, len(cells), 3))
    return "\n".join(_task_line(t, now) for t in tasks)


def render_stats(stats: TaskStats) -> str:
    return (
        f"Total: {stats.total}  Completed: {stats.completed}  Pending: {stats.pending}  "
        f"Overdue: {stats.overdue}  Due soon: {stats.due_soon}  Done: {stats.completion_rate}%"
    )


def render_notification(n: Notification) -> str:
    return f"[{_LEVEL_TAG[n.level]}] {n.message}"
