# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any

from ..errors import ValidationError

DEFAULT_CATEGORY = "Personal"
KNOWN_CATEGORIES: tuple[str, ...] = ("Personal", "Work", "Urgent", "Shopping", "Health")

MIN_PRIORITY = 1
MAX_PRIORITY = 5


class StatusFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"

    @classmethod
    def parse(cls, raw: str | None) -> StatusFilter:
        try:
            return cls((raw or "all").strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown filter: {raw}") from None


class SortKey(StrEnum):
    NEWEST = "newest"
    OLDEST = "oldest"
    DUE_DATE = "due-date"
    CATEGORY = "category"
    ALPHABETICAL = "alphabetical"

    @classmethod
    def parse(cls, raw: str | None) -> SortKey:
        try:
            return cls((raw or "newest").strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown sort order: {raw}") from None


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def from_db(cls, raw: Any) -> Theme:
        if not isinstance(raw, str):
            return cls.LIGHT
        try:
            return cls(raw)
        except ValueError:
            return cls.LIGHT


class ViewMode(StrEnum):
    LIST = "list"
    GRID = "grid"


@dataclass(slots=True)
class Task:
    id: str
    text: str
    created_at: datetime
    priority: int

    completed: bool = False
    category: str = DEFAULT_CATEGORY
    due_date: date | None = None
    completed_at: datetime | None = None

    def is_overdue(self, now: datetime) -> bool:
        """Pending and due before ``now`` (due dates count from midnight)."""
        if self.completed or self.due_date is None:
            return False
        return due_datetime(self.due_date, now) < now


@dataclass(slots=True)
class UserSettings:
    theme: Theme = Theme.LIGHT
    auto_save: bool = True
    notifications: bool = True
    sound_effects: bool = False
    view_mode: ViewMode = ViewMode.LIST

    def to_record(self) -> dict[str, Any]:
        return {
            "theme": self.theme.value,
            "autoSave": self.auto_save,
            "notifications": self.notifications,
            "soundEffects": self.sound_effects,
            "viewMode": self.view_mode.value,
        }

    @classmethod
    def from_record(cls, raw: Any) -> UserSettings:
        """Build settings from stored data, falling back to defaults field by field."""
        out = cls()
        if not isinstance(raw, dict):
            return out

        out.theme = Theme.from_db(raw.get("theme"))
        for key, attr in (
            ("autoSave", "auto_save"),
            ("notifications", "notifications"),
            ("soundEffects", "sound_effects"),
        ):
            val = raw.get(key)
            if isinstance(val, bool):
                setattr(out, attr, val)

        view_mode = raw.get("viewMode")
        if isinstance(view_mode, str) and view_mode in {m.value for m in ViewMode}:
            out.view_mode = ViewMode(view_mode)
        return out


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    overdue: int
    due_soon: int
    completion_rate: int = field(default=0)


# ---- helpers ----


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def due_datetime(due: date, reference: datetime) -> datetime:
    """Midnight of ``due`` in the timezone of ``reference``."""
    return datetime(due.year, due.month, due.day, tzinfo=reference.tzinfo)


def normalize_text(raw: Any) -> str:
    text = raw.strip() if isinstance(raw, str) else ""
    if not text:
        raise ValidationError("Please enter a task!")
    return text


def parse_due_date(raw: Any) -> date | None:
    """Accept a date, an ISO date string or an ISO datetime string; blank means no due date."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        raise ValidationError(f"Invalid due date: {raw!r}")
    s = raw.strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        raise ValidationError(f"Invalid due date: {raw!r}") from None


def parse_timestamp(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        dt = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(dt: datetime | None) -> str | None:
    if dt is None:
        return None
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def task_to_record(task: Task) -> dict[str, Any]:
    """Storage/export shape (camelCase keys, ISO-8601 timestamps)."""
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "category": task.category,
        "dueDate": task.due_date.isoformat() if task.due_date else None,
        "createdAt": format_timestamp(task.created_at),
        "completedAt": format_timestamp(task.completed_at),
        "priority": task.priority,
    }


def task_from_record(raw: Any, *, now: datetime) -> Task:
    """
    Rebuild a Task from a stored or imported record.

    Raises ValidationError when the record cannot be turned into a valid task
    (not a dict, blank text). Other fields fall back to defaults; the
    completed/completed_at pair is repaired so they agree.
    """
    if not isinstance(raw, dict):
        raise ValidationError("Task record must be an object")

    text = normalize_text(raw.get("text"))

    raw_id = raw.get("id")
    task_id = str(raw_id).strip() if isinstance(raw_id, (str, int)) and not isinstance(raw_id, bool) else ""

    category = raw.get("category")
    if not isinstance(category, str) or not category.strip():
        category = DEFAULT_CATEGORY

    try:
        due = parse_due_date(raw.get("dueDate"))
    except ValidationError:
        due = None

    created_at = parse_timestamp(raw.get("createdAt")) or now
    completed = raw.get("completed") is True
    completed_at = parse_timestamp(raw.get("completedAt")) if completed else None
    if completed and completed_at is None:
        completed_at = created_at

    priority = raw.get("priority")
    if not isinstance(priority, int) or isinstance(priority, bool):
        priority = MIN_PRIORITY
    priority = max(MIN_PRIORITY, min(MAX_PRIORITY, priority))

    return Task(
        id=task_id,
        text=text,
        created_at=created_at,
        priority=priority,
        completed=completed,
        category=category.strip(),
        due_date=due,
        completed_at=completed_at,
    )
