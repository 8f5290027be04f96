# src/taskflow/tasks/priority.py

from __future__ import annotations

import math
from datetime import date, datetime

from .task_models import MAX_PRIORITY, MIN_PRIORITY, due_datetime

_CATEGORY_BONUS = {
    "Urgent": 3,
    "Work": 2,
}

_SECONDS_PER_DAY = 24 * 60 * 60


def days_until(due: date, reference_now: datetime) -> int:
    """Whole-day ceiling difference between midnight of ``due`` and ``reference_now``."""
    delta = due_datetime(due, reference_now) - reference_now
    return math.ceil(delta.total_seconds() / _SECONDS_PER_DAY)


def calculate_priority(category: str, due_date: date | None, reference_now: datetime) -> int:
    """
    Urgency score in [1, 5].

    Base 1, +3 for Urgent, +2 for Work. A due date adds +4 when overdue,
    +3 when due within a day and +2 within three days. The sum is clamped.
    """
    priority = MIN_PRIORITY + _CATEGORY_BONUS.get(category, 0)

    if due_date is not None:
        diff = days_until(due_date, reference_now)
        if diff < 0:
            priority += 4
        elif diff <= 1:
            priority += 3
        elif diff <= 3:
            priority += 2

    return min(priority, MAX_PRIORITY)
