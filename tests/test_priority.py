# tests/test_priority.py

from __future__ import annotations

from datetime import date

import pytest

from taskflow.tasks.priority import calculate_priority, days_until

from .conftest import NOW


@pytest.mark.parametrize(
    ("category", "due", "expected"),
    [
        ("Personal", None, 1),
        ("Work", None, 3),
        ("Urgent", None, 4),
        ("Personal", date(2026, 10, 16), 5),  # overdue
        ("Personal", date(2026, 10, 17), 4),  # due today
        ("Personal", date(2026, 10, 18), 4),  # due tomorrow
        ("Personal", date(2026, 10, 20), 3),  # within 3 days
        ("Personal", date(2026, 10, 21), 1),  # far enough away
        ("Work", date(2026, 10, 19), 5),
        ("Urgent", date(2026, 10, 16), 5),  # 1 + 3 + 4, clamped
    ],
)
def test_priority_table(category: str, due: date | None, expected: int) -> None:
    assert calculate_priority(category, due, NOW) == expected


def test_days_until_uses_ceiling() -> None:
    assert days_until(date(2026, 10, 16), NOW) == -1
    assert days_until(date(2026, 10, 17), NOW) == 0
    assert days_until(date(2026, 10, 18), NOW) == 1
