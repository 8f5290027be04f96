# src/taskflow/storage/transfer.py

"""
Export to a human-readable text report and import from JSON.

Export groups tasks by category (first-appearance order) and ends with
summary statistics. Import accepts a JSON list of task-like records, the
same shape the gateway stores.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..errors import ImportFormatError, ValidationError
from ..tasks.priority import calculate_priority
from ..tasks.query import compute_stats
from ..tasks.task_models import Task, task_from_record

logger = logging.getLogger(__name__)

APP_TITLE = "TaskFlow"
_RULE = "=" * 50
_SUBRULE = "-" * 30


@dataclass(frozen=True, slots=True)
class ExportFile:
    filename: str
    content: str


@dataclass(frozen=True, slots=True)
class ImportBatch:
    tasks: list[Task]
    skipped: int


def export_filename(now: datetime) -> str:
    return f"{APP_TITLE}-Tasks-{now.date().isoformat()}.txt"


def _fmt_date(d: datetime | None) -> str:
    return d.astimezone().strftime("%Y-%m-%d") if d else ""


def render_report(tasks: Sequence[Task], now: datetime) -> str:
    stats = compute_stats(tasks, now)
    lines = [
        f"{APP_TITLE} - My Tasks",
        f"Exported on: {now.astimezone().strftime('%Y-%m-%d')}",
        f"Total Tasks: {stats.total}",
        f"Completed: {stats.completed}",
        f"Pending: {stats.pending}",
        "",
        _RULE,
        "",
    ]

    categories = list(dict.fromkeys(t.category for t in tasks))
    for category in categories:
        group = [t for t in tasks if t.category == category]
        lines.append(f"[{category.upper()}] ({len(group)} tasks)")
        lines.append(_SUBRULE)
        for index, task in enumerate(group, start=1):
            if task.completed:
                status = "[x]"
            elif task.is_overdue(now):
                status = "[!]"
            else:
                status = "[ ]"
            due = f" | Due: {task.due_date.isoformat()}" if task.due_date else ""
            done = f" | Completed: {_fmt_date(task.completed_at)}" if task.completed and task.completed_at else ""
            lines.append(f"{index}. {status} {task.text}{due}{done}")
        lines.append("")

    lines += [
        "",
        _RULE,
        "SUMMARY STATISTICS",
        _RULE,
        f"Total Tasks: {stats.total}",
        f"Completed Tasks: {stats.completed}",
        f"Pending Tasks: {stats.pending}",
        f"Overdue Tasks: {stats.overdue}",
    ]
    if stats.total:
        lines.append(f"Completion Rate: {stats.completion_rate}%")
    lines += ["", f"--- Generated by {APP_TITLE} ---"]
    return "\n".join(lines)


def build_export(tasks: Sequence[Task], now: datetime) -> ExportFile | None:
    """None when there is nothing to export."""
    if not tasks:
        return None
    return ExportFile(filename=export_filename(now), content=render_report(tasks, now))


def parse_import(payload: str | bytes, now: datetime) -> ImportBatch:
    """
    Validate an import payload.

    Raises ImportFormatError unless the payload is a JSON list. Records that do
    not describe a usable task are skipped and counted. Records without a
    priority get one computed from their category and due date.
    """
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise ImportFormatError(f"Import file is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ImportFormatError("Invalid file format! Expected a list of tasks.")

    tasks: list[Task] = []
    skipped = 0
    for raw in data:
        try:
            task = task_from_record(raw, now=now)
        except ValidationError:
            skipped += 1
            continue
        if "priority" not in raw:
            task.priority = calculate_priority(task.category, task.due_date, task.created_at)
        tasks.append(task)

    if skipped:
        logger.warning("Import skipped %d invalid record(s).", skipped)
    return ImportBatch(tasks=tasks, skipped=skipped)


def write_export(export: ExportFile, directory: Path) -> Path:
    """Write the report into ``directory`` and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export.filename
    path.write_text(export.content, "utf-8")
    logger.info("Export written to %s", path)
    return path
