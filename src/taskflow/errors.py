# src/taskflow/errors.py

from __future__ import annotations


class TaskFlowError(Exception):
    """Base class for every error raised by the task-state engine."""


class ValidationError(TaskFlowError):
    """Rejected input (blank task text, unknown filter value, bad date, ...)."""


class NotFoundError(TaskFlowError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class PersistenceError(TaskFlowError):
    """Durable storage could not be read or written."""


class ImportFormatError(TaskFlowError):
    """Import payload is not a JSON list of task records."""
