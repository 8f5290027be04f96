# src/taskflow/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations, so the
storage backend and the presentation adapter stay swappable and tests can
plug in in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Protocol


class KeyValueStore(Protocol):
    """Durable string key-value storage. Failures raise PersistenceError."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


Clock = Callable[[], datetime]

# Asked before destructive commands; receives the question, returns True to proceed.
ConfirmPrompt = Callable[[str], bool]
