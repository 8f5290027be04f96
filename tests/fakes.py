# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta

from taskflow.errors import PersistenceError


class MemoryKV:
    """
    In-memory KeyValueStore.

    - Captures writes for assertions
    - Stores raw strings, exactly like the SQLite backend
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.writes: list[str] = []

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.writes.append(key)
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class FailingKV(MemoryKV):
    """Reads work, every write fails (think: storage quota exceeded)."""

    def set(self, key: str, value: str) -> None:
        raise PersistenceError(f"quota exceeded while writing {key}")


class FixedClock:
    """Deterministic clock; call advance() to move time forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now
