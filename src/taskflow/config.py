# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
- Tests build their own settings object instead of reading the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKFLOW"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    export_dir: Path

    # ---- Behaviour ----
    autosave_interval: float
    search_debounce: float
    history_limit: int
    default_category: str
    confirm_destructive: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TaskFlow").strip() or "TaskFlow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "taskflow.sqlite3")
        export_dir = _env_path(_k("EXPORT_DIR"), data_dir / "exports")

        autosave_interval = max(1.0, _env_float(_k("AUTOSAVE_INTERVAL"), 30.0))
        search_debounce = max(0.0, _env_float(_k("SEARCH_DEBOUNCE"), 0.3))
        history_limit = max(1, _env_int(_k("HISTORY_LIMIT"), 50))
        default_category = _env(_k("DEFAULT_CATEGORY"), "Personal").strip() or "Personal"
        confirm_destructive = _env_bool(_k("CONFIRM_DESTRUCTIVE"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            export_dir=export_dir,
            autosave_interval=autosave_interval,
            search_debounce=search_debounce,
            history_limit=history_limit,
            default_category=default_category,
            confirm_destructive=confirm_destructive,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # .env never overrides variables already set in the real environment.
    load_dotenv(override=False)
    return Settings.from_env()
