# src/taskboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is required: every variable has a local default.
- Data lives under a gitignored directory (.local/taskboard by default).

Variables (prefix TASKBOARD_):
- APP_NAME       display name (default: taskboard)
- LOG_LEVEL      console log level (default: INFO)
- DATA_DIR       data + log directory (default: .local/taskboard)
- STORE_DIR      JSON blob store directory (default: <data_dir>/store)
- PERSIST        false => memory-only, nothing is written (default: true)
- DEFAULT_SORT   dueDate | weight | createdAt | status (default: createdAt)
- DEFAULT_GROUP  none | today | week | overdue (default: none)
- WEEK_DAYS      width of the "week" window in days (default: 7)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .todos.todo_models import GroupBy, SortBy

logger = logging.getLogger(__name__)

ENV_PREFIX = "TASKBOARD"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
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


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_sort(name: str, default: SortBy) -> SortBy:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return SortBy.parse(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r (unknown sort); using %s.", name, raw, default.value)
        return default


def _env_group(name: str, default: GroupBy) -> GroupBy:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return GroupBy.parse(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s=%r (unknown group); using %s.", name, raw, default.value)
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    store_dir: Path
    persist: bool

    # ---- View defaults ----
    default_sort: SortBy
    default_group: GroupBy
    week_days: int

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskboard").strip() or "taskboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskboard"))
        store_dir = _env_path(_k("STORE_DIR"), data_dir / "store")
        persist = _env_bool(_k("PERSIST"), True)

        default_sort = _env_sort(_k("DEFAULT_SORT"), SortBy.CREATED_AT)
        default_group = _env_group(_k("DEFAULT_GROUP"), GroupBy.NONE)
        # a zero/negative window would make "week" an empty view
        week_days = max(1, _env_int(_k("WEEK_DAYS"), 7))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            store_dir=store_dir,
            persist=persist,
            default_sort=default_sort,
            default_group=default_group,
            week_days=week_days,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
