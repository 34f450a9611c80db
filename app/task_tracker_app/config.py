from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from task_tracker_app.env import (
    DATABASE_URL,
    TASKTRACKER_DB_PATH,
    TASKTRACKER_ENV,
    TASKTRACKER_STATIC_DIR,
    get_env,
)

DEFAULT_DB_PATH = "data/task_tracker.db"
_SQLITE_URL_PREFIXES = ("sqlite:///", "sqlite://", "file:")

# Relative paths in the environment are anchored here rather than at the cwd.
PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _anchor(raw_path: str) -> str:
    path = Path(raw_path)
    return str(path if path.is_absolute() else (PROJECT_ROOT / path).resolve())


def _path_from_database_url(url: str) -> str:
    for prefix in _SQLITE_URL_PREFIXES:
        if url.startswith(prefix):
            return url[len(prefix):]
    raise RuntimeError(
        "DATABASE_URL must be a sqlite URL (sqlite:///path/to/db). "
        "Set TASKTRACKER_DB_PATH instead to point at a database file."
    )


def _db_path_setting() -> str:
    direct = get_env(TASKTRACKER_DB_PATH)
    if direct:
        return direct
    url = get_env(DATABASE_URL)
    return _path_from_database_url(url) if url else DEFAULT_DB_PATH


@dataclass(frozen=True)
class AppConfig:
    db_path: str
    env: str = "dev"
    static_dir: str = ""

    @classmethod
    def from_env(cls) -> AppConfig:
        static_dir = get_env(TASKTRACKER_STATIC_DIR)
        return cls(
            db_path=_anchor(_db_path_setting()),
            env=get_env(TASKTRACKER_ENV).lower() or "dev",
            static_dir=_anchor(static_dir) if static_dir else "",
        )
