from __future__ import annotations

import os

TASKTRACKER_ENV = "TASKTRACKER_ENV"
TASKTRACKER_DB_PATH = "TASKTRACKER_DB_PATH"
TASKTRACKER_STATIC_DIR = "TASKTRACKER_STATIC_DIR"
TASKTRACKER_PORT = "TASKTRACKER_PORT"

TASKTRACKER_DB_POOL_MAX_SIZE = "TASKTRACKER_DB_POOL_MAX_SIZE"
TASKTRACKER_DB_POOL_ACQUIRE_TIMEOUT_SEC = "TASKTRACKER_DB_POOL_ACQUIRE_TIMEOUT_SEC"

TASKTRACKER_LOG_LEVEL = "TASKTRACKER_LOG_LEVEL"
TASKTRACKER_LOG_JSON = "TASKTRACKER_LOG_JSON"
TASKTRACKER_LOG_CAPTURE_ROOT = "TASKTRACKER_LOG_CAPTURE_ROOT"

TASKTRACKER_ERROR_INCLUDE_DETAILS = "TASKTRACKER_ERROR_INCLUDE_DETAILS"
TASKTRACKER_REQUEST_ID_HEADER_ENABLED = "TASKTRACKER_REQUEST_ID_HEADER_ENABLED"
TASKTRACKER_SECURITY_HEADERS_ENABLED = "TASKTRACKER_SECURITY_HEADERS_ENABLED"

# Names shared with the hosting platform rather than owned by this app.
DATABASE_URL = "DATABASE_URL"
PORT = "PORT"

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


def get_env(name: str, default: str = "") -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return str(value).strip()


def get_env_bool(name: str, *, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return str(value).strip().lower() in _TRUE_VALUES


def get_env_int(
    name: str,
    *,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    raw = get_env(name, "")
    try:
        value = int(raw) if raw else int(default)
    except ValueError:
        value = int(default)
    if min_value is not None:
        value = max(int(min_value), value)
    if max_value is not None:
        value = min(int(max_value), value)
    return value


def get_env_float(
    name: str,
    *,
    default: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    raw = get_env(name, "")
    try:
        value = float(raw) if raw else float(default)
    except ValueError:
        value = float(default)
    if min_value is not None:
        value = max(float(min_value), value)
    if max_value is not None:
        value = min(float(max_value), value)
    return value
