from __future__ import annotations

import json
import logging
import sys
from typing import Any

from task_tracker_app.env import (
    TASKTRACKER_LOG_CAPTURE_ROOT,
    TASKTRACKER_LOG_JSON,
    TASKTRACKER_LOG_LEVEL,
    get_env,
    get_env_bool,
)

APP_LOGGER_NAME = "task_tracker_app"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Structured fields the app attaches through ``extra=``; anything else on the
# record is left out of JSON output.
EVENT_FIELDS = (
    "event",
    "request_id",
    "method",
    "path",
    "status_code",
    "error_code",
    "db_path",
)

_configured = False


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record: level, logger, message and any event fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({field: getattr(record, field) for field in EVENT_FIELDS if hasattr(record, field)})
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_app_logging() -> None:
    global _configured  # pylint: disable=global-statement
    if _configured:
        return

    level = logging.getLevelName(get_env(TASKTRACKER_LOG_LEVEL, "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLineFormatter() if get_env_bool(TASKTRACKER_LOG_JSON) else logging.Formatter(TEXT_FORMAT))

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(level)
    # With root capture the app logger just propagates to the shared root handler.
    owner = logging.getLogger() if get_env_bool(TASKTRACKER_LOG_CAPTURE_ROOT) else app_logger
    owner.handlers = [handler]
    owner.setLevel(level)

    _configured = True
    app_logger.debug("Logging configured. level=%s", logging.getLevelName(level))
