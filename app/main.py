from __future__ import annotations

import logging
import sys

import uvicorn

from task_tracker_app.env import PORT, TASKTRACKER_PORT, get_env_int
from task_tracker_app.errors import SchemaInitializationError
from task_tracker_app.logging import setup_app_logging
from task_tracker_app.web.app import app
from task_tracker_app.web.core.runtime import get_repo

LOGGER = logging.getLogger("task_tracker_app.main")

__all__ = ["app", "run"]


def run() -> None:
    setup_app_logging()
    try:
        get_repo().ensure_schema()
    except SchemaInitializationError:
        LOGGER.exception("Failed to initialize database; refusing to serve traffic.")
        sys.exit(1)
    port = get_env_int(PORT, default=get_env_int(TASKTRACKER_PORT, default=8000), min_value=1, max_value=65535)
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=False)


if __name__ == "__main__":
    run()
