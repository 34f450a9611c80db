from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator

from fastapi import FastAPI

from task_tracker_app.errors import SchemaInitializationError
from task_tracker_app.web.core.runtime import get_repo

LOGGER = logging.getLogger(__name__)


def create_app_lifespan():
    @asynccontextmanager
    async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
        try:
            get_repo().ensure_schema()
        except SchemaInitializationError:
            LOGGER.critical("Tables could not be created; the app will not start.", exc_info=True)
            raise
        yield
        # Closes the connection pool along with the cached repository.
        get_repo.cache_clear()

    return _lifespan
