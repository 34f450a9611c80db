from __future__ import annotations

import datetime as dt
from functools import lru_cache
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from task_tracker_app.config import AppConfig
from task_tracker_app.db import SQLiteClient, StoreError
from task_tracker_app.errors import SchemaInitializationError, ValidationError
from task_tracker_app.repository_project import RepositoryProjectMixin
from task_tracker_app.repository_task import RepositoryTaskMixin

LOGGER = logging.getLogger(__name__)

SQL_DIR = Path(__file__).resolve().parent / "sql"

# Order matters: tasks.project_id references projects(id).
SCHEMA_SQL_FILES: tuple[str, ...] = (
    "schema/create_projects_table.sql",
    "schema/create_tasks_table.sql",
)

DUE_DATE_ERROR = "due_date must be an ISO date (YYYY-MM-DD)"


@lru_cache(maxsize=None)
def load_sql(name: str) -> str:
    """Text of ``sql/<name>``, read once per process."""
    return (SQL_DIR / name).read_text(encoding="utf-8")


class TaskTrackerRepository(RepositoryProjectMixin, RepositoryTaskMixin):
    """Every read and write the HTTP layer needs, one SQL template per operation.

    ``client`` defaults to a pooled :class:`SQLiteClient` for ``config.db_path``;
    tests pass any object with the same ``query`` / ``execute_returning`` /
    ``execute_batch`` / ``close`` methods.
    """

    def __init__(self, config: AppConfig, client: Any | None = None) -> None:
        self.config = config
        self.client = client if client is not None else SQLiteClient(config)
        self._schema_ensured = False

    def _select(self, name: str, params: tuple = (), **placeholders: str) -> pd.DataFrame:
        return self.client.query(load_sql(name).format(**placeholders), params)

    def _write_returning(self, name: str, params: tuple) -> dict[str, Any] | None:
        rows = self.client.execute_returning(load_sql(name), params).to_dict("records")
        return rows[0] if rows else None

    @staticmethod
    def _blank_to_none(value: Any) -> Any:
        return value or None

    @staticmethod
    def _coerce_project_id(value: Any) -> int | None:
        if not value:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # JSON has one number type, so 3.0 names the same project as 3.
        if isinstance(value, float) and value.is_integer():
            return int(value)
        try:
            return int(str(value).strip())
        except ValueError:
            raise ValidationError("project_id must be an integer") from None

    @staticmethod
    def _coerce_due_date(value: Any) -> dt.date | None:
        if not value:
            return None
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, dt.date):
            return value
        text = str(value).strip()
        # A full ISO timestamp is accepted; only its date part is stored.
        if len(text) > 10 and text[10] not in ("T", " "):
            raise ValidationError(DUE_DATE_ERROR)
        try:
            return dt.date.fromisoformat(text[:10])
        except ValueError:
            raise ValidationError(DUE_DATE_ERROR) from None

    def ensure_schema(self) -> None:
        if self._schema_ensured:
            return
        try:
            self.client.execute_batch([load_sql(name) for name in SCHEMA_SQL_FILES])
        except (StoreError, OSError) as exc:
            raise SchemaInitializationError(f"Could not create tables in {self.config.db_path}: {exc}") from exc
        self._schema_ensured = True
        LOGGER.info(
            "Tables ready in %s",
            self.config.db_path,
            extra={"event": "schema_initialized", "db_path": self.config.db_path},
        )

    def ping(self) -> None:
        self._select("health/select_connectivity_check.sql")

    def close(self) -> None:
        self.client.close()
