from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from task_tracker_app.errors import NotFoundError, ValidationError
from task_tracker_app.filters import collect_predicates, render_where_clause

LOGGER = logging.getLogger(__name__)

DEFAULT_TASK_STATUS = "not started"


class RepositoryTaskMixin:
    def create_task(
        self,
        *,
        title: Any,
        user_name: Any,
        project_id: Any = None,
        description: Any = None,
        due_date: Any = None,
        status: Any = None,
    ) -> dict[str, Any]:
        if not title or not user_name:
            raise ValidationError("Title and user name are required")
        task = self._write_returning(
            "inserts/create_task.sql",
            (
                self._coerce_project_id(project_id),
                title,
                self._blank_to_none(description),
                self._coerce_due_date(due_date),
                status or DEFAULT_TASK_STATUS,
                user_name,
            ),
        )
        LOGGER.debug("Created task %s for %s", task["id"], user_name)
        return task

    def list_tasks(self, *, user_name: Any = None, project_id: Any = None) -> pd.DataFrame:
        where_clause, params = render_where_clause(
            collect_predicates(
                [
                    ("user_name", user_name),
                    ("project_id", self._coerce_project_id(project_id)),
                ]
            )
        )
        return self._select("reporting/list_tasks.sql", params, where_clause=where_clause)

    def update_task(
        self,
        task_id: Any,
        *,
        title: Any = None,
        user_name: Any = None,
        project_id: Any = None,
        description: Any = None,
        due_date: Any = None,
        status: Any = None,
    ) -> dict[str, Any]:
        """Overwrite every mutable column of one task.

        Unlike ``create_task`` there is no required-field check and ``status`` is
        written exactly as supplied, so an empty status stays empty and a missing
        one fails the NOT NULL constraint in the store.
        """
        try:
            row_id = int(str(task_id).strip())
        except ValueError:
            raise NotFoundError("Task not found") from None
        task = self._write_returning(
            "updates/update_task.sql",
            (
                self._coerce_project_id(project_id),
                title,
                self._blank_to_none(description),
                self._coerce_due_date(due_date),
                status,
                user_name,
                row_id,
            ),
        )
        if task is None:
            raise NotFoundError("Task not found")
        return task
