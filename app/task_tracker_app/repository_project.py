from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from task_tracker_app.errors import ValidationError

LOGGER = logging.getLogger(__name__)


class RepositoryProjectMixin:
    def create_project(self, *, name: Any, description: Any = None) -> dict[str, Any]:
        if not name:
            raise ValidationError("Name is required")
        project = self._write_returning("inserts/create_project.sql", (name, self._blank_to_none(description)))
        LOGGER.debug("Created project %s", project["id"])
        return project

    def list_projects(self) -> pd.DataFrame:
        return self._select("reporting/list_projects.sql")
