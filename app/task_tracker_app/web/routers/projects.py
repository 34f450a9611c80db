from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from task_tracker_app.db import StoreError
from task_tracker_app.web.core.runtime import get_repo
from task_tracker_app.web.http.errors import store_failure

router = APIRouter(prefix="/api/projects")


@router.post("")
def api_create_project(payload: dict[str, Any] | None = Body(default=None)):
    body = payload or {}
    repo = get_repo()
    try:
        row = repo.create_project(
            name=body.get("name"),
            description=body.get("description"),
        )
    except StoreError as exc:
        raise store_failure("Failed to create project", exc) from exc
    return JSONResponse(row)


@router.get("")
def api_list_projects():
    repo = get_repo()
    try:
        rows = repo.list_projects().to_dict("records")
    except StoreError as exc:
        raise store_failure("Failed to fetch projects", exc) from exc
    return JSONResponse(rows)
