from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from task_tracker_app.db import StoreError
from task_tracker_app.web.core.runtime import get_repo
from task_tracker_app.web.http.errors import store_failure

router = APIRouter(prefix="/api/tasks")

TASK_BODY_FIELDS = ("project_id", "title", "description", "due_date", "status", "user_name")


def _task_fields(payload: dict[str, Any] | None) -> dict[str, Any]:
    body = payload or {}
    return {field: body.get(field) for field in TASK_BODY_FIELDS}


@router.post("")
def api_create_task(payload: dict[str, Any] | None = Body(default=None)):
    repo = get_repo()
    try:
        row = repo.create_task(**_task_fields(payload))
    except StoreError as exc:
        raise store_failure("Failed to create task", exc) from exc
    return JSONResponse(row)


@router.get("")
def api_list_tasks(user_name: str = "", project_id: str = ""):
    repo = get_repo()
    try:
        rows = repo.list_tasks(user_name=user_name, project_id=project_id).to_dict("records")
    except StoreError as exc:
        raise store_failure("Failed to fetch tasks", exc) from exc
    return JSONResponse(rows)


@router.put("/{task_id}")
def api_update_task(task_id: str, payload: dict[str, Any] | None = Body(default=None)):
    repo = get_repo()
    try:
        row = repo.update_task(task_id, **_task_fields(payload))
    except StoreError as exc:
        raise store_failure("Failed to update task", exc) from exc
    return JSONResponse(row)
