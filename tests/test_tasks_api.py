from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest
from fastapi.testclient import TestClient

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from task_tracker_app.db import DataExecutionError, DataQueryError
from task_tracker_app.web.app import create_app
from task_tracker_app.web.routers import tasks as tasks_router


class _BrokenTaskRepo:
    def ensure_schema(self) -> None:
        return

    def list_tasks(self, **_kwargs) -> pd.DataFrame:
        raise DataQueryError("Query execution failed.")

    def create_task(self, **_kwargs):
        raise DataExecutionError("Statement execution failed.")

    def update_task(self, _task_id, **_kwargs):
        raise DataExecutionError("Statement execution failed.")


def _create_task(client: TestClient, **fields) -> dict:
    payload = {"title": "Write docs", "user_name": "alice"}
    payload.update(fields)
    response = client.post("/api/tasks", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def test_create_task_defaults_status(client: TestClient) -> None:
    task = _create_task(client)

    assert isinstance(task["id"], int)
    assert task["status"] == "not started"
    assert task["title"] == "Write docs"
    assert task["user_name"] == "alice"
    assert task["project_id"] is None
    assert task["description"] is None
    assert task["due_date"] is None


def test_create_task_keeps_supplied_fields(client: TestClient) -> None:
    project = client.post("/api/projects", json={"name": "Website"}).json()

    task = _create_task(
        client,
        project_id=project["id"],
        description="API reference",
        due_date="2024-05-01",
        status="in progress",
    )

    assert task["project_id"] == project["id"]
    assert task["description"] == "API reference"
    assert task["due_date"] == "2024-05-01"
    assert task["status"] == "in progress"


def test_create_task_accepts_project_id_as_string(client: TestClient) -> None:
    task = _create_task(client, project_id="12")

    assert task["project_id"] == 12


def test_create_task_accepts_integral_float_project_id(client: TestClient) -> None:
    task = _create_task(client, project_id=3.0)

    assert task["project_id"] == 3
    assert client.get("/api/tasks", params={"project_id": "3"}).json() == [task]


def test_create_task_allows_unknown_project(client: TestClient) -> None:
    task = _create_task(client, project_id=999)

    assert task["project_id"] == 999


def test_create_task_truncates_timestamp_due_date(client: TestClient) -> None:
    task = _create_task(client, due_date="2024-05-01T09:30:00Z")

    assert task["due_date"] == "2024-05-01"


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("due_date", "next tuesday", "due_date must be an ISO date (YYYY-MM-DD)"),
        ("due_date", "2024-13-01", "due_date must be an ISO date (YYYY-MM-DD)"),
        ("project_id", "abc", "project_id must be an integer"),
        ("project_id", 3.5, "project_id must be an integer"),
    ],
)
def test_create_task_rejects_malformed_values(client: TestClient, field: str, value: object, message: str) -> None:
    response = client.post("/api/tasks", json={"title": "Write docs", "user_name": "alice", field: value})

    assert response.status_code == 400
    assert response.json() == {"error": message}


@pytest.mark.parametrize(
    "payload",
    [
        {"user_name": "alice"},
        {"title": "Write docs"},
        {"title": "", "user_name": "alice"},
        {"title": "Write docs", "user_name": ""},
        {},
    ],
)
def test_create_task_requires_title_and_user_name(client: TestClient, payload: dict) -> None:
    response = client.post("/api/tasks", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Title and user name are required"}
    assert client.get("/api/tasks").json() == []


def test_list_tasks_without_filters_returns_all_newest_first(client: TestClient) -> None:
    first = _create_task(client, user_name="alice")
    second = _create_task(client, user_name="bob")
    third = _create_task(client, user_name="alice")

    response = client.get("/api/tasks")

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == [third["id"], second["id"], first["id"]]


def test_list_tasks_filters_by_user_name(client: TestClient) -> None:
    first = _create_task(client, user_name="alice")
    _create_task(client, user_name="bob")
    third = _create_task(client, user_name="alice")

    response = client.get("/api/tasks", params={"user_name": "alice"})

    assert [row["id"] for row in response.json()] == [third["id"], first["id"]]


def test_list_tasks_filters_by_project(client: TestClient) -> None:
    in_project = _create_task(client, project_id=1)
    _create_task(client, project_id=2)
    _create_task(client)

    response = client.get("/api/tasks", params={"project_id": "1"})

    assert [row["id"] for row in response.json()] == [in_project["id"]]


def test_list_tasks_combines_filters_with_and(client: TestClient) -> None:
    match = _create_task(client, user_name="alice", project_id=1)
    _create_task(client, user_name="alice", project_id=2)
    _create_task(client, user_name="bob", project_id=1)

    response = client.get("/api/tasks", params={"user_name": "alice", "project_id": "1"})

    assert [row["id"] for row in response.json()] == [match["id"]]


def test_list_tasks_ignores_empty_filters(client: TestClient) -> None:
    _create_task(client, user_name="alice")
    _create_task(client, user_name="bob")

    response = client.get("/api/tasks", params={"user_name": "", "project_id": ""})

    assert len(response.json()) == 2


def test_list_tasks_returns_created_task_unchanged(client: TestClient) -> None:
    created = _create_task(client, user_name="carol", description="notes", due_date="2024-06-30")

    listed = client.get("/api/tasks", params={"user_name": "carol"}).json()

    assert listed == [created]


def test_update_task_overwrites_every_field(client: TestClient) -> None:
    task = _create_task(client, project_id=1, description="old", due_date="2024-01-01", status="in progress")

    response = client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "Ship docs", "user_name": "bob", "status": "done"},
    )

    assert response.status_code == 200
    assert response.json() == {
        "id": task["id"],
        "project_id": None,
        "title": "Ship docs",
        "description": None,
        "due_date": None,
        "status": "done",
        "user_name": "bob",
    }


def test_update_task_writes_empty_status_verbatim(client: TestClient) -> None:
    task = _create_task(client)

    response = client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "Write docs", "user_name": "alice", "status": ""},
    )

    assert response.status_code == 200
    assert response.json()["status"] == ""


def test_update_task_without_status_fails_in_store(client: TestClient) -> None:
    task = _create_task(client)

    response = client.put(f"/api/tasks/{task['id']}", json={"title": "Write docs", "user_name": "alice"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to update task"}


@pytest.mark.parametrize("task_id", ["424242", "not-a-number"])
def test_update_missing_task_is_404(client: TestClient, task_id: str) -> None:
    seeded = _create_task(client, project_id=1, description="keep me", due_date="2024-02-02")

    response = client.put(
        f"/api/tasks/{task_id}",
        json={"title": "x", "user_name": "alice", "status": "done"},
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Task not found"}
    assert client.get("/api/tasks").json() == [seeded]


@pytest.mark.parametrize(
    ("method", "path", "message"),
    [
        ("get", "/api/tasks", "Failed to fetch tasks"),
        ("post", "/api/tasks", "Failed to create task"),
        ("put", "/api/tasks/1", "Failed to update task"),
    ],
)
def test_task_store_failures_are_generic_500(
    isolated_db: Path,
    monkeypatch: pytest.MonkeyPatch,
    method: str,
    path: str,
    message: str,
) -> None:
    app = create_app()
    monkeypatch.setattr(tasks_router, "get_repo", lambda: _BrokenTaskRepo())
    client = TestClient(app)

    kwargs = {} if method == "get" else {"json": {"title": "x", "user_name": "alice"}}
    response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 500
    assert response.json() == {"error": message}
