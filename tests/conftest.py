from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from task_tracker_app.config import AppConfig  # noqa: E402
from task_tracker_app.repository import TaskTrackerRepository  # noqa: E402
from task_tracker_app.web.core.runtime import get_config, get_repo  # noqa: E402


@pytest.fixture()
def isolated_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    db_path = tmp_path / "task_tracker_test.db"
    monkeypatch.setenv("TASKTRACKER_ENV", "test")
    monkeypatch.setenv("TASKTRACKER_DB_PATH", str(db_path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("TASKTRACKER_STATIC_DIR", raising=False)
    monkeypatch.delenv("TASKTRACKER_ERROR_INCLUDE_DETAILS", raising=False)
    get_config.cache_clear()
    get_repo.cache_clear()
    yield db_path
    get_repo.cache_clear()
    get_config.cache_clear()


@pytest.fixture()
def client(isolated_db: Path) -> Iterator[TestClient]:
    from task_tracker_app.web.app import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def repo(tmp_path: Path) -> Iterator[TaskTrackerRepository]:
    repository = TaskTrackerRepository(AppConfig(db_path=str(tmp_path / "repo.db")))
    repository.ensure_schema()
    yield repository
    repository.close()
