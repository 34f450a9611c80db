from __future__ import annotations

from dataclasses import dataclass

from task_tracker_app.env import (
    TASKTRACKER_REQUEST_ID_HEADER_ENABLED,
    TASKTRACKER_SECURITY_HEADERS_ENABLED,
    get_env_bool,
)


@dataclass(frozen=True)
class AppRuntimeSettings:
    security_headers_enabled: bool
    request_id_header_enabled: bool


def load_app_runtime_settings() -> AppRuntimeSettings:
    return AppRuntimeSettings(
        security_headers_enabled=get_env_bool(TASKTRACKER_SECURITY_HEADERS_ENABLED, default=True),
        request_id_header_enabled=get_env_bool(TASKTRACKER_REQUEST_ID_HEADER_ENABLED, default=True),
    )
