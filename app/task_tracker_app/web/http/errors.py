from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_tracker_app.db import DataConnectionError, DataExecutionError, DataQueryError, StoreError
from task_tracker_app.env import TASKTRACKER_ERROR_INCLUDE_DETAILS, get_env_bool
from task_tracker_app.errors import NotFoundError, SchemaInitializationError, ValidationError

ERROR_CODE_VALIDATION = "VALIDATION_ERROR"
ERROR_CODE_BAD_REQUEST = "BAD_REQUEST"
ERROR_CODE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
ERROR_CODE_SCHEMA_NOT_READY = "SCHEMA_NOT_READY"
ERROR_CODE_DB_CONNECTION = "DB_CONNECTION_ERROR"
ERROR_CODE_DB_QUERY = "DB_QUERY_ERROR"
ERROR_CODE_DB_EXECUTION = "DB_EXECUTION_ERROR"
ERROR_CODE_INTERNAL = "INTERNAL_SERVER_ERROR"

# (exception type, status, code, fallback message). Client errors keep their own
# message; server errors always answer with the fallback.
_ERROR_TABLE: tuple[tuple[type[BaseException], int, str, str], ...] = (
    (ValidationError, 400, ERROR_CODE_VALIDATION, "Request parameters are invalid."),
    (NotFoundError, 404, ERROR_CODE_NOT_FOUND, "Not found."),
    (SchemaInitializationError, 503, ERROR_CODE_SCHEMA_NOT_READY, "Database schema is not ready."),
    (DataConnectionError, 500, ERROR_CODE_DB_CONNECTION, "Database is unavailable."),
    (DataQueryError, 500, ERROR_CODE_DB_QUERY, "Failed to read from the database."),
    (DataExecutionError, 500, ERROR_CODE_DB_EXECUTION, "Failed to write to the database."),
)

_HTTP_STATUS_CODES = {
    400: ERROR_CODE_BAD_REQUEST,
    404: ERROR_CODE_NOT_FOUND,
    405: ERROR_CODE_METHOD_NOT_ALLOWED,
    422: ERROR_CODE_VALIDATION,
}


@dataclass(frozen=True)
class ErrorOutcome:
    status_code: int
    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiError(RuntimeError):
    """An error already shaped for the client: status, code and public message."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.outcome = ErrorOutcome(int(status_code), code, message, details)


def store_failure(message: str, exc: StoreError) -> ApiError:
    """500 for a failed store round-trip; the cause only travels in ``details``."""
    outcome = classify_exception(exc)
    return ApiError(500, outcome.code, message, {"reason": str(exc), "type": type(exc).__name__})


def classify_exception(exc: BaseException) -> ErrorOutcome:
    if isinstance(exc, ApiError):
        return exc.outcome
    if isinstance(exc, RequestValidationError):
        return ErrorOutcome(
            422,
            ERROR_CODE_VALIDATION,
            "Request validation failed. Check field values and try again.",
            {"errors": exc.errors()},
        )
    if isinstance(exc, StarletteHTTPException):
        message = str(exc.detail or "HTTP request failed.")
        return ErrorOutcome(exc.status_code, _HTTP_STATUS_CODES.get(exc.status_code, ERROR_CODE_INTERNAL), message)
    for exc_type, status_code, code, fallback in _ERROR_TABLE:
        if isinstance(exc, exc_type):
            if status_code < 500:
                return ErrorOutcome(status_code, code, str(exc) or fallback)
            return ErrorOutcome(status_code, code, fallback, {"reason": str(exc)})
    return ErrorOutcome(500, ERROR_CODE_INTERNAL, "An unexpected error occurred.")


def wants_json_error(request: Request) -> bool:
    route_path = getattr(request.scope.get("route"), "path", "") or request.url.path
    return str(route_path).startswith("/api/")


def request_id_of(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request.headers.get("x-request-id", "") or "-"


def error_body(outcome: ErrorOutcome) -> dict[str, Any]:
    body: dict[str, Any] = {"error": outcome.message}
    if get_env_bool(TASKTRACKER_ERROR_INCLUDE_DETAILS, default=False):
        body["code"] = outcome.code
        if outcome.details:
            body["details"] = outcome.details
    return body


def api_error_response(request: Request, outcome: ErrorOutcome) -> JSONResponse:
    return JSONResponse(
        error_body(outcome),
        status_code=outcome.status_code,
        headers={"X-Request-ID": request_id_of(request)},
    )
