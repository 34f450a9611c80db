from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from task_tracker_app.errors import NotFoundError, ValidationError
from task_tracker_app.web.http.errors import (
    ApiError,
    api_error_response,
    classify_exception,
    request_id_of,
    wants_json_error,
)

LOGGER = logging.getLogger(__name__)

HANDLED_EXCEPTIONS: tuple[type[Exception], ...] = (
    ApiError,
    ValidationError,
    NotFoundError,
    RequestValidationError,
    StarletteHTTPException,
    Exception,
)


def render_exception(request: Request, exc: Exception) -> Response:
    """Log ``exc`` once and turn it into the response the client sees."""
    outcome = classify_exception(exc)
    server_side = outcome.status_code >= 500
    LOGGER.log(
        logging.ERROR if server_side else logging.WARNING,
        "%s %s failed with %s %s",
        request.method,
        request.url.path,
        outcome.status_code,
        outcome.code,
        exc_info=exc if server_side else None,
        extra={
            "event": "api_error",
            "request_id": request_id_of(request),
            "method": request.method,
            "path": request.url.path,
            "status_code": outcome.status_code,
            "error_code": outcome.code,
        },
    )
    if wants_json_error(request):
        return api_error_response(request, outcome)
    return PlainTextResponse(outcome.message, status_code=outcome.status_code)


async def _handle_exception(request: Request, exc: Exception) -> Response:
    return render_exception(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    for exc_type in HANDLED_EXCEPTIONS:
        app.add_exception_handler(exc_type, _handle_exception)
