from __future__ import annotations

import logging
from pathlib import Path
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from task_tracker_app.logging import setup_app_logging
from task_tracker_app.web.core.runtime import get_config
from task_tracker_app.web.http.exception_handlers import register_exception_handlers, render_exception
from task_tracker_app.web.routers import router as api_router
from task_tracker_app.web.system.lifespan import create_app_lifespan
from task_tracker_app.web.system.settings import load_app_runtime_settings

LOGGER = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def create_app() -> FastAPI:
    setup_app_logging()
    config = get_config()
    settings = load_app_runtime_settings()

    app = FastAPI(title="Task Tracker", lifespan=create_app_lifespan())

    @app.middleware("http")
    async def _request_id_middleware(request: Request, call_next):
        request_id = uuid.uuid4().hex[:12]
        request.state.request_id = request_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            # Errors without a more specific handler surface here rather than in
            # the exception middleware.
            response = render_exception(request, exc)
        if settings.security_headers_enabled:
            for name, value in SECURITY_HEADERS.items():
                response.headers.setdefault(name, value)
        if settings.request_id_header_enabled:
            response.headers["X-Request-ID"] = request_id
        LOGGER.debug(
            "%s %s -> %s in %.1f ms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000.0,
            extra={"event": "request_completed", "request_id": request_id},
        )
        return response

    register_exception_handlers(app)
    app.include_router(api_router)

    if config.static_dir:
        static_dir = Path(config.static_dir)
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
        else:
            LOGGER.warning("Static directory not found; skipping mount. path=%s", static_dir)
    return app


app = create_app()
