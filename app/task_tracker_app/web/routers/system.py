from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from task_tracker_app.web.core.runtime import get_config, get_repo

router = APIRouter(prefix="/api")


def _describe_failure(exc: BaseException) -> str:
    """``Type: message`` for ``exc`` and each exception it was raised from."""
    parts: list[str] = []
    current: BaseException | None = exc
    while current is not None and len(parts) < 8:
        text = str(current).strip()
        parts.append(f"{type(current).__name__}: {text}" if text else type(current).__name__)
        current = current.__cause__ or current.__context__
    return "; ".join(parts)


@router.get("/health")
def api_health():
    config = get_config()
    status = {"ok": True, "env": config.env, "database": config.db_path}
    try:
        repo = get_repo()
        repo.ensure_schema()
        repo.ping()
    except Exception as exc:
        status.update(ok=False, error=_describe_failure(exc))
        return JSONResponse(status, status_code=503)
    return JSONResponse(status)
