"""Translate data-layer exceptions into JSON error responses.

    RemoteFailure      → 502  (backend down or rejected the call; retryable)
    LocalStateFailure  → 500  (simulated state broken)
    RecordNotFound     → 404
    InvalidRecord      → 422  (with per-field ``errors``)

Called by: main.py (``register_exception_handlers()``)
Depends on: core/errors.py
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from medcure.core.errors import (
    DataServiceError,
    InvalidRecord,
    LocalStateFailure,
    RecordNotFound,
    RemoteFailure,
)

logger = structlog.get_logger()

STATUS_BY_KIND = {
    RemoteFailure.kind: 502,
    LocalStateFailure.kind: 500,
    RecordNotFound.kind: 404,
    InvalidRecord.kind: 422,
}


async def data_service_error_handler(request: Request, exc: DataServiceError) -> JSONResponse:
    """Render any ``DataServiceError`` as ``{"error": {...}}``."""
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    request_id = getattr(request.state, "request_id", "unknown")

    body = {**exc.to_dict(), "request_id": request_id}
    if isinstance(exc, InvalidRecord) and exc.errors:
        body["errors"] = exc.errors
    if isinstance(exc, RemoteFailure) and exc.status_code is not None:
        body["upstream_status"] = exc.status_code

    log = logger.warning if status_code < 500 else logger.error
    log(
        "data_service_error",
        kind=exc.kind,
        domain=exc.domain,
        error=exc.message,
        status=status_code,
        request_id=request_id,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content={"error": body})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DataServiceError, data_service_error_handler)
