"""Middleware for request logging, error handling, request IDs, and mode tagging.

Middleware stack (executed in reverse registration order):
    1. RequestIDMiddleware    → Assigns unique X-Request-ID to every request
    2. LoggingMiddleware      → Logs method, path, status, mode, and duration
    3. DataModeMiddleware     → Adds X-MedCure-Mode header (mock|live)
    4. ErrorHandlerMiddleware → Catches unhandled exceptions → JSON error response

The X-MedCure-Mode header lets the dashboard's mode badge and the DevTools
network panel show which data path answered each request.

Called by: main.py (``register_middleware()``)
Depends on: config.py (Settings), services/__init__.py (DataServices)
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from medcure.config import get_settings
from medcure.core.mode_store import track_resolved_modes

logger = structlog.get_logger()

MODE_HEADER = "X-MedCure-Mode"


def _fallback_mode(request: Request) -> str:
    services = getattr(request.app.state, "services", None)
    if services is None:
        return get_settings().data_mode.strip().lower()
    return services.mode_store.last_known.value


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the client's ``X-Request-ID`` or mint one.

    The ID lands on ``request.state.request_id`` and on the response.
    """

    async def dispatch(self, request: Request, call_next):  # noqa: ANN001
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # noqa: ANN001
        start = time.perf_counter()

        response: Response = await call_next(request)

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            mode=response.headers.get(MODE_HEADER),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            request_id=getattr(request.state, "request_id", "unknown"),
        )
        return response


class DataModeMiddleware(BaseHTTPMiddleware):
    """Add ``X-MedCure-Mode`` to every response.

    The value is the last mode this request resolved. Requests that never
    resolve one (docs, unknown paths) report the store's last known mode.
    """

    async def dispatch(self, request: Request, call_next):  # noqa: ANN001
        resolved = track_resolved_modes()
        response = await call_next(request)
        response.headers[MODE_HEADER] = resolved[-1].value if resolved else _fallback_mode(request)
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn anything the exception handlers missed into a JSON 500.

    Logs the full traceback and never leaks internals to the client.
    """

    async def dispatch(self, request: Request, call_next):  # noqa: ANN001
        try:
            return await call_next(request)
        except Exception as exc:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.exception(
                "unhandled_error",
                error=str(exc),
                request_id=request_id,
                path=request.url.path,
            )
            return JSONResponse(
                status_code=500,
                content={
                    "error": {
                        "kind": "internal_error",
                        "message": "Something went wrong on our side. Please try again.",
                        "request_id": request_id,
                    }
                },
            )


def register_middleware(app: FastAPI) -> None:
    """Register all middleware in the correct order.

    Starlette runs the last-registered middleware first, so RequestID is
    added last to wrap everything else and ErrorHandler first to sit
    closest to the routes.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(DataModeMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
