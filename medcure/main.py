"""FastAPI application factory.

Builds the FastAPI app with middleware, routes, and lifespan events. The
same routes serve both data modes; each facade call decides mock vs. live
through the shared ModeStore, so toggling the mode never needs a restart.

Called by: Uvicorn (``uvicorn medcure.main:app``)
Depends on: config.py, environment.py, routes/*, middleware.py, errors.py
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medcure.api.errors import register_exception_handlers
from medcure.api.middleware import MODE_HEADER, register_middleware
from medcure.config import get_settings
from medcure.core.environment import validate_environment
from medcure.core.registry import get_provider_registry
from medcure.services import build_services

_settings = get_settings()
_log_level = getattr(logging, _settings.log_level.upper(), logging.INFO)

# Core modules log through stdlib logging; route them at the same level.
logging.basicConfig(level=_log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if not _settings.is_production
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(_log_level),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown events.

    Validates the configuration, wires the facades, and closes provider
    connections (HTTP client, Redis) on shutdown.
    """
    validate_environment()
    settings = get_settings()
    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(settings)
    logger.info(
        "app_startup",
        env=settings.app_env,
        mode=settings.data_mode,
        mode_source=settings.mode_source,
        settings_storage=settings.settings_storage,
    )
    yield
    await get_provider_registry().aclose()
    logger.info("app_shutdown")


def create_app() -> FastAPI:
    """Build and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="MedCure Data API",
        description="Pharmacy dashboard data layer with switchable mock and live backends",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[MODE_HEADER, "X-Request-ID"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    from medcure.api.routes import archived, health, mode, products, sales
    from medcure.api.routes import settings as settings_routes

    app.include_router(health.router)
    app.include_router(mode.router)
    app.include_router(products.router)
    app.include_router(sales.router)
    app.include_router(settings_routes.router)
    app.include_router(archived.router)

    return app


app = create_app()
