"""Dependency injection for API routes.

Provides FastAPI dependencies for configuration and the data service
facades. The facades are built once per app and kept on ``app.state`` so
tests can install their own before the first request.

Called by: All route modules via the ServicesDep type alias
Depends on: config.py, services/__init__.py
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from medcure.config import Settings, get_settings
from medcure.services import DataServices, build_services

# ─── Settings ──────────────────────────────────────────────────────────────────


def get_config() -> Settings:
    """Return the application config."""
    return get_settings()


ConfigDep = Annotated[Settings, Depends(get_config)]

# ─── Data Services ─────────────────────────────────────────────────────────────


def get_services(request: Request, settings: ConfigDep) -> DataServices:
    """Return the app's facades, wiring them from ``settings`` on first use."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        services = build_services(settings)
        request.app.state.services = services
    return services


ServicesDep = Annotated[DataServices, Depends(get_services)]
