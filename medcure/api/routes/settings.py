"""settings.py — Branding, profile and preference routes.

Endpoints:
    GET    /api/v1/settings            → Full settings record (defaults filled in)
    PATCH  /api/v1/settings            → Deep-merge a partial record
    DELETE /api/v1/settings            → Reset to the default template
    GET    /api/v1/settings/{section}  → One section

Depends on: deps.py (ServicesDep), services/settings.py
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body

from medcure.api.deps import ServicesDep

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


@router.get("")
async def get_settings(services: ServicesDep) -> dict[str, Any]:
    record = await services.settings.get_settings()
    return record.to_dict()


@router.patch("")
async def update_settings(
    services: ServicesDep,
    partial: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    record = await services.settings.update_settings(partial)
    return record.to_dict()


@router.delete("")
async def reset_settings(services: ServicesDep) -> dict[str, Any]:
    record = await services.settings.reset_settings()
    return record.to_dict()


@router.get("/{section}")
async def get_section(section: str, services: ServicesDep) -> Any:
    return await services.settings.get_section(section)
