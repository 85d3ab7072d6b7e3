"""Health check endpoint."""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from medcure.api.deps import ServicesDep
from medcure.models.schemas import HealthResponse

logger = structlog.get_logger()
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(services: ServicesDep) -> HealthResponse:
    """Liveness plus the data mode requests are currently served from."""
    mode = await services.mode_store.current_mode()
    return HealthResponse(status="healthy", mode=mode.value)
