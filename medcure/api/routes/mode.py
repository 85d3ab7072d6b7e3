"""mode.py — Admin data-mode toggle.

Endpoints:
    GET    /api/v1/mode  → Resolved mode plus configuration snapshot
    PUT    /api/v1/mode  → Pin the mode (optionally broadcast to all workers)
    DELETE /api/v1/mode  → Release the pin; the configured source decides again

Called by: Dashboard settings page (mock/live switch)
Depends on: deps.py (ServicesDep), core/environment.py
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException

from medcure.api.deps import ServicesDep
from medcure.core.environment import get_environment_info, to_dict
from medcure.core.errors import ModeProbeFailure
from medcure.models.schemas import ModeRead, ModeUpdate

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/mode", tags=["mode"])


async def _snapshot(services: ServicesDep) -> ModeRead:
    store = services.mode_store
    mode = await store.current_mode()
    return ModeRead(**to_dict(get_environment_info(mode, pinned=store.is_pinned)))


@router.get("", response_model=ModeRead)
async def get_mode(services: ServicesDep) -> ModeRead:
    return await _snapshot(services)


@router.put("", response_model=ModeRead)
async def set_mode(body: ModeUpdate, services: ServicesDep) -> ModeRead:
    """Pin the data mode for this process.

    With ``broadcast`` the shared flag is written too, so workers that
    read it follow. Only probes that can publish (redis) support this.
    """
    store = services.mode_store
    publish = getattr(store.probe, "publish", None)
    if body.broadcast and publish is None:
        raise HTTPException(status_code=409, detail="The configured mode source cannot broadcast.")

    mode = store.set_mode(body.mode)
    if body.broadcast:
        try:
            await publish(mode)
        except ModeProbeFailure as exc:
            logger.error("mode_broadcast_failed", mode=mode.value, error=exc.message)
            raise HTTPException(status_code=503, detail="Mode pinned locally but broadcast failed.") from exc

    logger.info("mode_pinned", mode=mode.value, broadcast=body.broadcast)
    return await _snapshot(services)


@router.delete("", response_model=ModeRead)
async def clear_mode(services: ServicesDep) -> ModeRead:
    services.mode_store.clear_override()
    logger.info("mode_pin_cleared")
    return await _snapshot(services)
