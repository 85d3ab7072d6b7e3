"""archived.py — Archive routes.

Endpoints:
    GET    /api/v1/archived                 → Archived items (type, search)
    GET    /api/v1/archived/stats           → Totals per archive type
    POST   /api/v1/archived/products/{id}   → Archive a product
    POST   /api/v1/archived/{id}/restore    → Restore an archived item
    DELETE /api/v1/archived/{id}            → Permanently delete

Depends on: deps.py (ServicesDep), services/archived.py
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from medcure.api.deps import ServicesDep
from medcure.models.schemas import ArchiveRequest

router = APIRouter(prefix="/api/v1/archived", tags=["archived"])


@router.get("")
async def list_archived(
    services: ServicesDep,
    type: str = "all",  # noqa: A002
    search: str | None = None,
) -> list[dict[str, Any]]:
    return await services.archived.list_archived(type, search=search)


@router.get("/stats")
async def archived_stats(services: ServicesDep) -> dict[str, Any]:
    return await services.archived.archived_stats()


@router.post("/products/{product_id}", status_code=201)
async def archive_product(
    product_id: str,
    services: ServicesDep,
    body: ArchiveRequest | None = None,
) -> dict[str, Any]:
    reason = body.reason if body is not None else ArchiveRequest().reason
    return await services.archived.archive_product(product_id, reason)


@router.post("/{item_id}/restore")
async def restore_item(item_id: str, services: ServicesDep) -> dict[str, Any]:
    return await services.archived.restore_item(item_id)


@router.delete("/{item_id}", status_code=204)
async def delete_item(item_id: str, services: ServicesDep) -> None:
    await services.archived.delete_item(item_id)
