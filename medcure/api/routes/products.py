"""products.py — Inventory routes.

Endpoints:
    GET    /api/v1/products             → Active products (search, category)
    POST   /api/v1/products             → Create a product
    GET    /api/v1/products/low-stock   → Products at or below a threshold
    GET    /api/v1/products/summary     → Inventory value and stock counts
    GET    /api/v1/products/{id}        → One product
    PATCH  /api/v1/products/{id}        → Partial update
    DELETE /api/v1/products/{id}        → Delete

Depends on: deps.py (ServicesDep), services/products.py
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from medcure.api.deps import ServicesDep
from medcure.models.schemas import ProductCreate, ProductUpdate

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("")
async def list_products(
    services: ServicesDep,
    search: str | None = None,
    category: str | None = None,
) -> list[dict[str, Any]]:
    return await services.products.list_products(search=search, category=category)


@router.post("", status_code=201)
async def create_product(body: ProductCreate, services: ServicesDep) -> dict[str, Any]:
    return await services.products.create_product(body.model_dump(exclude_none=True))


# WHY: Fixed paths are declared before /{product_id} so they are not
# swallowed as ids.
@router.get("/low-stock")
async def low_stock_products(
    services: ServicesDep,
    threshold: int | None = Query(None, ge=0),
) -> list[dict[str, Any]]:
    return await services.products.low_stock_products(threshold)


@router.get("/summary")
async def inventory_summary(
    services: ServicesDep,
    threshold: int | None = Query(None, ge=0),
) -> dict[str, Any]:
    return await services.products.inventory_summary(threshold)


@router.get("/{product_id}")
async def get_product(product_id: str, services: ServicesDep) -> dict[str, Any]:
    return await services.products.get_product(product_id)


@router.patch("/{product_id}")
async def update_product(
    product_id: str,
    body: ProductUpdate,
    services: ServicesDep,
) -> dict[str, Any]:
    return await services.products.update_product(product_id, body.model_dump(exclude_unset=True))


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: str, services: ServicesDep) -> None:
    await services.products.delete_product(product_id)
