"""sales.py — Point-of-sale and sales analytics routes.

Endpoints:
    GET  /api/v1/sales               → Sales in [start, end), newest first
    POST /api/v1/sales               → Record a sale and deduct stock
    GET  /api/v1/sales/by-hour       → 24 hourly buckets for ``day`` (UTC)
    GET  /api/v1/sales/by-category   → Revenue per category
    GET  /api/v1/sales/summary       → Totals and payment method breakdown
    GET  /api/v1/sales/{id}          → One sale with its items

Depends on: deps.py (ServicesDep), services/sales.py
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from fastapi import APIRouter

from medcure.api.deps import ServicesDep
from medcure.models.schemas import SaleCreate

router = APIRouter(prefix="/api/v1/sales", tags=["sales"])


@router.get("")
async def list_sales(
    services: ServicesDep,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict[str, Any]]:
    return await services.sales.list_sales(start=start, end=end)


@router.post("", status_code=201)
async def create_sale(body: SaleCreate, services: ServicesDep) -> dict[str, Any]:
    return await services.sales.create_sale(body.model_dump(exclude_none=True))


@router.get("/by-hour")
async def sales_by_hour(services: ServicesDep, day: date | None = None) -> list[dict[str, Any]]:
    """Defaults to today (UTC)."""
    return await services.sales.sales_by_hour(day or datetime.now(UTC).date())


@router.get("/by-category")
async def sales_by_category(
    services: ServicesDep,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict[str, Any]]:
    return await services.sales.sales_by_category(start=start, end=end)


@router.get("/summary")
async def sales_summary(
    services: ServicesDep,
    start: datetime | None = None,
    end: datetime | None = None,
) -> dict[str, Any]:
    return await services.sales.sales_summary(start=start, end=end)


@router.get("/{sale_id}")
async def get_sale(sale_id: str, services: ServicesDep) -> dict[str, Any]:
    return await services.sales.get_sale(sale_id)
