"""Pydantic v2 schemas for API request/response bodies.

Request models only check shape; business rules (non-negative prices,
stock on hand, matching totals) are enforced by the service facades so
mock and live reject the same input.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ─── Health & Mode ─────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str = "healthy"
    mode: str
    version: str = "0.1.0"


class ModeRead(BaseModel):
    mode: Literal["mock", "live"]
    configured_mode: str
    mode_source: str
    pinned: bool
    app_env: str
    version: str


class ModeUpdate(BaseModel):
    mode: Literal["mock", "live"]
    # Also write the shared flag so every worker follows (redis source only).
    broadcast: bool = False


# ─── Products ──────────────────────────────────────────────────────────────────


class ProductCreate(BaseModel):
    # Extra pharmacy columns (generic_name, brand, ...) pass through untouched.
    model_config = ConfigDict(extra="allow")

    name: str
    category: str
    selling_price: float
    cost_price: float = 0
    stock: int = 0
    expiry_date: str | None = None


class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    category: str | None = None
    selling_price: float | None = None
    cost_price: float | None = None
    stock: int | None = None
    expiry_date: str | None = None


# ─── Sales ─────────────────────────────────────────────────────────────────────


class SaleItemCreate(BaseModel):
    product_id: str
    quantity: int
    unit_price: float
    subtotal: float
    variant_info: dict[str, Any] | None = None


class SaleCreate(BaseModel):
    items: list[SaleItemCreate] = Field(..., min_length=1)
    payment_method: str = "cash"
    total: float | None = None


# ─── Archive ───────────────────────────────────────────────────────────────────


class ArchiveRequest(BaseModel):
    reason: str = Field("Product archived", min_length=1, max_length=500)
