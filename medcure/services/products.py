"""products.py — Inventory facade.

Called by: api/routes/products.py
Depends on: services/base.py, core/analytics.py
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from medcure.core import analytics
from medcure.core.errors import InvalidRecord, RecordNotFound
from medcure.core.protocols import Filter, Record
from medcure.services.base import DataService

DEFAULT_LOW_STOCK_THRESHOLD = 10

_NUMERIC_FIELDS = ("cost_price", "selling_price")


def validate_product(data: dict[str, Any], *, partial: bool = False) -> None:
    """Reject malformed product input before any backend is touched.

    Args:
        data: Product fields to check.
        partial: True for updates, where absent fields are left alone.

    Raises:
        InvalidRecord: Listing every problem found.
    """
    errors = []
    if not partial or "name" in data:
        if not isinstance(data.get("name"), str) or not data["name"].strip():
            errors.append("Product name is required")
    if not partial or "category" in data:
        if not isinstance(data.get("category"), str) or not data["category"].strip():
            errors.append("Category is required")
    if not partial and "selling_price" not in data:
        errors.append("Selling price is required")

    for field in _NUMERIC_FIELDS:
        if field in data:
            value = data[field]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                errors.append(f"{field} must be a non-negative number")
    if "stock" in data:
        stock = data["stock"]
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            errors.append("stock must be a non-negative integer")
    if "id" in data and partial:
        errors.append("id cannot be changed")

    if errors:
        raise InvalidRecord("Invalid product", domain="products", errors=errors)


class ProductService(DataService):
    """List, edit and summarize the product catalogue."""

    domain = "products"

    async def list_products(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
    ) -> list[Record]:
        """Active products ordered by name, optionally filtered."""
        filters = [Filter("is_archived", False)]
        if search:
            filters.append(Filter("name", f"*{search}*", "ilike"))
        if category:
            filters.append(Filter("category", category))

        def from_mock() -> list[Record]:
            rows = [p for p in self._mock.list("products") if not p.get("is_archived")]
            if search:
                needle = search.lower()
                rows = [p for p in rows if needle in p["name"].lower()]
            if category:
                rows = [p for p in rows if p["category"] == category]
            return sorted(rows, key=lambda p: (p["name"], p["id"]))

        return await self._dispatch(
            "list_products",
            live=lambda: self._backend.select("products", filters=filters, order="name.asc"),
            mock=from_mock,
        )

    async def get_product(self, product_id: Any) -> Record:
        async def from_live() -> Record:
            rows = await self._backend.select("products", filters=[Filter("id", product_id)])
            if not rows:
                raise RecordNotFound(f"No products record with id '{product_id}'", domain=self.domain)
            return rows[0]

        return await self._dispatch(
            "get_product",
            live=from_live,
            mock=lambda: self._mock.get("products", product_id),
        )

    async def create_product(self, data: dict[str, Any]) -> Record:
        validate_product(data)
        row = {"stock": 0, "cost_price": 0, "is_archived": False, **data}
        return await self._dispatch(
            "create_product",
            live=lambda: self._backend.insert("products", row),
            mock=lambda: self._mock.create("products", row),
        )

    async def update_product(self, product_id: Any, changes: dict[str, Any]) -> Record:
        validate_product(changes, partial=True)

        async def from_live() -> Record:
            stamped = {**changes, "updated_at": datetime.now(timezone.utc).isoformat()}
            updated = await self._backend.update("products", product_id, stamped)
            if updated is None:
                raise RecordNotFound(f"No products record with id '{product_id}'", domain=self.domain)
            return updated

        return await self._dispatch(
            "update_product",
            live=from_live,
            mock=lambda: self._mock.update("products", product_id, changes),
        )

    async def delete_product(self, product_id: Any) -> None:
        async def from_live() -> None:
            if not await self._backend.delete("products", product_id):
                raise RecordNotFound(f"No products record with id '{product_id}'", domain=self.domain)

        def from_mock() -> None:
            self._mock.delete("products", product_id)

        await self._dispatch("delete_product", live=from_live, mock=from_mock)

    async def low_stock_products(self, threshold: int | None = None) -> list[Record]:
        """Active products at or below ``threshold``, lowest stock first."""
        limit = DEFAULT_LOW_STOCK_THRESHOLD if threshold is None else threshold

        def from_mock() -> list[Record]:
            rows = [
                p for p in self._mock.list("products")
                if not p.get("is_archived") and analytics.is_low_stock(p, limit)
            ]
            return sorted(rows, key=lambda p: (p["stock"], p["name"]))

        return await self._dispatch(
            "low_stock_products",
            live=lambda: self._backend.select(
                "products",
                filters=[Filter("is_archived", False), Filter("stock", limit, "lte")],
                order="stock.asc,name.asc",
            ),
            mock=from_mock,
        )

    async def inventory_summary(self, threshold: int | None = None) -> dict[str, Any]:
        limit = DEFAULT_LOW_STOCK_THRESHOLD if threshold is None else threshold
        products = await self._dispatch(
            "inventory_summary",
            live=lambda: self._backend.select("products", filters=[Filter("is_archived", False)]),
            mock=lambda: self._mock.list("products"),
        )
        return analytics.inventory_summary(products, limit)
