"""sales.py — Point-of-sale and sales analytics facade.

Live sales are processed by the ``process_sale_transaction`` database
function, which validates stock and writes the sale, its items and the
inventory deduction atomically. The mock path does the same in memory via
``MockDataProvider.record_sale``.

Called by: api/routes/sales.py
Depends on: services/base.py, core/analytics.py
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from medcure.core import analytics
from medcure.core.errors import InvalidRecord, RecordNotFound, RemoteFailure
from medcure.core.protocols import Filter, Record
from medcure.mock.fixtures import PAYMENT_METHODS
from medcure.services.base import DataService

# WHY: Sale items carry product_id only; the category for analytics comes
# from the embedded product row.
_SALE_COLUMNS = "*,items:sale_items(product_id,quantity,unit_price,subtotal,products(category))"


def validate_sale_item(item: Any) -> list[str]:
    """Return the problems with one basket line (empty when valid)."""
    if not isinstance(item, dict):
        return ["Sale item must be an object"]
    errors = []
    if not item.get("product_id"):
        errors.append("Product ID is required")
    quantity = item.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        errors.append("Valid quantity is required")
    unit_price = item.get("unit_price")
    if isinstance(unit_price, bool) or not isinstance(unit_price, (int, float)) or unit_price < 0:
        errors.append("Valid unit price is required")
    subtotal = item.get("subtotal")
    if isinstance(subtotal, bool) or not isinstance(subtotal, (int, float)) or subtotal <= 0:
        errors.append("Valid subtotal is required")
    return errors


def build_sale(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a sale request and compute its total from the item subtotals.

    Raises:
        InvalidRecord: If the basket, payment method or stated total is wrong.
    """
    items = data.get("items")
    if not isinstance(items, list) or not items:
        raise InvalidRecord("Sale must contain at least one item", domain="sales")

    errors = []
    for index, item in enumerate(items):
        errors.extend(f"items[{index}]: {problem}" for problem in validate_sale_item(item))
    payment_method = data.get("payment_method", "cash")
    if payment_method not in PAYMENT_METHODS:
        errors.append(f"payment_method must be one of: {list(PAYMENT_METHODS)}")
    if errors:
        raise InvalidRecord("Sale validation failed", domain="sales", errors=errors)

    total = analytics.calculate_sale_totals(items)["subtotal"]
    stated = data.get("total")
    if stated is not None and abs(float(stated) - total) > 0.01:
        raise InvalidRecord(
            "Sale validation failed",
            domain="sales",
            errors=[f"total {stated} does not match item subtotals {total}"],
        )

    return {
        "payment_method": payment_method,
        "total": total,
        "items": [dict(item) for item in items],
    }


def _normalize_live_sale(row: Record) -> Record:
    """Flatten the embedded ``products(category)`` onto each item."""
    sale = dict(row)
    items = []
    for item in sale.get("items") or []:
        flat = dict(item)
        product = flat.pop("products", None) or {}
        flat.setdefault("category", product.get("category"))
        items.append(flat)
    sale["items"] = items
    return sale


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class SalesService(DataService):
    """Record sales and serve dashboard aggregates."""

    domain = "sales"

    async def _fetch_sales(
        self,
        operation: str,
        start: datetime | None,
        end: datetime | None,
    ) -> list[Record]:
        filters = []
        if start is not None:
            filters.append(Filter("created_at", start, "gte"))
        if end is not None:
            filters.append(Filter("created_at", end, "lt"))

        async def from_live() -> list[Record]:
            rows = await self._backend.select(
                "sales", columns=_SALE_COLUMNS, filters=filters, order="created_at.desc",
            )
            return [_normalize_live_sale(row) for row in rows]

        def from_mock() -> list[Record]:
            rows = analytics.filter_by_range(self._mock.list("sales"), start, end)
            return sorted(rows, key=lambda s: (s["created_at"], s["id"]), reverse=True)

        return await self._dispatch(operation, live=from_live, mock=from_mock)

    async def list_sales(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Record]:
        """Sales in ``[start, end)``, newest first."""
        return await self._fetch_sales("list_sales", start, end)

    async def get_sale(self, sale_id: Any) -> Record:
        async def from_live() -> Record:
            rows = await self._backend.select("sales", columns=_SALE_COLUMNS, filters=[Filter("id", sale_id)])
            if not rows:
                raise RecordNotFound(f"No sales record with id '{sale_id}'", domain=self.domain)
            return _normalize_live_sale(rows[0])

        return await self._dispatch(
            "get_sale",
            live=from_live,
            mock=lambda: self._mock.get("sales", sale_id),
        )

    async def create_sale(self, data: dict[str, Any]) -> Record:
        """Validate, then record a sale and deduct stock in one step."""
        sale = build_sale(data)

        async def from_live() -> Record:
            result = await self._backend.rpc("process_sale_transaction", {
                "sale_total": sale["total"],
                "payment_method": sale["payment_method"],
                "sale_items": [
                    {
                        "product_id": item["product_id"],
                        "quantity": item["quantity"],
                        "unit_price": item["unit_price"],
                        "subtotal": item["subtotal"],
                        "variant_info": item.get("variant_info") or {},
                    }
                    for item in sale["items"]
                ],
            })
            if not result:
                raise RemoteFailure("process_sale_transaction returned no row", domain=self.domain)
            row = result[0] if isinstance(result, list) else result
            return {
                "id": row["sale_id"],
                "total": row["sale_total"],
                "payment_method": row["payment_method"],
                "status": "completed",
                "items": sale["items"],
                "created_at": row["created_at"],
            }

        return await self._dispatch(
            "create_sale",
            live=from_live,
            mock=lambda: self._mock.record_sale(sale),
        )

    async def sales_by_hour(self, day: date) -> list[dict[str, Any]]:
        """24 hourly buckets for ``day`` (UTC)."""
        start, end = _day_bounds(day)
        sales = await self._fetch_sales("sales_by_hour", start, end)
        return analytics.sales_by_hour(sales, day)

    async def sales_by_category(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[dict[str, Any]]:
        sales = await self._fetch_sales("sales_by_category", start, end)
        return analytics.sales_by_category(sales)

    async def sales_summary(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[str, Any]:
        sales = await self._fetch_sales("sales_summary", start, end)
        return analytics.sales_summary(sales)
