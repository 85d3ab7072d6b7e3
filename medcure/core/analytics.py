"""analytics.py — Pure aggregations shared by the mock and live paths.

Live calls fetch raw rows and aggregate here; mock calls aggregate the
simulated collections here. Same rows in, same output out, so charts do not
shift when the mode flips.

Called by: services/products.py, services/sales.py, services/archived.py
Depends on: Nothing
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Any

ARCHIVE_TYPES = ("product", "transaction", "supplier", "employee")


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO 8601 timestamp (``Z`` suffix allowed) into an aware datetime."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _money(amount: float) -> float:
    return round(amount + 0.0, 2)


def filter_by_range(
    rows: Iterable[dict[str, Any]],
    start: datetime | None = None,
    end: datetime | None = None,
    *,
    field: str = "created_at",
) -> list[dict[str, Any]]:
    """Keep rows whose ``field`` falls in ``[start, end)``."""
    selected = []
    for row in rows:
        stamp = parse_timestamp(row[field])
        if start is not None and stamp < parse_timestamp(start):
            continue
        if end is not None and stamp >= parse_timestamp(end):
            continue
        selected.append(row)
    return selected


def _completed(sales: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    return [sale for sale in sales if sale.get("status", "completed") == "completed"]


# ─── Sales ────────────────────────────────────────────────────────────────────


def calculate_sale_totals(items: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Subtotal, item count and average unit price for a basket."""
    items = list(items)
    subtotal = sum(float(item["subtotal"]) for item in items)
    total_items = sum(int(item["quantity"]) for item in items)
    return {
        "subtotal": _money(subtotal),
        "total_items": total_items,
        "average_item_price": _money(subtotal / total_items) if total_items else 0,
    }


def sales_by_hour(sales: Iterable[dict[str, Any]], day: date) -> list[dict[str, Any]]:
    """Bucket completed sales on ``day`` (UTC) into 24 hourly rows."""
    counts = [0] * 24
    revenue = [0.0] * 24
    for sale in _completed(sales):
        stamp = parse_timestamp(sale["created_at"]).astimezone(timezone.utc)
        if stamp.date() != day:
            continue
        counts[stamp.hour] += 1
        revenue[stamp.hour] += float(sale["total"])

    return [
        {"hour": f"{hour:02d}:00", "sales": counts[hour], "revenue": _money(revenue[hour])}
        for hour in range(24)
    ]


def sales_by_category(sales: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Revenue and units per product category, highest revenue first."""
    revenue: dict[str, float] = defaultdict(float)
    quantity: dict[str, int] = defaultdict(int)
    transactions: dict[str, set[Any]] = defaultdict(set)

    for sale in _completed(sales):
        for item in sale.get("items", []):
            category = item.get("category") or "Other"
            revenue[category] += float(item["subtotal"])
            quantity[category] += int(item["quantity"])
            transactions[category].add(sale["id"])

    rows = [
        {
            "category": category,
            "revenue": _money(revenue[category]),
            "quantity": quantity[category],
            "transactions": len(transactions[category]),
        }
        for category in revenue
    ]
    rows.sort(key=lambda row: (-row["revenue"], row["category"]))
    return rows


def sales_summary(sales: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Headline numbers for the sales dashboard cards."""
    sales = list(sales)
    completed = _completed(sales)
    total_revenue = sum(float(sale["total"]) for sale in completed)
    items_sold = sum(int(item["quantity"]) for sale in completed for item in sale.get("items", []))

    by_method: dict[str, float] = defaultdict(float)
    for sale in completed:
        by_method[sale.get("payment_method") or "unknown"] += float(sale["total"])

    return {
        "total_sales": len(completed),
        "reversed_sales": len(sales) - len(completed),
        "total_revenue": _money(total_revenue),
        "average_sale": _money(total_revenue / len(completed)) if completed else 0,
        "items_sold": items_sold,
        "by_payment_method": {method: _money(by_method[method]) for method in sorted(by_method)},
    }


# ─── Inventory ────────────────────────────────────────────────────────────────


def is_low_stock(product: dict[str, Any], threshold: int) -> bool:
    return int(product.get("stock", 0)) <= threshold


def inventory_summary(products: Iterable[dict[str, Any]], low_stock_threshold: int) -> dict[str, Any]:
    """Stock counts and valuation for active (non-archived) products."""
    active = [product for product in products if not product.get("is_archived")]
    categories: dict[str, int] = defaultdict(int)
    for product in active:
        categories[product.get("category") or "Other"] += 1

    return {
        "total_products": len(active),
        "total_stock": sum(int(p.get("stock", 0)) for p in active),
        "stock_value": _money(sum(int(p.get("stock", 0)) * float(p.get("cost_price", 0)) for p in active)),
        "retail_value": _money(sum(int(p.get("stock", 0)) * float(p.get("selling_price", 0)) for p in active)),
        "low_stock_count": sum(1 for p in active if 0 < int(p.get("stock", 0)) <= low_stock_threshold),
        "out_of_stock_count": sum(1 for p in active if int(p.get("stock", 0)) <= 0),
        "categories": {name: categories[name] for name in sorted(categories)},
    }


# ─── Archive ──────────────────────────────────────────────────────────────────


def archived_stats(items: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Count archived items per type; every known type is always present."""
    by_type = {item_type: 0 for item_type in ARCHIVE_TYPES}
    total = 0
    for item in items:
        total += 1
        item_type = item.get("type", "product")
        by_type[item_type] = by_type.get(item_type, 0) + 1
    return {"total": total, "by_type": by_type}
