"""factory.py — Seeded generators for simulated collections.

Each generator takes its own ``random.Random`` and an anchor time, so the
same seed and anchor always produce the same records. Unlike fixtures.py,
which holds static pools, these build full entity dicts shaped like the
rows the live backend returns.

Called by: provider.py (lazily, once per collection per session)
Depends on: fixtures.py
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Any

from medcure.mock.fixtures import (
    ARCHIVE_REASONS,
    ARCHIVED_BY,
    EMPLOYEE_NAMES,
    PAYMENT_METHODS,
    PRODUCT_POOL,
    SUPPLIER_NAMES,
    iso,
    mock_id,
)

_PACK_SIZES = ("x10", "x30", "x100")


def make_product(rng: random.Random, anchor: datetime, number: int) -> dict[str, Any]:
    """Build product ``number`` (1-based) from the catalogue pool."""
    name, category, cost = PRODUCT_POOL[(number - 1) % len(PRODUCT_POOL)]
    cycle = (number - 1) // len(PRODUCT_POOL)
    if cycle:
        name = f"{name} {_PACK_SIZES[(cycle - 1) % len(_PACK_SIZES)]}"

    # WHY: ~1 in 6 products low on stock so reorder widgets have content.
    stock = rng.randint(0, 12) if rng.random() < 0.17 else rng.randint(20, 250)
    created = anchor - timedelta(days=rng.randint(30, 365), minutes=rng.randint(0, 1439))
    updated = created + timedelta(days=rng.randint(0, 29))

    return {
        "id": mock_id("products", number),
        "name": name,
        "category": category,
        "stock": stock,
        "cost_price": round(cost, 2),
        "selling_price": round(cost * rng.uniform(1.2, 1.6), 2),
        "expiry_date": (anchor.date() + timedelta(days=rng.randint(15, 720))).isoformat(),
        "is_archived": False,
        "created_at": iso(created),
        "updated_at": iso(updated),
    }


def make_products(rng: random.Random, anchor: datetime, count: int) -> list[dict[str, Any]]:
    return [make_product(rng, anchor, number) for number in range(1, count + 1)]


def make_sales(
    rng: random.Random,
    anchor: datetime,
    products: list[dict[str, Any]],
    count: int,
) -> list[dict[str, Any]]:
    """Build ``count`` sales over the week before ``anchor``, oldest first."""
    if not products:
        return []

    stamps = sorted(
        (anchor - timedelta(minutes=rng.randint(0, 7 * 24 * 60 - 1)) for _ in range(count)),
    )
    sales = []
    for number, created in enumerate(stamps, start=1):
        basket = rng.sample(products, k=min(len(products), rng.randint(1, 4)))
        items = []
        for product in basket:
            quantity = rng.randint(1, 5)
            unit_price = float(product["selling_price"])
            items.append({
                "product_id": product["id"],
                "category": product["category"],
                "quantity": quantity,
                "unit_price": unit_price,
                "subtotal": round(quantity * unit_price, 2),
            })
        sales.append({
            "id": mock_id("sales", number),
            "total": round(sum(item["subtotal"] for item in items), 2),
            "payment_method": rng.choice(PAYMENT_METHODS),
            "status": "reversed" if rng.random() < 0.05 else "completed",
            "items": items,
            "created_at": iso(created),
        })
    return sales


def make_archived(rng: random.Random, anchor: datetime, count: int) -> list[dict[str, Any]]:
    """Build archived items cycling through every archive type."""
    items = []
    for number in range(1, count + 1):
        item_type = ("product", "transaction", "supplier", "employee")[(number - 1) % 4]
        archived_at = anchor - timedelta(days=rng.randint(1, 180), minutes=rng.randint(0, 1439))

        if item_type == "product":
            payload = make_product(rng, anchor, 900 + number)
            payload["is_archived"] = True
            name = payload["name"]
        elif item_type == "transaction":
            total = round(rng.uniform(50, 2500), 2)
            payload = {"total": total, "payment_method": rng.choice(PAYMENT_METHODS)}
            name = f"Sale #{rng.randint(1000, 9999)} (₱{total:,.2f})"
        elif item_type == "supplier":
            name = rng.choice(SUPPLIER_NAMES)
            payload = {"contact": f"orders@{name.split()[0].lower()}.ph"}
        else:
            name = rng.choice(EMPLOYEE_NAMES)
            payload = {"role": "cashier"}

        items.append({
            "id": mock_id("archived", number),
            "type": item_type,
            "name": name,
            "reason": rng.choice(ARCHIVE_REASONS),
            "archived_by": ARCHIVED_BY,
            "archived_at": iso(archived_at),
            "payload": payload,
        })
    return items
