"""provider.py — In-memory simulated collections for mock mode.

Collections are generated lazily on first access and then owned by the
provider for the rest of the session: repeated ``list()`` calls return the
same ids and field values until ``reset()``. Nothing touches the network
or the disk.

Called by: services/* (mock strategy)
Depends on: factory.py, core/errors.py
"""

from __future__ import annotations

import copy
import logging
import random
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from medcure.core.errors import InvalidRecord, RecordNotFound
from medcure.mock.factory import make_archived, make_products, make_sales
from medcure.mock.fixtures import ARCHIVED_BY, iso, mock_id

logger = logging.getLogger(__name__)

DOMAINS = ("products", "sales", "archived")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class MockDataProvider:
    """Per-session simulated products, sales and archived items.

    Features:
      - Seeded generation (one ``random.Random`` per domain)
      - CRUD on any domain, ids continue the generated sequence
      - Archive/restore moves records between products and archived
      - Deep copies out, so callers cannot mutate provider state

    Usage:
        provider = MockDataProvider(seed=42)
        products = provider.list("products")
    """

    def __init__(
        self,
        *,
        seed: int = 1337,
        product_count: int = 40,
        sales_count: int = 120,
        archived_count: int = 12,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._seed = seed
        self._counts = {
            "products": product_count,
            "sales": sales_count,
            "archived": archived_count,
        }
        self._clock = clock
        self._anchor: datetime | None = None
        self._collections: dict[str, list[dict[str, Any]]] = {}
        self._next_number: dict[str, int] = {}
        logger.info("🎭 MockDataProvider initialized — seed=%s", seed)

    # ─── Generation ──────────────────────────────────────────────────────────

    @property
    def anchor(self) -> datetime:
        """Reference time the simulated history is laid out against."""
        if self._anchor is None:
            self._anchor = self._clock()
        return self._anchor

    def _rng(self, domain: str) -> random.Random:
        # WHY: One stream per domain, so regenerating sales after a reset
        # does not depend on how many products were drawn before it.
        return random.Random(f"{self._seed}:{domain}")

    def _collection(self, domain: str) -> list[dict[str, Any]]:
        if domain not in DOMAINS:
            raise ValueError(f"Unknown mock domain: '{domain}'. Available: {list(DOMAINS)}")

        if domain not in self._collections:
            count = self._counts[domain]
            rng = self._rng(domain)
            if domain == "products":
                records = make_products(rng, self.anchor, count)
            elif domain == "sales":
                # WHY: Baskets come from the seed catalogue, not the live one, so
                # product edits never change the generated history.
                catalogue = make_products(self._rng("products"), self.anchor, self._counts["products"])
                records = make_sales(rng, self.anchor, catalogue, count)
            else:
                records = make_archived(rng, self.anchor, count)
            self._collections[domain] = records
            self._next_number[domain] = count + 1
            logger.debug("Generated mock %s: %d records", domain, len(records))
        return self._collections[domain]

    def _find(self, domain: str, record_id: Any) -> dict[str, Any]:
        for record in self._collection(domain):
            if record["id"] == record_id:
                return record
        raise RecordNotFound(f"No {domain} record with id '{record_id}'", domain=domain)

    def _new_id(self, domain: str) -> str:
        self._collection(domain)
        number = self._next_number[domain]
        self._next_number[domain] = number + 1
        return mock_id(domain, number)

    # ─── Reads ───────────────────────────────────────────────────────────────

    def list(self, domain: str) -> list[dict[str, Any]]:
        """Return the session-stable collection for ``domain``."""
        return copy.deepcopy(self._collection(domain))

    def get(self, domain: str, record_id: Any) -> dict[str, Any]:
        return copy.deepcopy(self._find(domain, record_id))

    # ─── Writes ──────────────────────────────────────────────────────────────

    def create(self, domain: str, record: dict[str, Any]) -> dict[str, Any]:
        """Append a record, assigning ``id`` and timestamps."""
        now = iso(self._clock())
        created = copy.deepcopy(record)
        created["id"] = self._new_id(domain)
        created.setdefault("created_at", now)
        if domain == "products":
            created.setdefault("updated_at", now)
            created.setdefault("is_archived", False)
        self._collection(domain).append(created)
        return copy.deepcopy(created)

    def update(self, domain: str, record_id: Any, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply ``changes`` to one record; ``id`` is never rewritten."""
        record = self._find(domain, record_id)
        for key, value in changes.items():
            if key != "id":
                record[key] = copy.deepcopy(value)
        if domain == "products":
            record["updated_at"] = iso(self._clock())
        return copy.deepcopy(record)

    def delete(self, domain: str, record_id: Any) -> dict[str, Any]:
        record = self._find(domain, record_id)
        self._collection(domain).remove(record)
        return record

    def record_sale(self, sale: dict[str, Any]) -> dict[str, Any]:
        """Store a sale and deduct its quantities from product stock.

        All items are checked before any stock moves, so a failing sale
        leaves inventory untouched.

        Raises:
            RecordNotFound: If an item references an unknown product.
            InvalidRecord: If a product has insufficient stock.
        """
        products = {product["id"]: product for product in self._collection("products")}
        wanted: dict[Any, int] = {}
        for item in sale.get("items", []):
            if item["product_id"] not in products:
                raise RecordNotFound(f"No products record with id '{item['product_id']}'", domain="products")
            wanted[item["product_id"]] = wanted.get(item["product_id"], 0) + item["quantity"]

        shortages = []
        for product_id, quantity in wanted.items():
            product = products[product_id]
            if product["stock"] < quantity:
                shortages.append(f"Insufficient stock for {product['name']}: {product['stock']} left")
        if shortages:
            raise InvalidRecord("Sale validation failed", domain="sales", errors=shortages)

        for item in sale.get("items", []):
            product = products[item["product_id"]]
            product["stock"] -= item["quantity"]
            item.setdefault("category", product["category"])
        return self.create("sales", {"status": "completed", **sale})

    def archive_product(
        self,
        product_id: Any,
        reason: str,
        *,
        archived_by: str = ARCHIVED_BY,
    ) -> dict[str, Any]:
        """Move a product into the archive and return the archived item."""
        product = self.delete("products", product_id)
        product["is_archived"] = True
        return self.create("archived", {
            "type": "product",
            "name": product["name"],
            "reason": reason,
            "archived_by": archived_by,
            "archived_at": iso(self._clock()),
            "payload": product,
        })

    def restore(self, item_id: Any) -> dict[str, Any]:
        """Take an item out of the archive.

        Archived products go back into the products collection under their
        original id; other types are simply released.
        """
        item = self.delete("archived", item_id)
        payload = item.get("payload") or {}
        if item["type"] == "product" and payload.get("id"):
            payload["is_archived"] = False
            payload["updated_at"] = iso(self._clock())
            self._collection("products").append(payload)
            return copy.deepcopy(payload)
        return item

    def reset(self, domain: str | None = None) -> None:
        """Forget one or all collections; the next read regenerates them."""
        if domain is None:
            self._collections.clear()
            self._next_number.clear()
            self._anchor = None
        else:
            if domain not in DOMAINS:
                raise ValueError(f"Unknown mock domain: '{domain}'. Available: {list(DOMAINS)}")
            self._collections.pop(domain, None)
            self._next_number.pop(domain, None)
        logger.info("Mock data reset: %s", domain or "all")
