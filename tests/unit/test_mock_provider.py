"""Tests for the simulated collections (mock/provider.py).

Validates that:
  - Collections are stable for a session and reproducible from a seed
  - CRUD keeps ids unique and never rewrites them
  - Sales deduct stock atomically
  - Archive and restore move products between collections

Run with: uv run pytest tests/unit/test_mock_provider.py -v
"""

from __future__ import annotations

import pytest

from medcure.core.errors import InvalidRecord, RecordNotFound
from medcure.mock.fixtures import mock_id
from medcure.mock.provider import DOMAINS, MockDataProvider

# ─── Generation ───────────────────────────────────────────────────────────────


class TestGeneration:
    """Seeded generation and session stability."""

    def test_counts_and_ids(self, mock_provider):
        products = mock_provider.list("products")
        assert len(products) == 10
        assert products[0]["id"] == "prd-000001"
        assert len({p["id"] for p in products}) == 10
        assert len(mock_provider.list("sales")) == 20
        assert len(mock_provider.list("archived")) == 8

    def test_repeated_list_is_identical(self, mock_provider):
        for domain in DOMAINS:
            assert mock_provider.list(domain) == mock_provider.list(domain)

    def test_same_seed_same_data(self, mock_provider, now):
        twin = MockDataProvider(
            seed=7, product_count=10, sales_count=20, archived_count=8, clock=lambda: now,
        )
        for domain in DOMAINS:
            assert twin.list(domain) == mock_provider.list(domain)

    def test_returned_copies_are_detached(self, mock_provider):
        products = mock_provider.list("products")
        products[0]["name"] = "Tampered"
        products.clear()
        assert mock_provider.get("products", "prd-000001")["name"] != "Tampered"
        assert len(mock_provider.list("products")) == 10

    def test_sales_reference_generated_products(self, mock_provider):
        product_ids = {p["id"] for p in mock_provider.list("products")}
        for sale in mock_provider.list("sales"):
            assert sale["items"]
            assert {item["product_id"] for item in sale["items"]} <= product_ids
            assert sale["total"] == round(sum(item["subtotal"] for item in sale["items"]), 2)

    def test_archived_cycles_types(self, mock_provider):
        types = [item["type"] for item in mock_provider.list("archived")]
        assert types[:4] == ["product", "transaction", "supplier", "employee"]

    def test_unknown_domain(self, mock_provider):
        with pytest.raises(ValueError, match="Unknown mock domain"):
            mock_provider.list("suppliers")

    def test_mock_id_format(self):
        assert mock_id("products", 17) == "prd-000017"
        assert mock_id("widgets", 1) == "mck-000001"


# ─── CRUD ─────────────────────────────────────────────────────────────────────


class TestCrud:
    def test_create_continues_sequence(self, mock_provider, now):
        created = mock_provider.create("products", {"name": "Zinc 50mg", "category": "Supplement", "stock": 3})

        assert created["id"] == "prd-000011"
        assert created["is_archived"] is False
        assert created["created_at"] == now.isoformat()
        assert mock_provider.get("products", "prd-000011")["name"] == "Zinc 50mg"

    def test_update_never_rewrites_id(self, mock_provider, now):
        updated = mock_provider.update("products", "prd-000001", {"id": "hijack", "stock": 42})

        assert updated["id"] == "prd-000001"
        assert updated["stock"] == 42
        assert updated["updated_at"] == now.isoformat()

    def test_delete(self, mock_provider):
        mock_provider.delete("products", "prd-000003")
        with pytest.raises(RecordNotFound):
            mock_provider.get("products", "prd-000003")
        assert len(mock_provider.list("products")) == 9

    def test_missing_record(self, mock_provider):
        with pytest.raises(RecordNotFound) as exc_info:
            mock_provider.update("sales", "sal-999999", {"status": "reversed"})
        assert exc_info.value.domain == "sales"

    def test_reset_domain_regenerates_original(self, mock_provider):
        original = mock_provider.list("products")
        mock_provider.create("products", {"name": "Extra", "category": "Other"})
        mock_provider.update("products", "prd-000001", {"stock": 0})

        mock_provider.reset("products")

        assert mock_provider.list("products") == original

    def test_sales_ignore_product_edits(self, mock_provider, now):
        """Generated sales come from the seed catalogue, not the live one."""
        twin = MockDataProvider(
            seed=7, product_count=10, sales_count=20, archived_count=8, clock=lambda: now,
        )
        mock_provider.archive_product("prd-000001", "Recalled lot")
        mock_provider.create("products", {"name": "Extra", "category": "Other"})

        assert mock_provider.list("sales") == twin.list("sales")

    def test_reset_sales_after_price_change(self, mock_provider):
        original = mock_provider.list("sales")
        mock_provider.update("products", "prd-000002", {"selling_price": 999})

        mock_provider.reset("sales")

        assert mock_provider.list("sales") == original

    def test_reset_all(self, mock_provider):
        mock_provider.delete("archived", "arc-000001")
        mock_provider.reset()
        assert len(mock_provider.list("archived")) == 8


# ─── Sales & Archive ──────────────────────────────────────────────────────────


def _line(product_id: str, quantity: int, unit_price: float = 10.0) -> dict:
    return {
        "product_id": product_id,
        "quantity": quantity,
        "unit_price": unit_price,
        "subtotal": quantity * unit_price,
    }


class TestRecordSale:
    def test_deducts_stock(self, mock_provider):
        mock_provider.update("products", "prd-000001", {"stock": 5})

        sale = mock_provider.record_sale({"payment_method": "cash", "total": 20.0, "items": [_line("prd-000001", 2)]})

        assert sale["id"] == "sal-000021"
        assert sale["status"] == "completed"
        assert sale["items"][0]["category"] == mock_provider.get("products", "prd-000001")["category"]
        assert mock_provider.get("products", "prd-000001")["stock"] == 3

    def test_shortage_moves_nothing(self, mock_provider):
        mock_provider.update("products", "prd-000001", {"stock": 5})
        mock_provider.update("products", "prd-000002", {"stock": 5})
        sales_before = len(mock_provider.list("sales"))

        with pytest.raises(InvalidRecord) as exc_info:
            mock_provider.record_sale({"items": [_line("prd-000002", 1), _line("prd-000001", 6)]})

        assert "Insufficient stock" in exc_info.value.errors[0]
        assert mock_provider.get("products", "prd-000002")["stock"] == 5
        assert len(mock_provider.list("sales")) == sales_before

    def test_repeated_lines_count_together(self, mock_provider):
        mock_provider.update("products", "prd-000001", {"stock": 5})
        with pytest.raises(InvalidRecord):
            mock_provider.record_sale({"items": [_line("prd-000001", 3), _line("prd-000001", 3)]})
        assert mock_provider.get("products", "prd-000001")["stock"] == 5

    def test_unknown_product(self, mock_provider):
        with pytest.raises(RecordNotFound):
            mock_provider.record_sale({"items": [_line("prd-404404", 1)]})


class TestArchiveRestore:
    def test_archive_then_restore_product(self, mock_provider):
        product = mock_provider.get("products", "prd-000002")

        item = mock_provider.archive_product("prd-000002", "Expired batch")

        assert item["id"] == "arc-000009"
        assert item["type"] == "product"
        assert item["reason"] == "Expired batch"
        assert item["payload"]["id"] == "prd-000002"
        assert item["payload"]["is_archived"] is True
        assert "prd-000002" not in {p["id"] for p in mock_provider.list("products")}

        restored = mock_provider.restore("arc-000009")

        assert restored["id"] == "prd-000002"
        assert restored["is_archived"] is False
        assert restored["stock"] == product["stock"]
        assert mock_provider.get("products", "prd-000002")["name"] == product["name"]
        assert "arc-000009" not in {a["id"] for a in mock_provider.list("archived")}

    def test_restore_non_product_releases_item(self, mock_provider):
        products_before = mock_provider.list("products")

        released = mock_provider.restore("arc-000002")

        assert released["type"] == "transaction"
        assert len(mock_provider.list("archived")) == 7
        assert mock_provider.list("products") == products_before

    def test_archive_unknown_product(self, mock_provider):
        with pytest.raises(RecordNotFound):
            mock_provider.archive_product("prd-404404", "Gone")
