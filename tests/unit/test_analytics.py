"""Tests for the shared dashboard aggregations (core/analytics.py)."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from medcure.core import analytics

SALES = [
    {
        "id": "s1",
        "total": 100.0,
        "payment_method": "cash",
        "status": "completed",
        "created_at": "2026-03-01T08:15:00Z",
        "items": [
            {"product_id": "p1", "category": "Analgesic", "quantity": 2, "unit_price": 20.0, "subtotal": 40.0},
            {"product_id": "p2", "category": "Supplement", "quantity": 1, "unit_price": 60.0, "subtotal": 60.0},
        ],
    },
    {
        "id": "s2",
        "total": 50.5,
        "payment_method": "gcash",
        "status": "completed",
        "created_at": "2026-03-01T08:45:00+00:00",
        "items": [
            {"product_id": "p1", "category": "Analgesic", "quantity": 1, "unit_price": 50.5, "subtotal": 50.5},
        ],
    },
    {
        "id": "s3",
        "total": 999.0,
        "payment_method": "card",
        "status": "reversed",
        "created_at": "2026-03-01T09:00:00Z",
        "items": [
            {"product_id": "p3", "category": "Antibiotic", "quantity": 3, "unit_price": 333.0, "subtotal": 999.0},
        ],
    },
    {
        "id": "s4",
        "total": 10.0,
        "payment_method": "cash",
        "status": "completed",
        "created_at": "2026-03-02T23:59:00Z",
        "items": [
            {"product_id": "p4", "quantity": 1, "unit_price": 10.0, "subtotal": 10.0},
        ],
    },
]


class TestTimestamps:
    def test_z_suffix_and_naive_are_utc(self):
        assert analytics.parse_timestamp("2026-03-01T08:15:00Z") == datetime(2026, 3, 1, 8, 15, tzinfo=UTC)
        assert analytics.parse_timestamp("2026-03-01T08:15:00").tzinfo is not None

    def test_filter_by_range_is_half_open(self):
        start = datetime(2026, 3, 1, 8, 45, tzinfo=UTC)
        end = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)
        selected = analytics.filter_by_range(SALES, start, end)
        assert [sale["id"] for sale in selected] == ["s2"]


class TestSalesAggregates:
    def test_sale_totals(self):
        totals = analytics.calculate_sale_totals(SALES[0]["items"])
        assert totals == {"subtotal": 100.0, "total_items": 3, "average_item_price": 33.33}

    def test_by_hour_has_24_buckets_and_skips_reversed(self):
        rows = analytics.sales_by_hour(SALES, date(2026, 3, 1))

        assert len(rows) == 24
        assert rows[8] == {"hour": "08:00", "sales": 2, "revenue": 150.5}
        assert rows[9] == {"hour": "09:00", "sales": 0, "revenue": 0.0}
        assert sum(row["sales"] for row in rows) == 2

    def test_by_category_sorted_by_revenue(self):
        rows = analytics.sales_by_category(SALES)

        assert [row["category"] for row in rows] == ["Analgesic", "Supplement", "Other"]
        assert rows[0] == {"category": "Analgesic", "revenue": 90.5, "quantity": 3, "transactions": 2}

    def test_summary(self):
        summary = analytics.sales_summary(SALES)

        assert summary["total_sales"] == 3
        assert summary["reversed_sales"] == 1
        assert summary["total_revenue"] == 160.5
        assert summary["average_sale"] == 53.5
        assert summary["items_sold"] == 5
        assert summary["by_payment_method"] == {"cash": 110.0, "gcash": 50.5}

    def test_summary_of_nothing(self):
        summary = analytics.sales_summary([])
        assert summary["total_sales"] == 0
        assert summary["average_sale"] == 0

    def test_same_input_same_output(self):
        """Aggregates are pure, so mock and live agree on identical rows."""
        assert analytics.sales_summary(SALES) == analytics.sales_summary(list(reversed(SALES)))
        assert analytics.sales_by_category(SALES) == analytics.sales_by_category(list(reversed(SALES)))


class TestInventory:
    PRODUCTS = [
        {"name": "A", "category": "Analgesic", "stock": 0, "cost_price": 1.0, "selling_price": 2.0},
        {"name": "B", "category": "Analgesic", "stock": 5, "cost_price": 2.0, "selling_price": 3.0},
        {"name": "C", "category": "Supplement", "stock": 50, "cost_price": 1.5, "selling_price": 2.5},
        {"name": "D", "category": "Supplement", "stock": 8, "cost_price": 1.0, "selling_price": 1.0, "is_archived": True},
    ]

    @pytest.mark.parametrize(("stock", "expected"), [(0, True), (10, True), (11, False)])
    def test_is_low_stock(self, stock, expected):
        assert analytics.is_low_stock({"stock": stock}, 10) is expected

    def test_summary_ignores_archived(self):
        summary = analytics.inventory_summary(self.PRODUCTS, 10)

        assert summary["total_products"] == 3
        assert summary["total_stock"] == 55
        assert summary["stock_value"] == 85.0
        assert summary["retail_value"] == 140.0
        assert summary["low_stock_count"] == 1
        assert summary["out_of_stock_count"] == 1
        assert summary["categories"] == {"Analgesic": 2, "Supplement": 1}


class TestArchive:
    def test_stats_include_every_type(self):
        stats = analytics.archived_stats([{"type": "product"}, {"type": "product"}, {"type": "employee"}])
        assert stats == {
            "total": 3,
            "by_type": {"product": 2, "transaction": 0, "supplier": 0, "employee": 1},
        }
