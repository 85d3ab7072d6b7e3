"""Tests for request/response schemas (models/schemas.py)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from medcure.models.schemas import ArchiveRequest, ModeUpdate, ProductCreate, ProductUpdate, SaleCreate


def test_mode_update_defaults():
    body = ModeUpdate(mode="live")
    assert body.broadcast is False


def test_mode_update_rejects_unknown_mode():
    with pytest.raises(ValidationError):
        ModeUpdate(mode="sandbox")


def test_product_create_keeps_extra_columns():
    body = ProductCreate(name="Ibuprofen", category="Analgesic", selling_price=4.0, generic_name="ibuprofen")
    dumped = body.model_dump(exclude_none=True)
    assert dumped["generic_name"] == "ibuprofen"
    assert dumped["stock"] == 0
    assert "expiry_date" not in dumped


def test_product_update_only_dumps_sent_fields():
    body = ProductUpdate(stock=3)
    assert body.model_dump(exclude_unset=True) == {"stock": 3}


def test_sale_create_requires_items():
    with pytest.raises(ValidationError):
        SaleCreate(items=[])


def test_archive_request_default_reason():
    assert ArchiveRequest().reason == "Product archived"
    with pytest.raises(ValidationError):
        ArchiveRequest(reason="")
