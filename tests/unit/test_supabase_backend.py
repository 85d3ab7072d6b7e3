"""Tests for the PostgREST client (providers/supabase_backend.py).

Requests are answered by ``httpx.MockTransport`` so the exact URLs,
query strings and headers the backend would see can be asserted.

Run with: uv run pytest tests/unit/test_supabase_backend.py -v
"""

from __future__ import annotations

from datetime import UTC, datetime

import httpx
import pytest

from medcure.config import Settings
from medcure.core.errors import RemoteFailure
from medcure.core.protocols import Filter
from medcure.providers.supabase_backend import SupabaseBackend


def _backend(handler, **overrides) -> tuple[SupabaseBackend, list[httpx.Request]]:
    """Backend wired to ``handler``; returns it plus the captured requests."""
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    settings = Settings(
        _env_file=None,
        backend_url=overrides.pop("backend_url", "https://abc.supabase.co/"),
        backend_api_key=overrides.pop("backend_api_key", "anon-key"),
        **overrides,
    )
    return SupabaseBackend(settings, transport=httpx.MockTransport(record)), seen


class TestRequests:
    @pytest.mark.anyio
    async def test_select_with_filters_and_order(self):
        backend, seen = _backend(lambda request: httpx.Response(200, json=[{"id": 1}]))

        rows = await backend.select(
            "products",
            filters=[
                Filter("is_archived", False),
                Filter("stock", 10, "lte"),
                Filter("name", "*para*", "ilike"),
                Filter("expiry_date", None, "is"),
            ],
            order="name.asc",
        )

        assert rows == [{"id": 1}]
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/products"
        assert request.url.params.multi_items() == [
            ("select", "*"),
            ("is_archived", "eq.false"),
            ("stock", "lte.10"),
            ("name", "ilike.*para*"),
            ("expiry_date", "is.null"),
            ("order", "name.asc"),
        ]
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["Authorization"] == "Bearer anon-key"

    @pytest.mark.anyio
    async def test_datetime_filter_is_iso(self):
        backend, seen = _backend(lambda request: httpx.Response(200, json=[]))
        start = datetime(2026, 3, 1, tzinfo=UTC)

        await backend.select("sales", filters=[Filter("created_at", start, "gte")])

        assert seen[0].url.params["created_at"] == "gte.2026-03-01T00:00:00+00:00"

    @pytest.mark.anyio
    async def test_insert_asks_for_representation(self):
        backend, seen = _backend(lambda request: httpx.Response(201, json=[{"id": 9, "name": "Zinc"}]))

        row = await backend.insert("products", {"name": "Zinc"})

        assert row == {"id": 9, "name": "Zinc"}
        assert seen[0].method == "POST"
        assert seen[0].headers["Prefer"] == "return=representation"

    @pytest.mark.anyio
    async def test_update_targets_id(self):
        backend, seen = _backend(lambda request: httpx.Response(200, json=[{"id": 9, "stock": 1}]))

        row = await backend.update("products", 9, {"stock": 1})

        assert row == {"id": 9, "stock": 1}
        assert seen[0].method == "PATCH"
        assert seen[0].url.params["id"] == "eq.9"

    @pytest.mark.anyio
    async def test_update_no_match_returns_none(self):
        backend, _ = _backend(lambda request: httpx.Response(200, json=[]))
        assert await backend.update("products", 404, {"stock": 1}) is None

    @pytest.mark.anyio
    async def test_delete_reports_match(self):
        backend, _ = _backend(lambda request: httpx.Response(200, json=[{"id": 3}]))
        assert await backend.delete("archived_items", 3) is True

        backend, _ = _backend(lambda request: httpx.Response(200, json=[]))
        assert await backend.delete("archived_items", 3) is False

    @pytest.mark.anyio
    async def test_upsert_merges_on_conflict(self):
        backend, seen = _backend(lambda request: httpx.Response(201, json=[{"key": "branding"}]))

        await backend.upsert("settings", [{"key": "branding", "data": {}}], on_conflict="key")

        assert seen[0].url.params["on_conflict"] == "key"
        assert seen[0].headers["Prefer"] == "resolution=merge-duplicates,return=representation"

    @pytest.mark.anyio
    async def test_rpc(self):
        backend, seen = _backend(lambda request: httpx.Response(200, json=[{"sale_id": 1}]))

        result = await backend.rpc("process_sale_transaction", {"sale_total": 10})

        assert result == [{"sale_id": 1}]
        assert seen[0].url.path == "/rest/v1/rpc/process_sale_transaction"

    @pytest.mark.anyio
    async def test_empty_body(self):
        backend, _ = _backend(lambda request: httpx.Response(204))
        assert await backend.select("products") == []


class TestFailures:
    """Every transport or HTTP failure surfaces as RemoteFailure."""

    @pytest.mark.anyio
    async def test_http_error_carries_status_and_message(self):
        backend, _ = _backend(
            lambda request: httpx.Response(409, json={"message": "duplicate key value", "code": "23505"}),
        )

        with pytest.raises(RemoteFailure) as exc_info:
            await backend.insert("products", {"name": "Zinc"})

        assert exc_info.value.status_code == 409
        assert "duplicate key value" in exc_info.value.message

    @pytest.mark.anyio
    async def test_connection_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        backend, _ = _backend(refuse)

        with pytest.raises(RemoteFailure) as exc_info:
            await backend.select("products")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.anyio
    async def test_invalid_json(self):
        backend, _ = _backend(lambda request: httpx.Response(200, content=b"<html>"))
        with pytest.raises(RemoteFailure, match="invalid JSON"):
            await backend.select("products")

    @pytest.mark.anyio
    async def test_unconfigured_backend_never_sends(self):
        backend, seen = _backend(lambda request: httpx.Response(200, json=[]), backend_url="")

        with pytest.raises(RemoteFailure, match="BACKEND_URL"):
            await backend.select("products")

        assert seen == []

    @pytest.mark.anyio
    async def test_aclose(self):
        backend, _ = _backend(lambda request: httpx.Response(200, json=[]))
        await backend.aclose()
