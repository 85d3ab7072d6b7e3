"""Tests for /health and the admin mode toggle (routes/health.py, routes/mode.py).

Run with: uv run pytest tests/api/routes/test_mode_routes.py -v
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from medcure.core.environment import Mode
from medcure.core.errors import ModeProbeFailure


@pytest.mark.anyio
async def test_health(api_client: AsyncClient):
    """GET /health should report the resolved mode and tag the response."""
    response = await api_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["mode"] == "mock"
    assert response.headers["X-MedCure-Mode"] == "mock"
    assert response.headers["X-Request-ID"]


@pytest.mark.anyio
async def test_request_id_is_echoed(api_client: AsyncClient):
    response = await api_client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.anyio
async def test_get_mode(api_client: AsyncClient):
    response = await api_client.get("/api/v1/mode")

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "mock"
    assert data["pinned"] is False
    assert set(data) == {"mode", "configured_mode", "mode_source", "pinned", "app_env", "version"}


@pytest.mark.anyio
async def test_pin_live_then_clear(api_client: AsyncClient, services):
    """PUT pins the mode for the very next call; DELETE releases it."""
    response = await api_client.put("/api/v1/mode", json={"mode": "live"})

    assert response.status_code == 200
    assert response.json()["mode"] == "live"
    assert response.json()["pinned"] is True
    assert response.headers["X-MedCure-Mode"] == "live"
    assert await services.mode_store.current_mode() is Mode.LIVE

    response = await api_client.delete("/api/v1/mode")

    assert response.status_code == 200
    assert response.json()["pinned"] is False
    assert services.mode_store.is_pinned is False


@pytest.mark.anyio
async def test_pin_rejects_unknown_mode(api_client: AsyncClient, services):
    response = await api_client.put("/api/v1/mode", json={"mode": "staging"})

    assert response.status_code == 422
    assert services.mode_store.is_pinned is False


@pytest.mark.anyio
async def test_broadcast_without_publishing_probe(api_client: AsyncClient, services):
    """The test store has no probe, so there is nothing to broadcast to."""
    response = await api_client.put("/api/v1/mode", json={"mode": "live", "broadcast": True})

    assert response.status_code == 409
    assert services.mode_store.is_pinned is False


@pytest.mark.anyio
async def test_broadcast_publishes_to_probe(api_client: AsyncClient, services):
    probe = MagicMock()
    probe.read_mode = AsyncMock(return_value=None)
    probe.publish = AsyncMock()
    services.mode_store._probe = probe

    response = await api_client.put("/api/v1/mode", json={"mode": "live", "broadcast": True})

    assert response.status_code == 200
    probe.publish.assert_awaited_once_with(Mode.LIVE)


@pytest.mark.anyio
async def test_broadcast_failure_keeps_local_pin(api_client: AsyncClient, services):
    probe = MagicMock()
    probe.read_mode = AsyncMock(return_value=None)
    probe.publish = AsyncMock(side_effect=ModeProbeFailure("redis down"))
    services.mode_store._probe = probe

    response = await api_client.put("/api/v1/mode", json={"mode": "live", "broadcast": True})

    assert response.status_code == 503
    assert services.mode_store.last_known is Mode.LIVE
