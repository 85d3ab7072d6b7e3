"""Global pytest fixtures."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from medcure.core.environment import Mode
from medcure.core.mode_store import ModeStore
from medcure.core.settings_store import SettingsPersistence
from medcure.mock.provider import MockDataProvider
from medcure.providers.memory_storage import MemoryStorage
from medcure.services import DataServices, build_services

FIXED_NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def now() -> datetime:
    """The frozen clock reading used by mock_provider."""
    return FIXED_NOW


@pytest.fixture
def backend() -> MagicMock:
    """Mock BackendClient; every method is an AsyncMock."""
    client = MagicMock()
    client.select = AsyncMock(return_value=[])
    client.insert = AsyncMock()
    client.update = AsyncMock()
    client.delete = AsyncMock(return_value=True)
    client.upsert = AsyncMock(return_value=[])
    client.rpc = AsyncMock()
    return client


@pytest.fixture
def mock_provider() -> MockDataProvider:
    """Small seeded provider with a frozen clock."""
    return MockDataProvider(
        seed=7,
        product_count=10,
        sales_count=20,
        archived_count=8,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def persistence(storage: MemoryStorage) -> SettingsPersistence:
    return SettingsPersistence(storage, key="mockSettings")


@pytest.fixture
def make_services(backend, mock_provider, persistence):
    """Build facades pinned to a given mode, sharing the fixtures above."""

    def _make(mode: Mode = Mode.MOCK) -> DataServices:
        return build_services(
            registry=MagicMock(),
            mode_store=ModeStore(mode),
            backend=backend,
            persistence=persistence,
            mock=mock_provider,
        )

    return _make


@pytest.fixture
def services(make_services) -> DataServices:
    """Facades in mock mode."""
    return make_services(Mode.MOCK)


@pytest.fixture
async def api_client(services: DataServices):
    """Async client against the real app with test facades installed.

    WHY: ASGITransport does not run the lifespan, so the facades are put
    on ``app.state`` directly; deps.get_services picks them up.
    """
    from medcure.main import create_app

    app = create_app()
    app.state.services = services
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
