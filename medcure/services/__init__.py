"""Data service facades — the only data entry point for application code.

Design rules:
- Routes call ONLY the facades in this package.
- Every facade method resolves the data mode once, then runs either its
  live or its mock strategy (see base.py).
- No env var reads here (config-only).
"""

from __future__ import annotations

from dataclasses import dataclass

from medcure.config import Settings, get_settings
from medcure.core.mode_store import ModeStore
from medcure.core.protocols import BackendClient
from medcure.core.registry import ProviderRegistry, get_provider_registry
from medcure.core.settings_store import SettingsPersistence
from medcure.mock.provider import MockDataProvider
from medcure.services.archived import ArchivedService
from medcure.services.products import ProductService
from medcure.services.sales import SalesService
from medcure.services.settings import SettingsService


@dataclass(frozen=True)
class DataServices:
    """Every facade sharing one ModeStore, backend and mock provider."""

    mode_store: ModeStore
    mock: MockDataProvider
    products: ProductService
    sales: SalesService
    settings: SettingsService
    archived: ArchivedService


def build_services(
    settings: Settings | None = None,
    *,
    registry: ProviderRegistry | None = None,
    mode_store: ModeStore | None = None,
    backend: BackendClient | None = None,
    persistence: SettingsPersistence | None = None,
    mock: MockDataProvider | None = None,
) -> DataServices:
    """Wire the facades from configuration.

    Any collaborator can be passed in to replace the configured one, which
    is how tests pin the mode or count backend calls.
    """
    settings = settings or get_settings()
    registry = registry or get_provider_registry()

    if mode_store is None:
        mode_store = ModeStore(settings.data_mode, probe=registry.get_mode_probe())
    if backend is None:
        backend = registry.get_backend()
    if persistence is None:
        persistence = SettingsPersistence(registry.get_settings_storage(), key=settings.settings_store_key)
    if mock is None:
        mock = MockDataProvider(
            seed=settings.mock_seed,
            product_count=settings.mock_product_count,
            sales_count=settings.mock_sales_count,
            archived_count=settings.mock_archived_count,
        )

    return DataServices(
        mode_store=mode_store,
        mock=mock,
        products=ProductService(mode_store, backend, mock),
        sales=SalesService(mode_store, backend, mock),
        settings=SettingsService(mode_store, backend, mock, persistence),
        archived=ArchivedService(mode_store, backend, mock),
    )


__all__ = [
    "ArchivedService",
    "DataServices",
    "ProductService",
    "SalesService",
    "SettingsService",
    "build_services",
]
