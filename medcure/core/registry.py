"""Provider registry — resolves concrete implementations from config.

The registry is the single place where provider implementations are wired.
Service construction calls ``registry.get_backend()`` etc. and gets back a
concrete implementation based on the current config. Swapping providers is
a one-line env var change (e.g., MODE_SOURCE=redis).

Usage:
    from medcure.core.registry import get_provider_registry

    registry = get_provider_registry()
    probe = registry.get_mode_probe()
    storage = registry.get_settings_storage()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from medcure.config import get_settings
from medcure.core.protocols import BackendClient, ModeProbe, SettingsStorage

logger = logging.getLogger(__name__)

# ─── Provider Factory Map ──────────────────────────────────────────────────────
# Maps provider names to classes. Adding a new provider = one module in
# providers/ that calls register_provider() on import.

_BACKEND_FACTORIES: dict[str, type] = {}
_PROBE_FACTORIES: dict[str, type] = {}
_STORAGE_FACTORIES: dict[str, type] = {}


def register_provider(
    category: str,
    name: str,
    cls: type,
) -> None:
    """Register a provider implementation.

    Called by provider modules on import, or manually in tests.

    Args:
        category: One of 'backend', 'mode_probe', 'storage'
        name: Provider name (e.g., 'supabase', 'redis', 'file')
        cls: The provider class implementing the relevant Protocol
    """
    registry_map = {
        "backend": _BACKEND_FACTORIES,
        "mode_probe": _PROBE_FACTORIES,
        "storage": _STORAGE_FACTORIES,
    }

    target = registry_map.get(category)
    if target is None:
        raise ValueError(f"Unknown provider category: {category}")

    target[name] = cls
    logger.debug("Registered %s provider: %s", category, name)


class ProviderRegistry:
    """Singleton registry that resolves and caches provider instances."""

    def __init__(self) -> None:
        self._instances: dict[str, Any] = {}
        self._ensure_providers_loaded()

    def _ensure_providers_loaded(self) -> None:
        """Import all provider modules to trigger registration.

        Each provider module calls ``register_provider()`` on import.
        Modules with third-party dependencies are imported inside
        try/except so a missing optional SDK only disables that provider.
        """
        try:
            from medcure.providers import supabase_backend  # noqa: F401
        except ImportError:
            logger.debug("supabase_backend provider not available")
        try:
            from medcure.providers import redis_probe  # noqa: F401
        except ImportError:
            logger.debug("redis_probe provider not available")

        # Local providers have no external deps.
        from medcure.providers import env_probe, file_storage, memory_storage  # noqa: F401

    def _resolve(
        self,
        category: str,
        factories: dict[str, type],
        provider_name: str,
    ) -> Any:
        """Resolve and cache a provider instance."""
        cache_key = f"{category}:{provider_name}"
        if cache_key in self._instances:
            return self._instances[cache_key]

        cls = factories.get(provider_name)
        if cls is None:
            available = sorted(factories.keys())
            raise ValueError(
                f"Unknown {category} provider: '{provider_name}'. "
                f"Available: {available}"
            )

        instance = cls(get_settings())
        self._instances[cache_key] = instance
        logger.info("Initialized %s provider: %s", category, provider_name)
        return instance

    def get_backend(self, override: str | None = None) -> BackendClient:
        """Get the live backend client."""
        return self._resolve("backend", _BACKEND_FACTORIES, override or "supabase")

    def get_mode_probe(self, override: str | None = None) -> ModeProbe:
        """Get the configured mode probe."""
        name = override or get_settings().mode_source
        return self._resolve("mode_probe", _PROBE_FACTORIES, name)

    def get_settings_storage(self, override: str | None = None) -> SettingsStorage:
        """Get the configured raw settings storage."""
        name = override or get_settings().settings_storage
        return self._resolve("storage", _STORAGE_FACTORIES, name)

    async def aclose(self) -> None:
        """Close providers that hold network resources."""
        for instance in self._instances.values():
            closer = getattr(instance, "aclose", None)
            if closer is not None:
                await closer()
        self._instances.clear()


@lru_cache
def get_provider_registry() -> ProviderRegistry:
    """Get the singleton provider registry."""
    return ProviderRegistry()
