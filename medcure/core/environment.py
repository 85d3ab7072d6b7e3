"""environment.py — Data mode definitions and startup validation.

Mode overview:
    mock → Simulated collections, settings persisted to local storage.
    live → Remote Supabase backend for every domain.

Mode sources:
    env   → DATA_MODE (or MODE_ENV_VAR) read on every probe.
    redis → Shared flag key, lets one admin toggle flip all workers.

Called by: main.py (startup), core/mode_store.py, api/routes/health.py
Depends on: config.py (Settings)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import urlparse

from medcure.config import get_settings

logger = logging.getLogger(__name__)

# ─── Modes ────────────────────────────────────────────────────────────────────


class Mode(str, Enum):
    """Which data path a facade call takes."""

    MOCK = "mock"
    LIVE = "live"

    @classmethod
    def parse(cls, value: Mode | str) -> Mode:
        """Coerce a ``Mode`` or its case-insensitive string value.

        Raises:
            ValueError: If ``value`` names no mode.
        """
        if isinstance(value, Mode):
            return value
        normalized = str(value).strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Invalid data mode '{value}'. Must be one of: {sorted(VALID_MODES)}"
            ) from None


VALID_MODES = frozenset(mode.value for mode in Mode)

VALID_MODE_SOURCES = frozenset({"env", "redis"})
VALID_STORAGES = frozenset({"file", "memory"})


# ─── Environment Info ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class EnvironmentInfo:
    """Immutable snapshot of the data-mode configuration.

    Returned by ``get_environment_info()`` and used by the health and mode
    endpoints.
    """

    mode: str                  # "mock" | "live" (currently resolved)
    configured_mode: str       # DATA_MODE at startup
    mode_source: str           # "env" | "redis"
    pinned: bool               # True while an admin override is active
    app_env: str
    version: str


def get_environment_info(mode: Mode, *, pinned: bool = False) -> EnvironmentInfo:
    """Build an EnvironmentInfo snapshot for an already-resolved mode."""
    settings = get_settings()
    return EnvironmentInfo(
        mode=mode.value,
        configured_mode=settings.data_mode,
        mode_source=settings.mode_source,
        pinned=pinned,
        app_env=settings.app_env,
        version="0.1.0",
    )


# ─── Startup Validation ──────────────────────────────────────────────────────


def validate_environment() -> None:
    """Validate the data-layer configuration on startup.

    Checks:
        - DATA_MODE, MODE_SOURCE and SETTINGS_STORAGE are recognized.
        - Live mode has a usable BACKEND_URL.
        - Logs warnings for live mode without an API key.

    Called by: main.py ``lifespan()`` on app startup.

    Raises:
        ValueError: If a mode/source/storage name is not recognized.
        RuntimeError: If live mode is configured without a backend URL.
    """
    settings = get_settings()

    if settings.data_mode.strip().lower() not in VALID_MODES:
        raise ValueError(
            f"Invalid DATA_MODE='{settings.data_mode}'. "
            f"Must be one of: {sorted(VALID_MODES)}"
        )
    if settings.mode_source not in VALID_MODE_SOURCES:
        raise ValueError(
            f"Invalid MODE_SOURCE='{settings.mode_source}'. "
            f"Must be one of: {sorted(VALID_MODE_SOURCES)}"
        )
    if settings.settings_storage not in VALID_STORAGES:
        raise ValueError(
            f"Invalid SETTINGS_STORAGE='{settings.settings_storage}'. "
            f"Must be one of: {sorted(VALID_STORAGES)}"
        )

    logger.info(
        "Environment initialized: mode=%s, source=%s, env=%s",
        settings.data_mode,
        settings.mode_source,
        settings.app_env,
    )

    backend_url = settings.normalized_backend_url
    parsed = urlparse(backend_url)
    has_backend = parsed.scheme in {"http", "https"} and bool(parsed.netloc)

    if settings.is_mock:
        logger.info("🎭 MOCK MODE — simulated data, settings in %s storage.", settings.settings_storage)
        if not has_backend:
            # WHY: A runtime toggle to live would fail every call; say so now.
            logger.warning("BACKEND_URL not set — switching to live mode will fail until it is.")
        return

    logger.info("🚀 LIVE MODE — all domains served by %s", backend_url or "<unset>")
    if not has_backend:
        raise RuntimeError("Live mode requires BACKEND_URL to be a full http(s) URL.")
    if not settings.backend_api_key:
        logger.warning("BACKEND_API_KEY not set — backend requests will be anonymous.")


def to_dict(info: EnvironmentInfo) -> dict[str, Any]:
    """Serialize EnvironmentInfo to a JSON-safe dict."""
    return {
        "mode": info.mode,
        "configured_mode": info.configured_mode,
        "mode_source": info.mode_source,
        "pinned": info.pinned,
        "app_env": info.app_env,
        "version": info.version,
    }
