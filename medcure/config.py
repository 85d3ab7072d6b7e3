"""Application settings via pydantic-settings.

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  DEVELOPER QUICK-START  — What env vars do I need?
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#
#  DATA_MODE picks the data path every service call starts from:
#
#    mock  → Simulated products/sales/archive, settings kept in a local
#            JSON file.  No backend, no keys.
#            Keys needed: NONE
#
#    live  → Real Supabase (PostgREST) backend.
#            Keys needed: BACKEND_URL, BACKEND_API_KEY
#
# ─── Mode Source ──────────────────────────────────────────────────────────────
#
#   MODE_SOURCE=env    → DATA_MODE env var is re-read on every call
#   MODE_SOURCE=redis  → REDIS_URL key MODE_FLAG_KEY holds "mock" | "live",
#                        shared by every worker process
#
#   An admin can always pin the mode at runtime (PUT /api/v1/mode); the pin
#   wins over the probe until it is cleared.
#
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration loaded from environment variables.

    Called by: Every module that needs configuration (via ``get_settings()``).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App
    app_env: str = "development"
    log_level: str = "INFO"
    # Comma-separated dashboard origins allowed by CORS.
    allowed_origins: str = "http://localhost:3000"

    # ─── Data Mode ────────────────────────────────────────────────────────────
    # "mock" = simulated data, "live" = remote backend
    data_mode: str = "mock"
    # Where the mode signal comes from: "env" | "redis"
    mode_source: str = "env"
    # Env var consulted by the env probe on every read.
    mode_env_var: str = "DATA_MODE"

    # Redis  (shared mode flag)
    redis_url: str = "redis://localhost:6379/0"
    mode_flag_key: str = "medcure:data_mode"

    # ─── Simulated Settings Persistence ───────────────────────────────────────
    # "file" survives restarts, "memory" is per-process (tests, demos).
    settings_storage: str = "file"
    settings_store_dir: str = ".medcure/storage"
    settings_store_key: str = "mockSettings"

    # ─── Live Backend (Supabase / PostgREST) ──────────────────────────────────
    backend_url: str = ""
    backend_api_key: str = ""
    backend_timeout: float = 10.0

    # ─── Mock Data ────────────────────────────────────────────────────────────
    mock_seed: int = 1337
    mock_product_count: int = 40
    mock_sales_count: int = 120
    mock_archived_count: int = 12

    # ─── Computed Properties ──────────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        """True when app_env is explicitly set to 'production'."""
        return self.app_env == "production"

    @property
    def is_mock(self) -> bool:
        """True when the configured starting mode is mock."""
        return self.data_mode.strip().lower() == "mock"

    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a normalized list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def normalized_backend_url(self) -> str:
        """Return BACKEND_URL without a trailing slash."""
        return self.backend_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
