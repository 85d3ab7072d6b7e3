"""env_probe.py — Mode probe backed by an environment variable.

Reads ``MODE_ENV_VAR`` (default ``DATA_MODE``) from ``os.environ`` on every
call, so a supervisor that rewrites the process environment, or a test
using ``monkeypatch.setenv``, takes effect without a restart.

Called by: core/mode_store.py (via registry) when MODE_SOURCE=env
"""

from __future__ import annotations

import os

from medcure.config import Settings
from medcure.core.environment import Mode
from medcure.core.errors import ModeProbeFailure
from medcure.core.registry import register_provider


class EnvModeProbe:
    """Resolve the mode from the process environment."""

    def __init__(self, settings: Settings) -> None:
        self._var = settings.mode_env_var

    async def read_mode(self) -> Mode | None:
        raw = os.environ.get(self._var)
        if raw is None or not raw.strip():
            return None
        try:
            return Mode.parse(raw)
        except ValueError as exc:
            raise ModeProbeFailure(f"{self._var}={raw!r} is not a data mode") from exc


register_provider("mode_probe", "env", EnvModeProbe)
