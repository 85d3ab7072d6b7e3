"""mode_store.py — Single source of truth for mock vs. live.

Resolution order on every read:
    1. Admin override (``set_mode``) if one is pinned.
    2. The configured ModeProbe, if any.
    3. The last known mode.

State is one ``Mode`` reference per slot, replaced wholesale, so a reader
always sees a value that was current at some instant of its call.

Called by: services/base.py (once per facade operation), api/routes/mode.py
Depends on: environment.py (Mode), protocols.py (ModeProbe)
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

from medcure.core.environment import Mode
from medcure.core.errors import ModeProbeFailure
from medcure.core.protocols import ModeProbe

logger = logging.getLogger(__name__)

# Modes resolved in the current request, newest last. The HTTP layer installs
# a fresh list per request; tasks spawned for the request inherit it.
_resolved_modes: ContextVar[list[Mode] | None] = ContextVar("resolved_modes", default=None)


def track_resolved_modes() -> list[Mode]:
    """Start recording every mode resolved in the current context."""
    resolved: list[Mode] = []
    _resolved_modes.set(resolved)
    return resolved


class ModeStore:
    """Process-wide data mode with an injectable external probe.

    Usage:
        store = ModeStore(Mode.MOCK, probe=EnvModeProbe(settings))
        if await store.is_mock_mode():
            ...
    """

    def __init__(self, initial: Mode | str = Mode.MOCK, *, probe: ModeProbe | None = None) -> None:
        self._last_known: Mode = Mode.parse(initial)
        self._override: Mode | None = None
        self._probe = probe

    @property
    def last_known(self) -> Mode:
        """The most recently resolved mode."""
        return self._last_known

    @property
    def probe(self) -> ModeProbe | None:
        return self._probe

    @property
    def is_pinned(self) -> bool:
        """True while an admin override is in force."""
        return self._override is not None

    async def current_mode(self) -> Mode:
        """Resolve the mode for one logical operation."""
        mode = await self._resolve()
        resolved = _resolved_modes.get()
        if resolved is not None:
            resolved.append(mode)
        return mode

    async def _resolve(self) -> Mode:
        override = self._override
        if override is not None:
            return override
        if self._probe is None:
            return self._last_known

        try:
            probed = await self._probe.read_mode()
        except ModeProbeFailure as exc:
            logger.warning(
                "Mode probe failed, keeping last known mode=%s: %s",
                self._last_known.value,
                exc.message,
            )
            return self._last_known
        except Exception:
            # Probes are third-party I/O; a data call must never fail here.
            logger.exception(
                "Mode probe raised unexpectedly, keeping last known mode=%s",
                self._last_known.value,
            )
            return self._last_known

        # An override pinned while the probe was in flight wins.
        override = self._override
        if override is not None:
            return override
        if probed is None:
            return self._last_known

        if probed is not self._last_known:
            logger.info("Data mode changed: %s → %s", self._last_known.value, probed.value)
        self._last_known = probed
        return probed

    async def is_mock_mode(self) -> bool:
        """True when the current operation should use simulated data."""
        return await self.current_mode() is Mode.MOCK

    def set_mode(self, mode: Mode | str) -> Mode:
        """Pin the data mode. Visible to the very next read.

        Raises:
            ValueError: If ``mode`` names no mode.
        """
        resolved = Mode.parse(mode)
        self._override = resolved
        self._last_known = resolved
        logger.info("Data mode pinned by admin: %s", resolved.value)
        return resolved

    def clear_override(self) -> None:
        """Release an admin pin so the probe decides again."""
        if self._override is not None:
            logger.info("Data mode pin released (was %s)", self._override.value)
        self._override = None
