"""redis_probe.py — Mode probe backed by a shared Redis key.

One ``SET medcure:data_mode live`` flips every worker process at once.
An unset key means "no opinion"; an unreachable Redis is a probe failure,
which ModeStore absorbs by keeping the last known mode.

Called by: core/mode_store.py (via registry) when MODE_SOURCE=redis
Depends on: redis (asyncio client)
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from medcure.config import Settings
from medcure.core.environment import Mode
from medcure.core.errors import ModeProbeFailure
from medcure.core.registry import register_provider

logger = logging.getLogger(__name__)


class RedisModeProbe:
    """Resolve the mode from ``MODE_FLAG_KEY`` in Redis."""

    def __init__(self, settings: Settings, *, client: aioredis.Redis | None = None) -> None:
        self._key = settings.mode_flag_key
        self._client = client or aioredis.from_url(settings.redis_url, decode_responses=True)

    async def read_mode(self) -> Mode | None:
        try:
            raw = await self._client.get(self._key)
        except (RedisError, OSError) as exc:
            raise ModeProbeFailure(f"Redis mode flag unreadable: {exc}") from exc

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        try:
            return Mode.parse(raw)
        except ValueError as exc:
            raise ModeProbeFailure(f"Redis key {self._key}={raw!r} is not a data mode") from exc

    async def publish(self, mode: Mode) -> None:
        """Write the shared flag so other workers follow."""
        try:
            await self._client.set(self._key, mode.value)
        except (RedisError, OSError) as exc:
            raise ModeProbeFailure(f"Redis mode flag unwritable: {exc}") from exc
        logger.info("Published data mode %s to redis key %s", mode.value, self._key)

    async def aclose(self) -> None:
        await self._client.aclose()


register_provider("mode_probe", "redis", RedisModeProbe)
