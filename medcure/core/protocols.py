"""Provider protocols — abstract interfaces for everything outside the core.

The facades only ever talk to these protocols. Concrete implementations live
in ``medcure/providers`` and are wired by ``core/registry.py``:

    BackendClient    → providers/supabase_backend.py (httpx)
    ModeProbe        → providers/env_probe.py, providers/redis_probe.py
    SettingsStorage  → providers/file_storage.py, providers/memory_storage.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from medcure.core.environment import Mode

# A record as exchanged with the backend and returned to callers.
Record = dict[str, Any]

# ─── Data Structures ──────────────────────────────────────────────────────────

FILTER_OPS = frozenset({"eq", "neq", "gt", "gte", "lt", "lte", "ilike", "is"})


@dataclass(frozen=True)
class Filter:
    """A single column predicate for ``BackendClient.select``."""

    column: str
    value: Any
    op: str = "eq"  # one of FILTER_OPS

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter op '{self.op}'. Must be one of: {sorted(FILTER_OPS)}")


# ─── Protocols ─────────────────────────────────────────────────────────────────


@runtime_checkable
class BackendClient(Protocol):
    """Async CRUD over remote tables.

    Every failure must surface as ``RemoteFailure``.
    """

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: list[Filter] | None = None,
        order: str | None = None,
    ) -> list[Record]:
        """Return rows matching all filters.

        ``columns`` is a PostgREST select list and may embed related tables.
        """
        ...

    async def insert(self, table: str, row: Record) -> Record:
        """Insert one row and return it as stored."""
        ...

    async def update(self, table: str, record_id: Any, changes: Record) -> Record | None:
        """Patch one row by id. Returns None when no row matched."""
        ...

    async def delete(self, table: str, record_id: Any) -> bool:
        """Delete one row by id. Returns False when no row matched."""
        ...

    async def upsert(self, table: str, rows: list[Record], *, on_conflict: str = "id") -> list[Record]:
        """Insert-or-merge rows keyed by ``on_conflict``."""
        ...

    async def rpc(self, function: str, params: Record) -> Any:
        """Call a server-side function (atomic multi-table operations)."""
        ...


@runtime_checkable
class ModeProbe(Protocol):
    """External signal for the data mode.

    Returns None when the source has no opinion (e.g. flag unset).
    Raises ``ModeProbeFailure`` when the source is unreachable or garbled.
    """

    async def read_mode(self) -> Mode | None:
        ...


@runtime_checkable
class SettingsStorage(Protocol):
    """Raw string key-value storage, the durable half of mock settings."""

    async def get_item(self, key: str) -> str | None:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...
