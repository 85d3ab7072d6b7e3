"""memory_storage.py — Per-process SettingsStorage.

Same raw-string contract as FileStorage, kept in a dict. Used by tests and
throwaway demos where settings should vanish with the process.

Called by: core/settings_store.py (via registry) when SETTINGS_STORAGE=memory
"""

from __future__ import annotations

from medcure.config import Settings
from medcure.core.registry import register_provider


class MemoryStorage:
    """Dict-backed raw string storage."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._items: dict[str, str] = {}

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


register_provider("storage", "memory", MemoryStorage)
