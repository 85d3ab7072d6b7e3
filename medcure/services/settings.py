"""settings.py — Branding, profile and preference settings facade.

Mock mode reads and writes the durable ``SettingsPersistence`` record.
Live mode keeps one row per section in the remote ``settings`` table
(``{key, data}``) and applies the same default template and merge rules,
so the dashboard sees an identical shape either way.

Called by: api/routes/settings.py
Depends on: services/base.py, core/settings_store.py
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from medcure.core.errors import InvalidRecord, RecordNotFound
from medcure.core.mode_store import ModeStore
from medcure.core.protocols import BackendClient
from medcure.core.settings_store import SECTIONS, SettingsPersistence, SettingsRecord, non_object_sections
from medcure.mock.provider import MockDataProvider
from medcure.services.base import DataService

_TABLE = "settings"


class SettingsService(DataService):
    """Read, merge and reset the settings record."""

    domain = "settings"

    def __init__(
        self,
        mode_store: ModeStore,
        backend: BackendClient,
        mock: MockDataProvider,
        persistence: SettingsPersistence,
    ) -> None:
        super().__init__(mode_store, backend, mock)
        self._persistence = persistence

    async def _read_live(self) -> SettingsRecord:
        rows = await self._backend.select(_TABLE, columns="key,data")
        return SettingsRecord.from_dict({row["key"]: row["data"] for row in rows})

    async def get_settings(self) -> SettingsRecord:
        return await self._dispatch(
            "get_settings",
            live=self._read_live,
            mock=self._persistence.read,
        )

    async def get_section(self, name: str) -> Any:
        """One section of the record.

        Raises:
            RecordNotFound: If no such section exists.
        """

        def missing() -> RecordNotFound:
            return RecordNotFound(f"No settings section '{name}'", domain=self.domain)

        async def from_live() -> Any:
            record = await self._read_live()
            try:
                return record.section(name)
            except KeyError:
                raise missing() from None

        async def from_mock() -> Any:
            try:
                return await self._persistence.read_section(name)
            except KeyError:
                raise missing() from None

        return await self._dispatch("get_section", live=from_live, mock=from_mock)

    async def update_settings(self, partial: Mapping[str, Any]) -> SettingsRecord:
        """Deep-merge ``partial`` into the current record.

        Raises:
            InvalidRecord: If ``partial`` is empty, not an object, or sets a
                known section to anything but an object.
        """
        if not isinstance(partial, Mapping) or not partial:
            raise InvalidRecord("Settings update must be a non-empty object", domain=self.domain)
        invalid = non_object_sections(partial)
        if invalid:
            raise InvalidRecord(
                "Settings sections must be objects",
                domain=self.domain,
                errors=[f"{key}: expected an object" for key in invalid],
            )

        async def from_live() -> SettingsRecord:
            merged = (await self._read_live()).merge(partial)
            data = merged.to_dict()
            await self._backend.upsert(
                _TABLE,
                [{"key": key, "data": data[key]} for key in partial],
                on_conflict="key",
            )
            return merged

        return await self._dispatch(
            "update_settings",
            live=from_live,
            mock=lambda: self._persistence.write(partial),
        )

    async def reset_settings(self) -> SettingsRecord:
        """Restore the default template."""
        defaults = SettingsRecord.defaults()

        async def from_live() -> SettingsRecord:
            data = defaults.to_dict()
            await self._backend.upsert(
                _TABLE,
                [{"key": key, "data": data[key]} for key in SECTIONS],
                on_conflict="key",
            )
            return defaults

        return await self._dispatch(
            "reset_settings",
            live=from_live,
            mock=self._persistence.reset,
        )
