"""settings_store.py — Durable simulated settings (branding, profile, ...).

The whole record lives under one namespaced storage key as a JSON object:

    {"branding": {...}, "profile": {...}, "preferences": {...}, <unknown>: ...}

Reads merge the stored object onto ``DEFAULT_SETTINGS`` so callers always get
every section. Writes deep-merge a partial onto the stored record, so a
branding write never touches profile. Unknown keys ride along untouched.

Called by: services/settings.py (mock path)
Depends on: protocols.py (SettingsStorage), errors.py
"""

from __future__ import annotations

import asyncio
import copy
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from medcure.core.errors import LocalStateFailure
from medcure.core.protocols import SettingsStorage

logger = logging.getLogger(__name__)

# ─── Default Template ─────────────────────────────────────────────────────────

SECTIONS = ("branding", "profile", "preferences")

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "branding": {
        "business_name": "MedCure Pharmacy",
        "tagline": "Your Trusted Healthcare Partner",
        "logo_url": "",
        "primary_color": "#2563eb",
        "secondary_color": "#10B981",
        "accent_color": "#F59E0B",
        "theme": "light",
    },
    "profile": {
        "full_name": "",
        "email": "admin@medcure.com",
        "phone": "",
        "avatar_url": "",
        "job_title": "System Administrator",
    },
    "preferences": {
        "currency": "PHP",
        "timezone": "Asia/Manila",
        "language": "en",
        "notifications": True,
        "low_stock_threshold": 10,
        "expiry_warning_days": 30,
    },
}


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new dict with ``override`` merged into ``base``.

    Mappings merge key by key at every depth. Anything else in ``override``
    (scalars, lists, None) replaces the base value as a deep copy.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def non_object_sections(partial: Mapping[str, Any]) -> list[str]:
    """Known sections in ``partial`` whose value is not a mapping."""
    return [key for key in SECTIONS if key in partial and not isinstance(partial[key], Mapping)]


def merge_with_defaults(stored: Mapping[str, Any]) -> dict[str, Any]:
    """Lay a stored object over the default template.

    A known section whose stored value is not a mapping is treated as
    corrupt and falls back to that section's defaults.
    """
    merged: dict[str, Any] = copy.deepcopy(DEFAULT_SETTINGS)
    for key, value in stored.items():
        if key in DEFAULT_SETTINGS:
            if isinstance(value, Mapping):
                merged[key] = deep_merge(merged[key], value)
            else:
                logger.warning("Settings section '%s' is %s, not an object; using defaults", key, type(value).__name__)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


# ─── Record Type ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SettingsRecord:
    """A structurally complete settings record.

    ``extra`` holds every top-level key outside ``SECTIONS`` so newer
    front ends can store sections this backend does not know yet.
    """

    branding: dict[str, Any]
    profile: dict[str, Any]
    preferences: dict[str, Any]
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def defaults(cls) -> SettingsRecord:
        return cls.from_dict({})

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SettingsRecord:
        merged = merge_with_defaults(data)
        return cls(
            branding=merged.pop("branding"),
            profile=merged.pop("profile"),
            preferences=merged.pop("preferences"),
            extra=merged,
        )

    def to_dict(self) -> dict[str, Any]:
        data = copy.deepcopy(self.extra)
        data["branding"] = copy.deepcopy(self.branding)
        data["profile"] = copy.deepcopy(self.profile)
        data["preferences"] = copy.deepcopy(self.preferences)
        return data

    def section(self, name: str) -> Any:
        """Return one section by name, known or extra.

        Raises:
            KeyError: If the record has no such section.
        """
        if name in SECTIONS:
            return copy.deepcopy(getattr(self, name))
        return copy.deepcopy(self.extra[name])

    def merge(self, partial: Mapping[str, Any]) -> SettingsRecord:
        return SettingsRecord.from_dict(deep_merge(self.to_dict(), partial))


# ─── Persistence ──────────────────────────────────────────────────────────────


class SettingsPersistence:
    """Read-merge-write access to the single settings record.

    Writers serialize on an ``asyncio.Lock`` so interleaved writes merge
    instead of overwriting each other.
    """

    def __init__(self, storage: SettingsStorage, *, key: str = "mockSettings") -> None:
        self._storage = storage
        self._key = key
        self._lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    async def read(self) -> SettingsRecord:
        """Return the stored record merged onto defaults.

        Missing data reads as defaults. Unparseable data is logged and
        replaced in storage by the defaults.

        Raises:
            LocalStateFailure: If the storage itself cannot be read.
        """
        raw = await self._load()
        stored = self._decode(raw)
        if stored is None:
            if raw is not None:
                await self._heal(raw)
            return SettingsRecord.defaults()
        return SettingsRecord.from_dict(stored)

    async def write(self, partial: Mapping[str, Any]) -> SettingsRecord:
        """Deep-merge ``partial`` into the stored record and persist it.

        Raises:
            LocalStateFailure: If ``partial`` is not a JSON-serializable
                mapping, sets a known section to a non-object (nothing is
                written), or the storage cannot be read or written.
        """
        if not isinstance(partial, Mapping):
            raise LocalStateFailure(
                f"Settings update must be an object, got {type(partial).__name__}",
                domain="settings",
            )
        invalid = non_object_sections(partial)
        if invalid:
            raise LocalStateFailure(
                f"Settings sections must be objects: {', '.join(invalid)}",
                domain="settings",
            )

        async with self._lock:
            raw = await self._load()
            stored = self._decode(raw) or {}
            updated = SettingsRecord.from_dict(deep_merge(stored, partial))
            await self._save(updated.to_dict())

        logger.debug("Settings written: sections=%s", sorted(partial.keys()))
        return updated

    async def reset(self) -> SettingsRecord:
        """Clear the stored record and return the default template."""
        async with self._lock:
            try:
                await self._storage.remove_item(self._key)
            except OSError as exc:
                raise LocalStateFailure(f"Could not clear settings: {exc}", domain="settings") from exc
        logger.info("Settings reset to defaults (key=%s)", self._key)
        return SettingsRecord.defaults()

    async def read_section(self, name: str) -> Any:
        """Return one section of ``read()``.

        Raises:
            KeyError: If the record has no such section.
        """
        record = await self.read()
        return record.section(name)

    # ─── Internals ────────────────────────────────────────────────────────────

    async def _load(self) -> str | None:
        try:
            return await self._storage.get_item(self._key)
        except OSError as exc:
            raise LocalStateFailure(f"Could not read settings: {exc}", domain="settings") from exc

    async def _save(self, data: dict[str, Any]) -> None:
        try:
            payload = json.dumps(data, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise LocalStateFailure(f"Settings are not JSON-serializable: {exc}", domain="settings") from exc
        try:
            await self._storage.set_item(self._key, payload)
        except OSError as exc:
            raise LocalStateFailure(f"Could not write settings: {exc}", domain="settings") from exc

    def _decode(self, raw: str | None) -> dict[str, Any] | None:
        """Parse stored JSON. None means missing or corrupt."""
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Stored settings under '%s' are not valid JSON: %s", self._key, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Stored settings under '%s' are %s, not an object", self._key, type(data).__name__)
            return None
        return data

    async def _heal(self, corrupt_raw: str) -> None:
        """Replace corrupt stored data with the defaults."""
        async with self._lock:
            # A writer may already have replaced the bad value.
            if await self._load() != corrupt_raw:
                return
            await self._save(SettingsRecord.defaults().to_dict())
        logger.warning("Corrupt settings under '%s' replaced with defaults", self._key)
