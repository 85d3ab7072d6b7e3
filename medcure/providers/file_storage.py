"""file_storage.py — Durable SettingsStorage, one file per key.

The on-disk analogue of browser localStorage: ``get_item``/``set_item``
deal in raw strings, and the caller owns the format. Writes go to a
temporary file first and are swapped in with ``os.replace``, so a crash
mid-write leaves the previous value intact.

Called by: core/settings_store.py (via registry) when SETTINGS_STORAGE=file
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path

from medcure.config import Settings
from medcure.core.registry import register_provider

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileStorage:
    """Raw string storage under ``SETTINGS_STORE_DIR``."""

    def __init__(self, settings: Settings) -> None:
        self._root = Path(settings.settings_store_dir)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    def _read(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            # Binary garbage reads as an unparseable value; the caller heals it.
            return path.read_bytes().decode("utf-8", errors="replace")

    def _write(self, key: str, value: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)
        logger.debug("Stored %d bytes under '%s' in %s", len(value), key, self._root)

    async def remove_item(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)


register_provider("storage", "file", FileStorage)
