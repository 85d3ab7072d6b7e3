"""supabase_backend.py — Live BackendClient over Supabase's PostgREST API.

Maps the generic CRUD protocol onto ``{BACKEND_URL}/rest/v1``:

    select  → GET    /{table}?select=*&col=op.value&order=...
    insert  → POST   /{table}              Prefer: return=representation
    update  → PATCH  /{table}?id=eq.{id}   Prefer: return=representation
    delete  → DELETE /{table}?id=eq.{id}   Prefer: return=representation
    upsert  → POST   /{table}?on_conflict= Prefer: resolution=merge-duplicates
    rpc     → POST   /rpc/{function}

Every transport or HTTP error becomes ``RemoteFailure``.

Called by: services/* (live strategy) via registry
Depends on: httpx, protocols.py (Filter)
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import httpx

from medcure.config import Settings
from medcure.core.errors import RemoteFailure
from medcure.core.protocols import Filter, Record
from medcure.core.registry import register_provider

logger = logging.getLogger(__name__)

_RETURN_REPRESENTATION = "return=representation"


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _error_detail(response: httpx.Response) -> str:
    """Pull PostgREST's ``message`` out of an error body when present."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)[:200]


class SupabaseBackend:
    """Thin async PostgREST client.

    Usage:
        Set BACKEND_URL and BACKEND_API_KEY, then switch the data mode to live.
    """

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._base_url = settings.normalized_backend_url
        headers = {"Accept": "application/json"}
        if settings.backend_api_key:
            headers["apikey"] = settings.backend_api_key
            headers["Authorization"] = f"Bearer {settings.backend_api_key}"

        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/rest/v1" if self._base_url else "http://backend.invalid/rest/v1",
            headers=headers,
            timeout=settings.backend_timeout,
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        if not self._base_url:
            raise RemoteFailure("BACKEND_URL is not configured")

        headers = {"Prefer": prefer} if prefer else None
        try:
            response = await self._client.request(method, path, params=params, json=json, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Backend %s %s failed: %s", method, path, status)
            raise RemoteFailure(
                f"{method} {path} rejected ({status}): {_error_detail(exc.response)}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Backend %s %s unreachable: %s", method, path, exc)
            raise RemoteFailure(f"{method} {path} failed: {exc}") from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteFailure(f"{method} {path} returned invalid JSON") from exc

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: list[Filter] | None = None,
        order: str | None = None,
    ) -> list[Record]:
        params = [("select", columns)]
        params.extend((f.column, f"{f.op}.{_format_value(f.value)}") for f in filters or [])
        if order:
            params.append(("order", order))
        rows = await self._request("GET", f"/{table}", params=params)
        return rows or []

    async def insert(self, table: str, row: Record) -> Record:
        rows = await self._request("POST", f"/{table}", json=row, prefer=_RETURN_REPRESENTATION)
        if not rows:
            raise RemoteFailure(f"Insert into {table} returned no row")
        return rows[0]

    async def update(self, table: str, record_id: Any, changes: Record) -> Record | None:
        rows = await self._request(
            "PATCH",
            f"/{table}",
            params=[("id", f"eq.{_format_value(record_id)}")],
            json=changes,
            prefer=_RETURN_REPRESENTATION,
        )
        return rows[0] if rows else None

    async def delete(self, table: str, record_id: Any) -> bool:
        rows = await self._request(
            "DELETE",
            f"/{table}",
            params=[("id", f"eq.{_format_value(record_id)}")],
            prefer=_RETURN_REPRESENTATION,
        )
        return bool(rows)

    async def upsert(self, table: str, rows: list[Record], *, on_conflict: str = "id") -> list[Record]:
        stored = await self._request(
            "POST",
            f"/{table}",
            params=[("on_conflict", on_conflict)],
            json=rows,
            prefer=f"resolution=merge-duplicates,{_RETURN_REPRESENTATION}",
        )
        return stored or []

    async def rpc(self, function: str, params: Record) -> Any:
        return await self._request("POST", f"/rpc/{function}", json=params)

    async def aclose(self) -> None:
        await self._client.aclose()


# ─── Provider Registration ────────────────────────────────────────────────────

register_provider("backend", "supabase", SupabaseBackend)
