"""archived.py — Archive facade (products, transactions, suppliers, employees).

Live mode reads the ``archived_items`` view and moves records in and out of
the archive through database functions, so the product row and its archive
entry change together.

Called by: api/routes/archived.py
Depends on: services/base.py, core/analytics.py
"""

from __future__ import annotations

from typing import Any

from medcure.core import analytics
from medcure.core.errors import InvalidRecord, RecordNotFound
from medcure.core.protocols import Filter, Record
from medcure.services.base import DataService

_TABLE = "archived_items"


class ArchivedService(DataService):
    """Browse, archive, restore and purge archived records."""

    domain = "archived"

    async def list_archived(
        self,
        item_type: str = "all",
        *,
        search: str | None = None,
    ) -> list[Record]:
        """Archived items, most recently archived first."""
        if item_type != "all" and item_type not in analytics.ARCHIVE_TYPES:
            raise InvalidRecord(
                f"Unknown archive type '{item_type}'",
                domain=self.domain,
                errors=[f"type must be 'all' or one of: {list(analytics.ARCHIVE_TYPES)}"],
            )

        filters = []
        if item_type != "all":
            filters.append(Filter("type", item_type))
        if search:
            filters.append(Filter("name", f"*{search}*", "ilike"))

        def from_mock() -> list[Record]:
            rows = self._mock.list("archived")
            if item_type != "all":
                rows = [row for row in rows if row["type"] == item_type]
            if search:
                needle = search.lower()
                rows = [row for row in rows if needle in row["name"].lower()]
            return sorted(rows, key=lambda row: (row["archived_at"], row["id"]), reverse=True)

        return await self._dispatch(
            "list_archived",
            live=lambda: self._backend.select(_TABLE, filters=filters, order="archived_at.desc"),
            mock=from_mock,
        )

    async def archive_product(self, product_id: Any, reason: str = "Product archived") -> Record:
        if not isinstance(reason, str) or not reason.strip():
            raise InvalidRecord("An archive reason is required", domain=self.domain)

        async def from_live() -> Record:
            row = await self._backend.rpc("archive_product", {"product_id": product_id, "reason": reason})
            if not row:
                raise RecordNotFound(f"No products record with id '{product_id}'", domain="products")
            return row[0] if isinstance(row, list) else row

        return await self._dispatch(
            "archive_product",
            live=from_live,
            mock=lambda: self._mock.archive_product(product_id, reason),
        )

    async def restore_item(self, item_id: Any) -> Record:
        """Take an item out of the archive; products return to inventory."""
        async def from_live() -> Record:
            row = await self._backend.rpc("restore_archived_item", {"item_id": item_id})
            if not row:
                raise RecordNotFound(f"No archived record with id '{item_id}'", domain=self.domain)
            return row[0] if isinstance(row, list) else row

        return await self._dispatch(
            "restore_item",
            live=from_live,
            mock=lambda: self._mock.restore(item_id),
        )

    async def delete_item(self, item_id: Any) -> None:
        """Permanently delete an archived item."""
        async def from_live() -> None:
            if not await self._backend.delete(_TABLE, item_id):
                raise RecordNotFound(f"No archived record with id '{item_id}'", domain=self.domain)

        def from_mock() -> None:
            self._mock.delete("archived", item_id)

        await self._dispatch("delete_item", live=from_live, mock=from_mock)

    async def archived_stats(self) -> dict[str, Any]:
        items = await self._dispatch(
            "archived_stats",
            live=lambda: self._backend.select(_TABLE, columns="id,type"),
            mock=lambda: self._mock.list("archived"),
        )
        return analytics.archived_stats(items)
