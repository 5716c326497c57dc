"""SQLite implementation of inventory storage."""

from collections import defaultdict
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import aiosqlite

from stockpilot.config import get_logger
from stockpilot.core.entities.inventory import (
    HistoryEntry,
    HistoryEntryType,
    Item,
    Warehouse,
)
from stockpilot.core.entities.report import ArchivedReport, archived_report_adapter
from stockpilot.core.exceptions import DatabaseError
from stockpilot.core.interfaces.inventory_store import IInventoryStore
from stockpilot.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from stockpilot.infrastructure.storage.sqlite.migrations import initialize_database

logger = get_logger(__name__)

# Errors that mean a stored row cannot be turned back into an entity
_ROW_ERRORS = (ValueError, TypeError, KeyError)


def _parse_ts(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo is not None else ts.replace(tzinfo=UTC)


class SQLiteInventoryStore(IInventoryStore):
    """
    SQLite implementation of whole-collection inventory storage.

    Warehouses and items are upserted and rows missing from the saved
    collection are deleted, all in one transaction. Rows that no longer load
    as entities are never deleted this way. History rows are only
    ever inserted, keyed by (item_id, seq), so a stored entry is never
    rewritten. Archived reports use INSERT OR IGNORE.
    """

    async def initialize(self) -> None:
        """Apply pending schema migrations to the configured database."""
        try:
            results = await initialize_database()
        except (aiosqlite.Error, OSError) as e:
            raise DatabaseError("initialize", str(e)) from e
        failed = [r for r in results if not r.success]
        if failed:
            raise DatabaseError("migrate", failed[0].error or "migration failed")

    # Warehouses

    async def load_warehouses(self) -> list[Warehouse]:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM warehouses ORDER BY created_at, id"
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("load_warehouses", str(e)) from e

        warehouses = []
        for row in rows:
            try:
                warehouses.append(self._row_to_warehouse(row))
            except _ROW_ERRORS as e:
                logger.warning(
                    "stored_data_malformed",
                    collection="warehouses",
                    record_id=row["id"],
                    error=str(e),
                )
        return warehouses

    async def save_warehouses(self, warehouses: list[Warehouse]) -> None:
        try:
            async with get_transaction() as conn:
                await self._delete_missing(
                    conn,
                    "warehouses",
                    [w.id for w in warehouses],
                    self._warehouse_readable,
                )
                await conn.executemany(
                    """
                    INSERT INTO warehouses (
                        id, name, description, is_archived, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name,
                        description = excluded.description,
                        is_archived = excluded.is_archived,
                        updated_at = excluded.updated_at
                    """,
                    [
                        (
                            w.id,
                            w.name,
                            w.description,
                            int(w.is_archived),
                            w.created_at.isoformat(),
                            w.updated_at.isoformat(),
                        )
                        for w in warehouses
                    ],
                )
        except aiosqlite.Error as e:
            raise DatabaseError("save_warehouses", str(e)) from e
        logger.debug("warehouses_saved", count=len(warehouses))

    # Items

    async def load_items(self) -> list[Item]:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute("SELECT * FROM items ORDER BY created_at, id")
                item_rows = await cursor.fetchall()
                cursor = await conn.execute(
                    "SELECT * FROM history_entries ORDER BY item_id, seq"
                )
                entry_rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("load_items", str(e)) from e

        history: dict[str, list[aiosqlite.Row]] = defaultdict(list)
        for row in entry_rows:
            history[row["item_id"]].append(row)

        items = []
        for row in item_rows:
            try:
                items.append(self._row_to_item(row, history.get(row["id"], [])))
            except _ROW_ERRORS as e:
                logger.warning(
                    "stored_data_malformed",
                    collection="items",
                    record_id=row["id"],
                    error=str(e),
                )
        return items

    async def save_items(self, items: list[Item]) -> None:
        try:
            async with get_transaction() as conn:
                await self._delete_missing(
                    conn, "items", [i.id for i in items], self._item_readable
                )
                await conn.executemany(
                    """
                    INSERT INTO items (
                        id, warehouse_id, name, quantity, is_archived,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name,
                        quantity = excluded.quantity,
                        is_archived = excluded.is_archived,
                        updated_at = excluded.updated_at
                    """,
                    [
                        (
                            i.id,
                            i.warehouse_id,
                            i.name,
                            i.quantity,
                            int(i.is_archived),
                            i.created_at.isoformat(),
                            i.updated_at.isoformat(),
                        )
                        for i in items
                    ],
                )
                await conn.executemany(
                    """
                    INSERT OR IGNORE INTO history_entries (
                        item_id, seq, id, type, change, quantity_before,
                        quantity_after, comment, timestamp
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            item.id,
                            seq,
                            e.id,
                            e.type.value,
                            e.change,
                            e.quantity_before,
                            e.quantity_after,
                            e.comment,
                            e.timestamp.isoformat(),
                        )
                        for item in items
                        for seq, e in enumerate(item.history)
                    ],
                )
        except aiosqlite.Error as e:
            raise DatabaseError("save_items", str(e)) from e
        logger.debug("items_saved", count=len(items))

    # Archived reports

    async def load_archived_reports(self) -> list[ArchivedReport]:
        try:
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT id, payload_json FROM archived_reports ORDER BY printed_at, id"
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("load_archived_reports", str(e)) from e

        reports = []
        for row in rows:
            try:
                reports.append(archived_report_adapter.validate_json(row["payload_json"]))
            except _ROW_ERRORS as e:
                logger.warning(
                    "stored_data_malformed",
                    collection="archived_reports",
                    record_id=row["id"],
                    error=str(e),
                )
        return reports

    async def save_archived_reports(self, reports: list[ArchivedReport]) -> None:
        try:
            async with get_transaction() as conn:
                cursor = await conn.executemany(
                    """
                    INSERT OR IGNORE INTO archived_reports (
                        id, report_type, printed_by, printed_at, payload_json
                    ) VALUES (?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            r.id,
                            r.report_type.value,
                            r.printed_by,
                            r.printed_at.isoformat(),
                            r.model_dump_json(),
                        )
                        for r in reports
                    ],
                )
                inserted = cursor.rowcount
        except aiosqlite.Error as e:
            raise DatabaseError("save_archived_reports", str(e)) from e
        logger.debug("archived_reports_saved", inserted=inserted)

    # Helpers

    @staticmethod
    async def _delete_missing(
        conn: aiosqlite.Connection,
        table: str,
        keep_ids: list[str],
        readable: Callable[[aiosqlite.Connection, aiosqlite.Row], Awaitable[bool]],
    ) -> None:
        """
        Delete rows left out of a saved collection.

        A row that does not load as an entity was never handed out, so its
        absence from the collection is not a removal. It stays stored.
        """
        keep = set(keep_ids)
        cursor = await conn.execute(f"SELECT * FROM {table}")
        stale = []
        for row in await cursor.fetchall():
            if row["id"] in keep:
                continue
            if await readable(conn, row):
                stale.append(row["id"])
            else:
                logger.warning(
                    "stored_data_preserved", collection=table, record_id=row["id"]
                )
        if stale:
            await conn.executemany(
                f"DELETE FROM {table} WHERE id = ?", [(i,) for i in stale]
            )

    @classmethod
    async def _warehouse_readable(
        cls, conn: aiosqlite.Connection, row: aiosqlite.Row
    ) -> bool:
        try:
            cls._row_to_warehouse(row)
        except _ROW_ERRORS:
            return False
        return True

    @classmethod
    async def _item_readable(cls, conn: aiosqlite.Connection, row: aiosqlite.Row) -> bool:
        cursor = await conn.execute(
            "SELECT * FROM history_entries WHERE item_id = ? ORDER BY seq", (row["id"],)
        )
        entry_rows = list(await cursor.fetchall())
        try:
            cls._row_to_item(row, entry_rows)
        except _ROW_ERRORS:
            return False
        return True

    @staticmethod
    def _row_to_warehouse(row: aiosqlite.Row) -> Warehouse:
        """Convert a database row to a Warehouse entity."""
        return Warehouse(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            is_archived=bool(row["is_archived"]),
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
        )

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            type=HistoryEntryType(row["type"]),
            change=row["change"],
            quantity_before=row["quantity_before"],
            quantity_after=row["quantity_after"],
            comment=row["comment"],
            timestamp=_parse_ts(row["timestamp"]),
        )

    @classmethod
    def _row_to_item(cls, row: aiosqlite.Row, entry_rows: list[aiosqlite.Row]) -> Item:
        """Convert an item row and its history rows to an Item entity."""
        return Item(
            id=row["id"],
            warehouse_id=row["warehouse_id"],
            name=row["name"],
            quantity=row["quantity"],
            history=[cls._row_to_entry(r) for r in entry_rows],
            is_archived=bool(row["is_archived"]),
            created_at=_parse_ts(row["created_at"]),
            updated_at=_parse_ts(row["updated_at"]),
        )
