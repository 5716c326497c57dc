"""Tests for SQLiteInventoryStore against a real temporary database."""

import aiosqlite
import pytest

from stockpilot.core.entities.context import OperationContext
from stockpilot.core.entities.report import ItemReport, WarehouseReport
from stockpilot.core.exceptions import DatabaseError
from stockpilot.core.services.archival import (
    ItemReportSource,
    WarehouseReportSource,
    archive_warehouse,
    create_report_snapshot,
)
from stockpilot.core.services.ledger import add_stock, consume_stock
from stockpilot.infrastructure.storage.sqlite import get_connection


class TestWarehouses:
    async def test_empty_database(self, sqlite_store):
        assert await sqlite_store.load_warehouses() == []
        assert await sqlite_store.load_items() == []
        assert await sqlite_store.load_archived_reports() == []

    async def test_save_and_load(self, sqlite_store, warehouse):
        await sqlite_store.save_warehouses([warehouse])

        loaded = await sqlite_store.load_warehouses()

        assert loaded == [warehouse]

    async def test_save_replaces_collection(self, sqlite_store, warehouse):
        other = warehouse.model_copy(update={"id": "wh-2", "name": "Backroom"})
        await sqlite_store.save_warehouses([warehouse, other])

        renamed = warehouse.model_copy(update={"name": "Front Store", "is_archived": True})
        await sqlite_store.save_warehouses([renamed])

        loaded = await sqlite_store.load_warehouses()
        assert len(loaded) == 1
        assert loaded[0].name == "Front Store"
        assert loaded[0].is_archived


class TestItems:
    async def test_history_round_trip(self, sqlite_store, warehouse, make_item):
        item = make_item(warehouse, initial=100, movements=(-30, 5))
        await sqlite_store.save_items([item])

        loaded = await sqlite_store.load_items()

        assert len(loaded) == 1
        assert loaded[0] == item
        assert [e.quantity_after for e in loaded[0].history] == [100, 70, 75]

    async def test_appended_entries_persist(self, sqlite_store, warehouse, make_item, clock, ids):
        item = make_item(warehouse, initial=10)
        await sqlite_store.save_items([item])

        item = consume_stock(item, 4, "used", clock, ids).item
        item = add_stock(item, 1, None, clock, ids).item
        await sqlite_store.save_items([item])

        loaded = (await sqlite_store.load_items())[0]
        assert loaded.quantity == 7
        assert [e.change for e in loaded.history] == [10, -4, 1]
        assert loaded.history[1].comment == "used"

    async def test_stored_history_is_not_rewritten(self, sqlite_store, warehouse, make_item):
        item = make_item(warehouse, initial=10)
        await sqlite_store.save_items([item])

        tampered_entry = item.history[0].model_copy(update={"comment": "changed"})
        tampered = item.model_copy(update={"history": [tampered_entry]})
        await sqlite_store.save_items([tampered])

        loaded = (await sqlite_store.load_items())[0]
        assert loaded.history[0].comment == "Initial item creation"

    async def test_removed_items_lose_their_history(self, sqlite_store, warehouse, make_item):
        keep = make_item(warehouse, "Keep")
        drop = make_item(warehouse, "Drop", movements=(-1,))
        await sqlite_store.save_items([keep, drop])

        await sqlite_store.save_items([keep])

        assert [i.name for i in await sqlite_store.load_items()] == ["Keep"]
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM history_entries WHERE item_id = ?", (drop.id,)
            )
            assert (await cursor.fetchone())[0] == 0

    async def test_cascade_plan_saves(self, sqlite_store, warehouse, make_item, clock):
        items = [make_item(warehouse, "A"), make_item(warehouse, "B")]
        await sqlite_store.save_warehouses([warehouse])
        await sqlite_store.save_items(items)

        plan = archive_warehouse(warehouse, items, clock)
        await sqlite_store.save_warehouses([plan.warehouse])
        await sqlite_store.save_items(list(plan.items))

        assert all(i.is_archived for i in await sqlite_store.load_items())
        assert (await sqlite_store.load_warehouses())[0].is_archived

    async def test_failed_save_keeps_previous_collection(
        self, sqlite_store, warehouse, make_item
    ):
        item = make_item(warehouse, initial=5)
        await sqlite_store.save_items([item])

        # quantity CHECK constraint rejects the whole transaction
        broken = item.model_copy(update={"id": "other", "quantity": -1})
        with pytest.raises(DatabaseError):
            await sqlite_store.save_items([broken])

        assert await sqlite_store.load_items() == [item]

    async def test_malformed_row_is_skipped(self, sqlite_store, warehouse, make_item):
        item = make_item(warehouse)
        await sqlite_store.save_items([item])
        async with get_connection() as conn:
            await conn.execute(
                "INSERT INTO items VALUES ('bad', 'w', 'Bad', 1, 0, 'not-a-date', 'x')"
            )

        loaded = await sqlite_store.load_items()

        assert [i.id for i in loaded] == [item.id]

    async def test_unreadable_item_survives_later_save(
        self, sqlite_store, warehouse, make_item, clock, ids
    ):
        good = make_item(warehouse, "Good")
        bad = make_item(warehouse, "Bad")
        await sqlite_store.save_items([good, bad])
        async with get_connection() as conn:
            await conn.execute(
                "UPDATE items SET created_at = 'not-a-date' WHERE id = ?", (bad.id,)
            )

        loaded = await sqlite_store.load_items()
        assert [i.id for i in loaded] == [good.id]
        moved = add_stock(loaded[0], 5, None, clock, ids).item
        await sqlite_store.save_items([moved])

        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM items WHERE id = ?", (bad.id,))
            assert (await cursor.fetchone())[0] == 1
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM history_entries WHERE item_id = ?", (bad.id,)
            )
            assert (await cursor.fetchone())[0] == 1
            await conn.execute(
                "UPDATE items SET created_at = ? WHERE id = ?",
                (bad.created_at.isoformat(), bad.id),
            )
        assert {i.id for i in await sqlite_store.load_items()} == {good.id, bad.id}

    async def test_unreadable_warehouse_survives_later_save(self, sqlite_store, warehouse):
        other = warehouse.model_copy(update={"id": "wh-2", "name": "Backroom"})
        await sqlite_store.save_warehouses([warehouse, other])
        async with get_connection() as conn:
            await conn.execute("UPDATE warehouses SET updated_at = 'x' WHERE id = 'wh-2'")

        loaded = await sqlite_store.load_warehouses()
        await sqlite_store.save_warehouses(loaded)

        async with get_connection() as conn:
            cursor = await conn.execute("SELECT id FROM warehouses ORDER BY id")
            assert [row["id"] for row in await cursor.fetchall()] == ["wh-2", "wh-main"]


class TestArchivedReports:
    async def test_insert_only(self, sqlite_store, warehouse, make_item, clock, ids):
        item = make_item(warehouse)
        ctx = OperationContext(username="Admin")
        first = create_report_snapshot(
            ItemReportSource(warehouse=warehouse, item=item), ctx, clock, ids
        )
        await sqlite_store.save_archived_reports([first])

        second = create_report_snapshot(
            WarehouseReportSource(warehouse=warehouse, items=[item]), ctx, clock, ids
        )
        altered = first.model_copy(update={"printed_by": "Mallory"})
        await sqlite_store.save_archived_reports([altered, second])

        loaded = await sqlite_store.load_archived_reports()

        assert [type(r) for r in loaded] == [ItemReport, WarehouseReport]
        assert loaded[0].printed_by == "Admin"
        assert loaded[0].history_snapshot == first.history_snapshot
        assert loaded[1].items_snapshot[0].quantity == 100

    async def test_report_type_is_checked(self, sqlite_store):
        async with get_connection() as conn:
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute(
                    "INSERT INTO archived_reports VALUES ('r', 'BOGUS', 'a', 't', '{}')"
                )
