"""Tests for the JSON document-file inventory store."""

import json
from pathlib import Path

import pytest

from stockpilot.core.entities.context import OperationContext
from stockpilot.core.entities.report import ItemReport
from stockpilot.core.services.archival import ItemReportSource, create_report_snapshot
from stockpilot.infrastructure.storage import (
    JsonFileInventoryStore,
    SQLiteInventoryStore,
    create_inventory_store,
)


@pytest.fixture
def json_path(tmp_path: Path) -> Path:
    return tmp_path / "store" / "inventory.json"


@pytest.fixture
async def json_store(json_path: Path) -> JsonFileInventoryStore:
    store = JsonFileInventoryStore(json_path)
    await store.initialize()
    return store


class TestJsonFileInventoryStore:
    async def test_initialize_creates_empty_document(self, json_store, json_path):
        assert json.loads(json_path.read_text()) == {
            "warehouses": [],
            "items": [],
            "archived_reports": [],
        }

    async def test_initialize_keeps_existing_document(self, json_store, json_path, warehouse):
        await json_store.save_warehouses([warehouse])
        await JsonFileInventoryStore(json_path).initialize()
        assert await json_store.load_warehouses() == [warehouse]

    async def test_round_trip(self, json_store, warehouse, make_item):
        item = make_item(warehouse, initial=100, movements=(-30,))
        await json_store.save_warehouses([warehouse])
        await json_store.save_items([item])

        assert await json_store.load_warehouses() == [warehouse]
        assert await json_store.load_items() == [item]

    async def test_collections_saved_independently(self, json_store, warehouse, make_item):
        item = make_item(warehouse)
        await json_store.save_items([item])
        await json_store.save_warehouses([warehouse])
        await json_store.save_warehouses([])

        assert await json_store.load_items() == [item]
        assert await json_store.load_warehouses() == []

    async def test_reports_insert_only(self, json_store, warehouse, make_item, clock, ids):
        item = make_item(warehouse)
        report = create_report_snapshot(
            ItemReportSource(warehouse=warehouse, item=item),
            OperationContext(username="Admin"),
            clock,
            ids,
        )
        await json_store.save_archived_reports([report])
        await json_store.save_archived_reports(
            [report.model_copy(update={"printed_by": "Mallory"})]
        )

        loaded = await json_store.load_archived_reports()

        assert len(loaded) == 1
        assert isinstance(loaded[0], ItemReport)
        assert loaded[0].printed_by == "Admin"

    async def test_missing_file_loads_empty(self, tmp_path):
        store = JsonFileInventoryStore(tmp_path / "absent.json")
        assert await store.load_items() == []

    async def test_malformed_file_loads_empty(self, json_path, json_store):
        json_path.write_text("{not json")
        assert await json_store.load_warehouses() == []
        assert await json_store.load_archived_reports() == []

    async def test_malformed_records_are_skipped(self, json_path, json_store, warehouse):
        good = warehouse.model_dump(mode="json")
        json_path.write_text(
            json.dumps({"warehouses": [good, {"id": "broken"}], "items": "nope"})
        )

        assert [w.id for w in await json_store.load_warehouses()] == ["wh-main"]
        assert await json_store.load_items() == []

    async def test_unreadable_item_survives_later_save(
        self, json_path, json_store, warehouse, make_item
    ):
        good = make_item(warehouse, "Good")
        bad = make_item(warehouse, "Bad").model_dump(mode="json")
        bad["quantity"] = "many"
        json_path.write_text(
            json.dumps(
                {
                    "warehouses": [],
                    "items": [good.model_dump(mode="json"), bad],
                    "archived_reports": [],
                }
            )
        )

        loaded = await json_store.load_items()
        assert [i.id for i in loaded] == [good.id]
        await json_store.save_items(loaded)

        stored = json.loads(json_path.read_text())["items"]
        assert bad in stored
        assert len(stored) == 2

    async def test_malformed_file_is_set_aside_before_save(
        self, json_path, json_store, warehouse
    ):
        json_path.write_text("{not json")

        await json_store.save_warehouses([warehouse])

        backups = list(json_path.parent.glob("inventory.json.corrupt-*"))
        assert len(backups) == 1
        assert backups[0].read_text() == "{not json"
        assert await json_store.load_warehouses() == [warehouse]

    async def test_report_collection_that_is_not_a_list(
        self, json_path, json_store, warehouse, make_item, clock, ids
    ):
        json_path.write_text(
            json.dumps({"warehouses": [], "items": [], "archived_reports": {"k": "v"}})
        )
        report = create_report_snapshot(
            ItemReportSource(warehouse=warehouse, item=make_item(warehouse)),
            OperationContext(username="Admin"),
            clock,
            ids,
        )

        await json_store.save_archived_reports([report])

        stored = json.loads(json_path.read_text())["archived_reports"]
        assert [r["id"] for r in stored] == [report.id]
        assert len(list(json_path.parent.glob("inventory.json.corrupt-*"))) == 1

    async def test_no_temp_files_left(self, json_path, json_store, warehouse):
        await json_store.save_warehouses([warehouse])
        assert [p.name for p in json_path.parent.iterdir()] == ["inventory.json"]


class TestCreateInventoryStore:
    async def test_backends(self, isolated_settings):
        assert isinstance(create_inventory_store("json"), JsonFileInventoryStore)
        assert isinstance(create_inventory_store("sqlite"), SQLiteInventoryStore)
        assert isinstance(create_inventory_store(), SQLiteInventoryStore)

    async def test_unknown_backend(self, isolated_settings):
        with pytest.raises(ValueError):
            create_inventory_store("postgres")
