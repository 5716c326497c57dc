"""Tests for the archival policy and report snapshots."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from stockpilot.core.entities.context import OperationContext
from stockpilot.core.entities.report import (
    ItemReport,
    ReportType,
    TransactionsReport,
    WarehouseReport,
)
from stockpilot.core.services.archival import (
    ItemReportSource,
    TransactionsReportSource,
    WarehouseReportSource,
    archive_item,
    archive_warehouse,
    create_report_snapshot,
    restore_item,
    restore_warehouse,
)
from stockpilot.core.services.ledger import add_stock
from stockpilot.core.services.report_projector import TransactionFeed

T0 = datetime(2024, 1, 15, 9, 0, tzinfo=UTC)

ADMIN = OperationContext(username="Admin")


class TestArchiveWarehouse:
    def test_cascade_skips_already_archived(self, warehouse, make_item, clock):
        a = make_item(warehouse, "A")
        b = make_item(warehouse, "B").model_copy(update={"is_archived": True})
        b_updated_at = b.updated_at
        elsewhere = make_item(warehouse.model_copy(update={"id": "wh-2"}), "C")

        plan = archive_warehouse(warehouse, [a, b, elsewhere], clock)

        assert plan.warehouse.is_archived
        assert plan.archived_item_ids == (a.id,)
        by_id = {i.id: i for i in plan.items}
        assert by_id[a.id].is_archived
        assert by_id[a.id].updated_at == plan.warehouse.updated_at
        assert by_id[b.id].updated_at == b_updated_at
        assert not by_id[elsewhere.id].is_archived
        # inputs are untouched
        assert not warehouse.is_archived
        assert not a.is_archived

    def test_empty_warehouse(self, warehouse, clock):
        plan = archive_warehouse(warehouse, [], clock)
        assert plan.items == ()
        assert plan.archived_item_ids == ()

    def test_restore_does_not_cascade(self, warehouse, make_item, clock):
        item = make_item(warehouse)
        plan = archive_warehouse(warehouse, [item], clock)

        restored = restore_warehouse(plan.warehouse, clock)

        assert not restored.is_archived
        assert restored.updated_at > plan.warehouse.updated_at
        assert all(i.is_archived for i in plan.items)


class TestItemArchival:
    def test_archive_and_restore_touch_warehouse(self, warehouse, make_item, clock):
        item = make_item(warehouse)

        archived = archive_item(item, warehouse, clock)
        assert archived.item.is_archived
        assert archived.warehouse.updated_at == archived.item.updated_at

        restored = restore_item(archived.item, archived.warehouse, clock)
        assert not restored.item.is_archived
        assert restored.item.history == item.history
        assert restored.item.quantity == item.quantity

    def test_missing_warehouse(self, warehouse, make_item, clock):
        result = archive_item(make_item(warehouse), None, clock)
        assert result.warehouse is None
        assert result.item.is_archived


class TestReportSnapshots:
    def test_item_snapshot_is_independent(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse, initial=10)

        report = create_report_snapshot(
            ItemReportSource(warehouse=warehouse, item=item), ADMIN, clock, ids
        )
        later = add_stock(item, 5, None, clock, ids).item

        assert isinstance(report, ItemReport)
        assert report.report_type == ReportType.ITEM
        assert report.printed_by == "Admin"
        assert report.warehouse_name == "Main Store"
        assert report.quantity_snapshot == 10
        assert len(report.history_snapshot) == 1
        assert later.quantity == 15

    def test_snapshot_is_frozen(self, warehouse, make_item, clock, ids):
        report = create_report_snapshot(
            ItemReportSource(warehouse=warehouse, item=make_item(warehouse)),
            ADMIN,
            clock,
            ids,
        )
        with pytest.raises(PydanticValidationError):
            report.quantity_snapshot = 0
        with pytest.raises(PydanticValidationError):
            report.history_snapshot[0].change = 1

    def test_warehouse_snapshot_has_active_items_only(self, warehouse, make_item, clock, ids):
        active = make_item(warehouse, "Active", 3)
        archived = make_item(warehouse, "Old", 9).model_copy(update={"is_archived": True})

        report = create_report_snapshot(
            WarehouseReportSource(warehouse=warehouse, items=[active, archived]),
            ADMIN,
            clock,
            ids,
        )

        assert isinstance(report, WarehouseReport)
        assert report.warehouse_description == "Ground floor"
        assert [(s.name, s.quantity) for s in report.items_snapshot] == [("Active", 3)]

    def test_transactions_snapshot(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse, movements=(-1,))
        rows = TransactionFeed([warehouse], [item]).to_list()

        report = create_report_snapshot(
            TransactionsReportSource(title="All Transactions", transactions=rows),
            ADMIN,
            clock,
            ids,
        )

        assert isinstance(report, TransactionsReport)
        assert report.report_title_snapshot == "All Transactions"
        assert len(report.transactions_snapshot) == 2
        assert not hasattr(report, "quantity_snapshot")

    def test_unknown_source(self, clock, ids):
        with pytest.raises(TypeError):
            create_report_snapshot(object(), ADMIN, clock, ids)
