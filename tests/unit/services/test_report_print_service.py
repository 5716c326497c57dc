"""Tests for ReportPrintService."""

from unittest.mock import AsyncMock

import pytest

from stockpilot.core.entities.context import OperationContext
from stockpilot.core.entities.report import ItemReport, ReportType, TransactionsReport
from stockpilot.core.exceptions import (
    ItemNotFoundError,
    ReportNotFoundError,
    ReportRenderError,
    WarehouseNotFoundError,
)
from stockpilot.core.services.report_print_service import (
    IReportRenderer,
    ReportDocument,
    ReportPrintService,
)
from stockpilot.core.services.report_projector import TransactionFilter

ALICE = OperationContext(username="alice")


class RecordingRenderer(IReportRenderer):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.documents: list[ReportDocument] = []

    def render(self, document: ReportDocument) -> bytes:
        self.documents.append(document)
        if self.fail:
            raise RuntimeError("font missing")
        return b"%PDF-fake " + document.title.encode()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def mock_store(warehouse, make_item):
    widget = make_item(warehouse, "Widget", 100, movements=(-30,))
    store = AsyncMock()
    store.load_warehouses.return_value = [warehouse]
    store.load_items.return_value = [widget]
    store.load_archived_reports.return_value = []
    return store


@pytest.fixture
def service(renderer, mock_store, clock, ids):
    return ReportPrintService(renderer, mock_store, clock, ids)


class TestPrintItem:
    async def test_prints_and_archives(self, service, renderer, mock_store):
        item = mock_store.load_items.return_value[0]

        printed = await service.print_item(item.id, ALICE)

        assert printed.content.startswith(b"%PDF")
        assert printed.file_size == len(printed.content)
        assert printed.file_name.startswith("item_report_")
        assert printed.file_name.endswith(".pdf")
        assert not printed.reprint

        document = renderer.documents[0]
        assert document.title == "Item Transaction History Report"
        assert document.subtitle == "Warehouse: Main Store"
        assert ("Printed By", "alice") in document.details
        # history table is newest first
        assert document.table.rows[0][1] == "Stock Consumed"
        assert document.table.rows[0][2] == "-30"
        assert document.table.rows[1][2] == "+100"

        saved = mock_store.save_archived_reports.call_args[0][0]
        assert len(saved) == 1
        assert isinstance(saved[0], ItemReport)
        assert saved[0] is printed.report
        assert saved[0].printed_by == "alice"
        assert saved[0].quantity_snapshot == 70

    async def test_unknown_item(self, service, mock_store):
        with pytest.raises(ItemNotFoundError):
            await service.print_item("nope", ALICE)
        mock_store.save_archived_reports.assert_not_called()

    async def test_render_failure_leaves_no_snapshot(self, mock_store, clock, ids):
        service = ReportPrintService(RecordingRenderer(fail=True), mock_store, clock, ids)
        item = mock_store.load_items.return_value[0]

        with pytest.raises(ReportRenderError) as exc_info:
            await service.print_item(item.id, ALICE)

        assert exc_info.value.code == "REPORT_RENDER_FAILED"
        mock_store.save_archived_reports.assert_not_called()


class TestPrintWarehouse:
    async def test_warehouse_report(self, service, renderer, mock_store, warehouse):
        printed = await service.print_warehouse(warehouse.id, ALICE)

        assert printed.report.report_type == ReportType.WAREHOUSE
        assert [(s.name, s.quantity) for s in printed.report.items_snapshot] == [("Widget", 70)]
        assert renderer.documents[0].table.rows == (("Widget", "70"),)
        assert ("Description", "Ground floor") in renderer.documents[0].details

    async def test_unknown_warehouse(self, service):
        with pytest.raises(WarehouseNotFoundError):
            await service.print_warehouse("nope", ALICE)


class TestPrintTransactions:
    async def test_title_and_rows(self, service, renderer, mock_store, warehouse):
        printed = await service.print_transactions(
            TransactionFilter(warehouse_id=warehouse.id), ALICE
        )

        assert isinstance(printed.report, TransactionsReport)
        assert printed.report.report_title_snapshot == "Transactions for Main Store"
        assert len(printed.report.transactions_snapshot) == 2
        document = renderer.documents[0]
        assert document.title == "Transactions for Main Store"
        assert document.subtitle == "Stock Pilot - Transaction Report"
        assert printed.file_name.startswith("transactions_report_")

    async def test_empty_feed_still_prints(self, service, renderer):
        printed = await service.print_transactions(
            TransactionFilter(warehouse_id="missing"), ALICE
        )
        assert printed.report.transactions_snapshot == ()
        assert renderer.documents[0].table.rows == ()


class TestReprint:
    async def test_reprint_renders_snapshot_without_archiving(
        self, service, renderer, mock_store
    ):
        item = mock_store.load_items.return_value[0]
        printed = await service.print_item(item.id, ALICE)
        mock_store.load_archived_reports.return_value = [printed.report]
        mock_store.save_archived_reports.reset_mock()

        again = await service.reprint(printed.report.id)

        assert again.reprint
        assert again.report is printed.report
        assert again.file_name == printed.file_name
        assert renderer.documents[1].table.rows == renderer.documents[0].table.rows
        mock_store.save_archived_reports.assert_not_called()

    async def test_unknown_report(self, service):
        with pytest.raises(ReportNotFoundError):
            await service.reprint("missing")
