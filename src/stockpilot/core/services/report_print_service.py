"""
Report printing service.

Builds a printable document for an item, a warehouse or a filtered
transaction feed, hands it to an injected IReportRenderer and only after a
successful render archives a snapshot of what was printed. A failed render
leaves no archived report behind.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from stockpilot.config import get_logger
from stockpilot.core.entities.context import OperationContext
from stockpilot.core.entities.inventory import HistoryEntry, Warehouse
from stockpilot.core.entities.report import (
    ArchivedReport,
    FlattenedTransaction,
    ItemQuantitySnapshot,
    ItemReport,
    ReportType,
    TransactionsReport,
    WarehouseReport,
)
from stockpilot.core.exceptions import (
    ItemNotFoundError,
    ReportNotFoundError,
    ReportRenderError,
    WarehouseNotFoundError,
)
from stockpilot.core.interfaces.clock import IClock, IIdGenerator
from stockpilot.core.interfaces.inventory_store import IInventoryStore
from stockpilot.core.services.archival import (
    ItemReportSource,
    ReportSource,
    TransactionsReportSource,
    WarehouseReportSource,
    create_report_snapshot,
)
from stockpilot.core.services.report_projector import (
    TransactionFeed,
    TransactionFilter,
    newest_first,
    report_title,
    warehouse_item_listing,
)

logger = get_logger(__name__)

TRANSACTIONS_SUBTITLE = "Stock Pilot - Transaction Report"


@dataclass(frozen=True)
class ReportTable:
    """Tabular body of a printable report."""

    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    empty_message: str
    # indexes of columns rendered centered (numbers)
    numeric_columns: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ReportDocument:
    """Renderer-neutral description of one printed report."""

    report_type: ReportType
    title: str
    subtitle: str | None
    printed_by: str
    printed_at: datetime
    details: tuple[tuple[str, str], ...]
    section: str
    table: ReportTable
    file_name: str


class IReportRenderer(ABC):
    """Interface for report rendering implementations."""

    @abstractmethod
    def render(self, document: ReportDocument) -> bytes:
        """Render a report document into printable bytes."""
        pass


@dataclass
class PrintedReport:
    """Result of printing or re-printing a report."""

    content: bytes
    file_name: str
    report: ArchivedReport
    reprint: bool = False

    @property
    def file_size(self) -> int:
        return len(self.content)


def _signed(change: int) -> str:
    return f"+{change}" if change > 0 else str(change)


class ReportDocumentBuilder:
    """Turns live data or archived snapshots into ReportDocuments."""

    def __init__(self, timezone: str = "UTC"):
        self._tz = ZoneInfo(timezone)

    def _fmt(self, value: datetime, pattern: str = "%Y-%m-%d %H:%M:%S") -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(self._tz).strftime(pattern)

    def item(
        self,
        warehouse_name: str,
        item_name: str,
        quantity: int,
        history: Iterable[HistoryEntry],
        printed_by: str,
        printed_at: datetime,
    ) -> ReportDocument:
        rows = tuple(
            (
                self._fmt(e.timestamp),
                e.type.label,
                _signed(e.change),
                str(e.quantity_before),
                str(e.quantity_after),
                e.comment or "",
            )
            for e in newest_first(history)
        )
        return ReportDocument(
            report_type=ReportType.ITEM,
            title="Item Transaction History Report",
            subtitle=f"Warehouse: {warehouse_name or 'N/A'}",
            printed_by=printed_by,
            printed_at=printed_at,
            details=(
                ("Item Name", item_name or "N/A"),
                ("Current Quantity", str(quantity)),
                ("Print Date", self._fmt(printed_at)),
                ("Printed By", printed_by),
            ),
            section="Transaction History",
            table=ReportTable(
                columns=("Date", "Type", "Change", "Qty Before", "Qty After", "Comment"),
                rows=rows,
                empty_message="No transaction history for this item.",
                numeric_columns=frozenset({2, 3, 4}),
            ),
            file_name=f"item_report_{self._fmt(printed_at, '%Y%m%d_%H%M%S')}.pdf",
        )

    def warehouse(
        self,
        warehouse_name: str,
        description: str | None,
        items: Sequence[ItemQuantitySnapshot],
        printed_by: str,
        printed_at: datetime,
    ) -> ReportDocument:
        details = []
        if description:
            details.append(("Description", description))
        details.extend(
            [
                ("Total Items", str(len(items))),
                ("Print Date", self._fmt(printed_at)),
                ("Printed By", printed_by),
            ]
        )
        return ReportDocument(
            report_type=ReportType.WAREHOUSE,
            title="Warehouse Inventory Report",
            subtitle=f"Warehouse: {warehouse_name}",
            printed_by=printed_by,
            printed_at=printed_at,
            details=tuple(details),
            section="Items",
            table=ReportTable(
                columns=("Item Name", "Quantity"),
                rows=tuple((i.name, str(i.quantity)) for i in items),
                empty_message="No active items in this warehouse.",
                numeric_columns=frozenset({1}),
            ),
            file_name=f"warehouse_report_{self._fmt(printed_at, '%Y%m%d_%H%M%S')}.pdf",
        )

    def transactions(
        self,
        title: str,
        transactions: Sequence[FlattenedTransaction],
        printed_by: str,
        printed_at: datetime,
    ) -> ReportDocument:
        rows = tuple(
            (
                self._fmt(t.timestamp, "%Y-%m-%d %H:%M"),
                t.item_name,
                t.warehouse_name,
                t.type.label,
                _signed(t.change),
                str(t.quantity_before),
                str(t.quantity_after),
                t.comment or "",
            )
            for t in transactions
        )
        return ReportDocument(
            report_type=ReportType.TRANSACTIONS,
            title=title,
            subtitle=TRANSACTIONS_SUBTITLE,
            printed_by=printed_by,
            printed_at=printed_at,
            details=(
                ("Print Date", self._fmt(printed_at)),
                ("Printed By", printed_by),
            ),
            section="Transactions",
            table=ReportTable(
                columns=(
                    "Date",
                    "Item Name",
                    "Warehouse",
                    "Type",
                    "Change",
                    "Before",
                    "After",
                    "Comment",
                ),
                rows=rows,
                empty_message="No transactions found for this selection.",
                numeric_columns=frozenset({4, 5, 6}),
            ),
            file_name=f"transactions_report_{self._fmt(printed_at, '%Y%m%d_%H%M%S')}.pdf",
        )

    def from_source(
        self, source: ReportSource, printed_by: str, printed_at: datetime
    ) -> ReportDocument:
        if isinstance(source, ItemReportSource):
            return self.item(
                source.warehouse.name,
                source.item.name,
                source.item.quantity,
                source.item.history,
                printed_by,
                printed_at,
            )
        if isinstance(source, WarehouseReportSource):
            snapshot = [
                ItemQuantitySnapshot(name=i.name, quantity=i.quantity)
                for i in source.items
            ]
            return self.warehouse(
                source.warehouse.name,
                source.warehouse.description,
                snapshot,
                printed_by,
                printed_at,
            )
        return self.transactions(
            source.title, source.transactions, printed_by, printed_at
        )

    def from_report(self, report: ArchivedReport) -> ReportDocument:
        if isinstance(report, ItemReport):
            return self.item(
                report.warehouse_name,
                report.item_name,
                report.quantity_snapshot,
                report.history_snapshot,
                report.printed_by,
                report.printed_at,
            )
        if isinstance(report, WarehouseReport):
            return self.warehouse(
                report.warehouse_name,
                report.warehouse_description,
                report.items_snapshot,
                report.printed_by,
                report.printed_at,
            )
        if isinstance(report, TransactionsReport):
            return self.transactions(
                report.report_title_snapshot,
                report.transactions_snapshot,
                report.printed_by,
                report.printed_at,
            )
        raise TypeError(f"Unsupported report: {type(report).__name__}")


class ReportPrintService:
    """
    Prints reports and archives what was printed.

    Loads data from the store, renders through IReportRenderer, then creates
    and saves the snapshot. Re-printing an archived report renders its
    snapshot and never creates a new archive entry.
    """

    def __init__(
        self,
        renderer: IReportRenderer,
        store: IInventoryStore,
        clock: IClock,
        ids: IIdGenerator,
        timezone: str = "UTC",
    ):
        self._renderer = renderer
        self._store = store
        self._clock = clock
        self._ids = ids
        self._builder = ReportDocumentBuilder(timezone)

    async def print_item(self, item_id: str, context: OperationContext) -> PrintedReport:
        """Print an item's full transaction history."""
        items = await self._store.load_items()
        item = next((i for i in items if i.id == item_id), None)
        if item is None:
            raise ItemNotFoundError(item_id)

        warehouses = await self._store.load_warehouses()
        warehouse = self._find_warehouse(warehouses, item.warehouse_id)
        return await self._print(ItemReportSource(warehouse=warehouse, item=item), context)

    async def print_warehouse(
        self, warehouse_id: str, context: OperationContext
    ) -> PrintedReport:
        """Print a warehouse's active items with their quantities."""
        warehouses = await self._store.load_warehouses()
        warehouse = self._find_warehouse(warehouses, warehouse_id)
        items = await self._store.load_items()
        listing = warehouse_item_listing(warehouse.id, items, order="name")
        return await self._print(
            WarehouseReportSource(warehouse=warehouse, items=listing), context
        )

    async def print_transactions(
        self, filters: TransactionFilter, context: OperationContext
    ) -> PrintedReport:
        """Print the flattened transaction feed for the given filters."""
        warehouses = await self._store.load_warehouses()
        items = await self._store.load_items()
        feed = TransactionFeed(warehouses, items, filters)
        title = report_title(filters, warehouses, items)
        return await self._print(
            TransactionsReportSource(title=title, transactions=feed.to_list()), context
        )

    async def reprint(self, report_id: str) -> PrintedReport:
        """Render an archived report from its snapshot."""
        reports = await self._store.load_archived_reports()
        report = next((r for r in reports if r.id == report_id), None)
        if report is None:
            raise ReportNotFoundError(report_id)

        document = self._builder.from_report(report)
        content = self._render(document)
        logger.info("report_reprinted", report_id=report_id, size_bytes=len(content))
        return PrintedReport(
            content=content, file_name=document.file_name, report=report, reprint=True
        )

    @staticmethod
    def _find_warehouse(warehouses: list[Warehouse], warehouse_id: str) -> Warehouse:
        warehouse = next((w for w in warehouses if w.id == warehouse_id), None)
        if warehouse is None:
            raise WarehouseNotFoundError(warehouse_id)
        return warehouse

    def _render(self, document: ReportDocument) -> bytes:
        try:
            return self._renderer.render(document)
        except ReportRenderError:
            raise
        except Exception as e:
            logger.error(
                "report_render_failed",
                report_type=document.report_type.value,
                error=str(e),
            )
            raise ReportRenderError(document.report_type.value, str(e)) from e

    async def _print(self, source: ReportSource, context: OperationContext) -> PrintedReport:
        printed_at = self._clock.now()
        document = self._builder.from_source(source, context.username, printed_at)
        logger.info(
            "generating_report",
            report_type=document.report_type.value,
            printed_by=context.username,
        )
        content = self._render(document)

        snapshot = create_report_snapshot(
            source, context, self._clock, self._ids, printed_at=printed_at
        )
        reports = await self._store.load_archived_reports()
        await self._store.save_archived_reports([*reports, snapshot])

        logger.info(
            "report_archived",
            report_id=snapshot.id,
            report_type=snapshot.report_type.value,
            size_bytes=len(content),
        )
        return PrintedReport(content=content, file_name=document.file_name, report=snapshot)

