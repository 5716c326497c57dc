"""Core domain entities."""

from stockpilot.core.entities.context import OperationContext
from stockpilot.core.entities.inventory import (
    HISTORY_TYPE_LABELS,
    HistoryEntry,
    HistoryEntryType,
    Item,
    Warehouse,
)
from stockpilot.core.entities.report import (
    ArchivedReport,
    FlattenedTransaction,
    ItemQuantitySnapshot,
    ItemReport,
    ReportType,
    TransactionsReport,
    WarehouseReport,
    archived_report_adapter,
    archived_report_list_adapter,
)

__all__ = [
    # Inventory entities
    "Warehouse",
    "Item",
    "HistoryEntry",
    "HistoryEntryType",
    "HISTORY_TYPE_LABELS",
    # Report entities
    "ArchivedReport",
    "ItemReport",
    "WarehouseReport",
    "TransactionsReport",
    "ReportType",
    "FlattenedTransaction",
    "ItemQuantitySnapshot",
    "archived_report_adapter",
    "archived_report_list_adapter",
    # Context
    "OperationContext",
]
