"""
Report entities.

Archived reports are point-in-time snapshots taken when a report is printed.
Each variant carries only its own fields and holds tuples of frozen models, so
a snapshot can never be changed after it is created.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from stockpilot.core.entities.inventory import HistoryEntry, HistoryEntryType, utcnow


class ReportType(str, Enum):
    """Kinds of printable reports."""

    ITEM = "ITEM"
    WAREHOUSE = "WAREHOUSE"
    TRANSACTIONS = "TRANSACTIONS"


class FlattenedTransaction(BaseModel):
    """A history entry denormalized with its item and warehouse."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: HistoryEntryType
    change: int
    quantity_before: int
    quantity_after: int
    comment: str | None = None
    timestamp: datetime
    item_id: str
    item_name: str
    warehouse_id: str
    warehouse_name: str


class ItemQuantitySnapshot(BaseModel):
    """Name and quantity of one item at print time."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: int


class _ArchivedReportBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    printed_by: str
    printed_at: datetime = Field(default_factory=utcnow)


class ItemReport(_ArchivedReportBase):
    """Snapshot of one item's full history."""

    report_type: Literal[ReportType.ITEM] = ReportType.ITEM
    warehouse_id: str
    warehouse_name: str
    item_id: str
    item_name: str
    quantity_snapshot: int
    history_snapshot: tuple[HistoryEntry, ...] = ()


class WarehouseReport(_ArchivedReportBase):
    """Snapshot of a warehouse's active items, names and quantities only."""

    report_type: Literal[ReportType.WAREHOUSE] = ReportType.WAREHOUSE
    warehouse_id: str
    warehouse_name: str
    warehouse_description: str | None = None
    items_snapshot: tuple[ItemQuantitySnapshot, ...] = ()


class TransactionsReport(_ArchivedReportBase):
    """Snapshot of a filtered transaction feed and its title."""

    report_type: Literal[ReportType.TRANSACTIONS] = ReportType.TRANSACTIONS
    report_title_snapshot: str
    transactions_snapshot: tuple[FlattenedTransaction, ...] = ()


ArchivedReport = Annotated[
    ItemReport | WarehouseReport | TransactionsReport,
    Field(discriminator="report_type"),
]

archived_report_adapter: TypeAdapter[ArchivedReport] = TypeAdapter(ArchivedReport)
archived_report_list_adapter: TypeAdapter[list[ArchivedReport]] = TypeAdapter(
    list[ArchivedReport]
)
