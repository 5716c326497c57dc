"""Warehouse, item and ledger entry entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(UTC)


class HistoryEntryType(str, Enum):
    """Kinds of stock movement recorded in an item's ledger."""

    CREATE_ITEM = "CREATE_ITEM"
    ADD_STOCK = "ADD_STOCK"
    CONSUME_STOCK = "CONSUME_STOCK"
    ADJUST_STOCK = "ADJUST_STOCK"  # reserved for direct corrections

    @property
    def label(self) -> str:
        return HISTORY_TYPE_LABELS[self]


HISTORY_TYPE_LABELS: dict[HistoryEntryType, str] = {
    HistoryEntryType.CREATE_ITEM: "Item Created",
    HistoryEntryType.ADD_STOCK: "Stock Added",
    HistoryEntryType.CONSUME_STOCK: "Stock Consumed",
    HistoryEntryType.ADJUST_STOCK: "Stock Adjusted",
}


class HistoryEntry(BaseModel):
    """One immutable ledger record."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: HistoryEntryType
    change: int  # signed delta
    quantity_before: int = Field(ge=0)
    quantity_after: int = Field(ge=0)
    comment: str | None = None
    timestamp: datetime = Field(default_factory=utcnow)


class Warehouse(BaseModel):
    """A named storage location that owns items."""

    id: str
    name: str
    description: str | None = None
    is_archived: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Item(BaseModel):
    """A stocked good; its quantity is the fold of its history."""

    id: str
    warehouse_id: str
    name: str
    quantity: int = 0
    history: list[HistoryEntry] = Field(default_factory=list)
    is_archived: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def last_entry(self) -> HistoryEntry | None:
        """Most recent entry in insertion order."""
        return self.history[-1] if self.history else None
