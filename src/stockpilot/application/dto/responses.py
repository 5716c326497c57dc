"""Response DTOs for API endpoints."""

from datetime import UTC, date, datetime
from typing import Any

from pydantic import BaseModel, Field

from stockpilot.core.entities.inventory import HistoryEntry, Item, Warehouse
from stockpilot.core.entities.report import (
    ArchivedReport,
    FlattenedTransaction,
    ItemReport,
    WarehouseReport,
)


class WarehouseResponse(BaseModel):
    """Warehouse as returned by the API."""

    id: str
    name: str
    description: str | None = None
    is_archived: bool
    created_at: datetime
    updated_at: datetime
    active_item_count: int | None = None

    @classmethod
    def from_entity(
        cls, warehouse: Warehouse, active_item_count: int | None = None
    ) -> "WarehouseResponse":
        return cls(
            id=warehouse.id,
            name=warehouse.name,
            description=warehouse.description,
            is_archived=warehouse.is_archived,
            created_at=warehouse.created_at,
            updated_at=warehouse.updated_at,
            active_item_count=active_item_count,
        )


class HistoryEntryResponse(BaseModel):
    """One ledger entry."""

    id: str
    type: str
    type_label: str
    change: int
    quantity_before: int
    quantity_after: int
    comment: str | None = None
    timestamp: datetime

    @classmethod
    def from_entity(cls, entry: HistoryEntry) -> "HistoryEntryResponse":
        return cls(
            id=entry.id,
            type=entry.type.value,
            type_label=entry.type.label,
            change=entry.change,
            quantity_before=entry.quantity_before,
            quantity_after=entry.quantity_after,
            comment=entry.comment,
            timestamp=entry.timestamp,
        )


class ItemResponse(BaseModel):
    """Item with optional history (most recent first)."""

    id: str
    warehouse_id: str
    name: str
    quantity: int
    is_archived: bool
    created_at: datetime
    updated_at: datetime
    history: list[HistoryEntryResponse] | None = None

    @classmethod
    def from_entity(
        cls, item: Item, history: list[HistoryEntry] | None = None
    ) -> "ItemResponse":
        return cls(
            id=item.id,
            warehouse_id=item.warehouse_id,
            name=item.name,
            quantity=item.quantity,
            is_archived=item.is_archived,
            created_at=item.created_at,
            updated_at=item.updated_at,
            history=(
                [HistoryEntryResponse.from_entity(e) for e in history]
                if history is not None
                else None
            ),
        )


class WarehouseListResponse(BaseModel):
    warehouses: list[WarehouseResponse]
    total: int


class WarehouseDetailResponse(BaseModel):
    """Warehouse with its active items."""

    warehouse: WarehouseResponse
    items: list[ItemResponse]


class ItemListResponse(BaseModel):
    items: list[ItemResponse]
    total: int


class StockMovementResponse(BaseModel):
    """Item after a stock movement, plus the entry that was appended."""

    item: ItemResponse
    entry: HistoryEntryResponse


class BalanceResponse(BaseModel):
    """Quantity held by an item at a given instant."""

    item_id: str
    at: datetime
    quantity: int


class LedgerVerificationResponse(BaseModel):
    """Result of replaying an item's history."""

    item_id: str
    consistent: bool
    quantity: int
    replayed_quantity: int | None = None
    error: str | None = None


class TransactionResponse(BaseModel):
    """Flattened transaction row."""

    id: str
    type: str
    type_label: str
    change: int
    quantity_before: int
    quantity_after: int
    comment: str | None = None
    timestamp: datetime
    item_id: str
    item_name: str
    warehouse_id: str
    warehouse_name: str

    @classmethod
    def from_entity(cls, tx: FlattenedTransaction) -> "TransactionResponse":
        return cls(
            **tx.model_dump(exclude={"type"}),
            type=tx.type.value,
            type_label=tx.type.label,
        )


class TransactionFeedResponse(BaseModel):
    """Filtered transaction feed with its report title."""

    title: str
    transactions: list[TransactionResponse]
    total: int
    warehouse_id: str | None = None
    item_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None


class ArchiveWarehouseResponse(BaseModel):
    """Archived warehouse and the items archived with it."""

    warehouse: WarehouseResponse
    archived_item_ids: list[str]


class ArchiveListResponse(BaseModel):
    """Soft-deleted warehouses and items."""

    warehouses: list[WarehouseResponse]
    items: list[ItemResponse]


class ArchivedReportSummary(BaseModel):
    """Listing row for an archived report."""

    id: str
    report_type: str
    title: str
    printed_by: str
    printed_at: datetime

    @classmethod
    def from_entity(cls, report: ArchivedReport) -> "ArchivedReportSummary":
        if isinstance(report, ItemReport):
            title = f"Item: {report.item_name} ({report.warehouse_name})"
        elif isinstance(report, WarehouseReport):
            title = f"Warehouse: {report.warehouse_name}"
        else:
            title = report.report_title_snapshot
        return cls(
            id=report.id,
            report_type=report.report_type.value,
            title=title,
            printed_by=report.printed_by,
            printed_at=report.printed_at,
        )


class ArchivedReportListResponse(BaseModel):
    reports: list[ArchivedReportSummary]
    total: int


class StockSuggestionResponse(BaseModel):
    """Advisory stock level."""

    item_id: str
    suggested_stock_level: float
    reasoning: str
    alert: str | None = None


class ProviderHealthResponse(BaseModel):
    """Health status of a provider."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    storage: ProviderHealthResponse | None = None
    llm: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ITEM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict[str, Any] | None = Field(
        default=None, description="Structured error context (ids, amounts)"
    )
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
