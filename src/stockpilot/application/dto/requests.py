"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation. Business rules (non-empty
names, positive amounts) are checked by the ledger so they surface as
VALIDATION_ERROR responses instead of schema errors.
"""

from datetime import date

from pydantic import BaseModel, Field


class CreateWarehouseRequest(BaseModel):
    """Request to create a warehouse."""

    name: str = Field(..., description="Warehouse name", examples=["Main Store"])
    description: str | None = Field(
        default=None,
        description="Optional free-text description",
        examples=["Ground floor, loading bay 2"],
    )


class CreateItemRequest(BaseModel):
    """Request to create an item with its opening stock."""

    warehouse_id: str = Field(..., description="Owning warehouse ID")
    name: str = Field(..., description="Item name", examples=["Widget"])
    initial_quantity: int = Field(
        ...,
        description="Opening stock, a positive whole number",
        examples=[100],
    )


class StockMovementRequest(BaseModel):
    """Request to add or consume stock."""

    amount: int = Field(..., description="Units to move, a positive whole number", examples=[30])
    comment: str | None = Field(
        default=None,
        description="Optional note stored on the history entry",
        examples=["sold"],
    )


class TransactionQuery(BaseModel):
    """Filters for the flattened transaction feed."""

    warehouse_id: str | None = Field(
        default=None, description="Warehouse ID, or 'all' / omitted for every warehouse"
    )
    item_id: str | None = Field(
        default=None,
        description="Item ID, or 'all'; only applied together with warehouse_id",
    )
    start_date: date | None = Field(default=None, description="First day, inclusive")
    end_date: date | None = Field(default=None, description="Last day, inclusive")


class PrintItemReportRequest(BaseModel):
    item_id: str = Field(..., description="Item to print")


class PrintWarehouseReportRequest(BaseModel):
    warehouse_id: str = Field(..., description="Warehouse to print")


class PrintTransactionsReportRequest(TransactionQuery):
    """Print the transaction feed for the given filters."""


class StockSuggestionRequest(BaseModel):
    """Request an advisory stock level for an item."""

    item_id: str = Field(..., description="Item to analyze")
    historical_data: str | None = Field(
        default=None,
        description="Free-text history; built from the item's ledger when omitted",
    )
