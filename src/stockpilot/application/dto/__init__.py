"""Data transfer objects for the API layer."""

from stockpilot.application.dto.requests import (
    CreateItemRequest,
    CreateWarehouseRequest,
    PrintItemReportRequest,
    PrintTransactionsReportRequest,
    PrintWarehouseReportRequest,
    StockMovementRequest,
    StockSuggestionRequest,
    TransactionQuery,
)
from stockpilot.application.dto.responses import (
    ArchivedReportListResponse,
    ArchivedReportSummary,
    ArchiveListResponse,
    ArchiveWarehouseResponse,
    BalanceResponse,
    ErrorResponse,
    HealthResponse,
    HistoryEntryResponse,
    ItemListResponse,
    ItemResponse,
    LedgerVerificationResponse,
    ProviderHealthResponse,
    StockMovementResponse,
    StockSuggestionResponse,
    TransactionFeedResponse,
    TransactionResponse,
    WarehouseDetailResponse,
    WarehouseListResponse,
    WarehouseResponse,
)

__all__ = [
    # Requests
    "CreateWarehouseRequest",
    "CreateItemRequest",
    "StockMovementRequest",
    "TransactionQuery",
    "PrintItemReportRequest",
    "PrintWarehouseReportRequest",
    "PrintTransactionsReportRequest",
    "StockSuggestionRequest",
    # Responses
    "WarehouseResponse",
    "WarehouseListResponse",
    "WarehouseDetailResponse",
    "ItemResponse",
    "ItemListResponse",
    "HistoryEntryResponse",
    "StockMovementResponse",
    "BalanceResponse",
    "LedgerVerificationResponse",
    "TransactionResponse",
    "TransactionFeedResponse",
    "ArchiveWarehouseResponse",
    "ArchiveListResponse",
    "ArchivedReportSummary",
    "ArchivedReportListResponse",
    "StockSuggestionResponse",
    "ProviderHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
