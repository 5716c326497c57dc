"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate the ledger and archival services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from stockpilot.application.locks import get_store_lock, reset_store_lock
from stockpilot.application.services import (
    get_clock,
    get_id_generator,
    get_inventory_store,
    get_report_print_service,
    get_report_renderer,
    get_stock_advisor_service,
    reset_services,
)
from stockpilot.application.use_cases import (
    AddStockUseCase,
    ArchiveItemUseCase,
    ArchiveWarehouseUseCase,
    ConsumeStockUseCase,
    CreateItemUseCase,
    CreateWarehouseUseCase,
    PrintReportUseCase,
    RestoreItemUseCase,
    RestoreWarehouseUseCase,
    SuggestStockLevelUseCase,
    ViewTransactionsUseCase,
)

__all__ = [
    # Use Cases
    "CreateWarehouseUseCase",
    "CreateItemUseCase",
    "AddStockUseCase",
    "ConsumeStockUseCase",
    "ArchiveWarehouseUseCase",
    "RestoreWarehouseUseCase",
    "ArchiveItemUseCase",
    "RestoreItemUseCase",
    "ViewTransactionsUseCase",
    "PrintReportUseCase",
    "SuggestStockLevelUseCase",
    # Service factories
    "get_clock",
    "get_id_generator",
    "get_inventory_store",
    "get_report_renderer",
    "get_report_print_service",
    "get_stock_advisor_service",
    "reset_services",
    # Locking
    "get_store_lock",
    "reset_store_lock",
]
