"""
Dependency injection container for FastAPI.

Provides use cases and the acting-user context to route handlers.
"""

from fastapi import Header

from stockpilot.application.use_cases import (
    AddStockUseCase,
    ArchiveItemUseCase,
    ArchiveWarehouseUseCase,
    ConsumeStockUseCase,
    CreateItemUseCase,
    CreateWarehouseUseCase,
    GetArchivedReportUseCase,
    GetItemUseCase,
    GetWarehouseUseCase,
    ItemBalanceUseCase,
    ListArchivedReportsUseCase,
    ListArchiveUseCase,
    ListItemsUseCase,
    ListWarehousesUseCase,
    PrintReportUseCase,
    RestoreItemUseCase,
    RestoreWarehouseUseCase,
    SuggestStockLevelUseCase,
    VerifyItemLedgerUseCase,
    ViewTransactionsUseCase,
)
from stockpilot.config import get_settings
from stockpilot.core.entities.context import OperationContext
from stockpilot.core.interfaces import IInventoryStore, ILLMProvider
from stockpilot.infrastructure.llm import get_llm_provider
from stockpilot.infrastructure.storage import get_inventory_store


def get_operation_context(
    x_user_name: str | None = Header(default=None, alias="X-User-Name"),
) -> OperationContext:
    """Acting user from the X-User-Name header, else the configured default."""
    username = (x_user_name or "").strip()
    return OperationContext(
        username=username or get_settings().reports.default_username
    )


# Warehouse use cases
def get_create_warehouse_use_case() -> CreateWarehouseUseCase:
    return CreateWarehouseUseCase()


def get_list_warehouses_use_case() -> ListWarehousesUseCase:
    return ListWarehousesUseCase()


def get_warehouse_use_case() -> GetWarehouseUseCase:
    return GetWarehouseUseCase()


def get_archive_warehouse_use_case() -> ArchiveWarehouseUseCase:
    return ArchiveWarehouseUseCase()


def get_restore_warehouse_use_case() -> RestoreWarehouseUseCase:
    return RestoreWarehouseUseCase()


# Item use cases
def get_create_item_use_case() -> CreateItemUseCase:
    return CreateItemUseCase()


def get_list_items_use_case() -> ListItemsUseCase:
    return ListItemsUseCase()


def get_item_use_case() -> GetItemUseCase:
    return GetItemUseCase()


def get_add_stock_use_case() -> AddStockUseCase:
    return AddStockUseCase()


def get_consume_stock_use_case() -> ConsumeStockUseCase:
    return ConsumeStockUseCase()


def get_item_balance_use_case() -> ItemBalanceUseCase:
    return ItemBalanceUseCase()


def get_verify_item_use_case() -> VerifyItemLedgerUseCase:
    return VerifyItemLedgerUseCase()


def get_archive_item_use_case() -> ArchiveItemUseCase:
    return ArchiveItemUseCase()


def get_restore_item_use_case() -> RestoreItemUseCase:
    return RestoreItemUseCase()


# Reporting and archive
def get_view_transactions_use_case() -> ViewTransactionsUseCase:
    return ViewTransactionsUseCase()


def get_print_report_use_case() -> PrintReportUseCase:
    return PrintReportUseCase()


def get_list_archive_use_case() -> ListArchiveUseCase:
    return ListArchiveUseCase()


def get_list_archived_reports_use_case() -> ListArchivedReportsUseCase:
    return ListArchivedReportsUseCase()


def get_archived_report_use_case() -> GetArchivedReportUseCase:
    return GetArchivedReportUseCase()


# Advisor
def get_suggest_stock_level_use_case() -> SuggestStockLevelUseCase:
    return SuggestStockLevelUseCase()


# Infrastructure
def get_store() -> IInventoryStore:
    """Get the configured inventory store."""
    return get_inventory_store()


def get_llm() -> ILLMProvider:
    """Get LLM provider."""
    return get_llm_provider()
