"""Application use cases."""

from stockpilot.application.use_cases.archive_item import (
    ArchiveItemUseCase,
    RestoreItemUseCase,
)
from stockpilot.application.use_cases.archive_warehouse import (
    ArchiveWarehouseUseCase,
    RestoreWarehouseUseCase,
)
from stockpilot.application.use_cases.create_item import CreateItemUseCase
from stockpilot.application.use_cases.create_warehouse import CreateWarehouseUseCase
from stockpilot.application.use_cases.print_report import PrintReportUseCase
from stockpilot.application.use_cases.query_inventory import (
    GetItemUseCase,
    GetWarehouseUseCase,
    ItemBalanceUseCase,
    ListItemsUseCase,
    ListWarehousesUseCase,
    VerifyItemLedgerUseCase,
)
from stockpilot.application.use_cases.stock_movement import (
    AddStockUseCase,
    ConsumeStockUseCase,
)
from stockpilot.application.use_cases.suggest_stock_level import SuggestStockLevelUseCase
from stockpilot.application.use_cases.view_archive import (
    GetArchivedReportUseCase,
    ListArchivedReportsUseCase,
    ListArchiveUseCase,
)
from stockpilot.application.use_cases.view_transactions import ViewTransactionsUseCase

__all__ = [
    "CreateWarehouseUseCase",
    "CreateItemUseCase",
    "AddStockUseCase",
    "ConsumeStockUseCase",
    "ArchiveWarehouseUseCase",
    "RestoreWarehouseUseCase",
    "ArchiveItemUseCase",
    "RestoreItemUseCase",
    "ListWarehousesUseCase",
    "GetWarehouseUseCase",
    "ListItemsUseCase",
    "GetItemUseCase",
    "ItemBalanceUseCase",
    "VerifyItemLedgerUseCase",
    "ViewTransactionsUseCase",
    "ListArchiveUseCase",
    "ListArchivedReportsUseCase",
    "GetArchivedReportUseCase",
    "PrintReportUseCase",
    "SuggestStockLevelUseCase",
]
