"""Core business services."""

from stockpilot.core.services.archival import (
    CascadePlan,
    ItemArchivalResult,
    ItemReportSource,
    TransactionsReportSource,
    WarehouseReportSource,
    archive_item,
    archive_warehouse,
    create_report_snapshot,
    restore_item,
    restore_warehouse,
)
from stockpilot.core.services.ledger import (
    LedgerResult,
    add_stock,
    balance_at,
    consume_stock,
    create_item,
    replay_history,
    verify_item,
)
from stockpilot.core.services.report_print_service import (
    IReportRenderer,
    PrintedReport,
    ReportDocument,
    ReportPrintService,
    ReportTable,
)
from stockpilot.core.services.report_projector import (
    TransactionFeed,
    TransactionFilter,
    item_history_view,
    report_title,
    warehouse_item_listing,
)
from stockpilot.core.services.stock_advisor import (
    StockAdvisorService,
    StockLevelSuggestion,
)

__all__ = [
    # Ledger
    "LedgerResult",
    "create_item",
    "add_stock",
    "consume_stock",
    "replay_history",
    "verify_item",
    "balance_at",
    # Projector
    "TransactionFeed",
    "TransactionFilter",
    "item_history_view",
    "warehouse_item_listing",
    "report_title",
    # Archival
    "CascadePlan",
    "ItemArchivalResult",
    "ItemReportSource",
    "WarehouseReportSource",
    "TransactionsReportSource",
    "archive_warehouse",
    "restore_warehouse",
    "archive_item",
    "restore_item",
    "create_report_snapshot",
    # Printing
    "IReportRenderer",
    "ReportDocument",
    "ReportTable",
    "PrintedReport",
    "ReportPrintService",
    # Advisor
    "StockAdvisorService",
    "StockLevelSuggestion",
]
