"""Print Report Use Case: render a PDF and archive what was printed."""

from stockpilot.application.dto.requests import (
    PrintItemReportRequest,
    PrintTransactionsReportRequest,
    PrintWarehouseReportRequest,
)
from stockpilot.application.locks import get_store_lock
from stockpilot.application.use_cases.view_transactions import build_filter
from stockpilot.config import get_logger
from stockpilot.core.entities.context import OperationContext
from stockpilot.core.services.report_print_service import (
    PrintedReport,
    ReportPrintService,
)

logger = get_logger(__name__)


class PrintReportUseCase:
    """
    Print item, warehouse and transaction reports.

    Printing appends a snapshot to the archived reports, so it runs under the
    store lock. Reprinting only reads and renders.
    """

    def __init__(self, print_service: ReportPrintService | None = None):
        self._print_service = print_service

    def _get_print_service(self) -> ReportPrintService:
        if self._print_service is None:
            from stockpilot.application.services import get_report_print_service

            self._print_service = get_report_print_service()
        return self._print_service

    async def print_item(
        self, request: PrintItemReportRequest, context: OperationContext
    ) -> PrintedReport:
        logger.info("print_item_report_started", item_id=request.item_id)
        async with get_store_lock():
            printed = await self._get_print_service().print_item(request.item_id, context)
        self._log_complete(printed)
        return printed

    async def print_warehouse(
        self, request: PrintWarehouseReportRequest, context: OperationContext
    ) -> PrintedReport:
        logger.info("print_warehouse_report_started", warehouse_id=request.warehouse_id)
        async with get_store_lock():
            printed = await self._get_print_service().print_warehouse(
                request.warehouse_id, context
            )
        self._log_complete(printed)
        return printed

    async def print_transactions(
        self, request: PrintTransactionsReportRequest, context: OperationContext
    ) -> PrintedReport:
        filters = build_filter(request)
        logger.info(
            "print_transactions_report_started",
            warehouse_id=filters.warehouse,
            item_id=filters.item,
        )
        async with get_store_lock():
            printed = await self._get_print_service().print_transactions(filters, context)
        self._log_complete(printed)
        return printed

    async def reprint(self, report_id: str) -> PrintedReport:
        return await self._get_print_service().reprint(report_id)

    @staticmethod
    def _log_complete(printed: PrintedReport) -> None:
        logger.info(
            "print_report_complete",
            report_id=printed.report.id,
            report_type=printed.report.report_type.value,
            file_name=printed.file_name,
            size_bytes=printed.file_size,
        )
