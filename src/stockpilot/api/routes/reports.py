"""Transaction feed and report printing endpoints."""

from fastapi import APIRouter, Depends, Response, status

from stockpilot.api.dependencies import (
    get_operation_context,
    get_print_report_use_case,
    get_view_transactions_use_case,
)
from stockpilot.api.routes._pdf import pdf_response
from stockpilot.application.dto.requests import (
    PrintItemReportRequest,
    PrintTransactionsReportRequest,
    PrintWarehouseReportRequest,
    TransactionQuery,
)
from stockpilot.application.dto.responses import ErrorResponse, TransactionFeedResponse
from stockpilot.application.use_cases import PrintReportUseCase, ViewTransactionsUseCase
from stockpilot.core.entities.context import OperationContext

router = APIRouter(prefix="/api/reports", tags=["reports"])

_PDF_RESPONSES: dict = {
    201: {"content": {"application/pdf": {}}, "description": "Rendered report"},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse, "description": "Rendering failed, nothing archived"},
}


@router.get(
    "/transactions",
    response_model=TransactionFeedResponse,
    responses={400: {"model": ErrorResponse}},
)
async def view_transactions(
    query: TransactionQuery = Depends(),
    use_case: ViewTransactionsUseCase = Depends(get_view_transactions_use_case),
) -> TransactionFeedResponse:
    """
    Flattened transactions across active warehouses, newest first.

    item_id only applies together with warehouse_id. Date bounds are
    inclusive whole days.
    """
    result = await use_case.execute(query)
    return use_case.to_response(result)


@router.post(
    "/item",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses=_PDF_RESPONSES,
)
async def print_item_report(
    request: PrintItemReportRequest,
    context: OperationContext = Depends(get_operation_context),
    use_case: PrintReportUseCase = Depends(get_print_report_use_case),
) -> Response:
    """Print an item's transaction history and archive the snapshot."""
    printed = await use_case.print_item(request, context)
    return pdf_response(printed, status.HTTP_201_CREATED)


@router.post(
    "/warehouse",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses=_PDF_RESPONSES,
)
async def print_warehouse_report(
    request: PrintWarehouseReportRequest,
    context: OperationContext = Depends(get_operation_context),
    use_case: PrintReportUseCase = Depends(get_print_report_use_case),
) -> Response:
    """Print a warehouse's active items and archive the snapshot."""
    printed = await use_case.print_warehouse(request, context)
    return pdf_response(printed, status.HTTP_201_CREATED)


@router.post(
    "/transactions",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses=_PDF_RESPONSES,
)
async def print_transactions_report(
    request: PrintTransactionsReportRequest,
    context: OperationContext = Depends(get_operation_context),
    use_case: PrintReportUseCase = Depends(get_print_report_use_case),
) -> Response:
    """Print the filtered transaction feed and archive the snapshot."""
    printed = await use_case.print_transactions(request, context)
    return pdf_response(printed, status.HTTP_201_CREATED)
