"""Archive endpoints: soft-deleted records and printed report snapshots."""

from typing import Any

from fastapi import APIRouter, Depends, Query, Response

from stockpilot.api.dependencies import (
    get_archived_report_use_case,
    get_list_archive_use_case,
    get_list_archived_reports_use_case,
    get_print_report_use_case,
)
from stockpilot.api.routes._pdf import pdf_response
from stockpilot.application.dto.responses import (
    ArchivedReportListResponse,
    ArchiveListResponse,
    ErrorResponse,
)
from stockpilot.application.use_cases import (
    GetArchivedReportUseCase,
    ListArchivedReportsUseCase,
    ListArchiveUseCase,
    PrintReportUseCase,
)
from stockpilot.core.entities.report import ReportType

router = APIRouter(prefix="/api/archive", tags=["archive"])


@router.get("", response_model=ArchiveListResponse)
async def list_archive(
    use_case: ListArchiveUseCase = Depends(get_list_archive_use_case),
) -> ArchiveListResponse:
    """Archived warehouses and items."""
    listing = await use_case.execute()
    return use_case.to_response(listing)


@router.get("/reports", response_model=ArchivedReportListResponse)
async def list_archived_reports(
    report_type: ReportType | None = Query(default=None),
    use_case: ListArchivedReportsUseCase = Depends(get_list_archived_reports_use_case),
) -> ArchivedReportListResponse:
    """Printed reports, most recent first."""
    reports = await use_case.execute(report_type.value if report_type else None)
    return use_case.to_response(reports)


@router.get(
    "/reports/{report_id}",
    responses={404: {"model": ErrorResponse}},
)
async def get_archived_report(
    report_id: str,
    use_case: GetArchivedReportUseCase = Depends(get_archived_report_use_case),
) -> dict[str, Any]:
    """Full snapshot of one archived report."""
    report = await use_case.execute(report_id)
    return use_case.to_response(report)


@router.get(
    "/reports/{report_id}/pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        404: {"model": ErrorResponse},
    },
)
async def reprint_archived_report(
    report_id: str,
    use_case: PrintReportUseCase = Depends(get_print_report_use_case),
) -> Response:
    """Render an archived report from its snapshot. No new archive entry is made."""
    printed = await use_case.reprint(report_id)
    return pdf_response(printed)
