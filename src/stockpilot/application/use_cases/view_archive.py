"""Archive listings and archived report lookup."""

from dataclasses import dataclass

from stockpilot.application.dto.responses import (
    ArchiveListResponse,
    ArchivedReportListResponse,
    ArchivedReportSummary,
    ItemResponse,
    WarehouseResponse,
)
from stockpilot.application.use_cases.base import InventoryUseCase
from stockpilot.core.entities.inventory import Item, Warehouse
from stockpilot.core.entities.report import ArchivedReport, archived_report_adapter
from stockpilot.core.exceptions import ReportNotFoundError
from stockpilot.core.services.report_projector import (
    archived_items,
    archived_report_listing,
    archived_warehouses,
)


@dataclass
class ArchiveListing:
    warehouses: list[Warehouse]
    items: list[Item]


class ListArchiveUseCase(InventoryUseCase):
    """Archived warehouses and items, most recently archived first."""

    async def execute(self) -> ArchiveListing:
        store = self._get_store()
        return ArchiveListing(
            warehouses=archived_warehouses(await store.load_warehouses()),
            items=archived_items(await store.load_items()),
        )

    def to_response(self, listing: ArchiveListing) -> ArchiveListResponse:
        return ArchiveListResponse(
            warehouses=[WarehouseResponse.from_entity(w) for w in listing.warehouses],
            items=[ItemResponse.from_entity(i) for i in listing.items],
        )


class ListArchivedReportsUseCase(InventoryUseCase):
    """Printed report snapshots, most recent first."""

    async def execute(self, report_type: str | None = None) -> list[ArchivedReport]:
        store = self._get_store()
        reports = archived_report_listing(await store.load_archived_reports())
        if report_type:
            reports = [r for r in reports if r.report_type.value == report_type]
        return reports

    def to_response(self, reports: list[ArchivedReport]) -> ArchivedReportListResponse:
        return ArchivedReportListResponse(
            reports=[ArchivedReportSummary.from_entity(r) for r in reports],
            total=len(reports),
        )


class GetArchivedReportUseCase(InventoryUseCase):
    """One archived report with its full snapshot."""

    async def execute(self, report_id: str) -> ArchivedReport:
        store = self._get_store()
        for report in await store.load_archived_reports():
            if report.id == report_id:
                return report
        raise ReportNotFoundError(report_id)

    def to_response(self, report: ArchivedReport) -> dict:
        return archived_report_adapter.dump_python(report, mode="json")
