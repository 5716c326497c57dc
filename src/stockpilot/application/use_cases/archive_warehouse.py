"""Archive and restore warehouses."""

from stockpilot.application.dto.responses import (
    ArchiveWarehouseResponse,
    WarehouseResponse,
)
from stockpilot.application.locks import get_store_lock
from stockpilot.application.use_cases.base import (
    InventoryUseCase,
    find_warehouse,
    replace_by_id,
)
from stockpilot.config import get_logger
from stockpilot.core.entities.inventory import Warehouse
from stockpilot.core.exceptions import (
    PartialCascadeError,
    PersistenceError,
    ValidationError,
)
from stockpilot.core.services.archival import (
    CascadePlan,
    archive_warehouse,
    restore_warehouse,
)

logger = get_logger(__name__)


class ArchiveWarehouseUseCase(InventoryUseCase):
    """
    Archive a warehouse and cascade to its active items.

    The warehouse collection is saved first, then the item collection. The
    two saves are not atomic together: when the second one fails the
    warehouse stays archived and PartialCascadeError names the items that
    were not.
    """

    async def execute(self, warehouse_id: str) -> CascadePlan:
        logger.info("archive_warehouse_started", warehouse_id=warehouse_id)

        store = self._get_store()
        async with get_store_lock():
            warehouses = await store.load_warehouses()
            warehouse = find_warehouse(warehouses, warehouse_id)
            if warehouse.is_archived:
                raise ValidationError(
                    "warehouse_id", "warehouse is already archived", warehouse_id
                )

            items = await store.load_items()
            plan = archive_warehouse(warehouse, items, self.clock)

            await store.save_warehouses(replace_by_id(warehouses, plan.warehouse))
            try:
                await store.save_items(list(plan.items))
            except PersistenceError as e:
                logger.error(
                    "archive_cascade_failed",
                    warehouse_id=warehouse_id,
                    pending_items=len(plan.archived_item_ids),
                    error=e.message,
                )
                raise PartialCascadeError(
                    warehouse_id, list(plan.archived_item_ids), e.message
                ) from e

        logger.info(
            "archive_warehouse_complete",
            warehouse_id=warehouse_id,
            archived_items=len(plan.archived_item_ids),
        )
        return plan

    def to_response(self, plan: CascadePlan) -> ArchiveWarehouseResponse:
        return ArchiveWarehouseResponse(
            warehouse=WarehouseResponse.from_entity(plan.warehouse),
            archived_item_ids=list(plan.archived_item_ids),
        )


class RestoreWarehouseUseCase(InventoryUseCase):
    """Restore an archived warehouse. Its items stay archived."""

    async def execute(self, warehouse_id: str) -> Warehouse:
        logger.info("restore_warehouse_started", warehouse_id=warehouse_id)

        store = self._get_store()
        async with get_store_lock():
            warehouses = await store.load_warehouses()
            warehouse = find_warehouse(warehouses, warehouse_id)
            if not warehouse.is_archived:
                raise ValidationError(
                    "warehouse_id", "warehouse is not archived", warehouse_id
                )

            restored = restore_warehouse(warehouse, self.clock)
            await store.save_warehouses(replace_by_id(warehouses, restored))

        logger.info("restore_warehouse_complete", warehouse_id=warehouse_id)
        return restored

    def to_response(self, warehouse: Warehouse) -> WarehouseResponse:
        return WarehouseResponse.from_entity(warehouse)
