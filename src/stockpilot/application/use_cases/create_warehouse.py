"""Create Warehouse Use Case."""

from stockpilot.application.dto.requests import CreateWarehouseRequest
from stockpilot.application.dto.responses import WarehouseResponse
from stockpilot.application.locks import get_store_lock
from stockpilot.application.use_cases.base import InventoryUseCase
from stockpilot.config import get_logger
from stockpilot.core.entities.inventory import Warehouse
from stockpilot.core.exceptions import ValidationError

logger = get_logger(__name__)


class CreateWarehouseUseCase(InventoryUseCase):
    """Create an empty, active warehouse."""

    async def execute(self, request: CreateWarehouseRequest) -> Warehouse:
        name = (request.name or "").strip()
        if not name:
            raise ValidationError("name", "must not be empty", request.name)
        description = (request.description or "").strip() or None

        logger.info("create_warehouse_started", name=name)

        store = self._get_store()
        async with get_store_lock():
            warehouses = await store.load_warehouses()
            now = self.clock.now()
            warehouse = Warehouse(
                id=self.ids.new_id(),
                name=name,
                description=description,
                created_at=now,
                updated_at=now,
            )
            await store.save_warehouses([*warehouses, warehouse])

        logger.info("create_warehouse_complete", warehouse_id=warehouse.id)
        return warehouse

    def to_response(self, warehouse: Warehouse) -> WarehouseResponse:
        return WarehouseResponse.from_entity(warehouse, active_item_count=0)
