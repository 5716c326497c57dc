"""Create Item Use Case: new item with its opening CREATE_ITEM entry."""

from stockpilot.application.dto.requests import CreateItemRequest
from stockpilot.application.dto.responses import ItemResponse
from stockpilot.application.locks import get_store_lock
from stockpilot.application.use_cases.base import (
    InventoryUseCase,
    find_warehouse,
    replace_by_id,
)
from stockpilot.config import get_logger
from stockpilot.core.exceptions import ValidationError
from stockpilot.core.services.ledger import LedgerResult, create_item
from stockpilot.core.services.report_projector import item_history_view

logger = get_logger(__name__)


class CreateItemUseCase(InventoryUseCase):
    """Create an item inside an active warehouse."""

    async def execute(self, request: CreateItemRequest) -> LedgerResult:
        logger.info(
            "create_item_started",
            warehouse_id=request.warehouse_id,
            initial_quantity=request.initial_quantity,
        )

        store = self._get_store()
        async with get_store_lock():
            warehouses = await store.load_warehouses()
            warehouse = find_warehouse(warehouses, request.warehouse_id)
            if warehouse.is_archived:
                raise ValidationError(
                    "warehouse_id", "warehouse is archived", request.warehouse_id
                )

            result = create_item(
                warehouse,
                request.name,
                request.initial_quantity,
                self.clock,
                self.ids,
            )

            items = await store.load_items()
            await store.save_items([*items, result.item])
            await store.save_warehouses(replace_by_id(warehouses, result.warehouse))

        logger.info(
            "create_item_complete",
            item_id=result.item.id,
            quantity=result.item.quantity,
        )
        return result

    def to_response(self, result: LedgerResult) -> ItemResponse:
        return ItemResponse.from_entity(result.item, item_history_view(result.item))
