"""Stock movement use cases: add and consume."""

from stockpilot.application.dto.requests import StockMovementRequest
from stockpilot.application.dto.responses import (
    HistoryEntryResponse,
    ItemResponse,
    StockMovementResponse,
)
from stockpilot.application.locks import get_store_lock
from stockpilot.application.use_cases.base import (
    InventoryUseCase,
    find_item,
    replace_by_id,
)
from stockpilot.config import get_logger
from stockpilot.core.exceptions import ValidationError
from stockpilot.core.services.ledger import LedgerResult, add_stock, consume_stock

logger = get_logger(__name__)


class _StockMovementUseCase(InventoryUseCase):
    """Load, apply one ledger operation, save items then the touched warehouse."""

    event = "stock_movement"
    operation = staticmethod(add_stock)

    async def execute(self, item_id: str, request: StockMovementRequest) -> LedgerResult:
        logger.info(f"{self.event}_started", item_id=item_id, amount=request.amount)

        store = self._get_store()
        async with get_store_lock():
            items = await store.load_items()
            item = find_item(items, item_id)
            if item.is_archived:
                raise ValidationError("item_id", "item is archived", item_id)

            warehouses = await store.load_warehouses()
            warehouse = next((w for w in warehouses if w.id == item.warehouse_id), None)
            if warehouse is not None and warehouse.is_archived:
                raise ValidationError("item_id", "item's warehouse is archived", item_id)

            result = self.operation(
                item,
                request.amount,
                request.comment,
                self.clock,
                self.ids,
                warehouse=warehouse,
            )

            await store.save_items(replace_by_id(items, result.item))
            if result.warehouse is not None:
                await store.save_warehouses(replace_by_id(warehouses, result.warehouse))

        logger.info(
            f"{self.event}_complete",
            item_id=item_id,
            change=result.entry.change,
            quantity=result.item.quantity,
        )
        return result

    def to_response(self, result: LedgerResult) -> StockMovementResponse:
        return StockMovementResponse(
            item=ItemResponse.from_entity(result.item),
            entry=HistoryEntryResponse.from_entity(result.entry),
        )


class AddStockUseCase(_StockMovementUseCase):
    """Append an ADD_STOCK entry."""

    event = "add_stock"
    operation = staticmethod(add_stock)


class ConsumeStockUseCase(_StockMovementUseCase):
    """Append a CONSUME_STOCK entry after the availability check."""

    event = "consume_stock"
    operation = staticmethod(consume_stock)
