"""Archive and restore single items."""

from stockpilot.application.dto.responses import ItemResponse
from stockpilot.application.locks import get_store_lock
from stockpilot.application.use_cases.base import (
    InventoryUseCase,
    find_item,
    replace_by_id,
)
from stockpilot.config import get_logger
from stockpilot.core.exceptions import ValidationError
from stockpilot.core.services.archival import (
    ItemArchivalResult,
    archive_item,
    restore_item,
)

logger = get_logger(__name__)


class _ItemArchivalUseCase(InventoryUseCase):
    event = "item_archival"
    target_state = True

    def _apply(self, item, warehouse) -> ItemArchivalResult:
        return archive_item(item, warehouse, self.clock)

    async def execute(self, item_id: str) -> ItemArchivalResult:
        logger.info(f"{self.event}_started", item_id=item_id)

        store = self._get_store()
        async with get_store_lock():
            items = await store.load_items()
            item = find_item(items, item_id)
            if item.is_archived == self.target_state:
                state = "archived" if self.target_state else "active"
                raise ValidationError("item_id", f"item is already {state}", item_id)

            warehouses = await store.load_warehouses()
            warehouse = next((w for w in warehouses if w.id == item.warehouse_id), None)
            result = self._apply(item, warehouse)

            await store.save_items(replace_by_id(items, result.item))
            if result.warehouse is not None:
                await store.save_warehouses(replace_by_id(warehouses, result.warehouse))

        logger.info(f"{self.event}_complete", item_id=item_id)
        return result

    def to_response(self, result: ItemArchivalResult) -> ItemResponse:
        return ItemResponse.from_entity(result.item)


class ArchiveItemUseCase(_ItemArchivalUseCase):
    """Soft-delete one item."""

    event = "archive_item"
    target_state = True


class RestoreItemUseCase(_ItemArchivalUseCase):
    """Bring an archived item back."""

    event = "restore_item"
    target_state = False

    def _apply(self, item, warehouse) -> ItemArchivalResult:
        return restore_item(item, warehouse, self.clock)
