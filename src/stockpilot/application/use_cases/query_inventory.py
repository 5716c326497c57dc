"""Read-only inventory queries: warehouses, items, balances and ledger checks."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Literal

from stockpilot.application.dto.responses import (
    BalanceResponse,
    ItemListResponse,
    ItemResponse,
    LedgerVerificationResponse,
    WarehouseDetailResponse,
    WarehouseListResponse,
    WarehouseResponse,
)
from stockpilot.application.use_cases.base import (
    InventoryUseCase,
    find_item,
    find_warehouse,
)
from stockpilot.config import get_logger
from stockpilot.core.entities.inventory import Item, Warehouse
from stockpilot.core.exceptions import LedgerIntegrityError
from stockpilot.core.services.ledger import balance_at, replay_history, verify_item
from stockpilot.core.services.report_projector import (
    active_warehouses,
    item_history_view,
    warehouse_item_listing,
)

logger = get_logger(__name__)


@dataclass
class WarehouseListResult:
    warehouses: list[Warehouse]
    active_item_counts: dict[str, int]


@dataclass
class WarehouseDetailResult:
    warehouse: Warehouse
    items: list[Item]


class ListWarehousesUseCase(InventoryUseCase):
    """Active warehouses, most recently updated first."""

    async def execute(self, search: str | None = None) -> WarehouseListResult:
        store = self._get_store()
        warehouses = active_warehouses(await store.load_warehouses(), search)
        items = await store.load_items()

        counts = {w.id: 0 for w in warehouses}
        for item in items:
            if not item.is_archived and item.warehouse_id in counts:
                counts[item.warehouse_id] += 1
        return WarehouseListResult(warehouses=warehouses, active_item_counts=counts)

    def to_response(self, result: WarehouseListResult) -> WarehouseListResponse:
        return WarehouseListResponse(
            warehouses=[
                WarehouseResponse.from_entity(w, result.active_item_counts.get(w.id, 0))
                for w in result.warehouses
            ],
            total=len(result.warehouses),
        )


class GetWarehouseUseCase(InventoryUseCase):
    """One warehouse with its active items."""

    async def execute(
        self,
        warehouse_id: str,
        order: Literal["name", "recent"] = "name",
    ) -> WarehouseDetailResult:
        store = self._get_store()
        warehouse = find_warehouse(await store.load_warehouses(), warehouse_id)
        items = warehouse_item_listing(warehouse.id, await store.load_items(), order)
        return WarehouseDetailResult(warehouse=warehouse, items=items)

    def to_response(self, result: WarehouseDetailResult) -> WarehouseDetailResponse:
        return WarehouseDetailResponse(
            warehouse=WarehouseResponse.from_entity(result.warehouse, len(result.items)),
            items=[ItemResponse.from_entity(i) for i in result.items],
        )


class ListItemsUseCase(InventoryUseCase):
    """Active items, optionally restricted to one warehouse."""

    async def execute(self, warehouse_id: str | None = None) -> list[Item]:
        store = self._get_store()
        items = await store.load_items()
        if warehouse_id:
            find_warehouse(await store.load_warehouses(), warehouse_id)
            return warehouse_item_listing(warehouse_id, items, order="name")
        active = [i for i in items if not i.is_archived]
        active.sort(key=lambda i: i.name.casefold())
        return active

    def to_response(self, items: list[Item]) -> ItemListResponse:
        return ItemListResponse(
            items=[ItemResponse.from_entity(i) for i in items],
            total=len(items),
        )


class GetItemUseCase(InventoryUseCase):
    """One item with its history, most recent first."""

    async def execute(self, item_id: str) -> Item:
        store = self._get_store()
        return find_item(await store.load_items(), item_id)

    def to_response(self, item: Item) -> ItemResponse:
        return ItemResponse.from_entity(item, item_history_view(item))


class ItemBalanceUseCase(InventoryUseCase):
    """Quantity an item held at a past instant, replayed from its history."""

    async def execute(self, item_id: str, at: datetime | None = None) -> BalanceResponse:
        instant = at or self.clock.now()
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)

        store = self._get_store()
        item = find_item(await store.load_items(), item_id)
        return BalanceResponse(
            item_id=item.id, at=instant, quantity=balance_at(item.history, instant)
        )


class VerifyItemLedgerUseCase(InventoryUseCase):
    """Replay an item's history and compare it with the stored quantity."""

    async def execute(self, item_id: str) -> LedgerVerificationResponse:
        store = self._get_store()
        item = find_item(await store.load_items(), item_id)

        try:
            balance = verify_item(item)
        except LedgerIntegrityError as e:
            logger.warning(
                "ledger_inconsistent", item_id=item_id, reason=e.details["reason"]
            )
            try:
                replayed = replay_history(item.history, item_id=item.id)
            except LedgerIntegrityError:
                replayed = None
            return LedgerVerificationResponse(
                item_id=item.id,
                consistent=False,
                quantity=item.quantity,
                replayed_quantity=replayed,
                error=e.message,
            )

        return LedgerVerificationResponse(
            item_id=item.id,
            consistent=True,
            quantity=item.quantity,
            replayed_quantity=balance,
        )
