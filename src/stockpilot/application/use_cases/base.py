"""Shared plumbing for inventory use cases."""

from stockpilot.core.entities.inventory import Item, Warehouse
from stockpilot.core.exceptions import ItemNotFoundError, WarehouseNotFoundError
from stockpilot.core.interfaces.clock import IClock, IIdGenerator
from stockpilot.core.interfaces.inventory_store import IInventoryStore


class InventoryUseCase:
    """
    Base for use cases that read or mutate the inventory collections.

    Collaborators are injected for tests and resolved lazily otherwise.
    """

    def __init__(
        self,
        store: IInventoryStore | None = None,
        clock: IClock | None = None,
        ids: IIdGenerator | None = None,
    ):
        self._store = store
        self._clock = clock
        self._ids = ids

    def _get_store(self) -> IInventoryStore:
        if self._store is None:
            from stockpilot.application.services import get_inventory_store

            self._store = get_inventory_store()
        return self._store

    @property
    def clock(self) -> IClock:
        if self._clock is None:
            from stockpilot.application.services import get_clock

            self._clock = get_clock()
        return self._clock

    @property
    def ids(self) -> IIdGenerator:
        if self._ids is None:
            from stockpilot.application.services import get_id_generator

            self._ids = get_id_generator()
        return self._ids


def find_warehouse(warehouses: list[Warehouse], warehouse_id: str) -> Warehouse:
    for warehouse in warehouses:
        if warehouse.id == warehouse_id:
            return warehouse
    raise WarehouseNotFoundError(warehouse_id)


def find_item(items: list[Item], item_id: str) -> Item:
    for item in items:
        if item.id == item_id:
            return item
    raise ItemNotFoundError(item_id)


def replace_by_id(records: list, updated) -> list:
    """Return a copy of records with the one sharing updated's id swapped in."""
    return [updated if r.id == updated.id else r for r in records]
