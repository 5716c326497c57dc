"""
Archival policy.

Soft deletion and restoration of warehouses and items, plus the write-once
snapshots taken when a report is printed. Archiving a warehouse cascades to
its active items; restoring a warehouse does not cascade back.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from stockpilot.core.entities.context import OperationContext
from stockpilot.core.entities.inventory import Item, Warehouse
from stockpilot.core.entities.report import (
    ArchivedReport,
    FlattenedTransaction,
    ItemQuantitySnapshot,
    ItemReport,
    TransactionsReport,
    WarehouseReport,
)
from stockpilot.core.interfaces.clock import IClock, IIdGenerator


@dataclass(frozen=True)
class CascadePlan:
    """
    Result of archiving a warehouse.

    ``items`` is the complete item collection with the cascaded copies in
    place, ready to be saved as a whole.
    """

    warehouse: Warehouse
    items: tuple[Item, ...]
    archived_item_ids: tuple[str, ...]


@dataclass(frozen=True)
class ItemArchivalResult:
    item: Item
    warehouse: Warehouse | None = None


def archive_warehouse(
    warehouse: Warehouse, items: Iterable[Item], clock: IClock
) -> CascadePlan:
    """
    Archive a warehouse and every non-archived item it owns.

    Items that are already archived are passed through untouched, keeping
    their original ``updated_at``.
    """
    now = clock.now()
    archived = warehouse.model_copy(update={"is_archived": True, "updated_at": now})

    result: list[Item] = []
    cascaded: list[str] = []
    for item in items:
        if item.warehouse_id == warehouse.id and not item.is_archived:
            item = item.model_copy(update={"is_archived": True, "updated_at": now})
            cascaded.append(item.id)
        result.append(item)

    return CascadePlan(
        warehouse=archived, items=tuple(result), archived_item_ids=tuple(cascaded)
    )


def restore_warehouse(warehouse: Warehouse, clock: IClock) -> Warehouse:
    """Clear the archived flag. Items archived with the warehouse stay archived."""
    return warehouse.model_copy(
        update={"is_archived": False, "updated_at": clock.now()}
    )


def _set_item_archived(
    item: Item, warehouse: Warehouse | None, archived: bool, clock: IClock
) -> ItemArchivalResult:
    now = clock.now()
    updated = item.model_copy(update={"is_archived": archived, "updated_at": now})
    parent = None
    if warehouse is not None:
        parent = warehouse.model_copy(update={"updated_at": now})
    return ItemArchivalResult(item=updated, warehouse=parent)


def archive_item(
    item: Item, warehouse: Warehouse | None, clock: IClock
) -> ItemArchivalResult:
    """Archive a single item and refresh its warehouse's ``updated_at``."""
    return _set_item_archived(item, warehouse, True, clock)


def restore_item(
    item: Item, warehouse: Warehouse | None, clock: IClock
) -> ItemArchivalResult:
    """Restore a single item and refresh its warehouse's ``updated_at``."""
    return _set_item_archived(item, warehouse, False, clock)


# Report snapshot sources


@dataclass(frozen=True)
class ItemReportSource:
    warehouse: Warehouse
    item: Item


@dataclass(frozen=True)
class WarehouseReportSource:
    warehouse: Warehouse
    items: Sequence[Item]


@dataclass(frozen=True)
class TransactionsReportSource:
    title: str
    transactions: Sequence[FlattenedTransaction]


ReportSource = ItemReportSource | WarehouseReportSource | TransactionsReportSource


def create_report_snapshot(
    source: ReportSource,
    context: OperationContext,
    clock: IClock,
    ids: IIdGenerator,
    printed_at: datetime | None = None,
) -> ArchivedReport:
    """
    Deep-copy report source data into a new archived report.

    The snapshot shares no mutable state with the source, so later changes
    to the item or warehouse never show up in it. ``printed_at`` defaults
    to the clock's current instant.
    """
    common = {
        "id": ids.new_id(),
        "printed_by": context.username,
        "printed_at": printed_at or clock.now(),
    }

    if isinstance(source, ItemReportSource):
        item = source.item
        return ItemReport(
            **common,
            warehouse_id=source.warehouse.id,
            warehouse_name=source.warehouse.name,
            item_id=item.id,
            item_name=item.name,
            quantity_snapshot=item.quantity,
            history_snapshot=tuple(e.model_copy(deep=True) for e in item.history),
        )

    if isinstance(source, WarehouseReportSource):
        warehouse = source.warehouse
        return WarehouseReport(
            **common,
            warehouse_id=warehouse.id,
            warehouse_name=warehouse.name,
            warehouse_description=warehouse.description,
            items_snapshot=tuple(
                ItemQuantitySnapshot(name=i.name, quantity=i.quantity)
                for i in source.items
                if i.warehouse_id == warehouse.id and not i.is_archived
            ),
        )

    if isinstance(source, TransactionsReportSource):
        return TransactionsReport(
            **common,
            report_title_snapshot=source.title,
            transactions_snapshot=tuple(
                t.model_copy(deep=True) for t in source.transactions
            ),
        )

    raise TypeError(f"Unsupported report source: {type(source).__name__}")
