"""
Report projector.

Read-only views derived from warehouses and item ledgers: item history,
warehouse listings, the flattened cross-warehouse transaction feed and the
archive listings. Nothing here mutates its inputs or keeps state between
calls, and empty inputs yield empty views.
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Literal
from zoneinfo import ZoneInfo

from stockpilot.core.entities.inventory import HistoryEntry, Item, Warehouse
from stockpilot.core.entities.report import ArchivedReport, FlattenedTransaction

ALL = "all"

END_OF_DAY = time(23, 59, 59, 999000)


def _selected(value: str | None) -> str | None:
    """Normalize an entity filter: None, blank and "all" mean no filter."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == ALL:
        return None
    return value


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _newest_first(records):
    ordered = sorted(
        enumerate(records), key=lambda p: (_aware(p[1].timestamp), p[0]), reverse=True
    )
    return [record for _, record in ordered]


@dataclass(frozen=True)
class TransactionFilter:
    """
    Filters for the transaction feed, combined with AND.

    ``item_id`` only narrows the feed once ``warehouse_id`` is set. Date
    bounds are inclusive whole days in ``timezone``: the start floors to
    00:00:00.000 and the end ceils to 23:59:59.999.
    """

    warehouse_id: str | None = None
    item_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    timezone: str = "UTC"

    @property
    def warehouse(self) -> str | None:
        return _selected(self.warehouse_id)

    @property
    def item(self) -> str | None:
        if self.warehouse is None:
            return None
        return _selected(self.item_id)

    @property
    def start(self) -> datetime | None:
        if self.start_date is None:
            return None
        return datetime.combine(self.start_date, time.min, tzinfo=ZoneInfo(self.timezone))

    @property
    def end(self) -> datetime | None:
        if self.end_date is None:
            return None
        return datetime.combine(self.end_date, END_OF_DAY, tzinfo=ZoneInfo(self.timezone))

    def matches_time(self, timestamp: datetime) -> bool:
        timestamp = _aware(timestamp)
        start, end = self.start, self.end
        if start is not None and timestamp < start:
            return False
        if end is not None and timestamp > end:
            return False
        return True


def newest_first(entries: Iterable[HistoryEntry]) -> list[HistoryEntry]:
    """Entries by timestamp descending; of equal timestamps the later recorded comes first."""
    return _newest_first(entries)


def item_history_view(item: Item) -> list[HistoryEntry]:
    """An item's history for display, most recent first."""
    return newest_first(item.history)


def warehouse_item_listing(
    warehouse_id: str,
    items: Iterable[Item],
    order: Literal["name", "recent"] = "name",
) -> list[Item]:
    """Active items of one warehouse, by name or most recently updated first."""
    listing = [i for i in items if i.warehouse_id == warehouse_id and not i.is_archived]
    if order == "recent":
        listing.sort(key=lambda i: _aware(i.updated_at), reverse=True)
    else:
        listing.sort(key=lambda i: i.name.casefold())
    return listing


class TransactionFeed:
    """
    Flattened transactions of every active item in every active warehouse.

    Each iteration recomputes the feed from the captured inputs, newest
    first. Items whose warehouse is missing or archived contribute nothing.
    """

    def __init__(
        self,
        warehouses: Iterable[Warehouse],
        items: Iterable[Item],
        filters: TransactionFilter | None = None,
    ):
        self._warehouses = tuple(warehouses)
        self._items = tuple(items)
        self.filters = filters or TransactionFilter()

    def __iter__(self) -> Iterator[FlattenedTransaction]:
        return iter(_newest_first(self._flatten()))

    def _flatten(self) -> Iterator[FlattenedTransaction]:
        active = {w.id: w for w in self._warehouses if not w.is_archived}
        wanted_warehouse = self.filters.warehouse
        wanted_item = self.filters.item

        for item in self._items:
            if item.is_archived:
                continue
            warehouse = active.get(item.warehouse_id)
            if warehouse is None:
                continue
            if wanted_warehouse is not None and warehouse.id != wanted_warehouse:
                continue
            if wanted_item is not None and item.id != wanted_item:
                continue

            for entry in item.history:
                if not self.filters.matches_time(entry.timestamp):
                    continue
                yield FlattenedTransaction(
                    **entry.model_dump(),
                    item_id=item.id,
                    item_name=item.name,
                    warehouse_id=warehouse.id,
                    warehouse_name=warehouse.name,
                )

    def to_list(self) -> list[FlattenedTransaction]:
        return list(self)


def report_title(
    filters: TransactionFilter,
    warehouses: Iterable[Warehouse],
    items: Iterable[Item],
) -> str:
    """
    Human-readable title for a filtered transaction feed.

    Examples:
        All Transactions
        Transactions for Main Store from 2024-01-01 to 2024-01-31
        Transactions for Widget in Main Store until 2024-02-01
    """
    warehouse_names = {w.id: w.name for w in warehouses}
    item_names = {i.id: i.name for i in items}

    warehouse_id = filters.warehouse
    item_id = filters.item

    if warehouse_id is None:
        title = "All Transactions"
    else:
        warehouse_name = warehouse_names.get(warehouse_id, warehouse_id)
        if item_id is None:
            title = f"Transactions for {warehouse_name}"
        else:
            item_name = item_names.get(item_id, item_id)
            title = f"Transactions for {item_name} in {warehouse_name}"

    start, end = filters.start_date, filters.end_date
    if start and end:
        title += f" from {start.isoformat()} to {end.isoformat()}"
    elif start:
        title += f" from {start.isoformat()}"
    elif end:
        title += f" until {end.isoformat()}"
    return title


def active_warehouses(
    warehouses: Iterable[Warehouse], search: str | None = None
) -> list[Warehouse]:
    """Non-archived warehouses, most recently updated first, optionally name-searched."""
    needle = (search or "").strip().casefold()
    result = [
        w
        for w in warehouses
        if not w.is_archived and (not needle or needle in w.name.casefold())
    ]
    result.sort(key=lambda w: _aware(w.updated_at or w.created_at), reverse=True)
    return result


def archived_warehouses(warehouses: Iterable[Warehouse]) -> list[Warehouse]:
    result = [w for w in warehouses if w.is_archived]
    result.sort(key=lambda w: _aware(w.updated_at), reverse=True)
    return result


def archived_items(items: Iterable[Item]) -> list[Item]:
    result = [i for i in items if i.is_archived]
    result.sort(key=lambda i: _aware(i.updated_at), reverse=True)
    return result


def archived_report_listing(reports: Iterable[ArchivedReport]) -> list[ArchivedReport]:
    """Archived reports, most recently printed first."""
    return sorted(reports, key=lambda r: _aware(r.printed_at), reverse=True)


def summarize_history(item: Item, limit: int | None = 50) -> str:
    """
    Plain-text ledger summary used as the advisor's historical data.

    One line per entry, oldest first, capped to the ``limit`` most recent.
    """
    entries: Sequence[HistoryEntry] = item.history
    if limit is not None and len(entries) > limit:
        entries = entries[-limit:]
    if not entries:
        return f"No recorded transactions. Current stock: {item.quantity}."

    lines = [f"Item: {item.name}. Current stock: {item.quantity}."]
    for entry in entries:
        line = (
            f"{_aware(entry.timestamp).strftime('%Y-%m-%d %H:%M')} "
            f"{entry.type.label}: {entry.change:+d} "
            f"({entry.quantity_before} -> {entry.quantity_after})"
        )
        if entry.comment:
            line += f" - {entry.comment}"
        lines.append(line)
    return "\n".join(lines)
