"""
Ledger engine.

Applies validated stock movements to an item by appending history entries.
Functions never mutate their arguments: they return updated copies, so an
item is either fully updated (new entry, new quantity, new timestamp) or
left as it was.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from stockpilot.core.entities.inventory import (
    HistoryEntry,
    HistoryEntryType,
    Item,
    Warehouse,
)
from stockpilot.core.exceptions import (
    InsufficientStockError,
    LedgerIntegrityError,
    ValidationError,
)
from stockpilot.core.interfaces.clock import IClock, IIdGenerator

INITIAL_COMMENT = "Initial item creation"


@dataclass(frozen=True)
class LedgerResult:
    """Outcome of a ledger operation."""

    item: Item
    entry: HistoryEntry
    warehouse: Warehouse | None = None


def _require_positive_int(field: str, value: Any) -> int:
    # bool is an int subclass; True must not count as one unit
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be a whole number", value)
    if value <= 0:
        raise ValidationError(field, "must be greater than zero", value)
    return value


def _clean_comment(comment: str | None) -> str | None:
    if comment is None:
        return None
    comment = comment.strip()
    return comment or None


def _touch(warehouse: Warehouse | None, now: datetime) -> Warehouse | None:
    if warehouse is None:
        return None
    return warehouse.model_copy(update={"updated_at": now})


def create_item(
    warehouse: Warehouse,
    name: str,
    initial_quantity: int,
    clock: IClock,
    ids: IIdGenerator,
) -> LedgerResult:
    """
    Create an item whose history starts with a single CREATE_ITEM entry.

    Args:
        warehouse: Owning warehouse; a copy with a fresh updated_at is returned
        name: Item name, must be non-empty after stripping
        initial_quantity: Opening stock, a positive integer
        clock: Time source
        ids: Identifier source

    Returns:
        LedgerResult with the new item, its first entry and the touched warehouse

    Raises:
        ValidationError: If the name is empty or the quantity is not positive
    """
    clean_name = (name or "").strip()
    if not clean_name:
        raise ValidationError("name", "must not be empty", name)
    quantity = _require_positive_int("initial_quantity", initial_quantity)

    now = clock.now()
    entry = HistoryEntry(
        id=ids.new_id(),
        type=HistoryEntryType.CREATE_ITEM,
        change=quantity,
        quantity_before=0,
        quantity_after=quantity,
        comment=INITIAL_COMMENT,
        timestamp=now,
    )
    item = Item(
        id=ids.new_id(),
        warehouse_id=warehouse.id,
        name=clean_name,
        quantity=quantity,
        history=[entry],
        created_at=now,
        updated_at=now,
    )
    return LedgerResult(item=item, entry=entry, warehouse=_touch(warehouse, now))


def _append(
    item: Item,
    entry_type: HistoryEntryType,
    change: int,
    comment: str | None,
    clock: IClock,
    ids: IIdGenerator,
    warehouse: Warehouse | None,
) -> LedgerResult:
    if warehouse is not None and warehouse.id != item.warehouse_id:
        raise ValidationError(
            "warehouse_id", "item does not belong to this warehouse", warehouse.id
        )

    now = clock.now()
    before = item.quantity
    entry = HistoryEntry(
        id=ids.new_id(),
        type=entry_type,
        change=change,
        quantity_before=before,
        quantity_after=before + change,
        comment=_clean_comment(comment),
        timestamp=now,
    )
    updated = item.model_copy(
        update={
            "history": [*item.history, entry],
            "quantity": entry.quantity_after,
            "updated_at": now,
        }
    )
    return LedgerResult(item=updated, entry=entry, warehouse=_touch(warehouse, now))


def add_stock(
    item: Item,
    amount: int,
    comment: str | None,
    clock: IClock,
    ids: IIdGenerator,
    warehouse: Warehouse | None = None,
) -> LedgerResult:
    """Append an ADD_STOCK entry of +amount."""
    amount = _require_positive_int("amount", amount)
    return _append(
        item, HistoryEntryType.ADD_STOCK, amount, comment, clock, ids, warehouse
    )


def consume_stock(
    item: Item,
    amount: int,
    comment: str | None,
    clock: IClock,
    ids: IIdGenerator,
    warehouse: Warehouse | None = None,
) -> LedgerResult:
    """
    Append a CONSUME_STOCK entry of -amount.

    The availability check and the new entry both read the same item
    snapshot, so a consumption can never be applied against a stale quantity.

    Raises:
        ValidationError: If amount is not a positive integer
        InsufficientStockError: If amount exceeds the quantity on hand
    """
    amount = _require_positive_int("amount", amount)
    if amount > item.quantity:
        raise InsufficientStockError(
            item_id=item.id, requested=amount, available=item.quantity
        )
    return _append(
        item, HistoryEntryType.CONSUME_STOCK, -amount, comment, clock, ids, warehouse
    )


def replay_history(
    history: Sequence[HistoryEntry], item_id: str | None = None
) -> int:
    """
    Fold a history in insertion order and return the resulting quantity.

    Every entry type, ADJUST_STOCK included, is folded by its signed change.

    Raises:
        LedgerIntegrityError: On a broken chain, bad arithmetic or a negative balance
    """
    balance = 0
    for entry in history:
        if entry.quantity_before != balance:
            raise LedgerIntegrityError(
                item_id,
                f"entry starts at {entry.quantity_before}, expected {balance}",
                entry_id=entry.id,
            )
        balance += entry.change
        if entry.quantity_after != balance:
            raise LedgerIntegrityError(
                item_id,
                f"entry ends at {entry.quantity_after}, expected {balance}",
                entry_id=entry.id,
            )
        if balance < 0:
            raise LedgerIntegrityError(
                item_id, f"balance went negative ({balance})", entry_id=entry.id
            )
    return balance


def verify_item(item: Item) -> int:
    """Replay an item's history and check it matches the stored quantity."""
    balance = replay_history(item.history, item_id=item.id)
    if balance != item.quantity:
        raise LedgerIntegrityError(
            item.id, f"quantity is {item.quantity} but history folds to {balance}"
        )
    return balance


def balance_at(history: Sequence[HistoryEntry], instant: datetime) -> int:
    """
    Quantity held at the given instant.

    Entries stamped exactly at the instant are included. Before the first
    entry the balance is 0.
    """
    balance = 0
    for entry in history:
        if entry.timestamp > instant:
            break
        balance = entry.quantity_after
    return balance
