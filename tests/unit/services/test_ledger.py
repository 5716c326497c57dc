"""Tests for the ledger engine."""

from datetime import UTC, datetime, timedelta

import pytest

from stockpilot.core.entities.inventory import HistoryEntry, HistoryEntryType
from stockpilot.core.exceptions import (
    InsufficientStockError,
    LedgerIntegrityError,
    ValidationError,
)
from stockpilot.core.services.ledger import (
    INITIAL_COMMENT,
    add_stock,
    balance_at,
    consume_stock,
    create_item,
    replay_history,
    verify_item,
)

T0 = datetime(2024, 1, 15, 9, 0, tzinfo=UTC)


class TestCreateItem:
    def test_opening_entry(self, warehouse, clock, ids):
        result = create_item(warehouse, "  Widget ", 100, clock, ids)

        item = result.item
        assert item.name == "Widget"
        assert item.quantity == 100
        assert item.warehouse_id == "wh-main"
        assert len(item.history) == 1

        entry = item.history[0]
        assert entry is result.entry
        assert entry.type == HistoryEntryType.CREATE_ITEM
        assert entry.change == 100
        assert entry.quantity_before == 0
        assert entry.quantity_after == 100
        assert entry.comment == INITIAL_COMMENT
        assert entry.timestamp == T0
        assert item.created_at == item.updated_at == T0

    def test_touches_warehouse_without_mutating_input(self, warehouse, clock, ids):
        result = create_item(warehouse, "Widget", 5, clock, ids)

        assert result.warehouse.updated_at == T0
        assert warehouse.updated_at == T0 - timedelta(days=1)

    def test_entry_and_item_ids_are_distinct(self, warehouse, clock, ids):
        result = create_item(warehouse, "Widget", 5, clock, ids)
        assert result.entry.id == "id-1"
        assert result.item.id == "id-2"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_rejects_empty_name(self, warehouse, clock, ids, name):
        with pytest.raises(ValidationError) as exc_info:
            create_item(warehouse, name, 10, clock, ids)
        assert exc_info.value.details["field"] == "name"

    @pytest.mark.parametrize("quantity", [0, -5, 2.5, True, "10"])
    def test_rejects_bad_initial_quantity(self, warehouse, clock, ids, quantity):
        with pytest.raises(ValidationError) as exc_info:
            create_item(warehouse, "Widget", quantity, clock, ids)
        assert exc_info.value.details["field"] == "initial_quantity"
        assert ids.count == 0


class TestAddStock:
    def test_appends_entry(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse, initial=10)

        result = add_stock(item, 15, "  restock ", clock, ids)

        assert result.item.quantity == 25
        assert len(result.item.history) == 2
        assert result.entry.type == HistoryEntryType.ADD_STOCK
        assert result.entry.change == 15
        assert result.entry.quantity_before == 10
        assert result.entry.quantity_after == 25
        assert result.entry.comment == "restock"
        assert result.item.updated_at == result.entry.timestamp
        # input untouched
        assert item.quantity == 10
        assert len(item.history) == 1

    def test_blank_comment_becomes_none(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse)
        result = add_stock(item, 1, "   ", clock, ids)
        assert result.entry.comment is None

    @pytest.mark.parametrize("amount", [0, -1, True, 1.0])
    def test_rejects_non_positive_or_non_integer(self, warehouse, make_item, clock, ids, amount):
        item = make_item(warehouse)
        with pytest.raises(ValidationError):
            add_stock(item, amount, None, clock, ids)

    def test_touches_owning_warehouse(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse)
        result = add_stock(item, 1, None, clock, ids, warehouse=warehouse)
        assert result.warehouse is not None
        assert result.warehouse.updated_at == result.entry.timestamp

    def test_rejects_foreign_warehouse(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse)
        other = warehouse.model_copy(update={"id": "wh-other"})
        with pytest.raises(ValidationError):
            add_stock(item, 1, None, clock, ids, warehouse=other)


class TestConsumeStock:
    def test_consumes(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse, initial=100)

        result = consume_stock(item, 30, "sold", clock, ids)

        assert result.item.quantity == 70
        assert result.entry.type == HistoryEntryType.CONSUME_STOCK
        assert result.entry.change == -30
        assert result.entry.quantity_before == 100
        assert result.entry.quantity_after == 70

    def test_consume_everything(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse, initial=7)
        result = consume_stock(item, 7, None, clock, ids)
        assert result.item.quantity == 0

    def test_insufficient_stock(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse, initial=100, movements=(-90,))
        assert item.quantity == 10

        with pytest.raises(InsufficientStockError) as exc_info:
            consume_stock(item, 11, None, clock, ids)

        assert exc_info.value.available == 10
        assert exc_info.value.requested == 11
        assert exc_info.value.details["available"] == 10
        assert item.quantity == 10
        assert len(item.history) == 2

    def test_validation_runs_before_availability(self, warehouse, make_item, clock, ids):
        item = make_item(warehouse, initial=1)
        with pytest.raises(ValidationError):
            consume_stock(item, -50, None, clock, ids)


class TestReplay:
    def test_replay_matches_quantity(self, warehouse, make_item):
        item = make_item(warehouse, initial=100, movements=(-30, 20, -90))
        assert item.quantity == 0
        assert replay_history(item.history) == 0
        assert verify_item(item) == 0

    def test_broken_chain(self, warehouse, make_item):
        item = make_item(warehouse, initial=10, movements=(5,))
        bad = item.history[1].model_copy(update={"quantity_before": 9})

        with pytest.raises(LedgerIntegrityError) as exc_info:
            replay_history([item.history[0], bad], item_id=item.id)

        assert exc_info.value.details["entry_id"] == bad.id

    def test_bad_arithmetic(self, warehouse, make_item):
        item = make_item(warehouse, initial=10)
        bad = item.history[0].model_copy(update={"quantity_after": 11})
        with pytest.raises(LedgerIntegrityError):
            replay_history([bad])

    def test_negative_balance(self):
        entry = HistoryEntry(
            id="e1",
            type=HistoryEntryType.ADJUST_STOCK,
            change=-1,
            quantity_before=0,
            quantity_after=0,
            timestamp=T0,
        )
        # quantity_after cannot hold -1, so the arithmetic check fires first
        with pytest.raises(LedgerIntegrityError):
            replay_history([entry])

    def test_adjustment_entries_fold_by_change(self, warehouse, make_item):
        item = make_item(warehouse, initial=10)
        adjust = HistoryEntry(
            id="adj",
            type=HistoryEntryType.ADJUST_STOCK,
            change=-4,
            quantity_before=10,
            quantity_after=6,
            timestamp=T0 + timedelta(hours=1),
        )
        assert replay_history([*item.history, adjust]) == 6

    def test_verify_detects_stored_quantity_drift(self, warehouse, make_item):
        item = make_item(warehouse, initial=10)
        drifted = item.model_copy(update={"quantity": 12})
        with pytest.raises(LedgerIntegrityError) as exc_info:
            verify_item(drifted)
        assert "12" in exc_info.value.details["reason"]

    def test_empty_history(self):
        assert replay_history([]) == 0


class TestBalanceAt:
    def test_balance_over_time(self, warehouse, make_item):
        # entries at T0, T0+1m, T0+2m
        item = make_item(warehouse, initial=100, movements=(-30, 5))

        assert balance_at(item.history, T0 - timedelta(seconds=1)) == 0
        assert balance_at(item.history, T0) == 100
        assert balance_at(item.history, T0 + timedelta(seconds=90)) == 70
        assert balance_at(item.history, T0 + timedelta(days=1)) == 75
