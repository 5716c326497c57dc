"""Tests for the domain exception hierarchy."""

from stockpilot.core.exceptions import (
    DatabaseError,
    InsufficientStockError,
    ItemNotFoundError,
    LedgerIntegrityError,
    LLMError,
    LLMTimeoutError,
    NotFoundError,
    PartialCascadeError,
    PersistenceError,
    ReportNotFoundError,
    StockPilotError,
    ValidationError,
    WarehouseNotFoundError,
)


def test_validation_error_details():
    err = ValidationError("amount", "must be greater than zero", 0)
    assert err.code == "VALIDATION_ERROR"
    assert err.details == {"field": "amount", "message": "must be greater than zero", "value": "0"}
    assert "amount" in err.message


def test_insufficient_stock_carries_available():
    err = InsufficientStockError("it-1", requested=11, available=10)
    assert err.code == "INSUFFICIENT_STOCK"
    assert err.available == 10
    assert err.to_dict() == {
        "error": "INSUFFICIENT_STOCK",
        "message": "Insufficient stock: requested 11, only 10 available",
        "details": {"item_id": "it-1", "requested": 11, "available": 10},
    }


def test_not_found_family():
    for err, code in (
        (WarehouseNotFoundError("w"), "WAREHOUSE_NOT_FOUND"),
        (ItemNotFoundError("i"), "ITEM_NOT_FOUND"),
        (ReportNotFoundError("r"), "REPORT_NOT_FOUND"),
    ):
        assert isinstance(err, NotFoundError)
        assert err.code == code


def test_persistence_family():
    err = DatabaseError("save_items", "disk I/O error")
    assert isinstance(err, PersistenceError)
    assert err.code == "DATABASE_ERROR"


def test_partial_cascade_lists_pending_items():
    err = PartialCascadeError("wh-1", ["a", "b"], "disk full")
    assert err.pending_item_ids == ["a", "b"]
    assert err.details["warehouse_id"] == "wh-1"
    assert "2 item(s)" in err.message


def test_ledger_integrity_reason():
    err = LedgerIntegrityError("it-1", "balance went negative (-1)", entry_id="e-3")
    assert err.details["reason"] == "balance went negative (-1)"
    assert err.details["entry_id"] == "e-3"


def test_default_code_is_class_name():
    assert StockPilotError("boom").code == "StockPilotError"
    assert isinstance(LLMTimeoutError(30), LLMError)
