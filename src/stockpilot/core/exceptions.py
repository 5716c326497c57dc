"""
Domain exceptions for Stock Pilot.

Every error carries a machine-readable code and a details dict; the message is
short and safe to show to an end user.
"""

from typing import Any


class StockPilotError(Exception):
    """Base exception for all Stock Pilot errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(StockPilotError):
    """Input validation failed. Nothing was committed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InsufficientStockError(StockPilotError):
    """Consumption exceeds the quantity on hand."""

    def __init__(self, item_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock: requested {requested}, only {available} available",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "requested": requested,
                "available": available,
            },
        )
        self.requested = requested
        self.available = available


# Lookup Exceptions
class NotFoundError(StockPilotError):
    """Referenced entity does not exist in the loaded collection."""

    pass


class WarehouseNotFoundError(NotFoundError):
    """Warehouse not found."""

    def __init__(self, warehouse_id: str):
        super().__init__(
            f"Warehouse not found: {warehouse_id}",
            code="WAREHOUSE_NOT_FOUND",
            details={"warehouse_id": warehouse_id},
        )


class ItemNotFoundError(NotFoundError):
    """Item not found."""

    def __init__(self, item_id: str):
        super().__init__(
            f"Item not found: {item_id}",
            code="ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class ReportNotFoundError(NotFoundError):
    """Archived report not found."""

    def __init__(self, report_id: str):
        super().__init__(
            f"Archived report not found: {report_id}",
            code="REPORT_NOT_FOUND",
            details={"report_id": report_id},
        )


# Ledger Exceptions
class LedgerIntegrityError(StockPilotError):
    """An item's history does not fold to a consistent balance."""

    def __init__(self, item_id: str | None, reason: str, entry_id: str | None = None):
        super().__init__(
            f"Ledger integrity violation for item {item_id}: {reason}",
            code="LEDGER_INTEGRITY",
            details={"item_id": item_id, "reason": reason, "entry_id": entry_id},
        )


class PartialCascadeError(StockPilotError):
    """Warehouse was archived but its items could not all be saved."""

    def __init__(self, warehouse_id: str, pending_item_ids: list[str], error: str):
        super().__init__(
            f"Warehouse {warehouse_id} archived, but {len(pending_item_ids)} "
            f"item(s) could not be archived: {error}",
            code="PARTIAL_CASCADE",
            details={
                "warehouse_id": warehouse_id,
                "pending_item_ids": pending_item_ids,
                "error": error,
            },
        )
        self.pending_item_ids = pending_item_ids


# Persistence Exceptions
class PersistenceError(StockPilotError):
    """Base exception for load/save round-trips to the backing store."""

    def __init__(
        self,
        message: str,
        code: str | None = "PERSISTENCE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, details=details)


class DatabaseError(PersistenceError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class StorageFileError(PersistenceError):
    """Reading or writing the document file failed."""

    def __init__(self, path: str, operation: str, error: str):
        super().__init__(
            f"Storage file error during {operation} of {path}: {error}",
            code="STORAGE_FILE_ERROR",
            details={"path": path, "operation": operation, "error": error},
        )


# Report Exceptions
class ReportRenderError(StockPilotError):
    """Printing collaborator failed to render a report."""

    def __init__(self, report_type: str, reason: str):
        super().__init__(
            f"Failed to render {report_type} report: {reason}",
            code="REPORT_RENDER_FAILED",
            details={"report_type": report_type, "reason": reason},
        )


# LLM Exceptions
class LLMError(StockPilotError):
    """Base exception for LLM operations."""

    pass


class LLMUnavailableError(LLMError):
    """LLM provider is not available."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"LLM provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMTimeoutError(LLMError):
    """LLM request timed out."""

    def __init__(self, timeout: int, operation: str = "generation"):
        super().__init__(
            f"LLM {operation} timed out after {timeout} seconds",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(LLMError):
    """LLM returned invalid or empty response."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class ModelNotFoundError(LLMError):
    """Requested model not found."""

    def __init__(self, model: str, provider: str):
        super().__init__(
            f"Model '{model}' not found on {provider}",
            code="MODEL_NOT_FOUND",
            details={"model": model, "provider": provider},
        )


class CircuitBreakerOpenError(LLMError):
    """Circuit breaker is open due to repeated failures."""

    def __init__(self, provider: str, cooldown_remaining: int):
        super().__init__(
            f"Circuit breaker open for {provider}, retry in {cooldown_remaining}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"provider": provider, "cooldown_remaining": cooldown_remaining},
        )


class ConfigurationError(StockPilotError):
    """Configuration error."""

    pass
