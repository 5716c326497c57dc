"""Storage infrastructure implementations."""

from stockpilot.config import get_logger, get_settings
from stockpilot.core.interfaces.inventory_store import IInventoryStore
from stockpilot.infrastructure.storage.json_file import JsonFileInventoryStore
from stockpilot.infrastructure.storage.sqlite import (
    SQLiteInventoryStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

logger = get_logger(__name__)

# Singleton instance
_inventory_store: IInventoryStore | None = None


def create_inventory_store(backend: str | None = None) -> IInventoryStore:
    """Build the store for the configured backend ("sqlite" or "json")."""
    settings = get_settings()
    backend = backend or settings.storage.backend
    if backend == "json":
        return JsonFileInventoryStore(settings.storage.json_path)
    if backend == "sqlite":
        return SQLiteInventoryStore()
    raise ValueError(f"Unknown storage backend: {backend}")


def get_inventory_store() -> IInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = create_inventory_store()
        logger.info("inventory_store_created", backend=type(_inventory_store).__name__)
    return _inventory_store


async def reset_inventory_store() -> None:
    """Drop the singleton store and close pooled connections (for tests and shutdown)."""
    global _inventory_store
    _inventory_store = None
    await close_pool()


__all__ = [
    "JsonFileInventoryStore",
    "SQLiteInventoryStore",
    "create_inventory_store",
    "get_inventory_store",
    "reset_inventory_store",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
