"""SQLite storage implementations."""

from stockpilot.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from stockpilot.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore

__all__ = [
    "SQLiteInventoryStore",
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
