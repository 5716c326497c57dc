"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod

from stockpilot.core.entities.inventory import Item, Warehouse
from stockpilot.core.entities.report import ArchivedReport


class IInventoryStore(ABC):
    """
    Whole-collection persistence for warehouses, items and archived reports.

    Every mutation is expressed as "load the full collection, change one
    record, save the full collection". Each save replaces its collection
    atomically; archived reports are insert-only and an existing report is
    never overwritten.

    Implementations: SQLiteInventoryStore, JsonFileInventoryStore
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backing storage (schema, directories)."""
        pass

    @abstractmethod
    async def load_warehouses(self) -> list[Warehouse]:
        """Load every warehouse, archived ones included."""
        pass

    @abstractmethod
    async def save_warehouses(self, warehouses: list[Warehouse]) -> None:
        """Replace the stored warehouse collection."""
        pass

    @abstractmethod
    async def load_items(self) -> list[Item]:
        """Load every item with its full history."""
        pass

    @abstractmethod
    async def save_items(self, items: list[Item]) -> None:
        """Replace the stored item collection, histories included."""
        pass

    @abstractmethod
    async def load_archived_reports(self) -> list[ArchivedReport]:
        """Load every archived report snapshot."""
        pass

    @abstractmethod
    async def save_archived_reports(self, reports: list[ArchivedReport]) -> None:
        """Insert reports that are not stored yet; stored reports stay as they are."""
        pass
