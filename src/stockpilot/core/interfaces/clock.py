"""Time and identity sources used by the ledger and archival services."""

from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Supplies the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        """
        Current timezone-aware instant.

        Consecutive calls must never go backwards, so history entries on
        one item keep non-decreasing timestamps.
        """
        pass


class IIdGenerator(ABC):
    """Produces identifiers for warehouses, items, entries and reports."""

    @abstractmethod
    def new_id(self) -> str:
        """Return an identifier never returned before."""
        pass
