"""System clock and identifier generator."""

import threading
import uuid
from datetime import UTC, datetime

from stockpilot.core.interfaces.clock import IClock, IIdGenerator


class SystemClock(IClock):
    """
    UTC wall clock that never goes backwards.

    If the system time steps back, the last returned instant is repeated
    until the wall clock catches up.
    """

    def __init__(self) -> None:
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        current = datetime.now(UTC)
        with self._lock:
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
        return current


class UuidGenerator(IIdGenerator):
    """Random UUID4 identifiers as 32-character hex strings."""

    def new_id(self) -> str:
        return uuid.uuid4().hex
