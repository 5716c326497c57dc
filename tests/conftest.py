"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from stockpilot.application.locks import reset_store_lock
from stockpilot.application.services import reset_services
from stockpilot.config import get_settings, reset_settings
from stockpilot.config.settings import Settings
from stockpilot.core.entities.inventory import Item, Warehouse
from stockpilot.core.interfaces.clock import IClock, IIdGenerator
from stockpilot.core.services.ledger import add_stock, consume_stock, create_item

T0 = datetime(2024, 1, 15, 9, 0, tzinfo=UTC)


class FakeClock(IClock):
    """Deterministic clock: every call advances by ``step``."""

    def __init__(self, start: datetime = T0, step: timedelta = timedelta(minutes=1)):
        self.current = start
        self.step = step

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value

    def set(self, value: datetime) -> None:
        self.current = value


class SequentialIds(IIdGenerator):
    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self.count = 0

    def new_id(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


@pytest.fixture(autouse=True)
def fresh_store_lock():
    """Each test runs on its own event loop, so it gets its own lock."""
    reset_store_lock()
    yield
    reset_store_lock()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def warehouse() -> Warehouse:
    return Warehouse(
        id="wh-main",
        name="Main Store",
        description="Ground floor",
        created_at=T0 - timedelta(days=1),
        updated_at=T0 - timedelta(days=1),
    )


@pytest.fixture
def make_item(clock: FakeClock, ids: SequentialIds) -> Callable[..., Item]:
    """Build an item through the ledger, optionally with extra movements.

    Movements are signed ints: positive adds, negative consumes.
    """

    def _make(
        warehouse: Warehouse,
        name: str = "Widget",
        initial: int = 100,
        movements: tuple[int, ...] = (),
    ) -> Item:
        item = create_item(warehouse, name, initial, clock, ids).item
        for amount in movements:
            if amount > 0:
                item = add_stock(item, amount, None, clock, ids).item
            else:
                item = consume_stock(item, -amount, None, clock, ids).item
        return item

    return _make


@pytest.fixture
async def isolated_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> AsyncGenerator[Settings, None]:
    """Point storage at tmp_path and reset every process-wide singleton."""
    from stockpilot.infrastructure.llm import reset_ollama_provider
    from stockpilot.infrastructure.storage import reset_inventory_store

    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_BACKEND", "sqlite")
    monkeypatch.setenv("REPORTS_DEFAULT_USERNAME", "Admin")
    monkeypatch.setenv("REPORTS_TIMEZONE", "UTC")
    reset_settings()
    reset_services()
    reset_store_lock()
    reset_ollama_provider()
    await reset_inventory_store()

    yield get_settings()

    await reset_inventory_store()
    reset_ollama_provider()
    reset_services()
    reset_store_lock()
    reset_settings()


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """Test client over a fresh JSON-file store; the lifespan initializes it."""
    import stockpilot.infrastructure.storage as storage
    from stockpilot.api.main import create_app
    from stockpilot.infrastructure.llm import reset_ollama_provider

    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.setenv("REPORTS_DEFAULT_USERNAME", "Admin")
    monkeypatch.setenv("REPORTS_TIMEZONE", "UTC")
    monkeypatch.setattr(storage, "_inventory_store", None)
    reset_settings()
    reset_services()
    reset_ollama_provider()

    with TestClient(create_app(), raise_server_exceptions=False) as c:
        yield c

    reset_ollama_provider()
    reset_services()
    reset_settings()
