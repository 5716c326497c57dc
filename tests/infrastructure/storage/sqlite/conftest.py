"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from stockpilot.config.settings import Settings
from stockpilot.infrastructure.storage import SQLiteInventoryStore


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def sqlite_store(
    isolated_settings: Settings,
) -> AsyncGenerator[SQLiteInventoryStore, None]:
    """Migrated store on the pool configured for tmp_path."""
    store = SQLiteInventoryStore()
    await store.initialize()
    yield store
