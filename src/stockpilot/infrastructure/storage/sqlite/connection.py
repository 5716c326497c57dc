"""
Shared aiosqlite connections for the inventory database.

Every connection runs in autocommit mode with WAL journaling and foreign
keys enforced, so deleting an item also deletes its history rows. Saves go
through ``transaction()``, which takes the write lock with
``BEGIN IMMEDIATE`` before the first statement runs.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from stockpilot.config import get_logger, get_settings
from stockpilot.config.settings import StorageSettings

logger = get_logger(__name__)

_PRAGMAS = (
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "foreign_keys=ON",
)


class ConnectionPool:
    """A fixed set of connections to one database file, handed out in turn."""

    def __init__(self, db_path: Path, pool_size: int = 5, busy_timeout: int = 30000):
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._connections: list[aiosqlite.Connection] = []
        self._idle: asyncio.Queue[aiosqlite.Connection] | None = None
        self._initialized = False
        self._guard = asyncio.Lock()

    @classmethod
    def from_settings(cls, storage: StorageSettings) -> "ConnectionPool":
        return cls(storage.db_path, storage.pool_size, storage.busy_timeout)

    async def initialize(self) -> None:
        async with self._guard:
            if self._initialized:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
            for _ in range(self.pool_size):
                conn = await self._open()
                self._connections.append(conn)
                idle.put_nowait(conn)
            self._idle = idle
            self._initialized = True
        logger.info("sqlite_pool_opened", db_path=str(self.db_path), size=self.pool_size)

    async def _open(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        for pragma in (*_PRAGMAS, f"busy_timeout={self.busy_timeout}"):
            await conn.execute(f"PRAGMA {pragma}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection, opening the pool on first use."""
        if not self._initialized:
            await self.initialize()
        idle = self._idle
        conn = await idle.get()
        try:
            yield conn
        finally:
            idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection holding the write lock.

        The block's statements commit together when it exits normally. Any
        exception rolls all of them back and propagates.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException as e:
                await conn.execute("ROLLBACK")
                logger.debug("sqlite_transaction_rolled_back", error=type(e).__name__)
                raise
            await conn.execute("COMMIT")

    async def close(self) -> None:
        async with self._guard:
            while self._connections:
                await self._connections.pop().close()
            self._idle = None
            self._initialized = False
        logger.info("sqlite_pool_closed", db_path=str(self.db_path))


_shared: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """The process-wide pool for the configured database, opened on demand."""
    global _shared
    if _shared is None:
        _shared = ConnectionPool.from_settings(get_settings().storage)
        await _shared.initialize()
    return _shared


async def close_pool() -> None:
    global _shared
    pool, _shared = _shared, None
    if pool is not None:
        await pool.close()


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    async with (await get_pool()).acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    async with (await get_pool()).transaction() as conn:
        yield conn
