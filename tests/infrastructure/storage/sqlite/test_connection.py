"""Unit tests for SQLite connection pool."""

from pathlib import Path

import pytest

from stockpilot.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False

    async def test_initialize_opens_connections(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        try:
            await pool.initialize()
            assert pool._initialized
            assert len(pool._connections) == 2
            assert temp_db_path.exists()
        finally:
            await pool.close()
        assert pool._connections == []

    async def test_pragmas(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1, busy_timeout=1234)
        try:
            async with pool.acquire() as conn:
                cursor = await conn.execute("PRAGMA foreign_keys")
                assert (await cursor.fetchone())[0] == 1
                cursor = await conn.execute("PRAGMA busy_timeout")
                assert (await cursor.fetchone())[0] == 1234
        finally:
            await pool.close()

    async def test_from_settings(self, isolated_settings):
        pool = ConnectionPool.from_settings(isolated_settings.storage)
        assert pool.db_path == isolated_settings.storage.db_path
        assert pool.pool_size == isolated_settings.storage.pool_size

    async def test_reopens_after_close(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()
        await pool.close()
        try:
            async with pool.acquire() as conn:
                cursor = await conn.execute("SELECT 1")
                assert (await cursor.fetchone())[0] == 1
            assert len(pool._connections) == 1
        finally:
            await pool.close()


class TestTransaction:
    async def test_commit(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        try:
            async with pool.acquire() as conn:
                await conn.execute("CREATE TABLE t (v INTEGER)")
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
            async with pool.acquire() as conn:
                cursor = await conn.execute("SELECT COUNT(*) FROM t")
                assert (await cursor.fetchone())[0] == 1
        finally:
            await pool.close()

    async def test_rollback_on_error(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        try:
            async with pool.acquire() as conn:
                await conn.execute("CREATE TABLE t (v INTEGER)")
            with pytest.raises(RuntimeError):
                async with pool.transaction() as conn:
                    await conn.execute("INSERT INTO t VALUES (1)")
                    raise RuntimeError("boom")
            async with pool.acquire() as conn:
                cursor = await conn.execute("SELECT COUNT(*) FROM t")
                assert (await cursor.fetchone())[0] == 0
        finally:
            await pool.close()


class TestGlobalPool:
    async def test_uses_configured_path(self, isolated_settings):
        pool = await get_pool()
        assert pool.db_path == isolated_settings.storage.db_path
        assert await get_pool() is pool

        async with get_transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0

        await close_pool()
        assert await get_pool() is not pool
