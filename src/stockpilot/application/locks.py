"""
Store write lock.

Saves replace whole collections, so every "load, change, save" cycle holds
one process-wide lock. Two requests can then never interleave their
rewrites. Separate processes sharing one store are not coordinated.
"""

import asyncio

_store_lock: asyncio.Lock | None = None


def get_store_lock() -> asyncio.Lock:
    """Get or create the process-wide store lock."""
    global _store_lock
    if _store_lock is None:
        _store_lock = asyncio.Lock()
    return _store_lock


def reset_store_lock() -> None:
    """Drop the lock (for tests and app restarts on a new event loop)."""
    global _store_lock
    _store_lock = None
