"""Connection and error helpers shared by the SQLite providers.

Every provider opens a short-lived ``aiosqlite`` connection per operation.
Writes that must read their own result run inside ``BEGIN IMMEDIATE`` so the
write lock is taken up front and concurrent writers queue on the busy
timeout instead of interleaving.
"""

from __future__ import annotations

import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from factcheck_feedback.utils.errors import StorageError, UpdateConflictError

DEFAULT_TIMEOUT_SECONDS = 5.0

_CONFLICT_MARKERS = ("database is locked", "database table is locked", "busy")


def connect(db_path: Path, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> aiosqlite.Connection:
    """Open a connection in autocommit mode; transactions are explicit."""
    return aiosqlite.connect(str(db_path), timeout=timeout, isolation_level=None)


@asynccontextmanager
async def write_transaction(db: aiosqlite.Connection) -> AsyncIterator[aiosqlite.Connection]:
    """Run the block inside ``BEGIN IMMEDIATE`` ... ``COMMIT``."""
    await db.execute("BEGIN IMMEDIATE")
    try:
        yield db
    except BaseException:
        await db.execute("ROLLBACK")
        raise
    await db.execute("COMMIT")


def translate_sqlite_error(exc: sqlite3.Error, provider_name: str, action: str) -> StorageError:
    """Map a sqlite3/aiosqlite error onto the service's storage errors."""
    text = str(exc).lower()
    if isinstance(exc, sqlite3.OperationalError) and any(m in text for m in _CONFLICT_MARKERS):
        return UpdateConflictError(
            message=f"{action} conflicted with a concurrent write: {exc}",
            provider_name=provider_name,
        )
    return StorageError(message=f"{action} failed: {exc}", provider_name=provider_name)
