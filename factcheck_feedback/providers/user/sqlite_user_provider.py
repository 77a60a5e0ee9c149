"""SQLite-backed user provider.

Users are registered the first time a trusted application acts on their
behalf.  Moderators may later set ``blocked_reason``; content created by a
blocked user starts in the BLOCKED state.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite
import structlog

from factcheck_feedback.interfaces.user_provider import IUserProvider
from factcheck_feedback.models.user import User
from factcheck_feedback.providers.sqlite_common import (
    DEFAULT_TIMEOUT_SECONDS,
    connect,
    translate_sqlite_error,
    write_transaction,
)
from factcheck_feedback.utils.errors import NotFoundError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/factcheck.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS users (
    app_id          TEXT NOT NULL,
    user_id         TEXT NOT NULL,
    name            TEXT,
    blocked_reason  TEXT,
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL,
    PRIMARY KEY (app_id, user_id)
);
"""

_INSERT_IF_MISSING_SQL = """\
INSERT INTO users (app_id, user_id, created_at, updated_at)
VALUES (?, ?, ?, ?)
ON CONFLICT(app_id, user_id) DO NOTHING;
"""

_SELECT_SQL = """\
SELECT user_id AS id, app_id, name, blocked_reason, created_at, updated_at
FROM users WHERE app_id = ? AND user_id = ?;
"""

_BLOCK_SQL = """\
UPDATE users SET blocked_reason = ?, updated_at = ? WHERE app_id = ? AND user_id = ?;
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteUserProvider(IUserProvider):
    """SQLite-backed user registry."""

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout

    async def initialize(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with connect(self._db_path, self._timeout) as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_TABLE_SQL)
        logger.info("user_db_initialized", path=str(self._db_path))

    def get_provider_name(self) -> str:
        return "sqlite_user"

    async def get_or_create_user(self, app_id: str, user_id: str) -> User:
        now = _now()
        try:
            async with connect(self._db_path, self._timeout) as db:
                db.row_factory = aiosqlite.Row
                async with write_transaction(db):
                    cursor = await db.execute(_INSERT_IF_MISSING_SQL, (app_id, user_id, now, now))
                    if cursor.rowcount == 1:
                        logger.info("user_registered", app_id=app_id, user_id=user_id)
                    cursor = await db.execute(_SELECT_SQL, (app_id, user_id))
                    row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "User lookup") from exc
        return User(**dict(row))

    async def block_user(self, app_id: str, user_id: str, reason: str) -> User:
        try:
            async with connect(self._db_path, self._timeout) as db:
                db.row_factory = aiosqlite.Row
                async with write_transaction(db):
                    cursor = await db.execute(_BLOCK_SQL, (reason, _now(), app_id, user_id))
                    updated = cursor.rowcount
                    cursor = await db.execute(_SELECT_SQL, (app_id, user_id))
                    row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "User block") from exc

        if updated == 0 or row is None:
            raise NotFoundError(
                message=f"User {user_id} of app {app_id} not found",
                provider_name=self.get_provider_name(),
            )
        logger.info("user_blocked", app_id=app_id, user_id=user_id)
        return User(**dict(row))
