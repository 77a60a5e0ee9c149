"""SQLite-backed article-reply feedback store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing IFeedbackStore).
#
# Table ``article_reply_feedbacks`` holds one row per
# (article, reply, user, app), keyed by the serialized ``FeedbackKey``.
#
# Upserts run as INSERT ... ON CONFLICT DO NOTHING followed, when nothing
# was inserted, by an UPDATE of the patch columns, both inside one
# ``BEGIN IMMEDIATE`` transaction, so ``created`` is exact and the write is
# committed before the call returns (read-after-write for ``load_all``).
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from factcheck_feedback.interfaces.feedback_store import IFeedbackStore
from factcheck_feedback.models.feedback import ArticleReplyFeedback, FeedbackKey, UpsertResult
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
CREATE TABLE IF NOT EXISTS article_reply_feedbacks (
    id                    TEXT    PRIMARY KEY,
    article_id            TEXT    NOT NULL,
    reply_id              TEXT    NOT NULL,
    user_id               TEXT    NOT NULL,
    app_id                TEXT    NOT NULL,
    score                 INTEGER NOT NULL,
    comment               TEXT,
    status                TEXT    NOT NULL DEFAULT 'NORMAL',
    created_at            TEXT    NOT NULL,
    updated_at            TEXT    NOT NULL,
    reply_user_id         TEXT,
    article_reply_user_id TEXT
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_feedbacks_article_reply "
    "ON article_reply_feedbacks(article_id, reply_id);",
    "CREATE INDEX IF NOT EXISTS idx_feedbacks_user ON article_reply_feedbacks(app_id, user_id);",
]

_COLUMNS = (
    "id",
    "article_id",
    "reply_id",
    "user_id",
    "app_id",
    "score",
    "comment",
    "status",
    "created_at",
    "updated_at",
    "reply_user_id",
    "article_reply_user_id",
)

# Identity columns come from the key and are never patched.
_PATCHABLE_COLUMNS = frozenset(
    {"score", "comment", "status", "updated_at", "reply_user_id", "article_reply_user_id"}
)
_INSERTABLE_COLUMNS = _PATCHABLE_COLUMNS | {"created_at", "article_id", "reply_id", "user_id", "app_id"}

_SELECT_BY_ID_SQL = f"SELECT {', '.join(_COLUMNS)} FROM article_reply_feedbacks WHERE id = ?;"

_SELECT_BY_PAIR_SQL = (
    f"SELECT {', '.join(_COLUMNS)} FROM article_reply_feedbacks "
    "WHERE article_id = ? AND reply_id = ? ORDER BY created_at, id;"
)

_SELECT_PAIRS_SQL = (
    "SELECT DISTINCT article_id, reply_id FROM article_reply_feedbacks "
    "ORDER BY article_id, reply_id;"
)


def _check_columns(fields: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(fields) - allowed
    if unknown:
        msg = f"Unknown feedback fields: {sorted(unknown)}"
        raise ValueError(msg)


def _update_sql(fields: dict[str, Any]) -> str:
    assignments = ", ".join(f"{column} = ?" for column in fields)
    return f"UPDATE article_reply_feedbacks SET {assignments} WHERE id = ?;"


class SQLiteFeedbackStore(IFeedbackStore):
    """SQLite-backed feedback persistence."""

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout

    async def initialize(self) -> None:
        """Create the feedback table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with connect(self._db_path, self._timeout) as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
        logger.info("feedback_db_initialized", path=str(self._db_path))

    def get_provider_name(self) -> str:
        return "sqlite_feedback"

    async def upsert(
        self,
        key: FeedbackKey,
        patch: dict[str, Any],
        insert_defaults: dict[str, Any],
    ) -> UpsertResult:
        """Insert from *insert_defaults* or apply *patch*; return the stored row."""
        _check_columns(patch, _PATCHABLE_COLUMNS)
        _check_columns(insert_defaults, _INSERTABLE_COLUMNS)

        feedback_id = key.to_id()
        # The key is authoritative for the identity columns.
        row_values = {
            **insert_defaults,
            "id": feedback_id,
            "article_id": key.article_id,
            "reply_id": key.reply_id,
            "user_id": key.user_id,
            "app_id": key.app_id,
        }
        columns = list(row_values)
        insert_sql = (
            f"INSERT INTO article_reply_feedbacks ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)}) "
            "ON CONFLICT(id) DO NOTHING;"
        )

        try:
            async with connect(self._db_path, self._timeout) as db:
                db.row_factory = aiosqlite.Row
                async with write_transaction(db):
                    cursor = await db.execute(insert_sql, tuple(row_values.values()))
                    created = cursor.rowcount == 1
                    if not created and patch:
                        await db.execute(_update_sql(patch), (*patch.values(), feedback_id))
                    cursor = await db.execute(_SELECT_BY_ID_SQL, (feedback_id,))
                    row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Feedback upsert") from exc

        feedback = ArticleReplyFeedback(**dict(row))
        logger.info(
            "feedback_upserted",
            feedback_id=feedback_id,
            created=created,
            score=feedback.score,
            status=feedback.status.value,
        )
        return UpsertResult(created=created, feedback=feedback)

    async def patch(self, key: FeedbackKey, fields: dict[str, Any]) -> None:
        """Update only *fields* on the record for *key*."""
        _check_columns(fields, _PATCHABLE_COLUMNS)
        if not fields:
            return

        feedback_id = key.to_id()
        try:
            async with connect(self._db_path, self._timeout) as db:
                async with write_transaction(db):
                    cursor = await db.execute(_update_sql(fields), (*fields.values(), feedback_id))
                    updated = cursor.rowcount
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Feedback patch") from exc

        if updated == 0:
            raise NotFoundError(
                message=f"Feedback {feedback_id} not found",
                provider_name=self.get_provider_name(),
            )
        logger.debug("feedback_patched", feedback_id=feedback_id, fields=sorted(fields))

    async def get(self, key: FeedbackKey) -> ArticleReplyFeedback | None:
        try:
            async with connect(self._db_path, self._timeout) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_BY_ID_SQL, (key.to_id(),))
                row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Feedback read") from exc
        return ArticleReplyFeedback(**dict(row)) if row is not None else None

    async def load_all(self, article_id: str, reply_id: str) -> list[ArticleReplyFeedback]:
        """Return all feedback for the pair, oldest first."""
        try:
            async with connect(self._db_path, self._timeout) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_BY_PAIR_SQL, (article_id, reply_id))
                rows = await cursor.fetchall()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Feedback load") from exc
        return [ArticleReplyFeedback(**dict(r)) for r in rows]

    async def list_article_reply_pairs(self) -> list[tuple[str, str]]:
        try:
            async with connect(self._db_path, self._timeout) as db:
                cursor = await db.execute(_SELECT_PAIRS_SQL)
                rows = await cursor.fetchall()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Feedback pair listing") from exc
        return [(r[0], r[1]) for r in rows]
