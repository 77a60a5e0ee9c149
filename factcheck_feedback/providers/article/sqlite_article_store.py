"""SQLite-backed article and reply store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing IArticleStore).
#
# Articles keep their reply entries embedded as a JSON array in the
# ``article_replies`` column, mirroring a document store.  The feedback
# counter update is one UPDATE statement that locates the entry with
# ``json_each`` and rewrites only its two counters with ``json_set``.
# SQLite executes the lookup and the write atomically, so concurrent
# updates to sibling entries or other article columns are never clobbered
# by a stale client-side copy of the document.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from factcheck_feedback.interfaces.article_store import IArticleStore
from factcheck_feedback.models.article import Article, ArticleReply, Reply
from factcheck_feedback.providers.sqlite_common import (
    DEFAULT_TIMEOUT_SECONDS,
    connect,
    translate_sqlite_error,
    write_transaction,
)
from factcheck_feedback.utils.errors import NotFoundError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/factcheck.db")

# ── Schema DDL ────────────────────────────────────────────────────────

_CREATE_ARTICLES_TABLE = """\
CREATE TABLE IF NOT EXISTS articles (
    id              TEXT PRIMARY KEY,
    text            TEXT NOT NULL,
    article_replies TEXT NOT NULL DEFAULT '[]',
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL
);
"""

_CREATE_REPLIES_TABLE = """\
CREATE TABLE IF NOT EXISTS replies (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    app_id      TEXT NOT NULL,
    text        TEXT NOT NULL,
    type        TEXT NOT NULL,
    reference   TEXT,
    created_at  TEXT NOT NULL
);
"""

# ── DML ───────────────────────────────────────────────────────────────

_UPSERT_ARTICLE = """\
INSERT INTO articles (id, text, article_replies, created_at, updated_at)
VALUES (?, ?, ?, ?, ?)
ON CONFLICT(id)
DO UPDATE SET text            = excluded.text,
              article_replies = excluded.article_replies,
              created_at      = excluded.created_at,
              updated_at      = excluded.updated_at;
"""

_UPSERT_REPLY = """\
INSERT INTO replies (id, user_id, app_id, text, type, reference, created_at)
VALUES (?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(id)
DO UPDATE SET user_id    = excluded.user_id,
              app_id     = excluded.app_id,
              text       = excluded.text,
              type       = excluded.type,
              reference  = excluded.reference,
              created_at = excluded.created_at;
"""

_SELECT_ARTICLE = """\
SELECT id, text, article_replies, created_at, updated_at FROM articles WHERE id = ?;
"""

_SELECT_REPLY = """\
SELECT id, user_id, app_id, text, type, reference, created_at FROM replies WHERE id = ?;
"""

_SELECT_ARTICLE_REPLIES = "SELECT article_replies FROM articles WHERE id = ?;"

_ARTICLE_EXISTS = "SELECT 1 FROM articles WHERE id = ?;"

# Find the entry index by reply_id, then overwrite its counters in place.
# No matching entry -> zero rows changed (a no-op, not an error).
# Keep it a plain UPDATE with no leading WITH; callers read changes().
_ENTRY_INDEX = """\
(SELECT je.key FROM json_each(articles.article_replies) AS je
 WHERE json_extract(je.value, '$.reply_id') = :reply_id LIMIT 1)"""

_UPDATE_FEEDBACK_COUNTS = f"""\
UPDATE articles
SET article_replies = json_set(
        article_replies,
        '$[' || {_ENTRY_INDEX} || '].positive_feedback_count', :positive,
        '$[' || {_ENTRY_INDEX} || '].negative_feedback_count', :negative
    )
WHERE id = :article_id
  AND {_ENTRY_INDEX} IS NOT NULL;
"""

_CHANGES = "SELECT changes();"


def _row_to_article(row: dict[str, Any]) -> Article:
    return Article(
        id=row["id"],
        text=row["text"],
        article_replies=[ArticleReply(**ar) for ar in json.loads(row["article_replies"])],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class SQLiteArticleStore(IArticleStore):
    """SQLite-backed article/reply persistence."""

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout

    async def initialize(self) -> None:
        """Create the articles and replies tables if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with connect(self._db_path, self._timeout) as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_ARTICLES_TABLE)
            await db.execute(_CREATE_REPLIES_TABLE)
        logger.info("article_db_initialized", path=str(self._db_path))

    def get_provider_name(self) -> str:
        return "sqlite_article"

    # ── Reads ──────────────────────────────────────────────────────────

    async def get_article(self, article_id: str) -> Article | None:
        try:
            async with connect(self._db_path, self._timeout) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_ARTICLE, (article_id,))
                row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Article read") from exc
        return _row_to_article(dict(row)) if row is not None else None

    async def get_reply(self, reply_id: str) -> Reply | None:
        try:
            async with connect(self._db_path, self._timeout) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_REPLY, (reply_id,))
                row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Reply read") from exc
        return Reply(**dict(row)) if row is not None else None

    # ── Writes ─────────────────────────────────────────────────────────

    async def save_article(self, article: Article) -> None:
        article_replies = json.dumps([ar.model_dump(mode="json") for ar in article.article_replies])
        try:
            async with connect(self._db_path, self._timeout) as db:
                async with write_transaction(db):
                    await db.execute(_UPSERT_ARTICLE, (
                        article.id,
                        article.text,
                        article_replies,
                        article.created_at,
                        article.updated_at,
                    ))
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Article save") from exc
        logger.debug("article_saved", article_id=article.id, reply_count=len(article.article_replies))

    async def save_reply(self, reply: Reply) -> None:
        try:
            async with connect(self._db_path, self._timeout) as db:
                async with write_transaction(db):
                    await db.execute(_UPSERT_REPLY, (
                        reply.id,
                        reply.user_id,
                        reply.app_id,
                        reply.text,
                        reply.type.value,
                        reply.reference,
                        reply.created_at,
                    ))
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, self.get_provider_name(), "Reply save") from exc
        logger.debug("reply_saved", reply_id=reply.id)

    async def update_reply_feedback_counts(
        self,
        article_id: str,
        reply_id: str,
        positive_feedback_count: int,
        negative_feedback_count: int,
    ) -> ArticleReply | None:
        """Overwrite the counters of one embedded entry in a single statement."""
        params = {
            "article_id": article_id,
            "reply_id": reply_id,
            "positive": positive_feedback_count,
            "negative": negative_feedback_count,
        }
        article_replies_json: str | None = None
        try:
            async with connect(self._db_path, self._timeout) as db:
                async with write_transaction(db):
                    cursor = await db.execute(_ARTICLE_EXISTS, (article_id,))
                    article_exists = await cursor.fetchone() is not None
                    if article_exists:
                        await db.execute(_UPDATE_FEEDBACK_COUNTS, params)
                        cursor = await db.execute(_CHANGES)
                        (changed,) = await cursor.fetchone()
                        if changed:
                            cursor = await db.execute(_SELECT_ARTICLE_REPLIES, (article_id,))
                            (article_replies_json,) = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(
                exc, self.get_provider_name(), f"Feedback count update on article {article_id}"
            ) from exc

        if not article_exists:
            raise NotFoundError(
                message=f"Article {article_id} not found",
                provider_name=self.get_provider_name(),
            )
        if article_replies_json is None:
            logger.info(
                "reply_feedback_counts_noop",
                article_id=article_id,
                reply_id=reply_id,
            )
            return None

        updated = next(
            (ar for ar in json.loads(article_replies_json) if ar.get("reply_id") == reply_id),
            None,
        )
        logger.info(
            "reply_feedback_counts_updated",
            article_id=article_id,
            reply_id=reply_id,
            positive_feedback_count=positive_feedback_count,
            negative_feedback_count=negative_feedback_count,
        )
        return ArticleReply(**updated) if updated is not None else None
