"""Abstract base class for article-reply feedback stores.

Defines the contract for persisting one feedback record per
(article, reply, user, app).  Implementations may use SQLite (local),
PostgreSQL, a document store, or anything that offers keyed upserts with
read-after-write visibility.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from factcheck_feedback.models.feedback import ArticleReplyFeedback, FeedbackKey, UpsertResult


class IFeedbackStore(ABC):
    """Contract for feedback persistence.

    All operations are async to support network-backed stores.
    """

    @abstractmethod
    async def upsert(
        self,
        key: FeedbackKey,
        patch: dict[str, Any],
        insert_defaults: dict[str, Any],
    ) -> UpsertResult:
        """Insert the record for *key* or merge *patch* into the existing one.

        Parameters
        ----------
        key:
            Identity of the record.
        patch:
            Fields written when the record already exists.  Fields not
            listed keep their stored values.
        insert_defaults:
            Full field set used when no record exists yet.

        Returns
        -------
        UpsertResult
            ``created`` tells whether an insert happened; ``feedback`` is the
            record as stored after the write.  The write must be visible to
            a :meth:`load_all` issued immediately afterwards.
        """

    @abstractmethod
    async def patch(self, key: FeedbackKey, fields: dict[str, Any]) -> None:
        """Update only the listed *fields* of the record for *key*.

        Raises ``NotFoundError`` when no record exists for *key*.
        """

    @abstractmethod
    async def get(self, key: FeedbackKey) -> ArticleReplyFeedback | None:
        """Return the record for *key*, or ``None``."""

    @abstractmethod
    async def load_all(self, article_id: str, reply_id: str) -> list[ArticleReplyFeedback]:
        """Return every record for the (article, reply) pair, regardless of status."""

    @abstractmethod
    async def list_article_reply_pairs(self) -> list[tuple[str, str]]:
        """Return every distinct (article_id, reply_id) that has feedback."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
