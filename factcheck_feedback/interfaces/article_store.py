"""Abstract base class for article and reply persistence.

Articles are aggregates that embed their reply entries.  Besides plain
reads and writes, the store must offer one targeted operation: overwrite
the feedback counters of a single embedded entry in place, atomically with
respect to concurrent writers of the same article.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from factcheck_feedback.models.article import Article, ArticleReply, Reply


class IArticleStore(ABC):
    """Contract for article/reply storage."""

    @abstractmethod
    async def get_article(self, article_id: str) -> Article | None:
        """Return the article, or ``None`` if it does not exist."""

    @abstractmethod
    async def get_reply(self, reply_id: str) -> Reply | None:
        """Return the reply, or ``None`` if it does not exist."""

    @abstractmethod
    async def save_article(self, article: Article) -> None:
        """Insert or fully replace an article."""

    @abstractmethod
    async def save_reply(self, reply: Reply) -> None:
        """Insert or fully replace a reply."""

    @abstractmethod
    async def update_reply_feedback_counts(
        self,
        article_id: str,
        reply_id: str,
        positive_feedback_count: int,
        negative_feedback_count: int,
    ) -> ArticleReply | None:
        """Overwrite the two counters on one embedded reply entry.

        Must run as a single conditional server-side update: find the entry
        by ``reply_id`` and set its counters, else do nothing.  Other entries
        and other article fields are never touched.

        Returns
        -------
        ArticleReply or None
            The updated entry, or ``None`` when the article has no entry for
            ``reply_id`` (nothing to update).

        Raises
        ------
        NotFoundError
            The article itself does not exist.
        UpdateConflictError / StorageError
            The write did not succeed.
        """

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
