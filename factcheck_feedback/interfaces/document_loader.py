"""Abstract base class for batched document lookups.

Resolvers load articles and replies by ``(collection, id)`` pairs.  A loader
instance is meant to live for one request so its memoization never serves
another request's stale view.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from factcheck_feedback.models.article import Article, Reply


class DocumentCollection(str, Enum):
    """Collections a loader can read from."""

    ARTICLES = "articles"
    REPLIES = "replies"


class IDocumentLoader(ABC):
    """Contract for batched, memoized document loads."""

    @abstractmethod
    async def load(self, collection: DocumentCollection, doc_id: str) -> Article | Reply:
        """Load one document.  Raises ``NotFoundError`` if it does not exist."""

    @abstractmethod
    async def load_many(
        self,
        keys: list[tuple[DocumentCollection, str]],
    ) -> list[Article | Reply]:
        """Load several documents concurrently, preserving the order of *keys*.

        Raises ``NotFoundError`` if any of them does not exist.
        """
