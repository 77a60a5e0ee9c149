"""Document loader backed by an ``IArticleStore``.

Batches ``(collection, id)`` lookups by dispatching them concurrently and
memoizes results in a ``cachetools.TTLCache``.  Build one loader per request
(see ``factcheck_feedback.api.context``) so memoized documents never outlive
the request that read them.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from cachetools import TTLCache

from factcheck_feedback.interfaces.article_store import IArticleStore
from factcheck_feedback.interfaces.document_loader import DocumentCollection, IDocumentLoader
from factcheck_feedback.models.article import Article, Reply
from factcheck_feedback.utils.errors import NotFoundError

logger = structlog.get_logger(logger_name=__name__)


class StoreDocumentLoader(IDocumentLoader):
    """Memoizing loader for articles and replies.

    Parameters
    ----------
    article_store:
        The store the documents are read from.
    max_size:
        Maximum number of memoized documents.
    ttl:
        Seconds a memoized document stays valid.
    """

    def __init__(self, article_store: IArticleStore, max_size: int = 256, ttl: int = 60) -> None:
        self._store = article_store
        self._cache: TTLCache[tuple[DocumentCollection, str], Any] = TTLCache(maxsize=max_size, ttl=ttl)

    async def load(self, collection: DocumentCollection, doc_id: str) -> Article | Reply:
        cache_key = (collection, doc_id)
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("loader_cache_hit", collection=collection.value, doc_id=doc_id)
            return cached

        if collection is DocumentCollection.ARTICLES:
            doc: Article | Reply | None = await self._store.get_article(doc_id)
        else:
            doc = await self._store.get_reply(doc_id)

        if doc is None:
            raise NotFoundError(
                message=f"Cannot find {collection.value} document with ID = {doc_id}",
                provider_name=self._store.get_provider_name(),
            )
        self._cache[cache_key] = doc
        return doc

    async def load_many(
        self,
        keys: list[tuple[DocumentCollection, str]],
    ) -> list[Article | Reply]:
        """Load all *keys* concurrently; the first missing document raises."""
        return list(await asyncio.gather(*(self.load(c, doc_id) for c, doc_id in keys)))
