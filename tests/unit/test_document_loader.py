"""Unit tests for StoreDocumentLoader."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from factcheck_feedback.interfaces.document_loader import DocumentCollection
from factcheck_feedback.providers.loader.store_document_loader import StoreDocumentLoader
from factcheck_feedback.utils.errors import NotFoundError
from tests.conftest import make_article, make_article_reply, make_reply


@pytest.fixture
def mock_article_store():
    store = MagicMock()
    store.get_article = AsyncMock(return_value=make_article("A1", make_article_reply("R1")))
    store.get_reply = AsyncMock(return_value=make_reply("R1"))
    store.get_provider_name.return_value = "mock_article"
    return store


@pytest.mark.asyncio
async def test_load_dispatches_by_collection(mock_article_store):
    loader = StoreDocumentLoader(mock_article_store)

    article = await loader.load(DocumentCollection.ARTICLES, "A1")
    reply = await loader.load(DocumentCollection.REPLIES, "R1")

    assert article.id == "A1"
    assert reply.id == "R1"
    mock_article_store.get_article.assert_awaited_once_with("A1")
    mock_article_store.get_reply.assert_awaited_once_with("R1")


@pytest.mark.asyncio
async def test_load_many_preserves_key_order(mock_article_store):
    loader = StoreDocumentLoader(mock_article_store)

    reply, article = await loader.load_many([
        (DocumentCollection.REPLIES, "R1"),
        (DocumentCollection.ARTICLES, "A1"),
    ])

    assert reply.id == "R1"
    assert article.id == "A1"


@pytest.mark.asyncio
async def test_repeated_loads_are_memoized(mock_article_store):
    loader = StoreDocumentLoader(mock_article_store)

    await loader.load(DocumentCollection.ARTICLES, "A1")
    await loader.load(DocumentCollection.ARTICLES, "A1")

    assert mock_article_store.get_article.await_count == 1


@pytest.mark.asyncio
async def test_separate_loaders_do_not_share_memo(mock_article_store):
    await StoreDocumentLoader(mock_article_store).load(DocumentCollection.ARTICLES, "A1")
    await StoreDocumentLoader(mock_article_store).load(DocumentCollection.ARTICLES, "A1")

    assert mock_article_store.get_article.await_count == 2


@pytest.mark.asyncio
async def test_missing_document_raises_not_found(mock_article_store):
    mock_article_store.get_reply = AsyncMock(return_value=None)
    loader = StoreDocumentLoader(mock_article_store)

    with pytest.raises(NotFoundError, match="Cannot find replies document with ID = R404"):
        await loader.load_many([
            (DocumentCollection.REPLIES, "R404"),
            (DocumentCollection.ARTICLES, "A1"),
        ])
