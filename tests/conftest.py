"""Shared pytest fixtures for the factcheck-feedback test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio

from factcheck_feedback.models.article import Article, ArticleReply, Reply, ReplyType
from factcheck_feedback.models.feedback import ArticleReplyFeedback, FeedbackKey, FeedbackStatus
from factcheck_feedback.models.user import User
from factcheck_feedback.providers.article.sqlite_article_store import SQLiteArticleStore
from factcheck_feedback.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
from factcheck_feedback.providers.loader.store_document_loader import StoreDocumentLoader
from factcheck_feedback.providers.user.sqlite_user_provider import SQLiteUserProvider
from factcheck_feedback.services.feedback_service import ArticleReplyFeedbackService
from factcheck_feedback.services.reply_count_projector import ReplyCountProjector

TIMESTAMP = "2024-01-01T00:00:00+00:00"


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 6, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


def make_article_reply(reply_id: str, **overrides) -> ArticleReply:
    fields = {
        "reply_id": reply_id,
        "user_id": f"author-of-{reply_id}",
        "app_id": "WEBSITE",
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
    }
    fields.update(overrides)
    return ArticleReply(**fields)


def make_article(article_id: str, *article_replies: ArticleReply, text: str = "Is this true?") -> Article:
    return Article(
        id=article_id,
        text=text,
        article_replies=list(article_replies),
        created_at=TIMESTAMP,
        updated_at=TIMESTAMP,
    )


def make_reply(reply_id: str, user_id: str | None = None) -> Reply:
    return Reply(
        id=reply_id,
        user_id=user_id or f"writer-of-{reply_id}",
        app_id="WEBSITE",
        text="It is a rumor.",
        type=ReplyType.RUMOR,
        reference="https://example.org/source",
        created_at=TIMESTAMP,
    )


def make_feedback(
    score: int,
    status: FeedbackStatus = FeedbackStatus.NORMAL,
    user_id: str = "U1",
    article_id: str = "A1",
    reply_id: str = "R1",
    **overrides,
) -> ArticleReplyFeedback:
    key = FeedbackKey(article_id=article_id, reply_id=reply_id, user_id=user_id, app_id="WEBSITE")
    fields = {
        "id": key.to_id(),
        "article_id": article_id,
        "reply_id": reply_id,
        "user_id": user_id,
        "app_id": "WEBSITE",
        "score": score,
        "status": status,
        "created_at": TIMESTAMP,
        "updated_at": TIMESTAMP,
    }
    fields.update(overrides)
    return ArticleReplyFeedback(**fields)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@pytest.fixture
def user_u1() -> User:
    return User(id="U1", app_id="WEBSITE")


@pytest.fixture
def user_u2() -> User:
    return User(id="U2", app_id="WEBSITE")


@pytest.fixture
def blocked_user() -> User:
    return User(id="U9", app_id="WEBSITE", blocked_reason="spam")


# ---------------------------------------------------------------------------
# SQLite providers (one temporary database per test)
# ---------------------------------------------------------------------------


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "factcheck.db"


@pytest_asyncio.fixture
async def feedback_store(db_path: Path) -> SQLiteFeedbackStore:
    store = SQLiteFeedbackStore(db_path=db_path)
    await store.initialize()
    return store


@pytest_asyncio.fixture
async def article_store(db_path: Path) -> SQLiteArticleStore:
    store = SQLiteArticleStore(db_path=db_path)
    await store.initialize()
    return store


@pytest_asyncio.fixture
async def user_provider(db_path: Path) -> SQLiteUserProvider:
    provider = SQLiteUserProvider(db_path=db_path)
    await provider.initialize()
    return provider


@pytest_asyncio.fixture
async def seeded_article_store(article_store: SQLiteArticleStore) -> SQLiteArticleStore:
    """Article A1 with reply entries R1 and R2, plus both reply documents."""
    await article_store.save_article(
        make_article(
            "A1",
            make_article_reply("R1"),
            make_article_reply("R2", positive_feedback_count=7, negative_feedback_count=3),
        )
    )
    await article_store.save_reply(make_reply("R1"))
    await article_store.save_reply(make_reply("R2"))
    return article_store


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def feedback_service(
    feedback_store: SQLiteFeedbackStore,
    seeded_article_store: SQLiteArticleStore,
    fake_clock: FakeClock,
) -> ArticleReplyFeedbackService:
    """Service wired to real SQLite stores with a deterministic clock."""
    return ArticleReplyFeedbackService(
        feedback_store=feedback_store,
        projector=ReplyCountProjector(seeded_article_store),
        loader_factory=lambda: StoreDocumentLoader(seeded_article_store),
        clock=fake_clock,
    )
