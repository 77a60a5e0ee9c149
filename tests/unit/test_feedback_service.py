"""Unit tests for ArticleReplyFeedbackService with mocked stores.

The store, projector and loader are replaced with AsyncMocks so each test
can assert exactly which writes happened, and in which order.
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from factcheck_feedback.interfaces.document_loader import DocumentCollection
from factcheck_feedback.models.feedback import FeedbackKey, FeedbackStatus, UpsertResult
from factcheck_feedback.models.user import User
from factcheck_feedback.services.feedback_service import ArticleReplyFeedbackService
from factcheck_feedback.utils.errors import NotFoundError, UnauthenticatedError, UpdateConflictError
from tests.conftest import make_article, make_article_reply, make_feedback, make_reply

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
KEY = FeedbackKey(article_id="A1", reply_id="R1", user_id="U1", app_id="WEBSITE")


@pytest.fixture
def mock_store():
    store = MagicMock()
    store.upsert = AsyncMock(return_value=UpsertResult(created=True, feedback=make_feedback(1)))
    store.patch = AsyncMock()
    store.load_all = AsyncMock(return_value=[make_feedback(1)])
    store.list_article_reply_pairs = AsyncMock(return_value=[])
    store.get_provider_name.return_value = "mock_feedback"
    return store


@pytest.fixture
def mock_projector():
    projector = MagicMock()
    projector.project = AsyncMock(
        return_value=make_article_reply("R1", positive_feedback_count=1)
    )
    return projector


@pytest.fixture
def mock_loader():
    loader = MagicMock()
    loader.load_many = AsyncMock(
        return_value=[
            make_reply("R1", user_id="writer-of-R1"),
            make_article("A1", make_article_reply("R1", user_id="author-of-R1")),
        ]
    )
    return loader


@pytest.fixture
def service(mock_store, mock_projector, mock_loader):
    return ArticleReplyFeedbackService(
        feedback_store=mock_store,
        projector=mock_projector,
        loader_factory=lambda: mock_loader,
        clock=lambda: FIXED_NOW,
    )


# ─── Authentication ───────────────────────────────────────────────

class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_user_rejected_before_any_write(self, service, mock_store, mock_projector):
        with pytest.raises(UnauthenticatedError):
            await service.record_feedback("A1", "R1", 1, None, user=None)

        mock_store.upsert.assert_not_awaited()
        mock_store.patch.assert_not_awaited()
        mock_projector.project.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_user_without_app_id_rejected(self, service, mock_store):
        with pytest.raises(UnauthenticatedError):
            await service.record_feedback("A1", "R1", 1, None, user=User(id="U1", app_id=""))
        mock_store.upsert.assert_not_awaited()


# ─── Upsert ───────────────────────────────────────────────────────

class TestUpsert:
    @pytest.mark.asyncio
    async def test_invalid_vote_rejected(self, service, user_u1, mock_store):
        with pytest.raises(ValueError):
            await service.record_feedback("A1", "R1", 5, None, user=user_u1)
        mock_store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_key_separator_in_ids_rejected_before_write(self, service, user_u1, mock_store):
        with pytest.raises(ValueError):
            await service.record_feedback("A1", "R__1", 1, None, user=user_u1)
        mock_store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upsert_uses_composite_key_and_patch(self, service, user_u1, mock_store):
        await service.record_feedback("A1", "R1", -1, "nope", user=user_u1)

        args, kwargs = mock_store.upsert.await_args
        assert args[0] == KEY
        now = FIXED_NOW.isoformat()
        assert kwargs["patch"] == {"score": -1, "comment": "nope", "updated_at": now}
        defaults = kwargs["insert_defaults"]
        assert defaults["created_at"] == now
        assert defaults["updated_at"] == now
        assert defaults["status"] == "NORMAL"
        assert defaults["score"] == -1

    @pytest.mark.asyncio
    async def test_blocked_user_feedback_starts_blocked(self, service, blocked_user, mock_store):
        await service.record_feedback("A1", "R1", 1, None, user=blocked_user)

        defaults = mock_store.upsert.await_args.kwargs["insert_defaults"]
        assert defaults["status"] == FeedbackStatus.BLOCKED.value

    @pytest.mark.asyncio
    async def test_custom_default_status_policy(self, mock_store, mock_projector, mock_loader, user_u1):
        svc = ArticleReplyFeedbackService(
            feedback_store=mock_store,
            projector=mock_projector,
            loader_factory=lambda: mock_loader,
            default_status_for=lambda user: FeedbackStatus.DELETED,
        )
        await svc.record_feedback("A1", "R1", 1, None, user=user_u1)

        defaults = mock_store.upsert.await_args.kwargs["insert_defaults"]
        assert defaults["status"] == "DELETED"


# ─── Author back-fill ─────────────────────────────────────────────

class TestAuthorBackfill:
    @pytest.mark.asyncio
    async def test_created_record_is_enriched(self, service, user_u1, mock_store, mock_loader):
        await service.record_feedback("A1", "R1", 1, None, user=user_u1)

        mock_loader.load_many.assert_awaited_once_with([
            (DocumentCollection.REPLIES, "R1"),
            (DocumentCollection.ARTICLES, "A1"),
        ])
        mock_store.patch.assert_awaited_once_with(
            KEY,
            {"reply_user_id": "writer-of-R1", "article_reply_user_id": "author-of-R1"},
        )

    @pytest.mark.asyncio
    async def test_enriched_update_skips_lookup(self, service, user_u1, mock_store, mock_loader):
        mock_store.upsert = AsyncMock(return_value=UpsertResult(
            created=False,
            feedback=make_feedback(
                -1,
                reply_user_id="writer-of-R1",
                article_reply_user_id="author-of-R1",
            ),
        ))

        await service.record_feedback("A1", "R1", -1, None, user=user_u1)

        mock_loader.load_many.assert_not_awaited()
        mock_store.patch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unenriched_update_retries_lookup(self, service, user_u1, mock_store, mock_loader):
        mock_store.upsert = AsyncMock(
            return_value=UpsertResult(created=False, feedback=make_feedback(1))
        )

        await service.record_feedback("A1", "R1", 1, None, user=user_u1)

        mock_loader.load_many.assert_awaited_once()
        mock_store.patch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_explicit_loader_overrides_factory(self, service, user_u1, mock_loader):
        other_loader = MagicMock()
        other_loader.load_many = AsyncMock(return_value=mock_loader.load_many.return_value)

        await service.record_feedback("A1", "R1", 1, None, user=user_u1, loader=other_loader)

        other_loader.load_many.assert_awaited_once()
        mock_loader.load_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_entry_raises_after_upsert(
        self, service, user_u1, mock_store, mock_projector, mock_loader
    ):
        mock_loader.load_many = AsyncMock(return_value=[
            make_reply("R1"),
            make_article("A1", make_article_reply("R2")),
        ])

        with pytest.raises(NotFoundError, match="article ID = A1 and reply ID = R1"):
            await service.record_feedback("A1", "R1", 1, None, user=user_u1)

        mock_store.upsert.assert_awaited_once()
        mock_store.patch.assert_not_awaited()
        mock_projector.project.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_document_propagates(self, service, user_u1, mock_projector, mock_loader):
        mock_loader.load_many = AsyncMock(
            side_effect=NotFoundError("Cannot find replies document with ID = R1")
        )

        with pytest.raises(NotFoundError):
            await service.record_feedback("A1", "R1", 1, None, user=user_u1)
        mock_projector.project.assert_not_awaited()


# ─── Projection ───────────────────────────────────────────────────

class TestProjection:
    @pytest.mark.asyncio
    async def test_result_carries_article_id_and_counts(self, service, user_u1, mock_store, mock_projector):
        feedbacks = [make_feedback(1), make_feedback(-1, user_id="U2")]
        mock_store.load_all = AsyncMock(return_value=feedbacks)

        result = await service.record_feedback("A1", "R1", 1, None, user=user_u1)

        mock_store.load_all.assert_awaited_once_with("A1", "R1")
        mock_projector.project.assert_awaited_once_with("A1", "R1", feedbacks)
        assert result.article_id == "A1"
        assert result.reply_id == "R1"
        assert result.positive_feedback_count == 1

    @pytest.mark.asyncio
    async def test_projector_noop_raises_not_found(self, service, user_u1, mock_projector):
        mock_projector.project = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match="Cannot get updated article reply"):
            await service.record_feedback("A1", "R1", 1, None, user=user_u1)

    @pytest.mark.asyncio
    async def test_storage_conflict_propagates(self, service, user_u1, mock_projector):
        mock_projector.project = AsyncMock(side_effect=UpdateConflictError())

        with pytest.raises(UpdateConflictError):
            await service.record_feedback("A1", "R1", 1, None, user=user_u1)


# ─── Listing and reconciliation ───────────────────────────────────

class TestListAndRecount:
    @pytest.mark.asyncio
    async def test_list_feedbacks_filters_by_status(self, service, mock_store):
        mock_store.load_all = AsyncMock(return_value=[
            make_feedback(1),
            make_feedback(-1, FeedbackStatus.BLOCKED, user_id="U2"),
        ])

        everything = await service.list_feedbacks("A1", "R1")
        blocked = await service.list_feedbacks("A1", "R1", status=FeedbackStatus.BLOCKED)

        assert len(everything) == 2
        assert [f.user_id for f in blocked] == ["U2"]

    @pytest.mark.asyncio
    async def test_recount_projects_stored_feedback(self, service, mock_store, mock_projector):
        result = await service.recount("A1", "R1")

        mock_projector.project.assert_awaited_once_with("A1", "R1", mock_store.load_all.return_value)
        assert result.positive_feedback_count == 1

    @pytest.mark.asyncio
    async def test_recount_all_summarizes_outcomes(self, service, mock_store, mock_projector):
        mock_store.list_article_reply_pairs = AsyncMock(
            return_value=[("A1", "R1"), ("A1", "R9"), ("A9", "R1")]
        )
        updated_entry = make_article_reply("R1")

        async def _project(article_id, reply_id, feedbacks):
            if article_id == "A9":
                raise NotFoundError("Article A9 not found")
            return updated_entry if reply_id == "R1" else None

        mock_projector.project = AsyncMock(side_effect=_project)

        summary = await service.recount_all(concurrency=2)

        assert summary["total"] == 3
        assert summary["updated"] == 1
        assert summary["skipped"] == 1
        assert summary["failed"] == [
            {"article_id": "A9", "reply_id": "R1", "error": "Article A9 not found"}
        ]
