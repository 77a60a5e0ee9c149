"""Article-reply feedback orchestrator: record votes, keep tallies in sync.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services (business logic orchestration).
# Depends on: IFeedbackStore, IDocumentLoader (per request),
#             ReplyCountProjector.
#
# ``record_feedback`` handles one vote end to end:
#
#   1. AUTH: assert a verified acting user before any write.
#   2. UPSERT: one record per (article, reply, user, app); re-votes update
#      score/comment/updated_at in place.
#   3. ENRICH: on first creation, look up the reply author and the
#      article-reply author concurrently and patch them onto the record.
#      A missing reply entry fails loudly with NotFoundError.
#   4. RELOAD: read every feedback record for the pair (read-after-write).
#   5. PROJECT: recompute and persist the reply entry's counters.
#
# There is no transaction spanning the feedback record and the article.
# Two concurrent votes on the same pair may both reload and both project;
# the projector's single-statement update makes the last write win without
# touching sibling entries.  Counts may briefly reflect a stale snapshot;
# any later vote or ``recount`` repairs them.
#
# Enrichment that failed (reply entry removed between upsert and lookup)
# is retried on the next vote by the same identity while the author
# fields are still empty.  Once set they are never re-queried.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import structlog

from factcheck_feedback.interfaces.document_loader import DocumentCollection, IDocumentLoader
from factcheck_feedback.interfaces.feedback_store import IFeedbackStore
from factcheck_feedback.models.article import ArticleReply, ArticleReplyResult
from factcheck_feedback.models.feedback import (
    ArticleReplyFeedback,
    FeedbackKey,
    FeedbackStatus,
    FeedbackVote,
)
from factcheck_feedback.models.user import User
from factcheck_feedback.services.reply_count_projector import ReplyCountProjector
from factcheck_feedback.utils.concurrency import throttled_gather
from factcheck_feedback.utils.errors import NotFoundError
from factcheck_feedback.utils.user import assert_user, get_content_default_status

logger = structlog.get_logger(logger_name=__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ArticleReplyFeedbackService:
    """Records feedback on article replies and maintains their vote tallies.

    All dependencies are constructor-injected; the service never builds its
    own providers.  ``loader_factory`` is called once per operation so
    memoized documents never leak across requests.
    """

    def __init__(
        self,
        feedback_store: IFeedbackStore,
        projector: ReplyCountProjector,
        loader_factory: Callable[[], IDocumentLoader],
        default_status_for: Callable[[User], FeedbackStatus] = get_content_default_status,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._feedback_store = feedback_store
        self._projector = projector
        self._loader_factory = loader_factory
        self._default_status_for = default_status_for
        self._clock = clock

    # ── Public API ─────────────────────────────────────────────────────

    async def record_feedback(
        self,
        article_id: str,
        reply_id: str,
        vote: int,
        comment: str | None,
        user: User | None,
        loader: IDocumentLoader | None = None,
    ) -> ArticleReplyResult:
        """Create or update *user*'s feedback on an article reply.

        Returns the updated reply entry annotated with ``article_id``.

        Raises
        ------
        UnauthenticatedError
            No verified user; nothing is written.
        ValueError
            ``vote`` is not -1, 0 or 1.
        NotFoundError
            The article, reply or article-reply entry is missing.  An
            already committed feedback upsert is left in place.
        """
        acting_user = assert_user(user)
        score = FeedbackVote(vote).value

        now = self._clock().isoformat()
        key = FeedbackKey(
            article_id=article_id,
            reply_id=reply_id,
            user_id=acting_user.id,
            app_id=acting_user.app_id,
        )

        upserted = await self._feedback_store.upsert(
            key,
            patch={"score": score, "comment": comment, "updated_at": now},
            insert_defaults={
                "article_id": article_id,
                "reply_id": reply_id,
                "user_id": acting_user.id,
                "app_id": acting_user.app_id,
                "score": score,
                "comment": comment,
                "status": self._default_status_for(acting_user).value,
                "created_at": now,
                "updated_at": now,
            },
        )

        if upserted.created or self._needs_author_backfill(upserted.feedback):
            await self._backfill_authors(key, loader or self._loader_factory())

        feedbacks = await self._feedback_store.load_all(article_id, reply_id)
        updated = await self._projector.project(article_id, reply_id, feedbacks)
        if updated is None:
            raise NotFoundError(
                f"Cannot get updated article reply with article ID = {article_id} "
                f"and reply ID = {reply_id}"
            )

        logger.info(
            "feedback_recorded",
            article_id=article_id,
            reply_id=reply_id,
            user_id=acting_user.id,
            app_id=acting_user.app_id,
            score=score,
            created=upserted.created,
            positive_feedback_count=updated.positive_feedback_count,
            negative_feedback_count=updated.negative_feedback_count,
        )
        return ArticleReplyResult(article_id=article_id, **updated.model_dump())

    async def list_feedbacks(
        self,
        article_id: str,
        reply_id: str,
        status: FeedbackStatus | None = None,
    ) -> list[ArticleReplyFeedback]:
        """Return feedback for the pair, optionally filtered by status."""
        feedbacks = await self._feedback_store.load_all(article_id, reply_id)
        if status is None:
            return feedbacks
        return [f for f in feedbacks if f.status == status]

    async def recount(self, article_id: str, reply_id: str) -> ArticleReply | None:
        """Recompute the pair's counters from the stored feedback.

        Returns ``None`` when the article has no entry for ``reply_id``.
        """
        feedbacks = await self._feedback_store.load_all(article_id, reply_id)
        return await self._projector.project(article_id, reply_id, feedbacks)

    async def recount_all(self, concurrency: int = 5) -> dict[str, Any]:
        """Recount every (article, reply) pair that has feedback.

        Returns a summary with ``total``, ``updated``, ``skipped`` (entry
        absent) and ``failed`` (list of ``{article_id, reply_id, error}``).
        """
        pairs = await self._feedback_store.list_article_reply_pairs()
        results = await throttled_gather(
            [self.recount(article_id, reply_id) for article_id, reply_id in pairs],
            semaphore=asyncio.Semaphore(concurrency),
            return_exceptions=True,
        )

        updated = skipped = 0
        failed: list[dict[str, str]] = []
        for (article_id, reply_id), result in zip(pairs, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "recount_failed",
                    article_id=article_id,
                    reply_id=reply_id,
                    error=str(result),
                )
                failed.append({"article_id": article_id, "reply_id": reply_id, "error": str(result)})
            elif result is None:
                skipped += 1
            else:
                updated += 1

        logger.info(
            "recount_all_finished",
            total=len(pairs),
            updated=updated,
            skipped=skipped,
            failed=len(failed),
        )
        return {"total": len(pairs), "updated": updated, "skipped": skipped, "failed": failed}

    # ── Internals ──────────────────────────────────────────────────────

    @staticmethod
    def _needs_author_backfill(feedback: ArticleReplyFeedback) -> bool:
        return feedback.reply_user_id is None or feedback.article_reply_user_id is None

    async def _backfill_authors(self, key: FeedbackKey, loader: IDocumentLoader) -> None:
        """Copy the reply author and article-reply author onto the feedback record."""
        reply, article = await loader.load_many([
            (DocumentCollection.REPLIES, key.reply_id),
            (DocumentCollection.ARTICLES, key.article_id),
        ])

        article_reply = article.find_article_reply(key.reply_id)
        if article_reply is None:
            raise NotFoundError(
                f"Cannot find article-reply with article ID = {key.article_id} "
                f"and reply ID = {key.reply_id}"
            )

        await self._feedback_store.patch(
            key,
            {
                "reply_user_id": reply.user_id,
                "article_reply_user_id": article_reply.user_id,
            },
        )
        logger.debug(
            "feedback_enriched",
            feedback_id=key.to_id(),
            reply_user_id=reply.user_id,
            article_reply_user_id=article_reply.user_id,
        )
