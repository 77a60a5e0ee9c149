"""Reply-count projector: feedback records → article reply-entry counters.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services.
# Depends on: IArticleStore.
#
# Recomputes ``positive_feedback_count`` / ``negative_feedback_count`` for
# exactly one reply entry of one article from a supplied feedback set and
# persists them with the store's single-statement conditional update.
#
# Only NORMAL feedback counts.  Score 1 is positive, -1 negative; 0 (or
# anything else) registers a vote but contributes to neither tally.
#
# The projection is idempotent for a given feedback set, so running it
# again later (see ArticleReplyFeedbackService.recount) reconciles any
# count left stale by an interrupted or raced request.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from factcheck_feedback.interfaces.article_store import IArticleStore
from factcheck_feedback.models.article import ArticleReply
from factcheck_feedback.models.feedback import ArticleReplyFeedback, FeedbackStatus

logger = structlog.get_logger(logger_name=__name__)


def count_feedback_votes(feedbacks: Iterable[ArticleReplyFeedback]) -> tuple[int, int]:
    """Return ``(positive, negative)`` counts over NORMAL feedback."""
    positive = negative = 0
    for feedback in feedbacks:
        if feedback.status != FeedbackStatus.NORMAL:
            continue
        if feedback.score == 1:
            positive += 1
        elif feedback.score == -1:
            negative += 1
    return positive, negative


class ReplyCountProjector:
    """Writes aggregated feedback counts into an article's reply entry."""

    def __init__(self, article_store: IArticleStore) -> None:
        self._article_store = article_store

    async def project(
        self,
        article_id: str,
        reply_id: str,
        feedbacks: Iterable[ArticleReplyFeedback],
    ) -> ArticleReply | None:
        """Persist the counts for ``(article_id, reply_id)``.

        Returns the updated entry, or ``None`` when the article no longer
        has an entry for ``reply_id`` (nothing to update).  A missing
        article raises ``NotFoundError``; failed writes raise
        ``UpdateConflictError`` / ``StorageError``.
        """
        positive, negative = count_feedback_votes(feedbacks)
        updated = await self._article_store.update_reply_feedback_counts(
            article_id,
            reply_id,
            positive_feedback_count=positive,
            negative_feedback_count=negative,
        )
        if updated is None:
            logger.warning(
                "article_reply_missing_for_projection",
                article_id=article_id,
                reply_id=reply_id,
            )
        return updated
