"""Service layer: feedback orchestration and reply-count projection."""

from factcheck_feedback.services.feedback_service import ArticleReplyFeedbackService
from factcheck_feedback.services.reply_count_projector import (
    ReplyCountProjector,
    count_feedback_votes,
)

__all__ = [
    "ArticleReplyFeedbackService",
    "ReplyCountProjector",
    "count_feedback_votes",
]
