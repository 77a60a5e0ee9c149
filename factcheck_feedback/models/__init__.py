"""Domain models for factcheck-feedback (frozen Pydantic v2 models)."""

from factcheck_feedback.models.article import (
    Article,
    ArticleReply,
    ArticleReplyResult,
    ArticleReplyStatus,
    Reply,
    ReplyType,
)
from factcheck_feedback.models.feedback import (
    ArticleReplyFeedback,
    FeedbackKey,
    FeedbackStatus,
    FeedbackVote,
    UpsertResult,
)
from factcheck_feedback.models.user import User

__all__ = [
    "Article",
    "ArticleReply",
    "ArticleReplyFeedback",
    "ArticleReplyResult",
    "ArticleReplyStatus",
    "FeedbackKey",
    "FeedbackStatus",
    "FeedbackVote",
    "Reply",
    "ReplyType",
    "UpsertResult",
    "User",
]
