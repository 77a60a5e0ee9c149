"""Pydantic request/response schemas for the factcheck-feedback API.

Request schemas end with "Request", response schemas end with "Response".
Invalid request bodies are rejected by FastAPI with a 422 before any
service code runs.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from factcheck_feedback.models.article import ArticleReplyResult, ArticleReplyStatus
from factcheck_feedback.models.feedback import (
    FEEDBACK_ID_SEPARATOR,
    ArticleReplyFeedback,
    FeedbackStatus,
)


class CreateOrUpdateFeedbackRequest(BaseModel):
    """Create or update a feedback on an article-reply connection."""

    article_id: str = Field(..., min_length=1)
    reply_id: str = Field(..., min_length=1)
    vote: Literal[-1, 0, 1] = Field(..., description="1 agree, 0 neutral, -1 disagree")
    comment: str | None = Field(default=None, max_length=2000)

    @field_validator("article_id", "reply_id")
    @classmethod
    def _reject_key_separator(cls, value: str) -> str:
        if FEEDBACK_ID_SEPARATOR in value:
            raise ValueError(f"must not contain {FEEDBACK_ID_SEPARATOR!r}")
        return value


class ArticleReplyResponse(BaseModel):
    """An article's reply entry with its feedback tallies."""

    article_id: str
    reply_id: str
    user_id: str
    app_id: str
    status: ArticleReplyStatus
    positive_feedback_count: int
    negative_feedback_count: int
    created_at: str
    updated_at: str

    @classmethod
    def from_result(cls, result: ArticleReplyResult) -> ArticleReplyResponse:
        return cls(**result.model_dump())


class FeedbackResponse(BaseModel):
    """A single feedback record."""

    id: str
    article_id: str
    reply_id: str
    user_id: str
    app_id: str
    score: int
    comment: str | None = None
    status: FeedbackStatus
    created_at: str
    updated_at: str
    reply_user_id: str | None = None
    article_reply_user_id: str | None = None

    @classmethod
    def from_feedback(cls, feedback: ArticleReplyFeedback) -> FeedbackResponse:
        return cls(**feedback.model_dump())


class FeedbackListResponse(BaseModel):
    """All feedback on one article-reply pair."""

    article_id: str
    reply_id: str
    feedbacks: list[FeedbackResponse] = Field(default_factory=list)
    total: int = 0


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, str]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
