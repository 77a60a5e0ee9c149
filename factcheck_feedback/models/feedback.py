"""Article-reply feedback domain models.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph; no imports from upper layers).
#
# One ArticleReplyFeedback exists per (article, reply, user, app).  The
# four-part identity is modelled explicitly as ``FeedbackKey`` so that
# callers never build the storage id by string concatenation themselves.
#
# Key design decisions:
#   - **Stable serialization**: ``FeedbackKey.to_id()`` joins the fields
#     with ``"__"`` in a fixed order.  The separator is rejected inside
#     component fields, which makes ``from_id`` an exact inverse.
#   - **Immutable state**: all models use ``frozen=True``; updates produce
#     new instances via ``model_copy(update={...})``.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

FEEDBACK_ID_SEPARATOR = "__"


# ─── FeedbackVote ────────────────────────────────────────────────────
class FeedbackVote(IntEnum):
    """Allowed feedback scores."""

    UPVOTE = 1
    NEUTRAL = 0
    DOWNVOTE = -1


# ─── FeedbackStatus ──────────────────────────────────────────────────
# Moderation state.  Only NORMAL feedback counts toward reply tallies.
class FeedbackStatus(str, Enum):
    """Moderation states of a feedback record."""

    NORMAL = "NORMAL"
    BLOCKED = "BLOCKED"
    DELETED = "DELETED"


# ─── FeedbackKey ─────────────────────────────────────────────────────
class FeedbackKey(BaseModel):
    """Composite identity of a feedback record."""

    model_config = ConfigDict(frozen=True)

    article_id: str
    reply_id: str
    user_id: str
    app_id: str

    @field_validator("article_id", "reply_id", "user_id", "app_id")
    @classmethod
    def _reject_separator(cls, value: str) -> str:
        if not value:
            raise ValueError("Feedback key components must not be empty")
        if FEEDBACK_ID_SEPARATOR in value:
            raise ValueError(
                f"Feedback key components must not contain {FEEDBACK_ID_SEPARATOR!r}"
            )
        return value

    def to_id(self) -> str:
        """Return the storage id: ``article__reply__user__app``."""
        return FEEDBACK_ID_SEPARATOR.join(
            (self.article_id, self.reply_id, self.user_id, self.app_id)
        )

    @classmethod
    def from_id(cls, feedback_id: str) -> FeedbackKey:
        """Parse a storage id produced by :meth:`to_id`."""
        parts = feedback_id.split(FEEDBACK_ID_SEPARATOR)
        if len(parts) != 4:
            raise ValueError(f"Malformed feedback id: {feedback_id!r}")
        article_id, reply_id, user_id, app_id = parts
        return cls(article_id=article_id, reply_id=reply_id, user_id=user_id, app_id=app_id)


# ─── ArticleReplyFeedback ────────────────────────────────────────────
class ArticleReplyFeedback(BaseModel):
    """One user's vote and comment on one article-reply pairing."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Serialized FeedbackKey.")
    article_id: str
    reply_id: str
    user_id: str
    app_id: str
    score: int = Field(ge=-1, le=1, description="+1 agree, 0 neutral, -1 disagree.")
    comment: str | None = None
    status: FeedbackStatus = FeedbackStatus.NORMAL
    created_at: str = Field(description="ISO-8601 UTC timestamp of the first vote.")
    updated_at: str = Field(description="ISO-8601 UTC timestamp of the latest vote.")
    # Denormalized authorship, filled once after creation.
    reply_user_id: str | None = None
    article_reply_user_id: str | None = None

    @property
    def key(self) -> FeedbackKey:
        return FeedbackKey(
            article_id=self.article_id,
            reply_id=self.reply_id,
            user_id=self.user_id,
            app_id=self.app_id,
        )


# ─── UpsertResult ────────────────────────────────────────────────────
class UpsertResult(BaseModel):
    """Outcome of a feedback upsert."""

    model_config = ConfigDict(frozen=True)

    created: bool = Field(description="True when the record did not exist before.")
    feedback: ArticleReplyFeedback
