"""Article and reply domain models.

An ``Article`` is the aggregate for a piece of disputed content.  It embeds
an ordered list of ``ArticleReply`` entries, each pointing at a ``Reply`` by
id and carrying the denormalized feedback counters.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ArticleReplyStatus(str, Enum):
    """Visibility of a reply entry inside an article."""

    NORMAL = "NORMAL"
    DELETED = "DELETED"
    BLOCKED = "BLOCKED"


class ReplyType(str, Enum):
    """Fact-checker verdict carried by a reply."""

    RUMOR = "RUMOR"
    NOT_RUMOR = "NOT_RUMOR"
    OPINIONATED = "OPINIONATED"
    NOT_ARTICLE = "NOT_ARTICLE"


class ArticleReply(BaseModel):
    """A reply entry embedded in an article."""

    model_config = ConfigDict(frozen=True)

    reply_id: str
    user_id: str = Field(description="Author who connected the reply to the article.")
    app_id: str
    status: ArticleReplyStatus = ArticleReplyStatus.NORMAL
    positive_feedback_count: int = Field(default=0, ge=0)
    negative_feedback_count: int = Field(default=0, ge=0)
    created_at: str
    updated_at: str


class Article(BaseModel):
    """A disputed article with its embedded reply entries."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    article_replies: list[ArticleReply] = Field(default_factory=list)
    created_at: str
    updated_at: str

    def find_article_reply(self, reply_id: str) -> ArticleReply | None:
        """Return the entry for *reply_id*, or ``None`` when absent."""
        return next(
            (ar for ar in self.article_replies if ar.reply_id == reply_id),
            None,
        )


class Reply(BaseModel):
    """A fact-checker's reply, referenced from article entries."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    app_id: str
    text: str
    type: ReplyType = ReplyType.NOT_ARTICLE
    reference: str | None = None
    created_at: str


class ArticleReplyResult(ArticleReply):
    """An updated reply entry annotated with the id of its article."""

    article_id: str
