"""Acting-user model supplied by the authentication layer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A verified user of one client application."""

    model_config = ConfigDict(frozen=True)

    id: str
    app_id: str
    name: str | None = None
    blocked_reason: str | None = Field(
        default=None,
        description="Set when moderators blocked the user; their new content starts BLOCKED.",
    )
    created_at: str | None = None
    updated_at: str | None = None
