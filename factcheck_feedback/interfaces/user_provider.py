"""Abstract base class for user lookup.

The authentication layer verifies the calling application; this provider
turns the verified ``(app_id, user_id)`` pair into a ``User`` carrying the
moderation state used to pick default content status.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from factcheck_feedback.models.user import User


class IUserProvider(ABC):
    """Contract for user persistence."""

    @abstractmethod
    async def get_or_create_user(self, app_id: str, user_id: str) -> User:
        """Return the user, registering it on first sight."""

    @abstractmethod
    async def block_user(self, app_id: str, user_id: str, reason: str) -> User:
        """Mark a user as blocked.  Raises ``NotFoundError`` for unknown users."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
