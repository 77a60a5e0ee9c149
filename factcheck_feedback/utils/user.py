"""Helpers for the acting user supplied by the authentication layer."""

from __future__ import annotations

from typing import TypeGuard

from factcheck_feedback.models.feedback import FeedbackStatus
from factcheck_feedback.models.user import User
from factcheck_feedback.utils.errors import UnauthenticatedError


def is_valid_user(user: User | None) -> TypeGuard[User]:
    return user is not None and bool(user.id) and bool(user.app_id)


def assert_user(user: User | None) -> User:
    """Return *user* or raise ``UnauthenticatedError`` when it is missing or incomplete."""
    if not is_valid_user(user):
        raise UnauthenticatedError()
    return user


def get_content_default_status(user: User) -> FeedbackStatus:
    """Initial moderation status for content created by *user*."""
    return FeedbackStatus.BLOCKED if user.blocked_reason else FeedbackStatus.NORMAL
