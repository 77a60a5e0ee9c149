"""Utility modules for factcheck-feedback.

- **errors** -- Domain exception hierarchy rooted at FactCheckFeedbackError;
  each class carries the HTTP status code the API answers with.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **concurrency** -- semaphore-throttled ``asyncio.gather`` for bulk work.
- **user** -- acting-user assertion and default content status.
"""

from factcheck_feedback.utils.concurrency import throttled_gather
from factcheck_feedback.utils.errors import (
    ConfigurationError,
    FactCheckFeedbackError,
    NotFoundError,
    StorageError,
    UnauthenticatedError,
    UpdateConflictError,
)
from factcheck_feedback.utils.logging import configure_logging, get_logger
from factcheck_feedback.utils.user import assert_user, get_content_default_status

__all__ = [
    "ConfigurationError",
    "FactCheckFeedbackError",
    "NotFoundError",
    "StorageError",
    "UnauthenticatedError",
    "UpdateConflictError",
    "assert_user",
    "configure_logging",
    "get_content_default_status",
    "get_logger",
    "throttled_gather",
]
