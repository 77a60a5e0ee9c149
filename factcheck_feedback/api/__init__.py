"""factcheck-feedback API layer: routes, schemas, request context, and middleware."""

from factcheck_feedback.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from factcheck_feedback.api.routes import router
from factcheck_feedback.api.schemas import (
    ArticleReplyResponse,
    CreateOrUpdateFeedbackRequest,
    ErrorResponse,
    FeedbackListResponse,
    FeedbackResponse,
    HealthResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "router",
    "ArticleReplyResponse",
    "CreateOrUpdateFeedbackRequest",
    "ErrorResponse",
    "FeedbackListResponse",
    "FeedbackResponse",
    "HealthResponse",
]
