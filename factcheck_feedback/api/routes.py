"""FastAPI API routes for article-reply feedback.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                                          Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/article-reply-feedbacks                   POST    Create/update a vote
# /api/v1/articles/{aid}/replies/{rid}/feedbacks    GET     List feedback for a pair
# /api/v1/health                                    GET     Health check
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from factcheck_feedback.api.context import get_current_user, get_document_loader
from factcheck_feedback.api.schemas import (
    ArticleReplyResponse,
    CreateOrUpdateFeedbackRequest,
    ErrorResponse,
    FeedbackListResponse,
    FeedbackResponse,
    HealthResponse,
)
from factcheck_feedback.interfaces.document_loader import IDocumentLoader
from factcheck_feedback.models.feedback import FeedbackStatus
from factcheck_feedback.models.user import User
from factcheck_feedback.services.feedback_service import ArticleReplyFeedbackService

logger = structlog.get_logger(logger_name=__name__)

router = APIRouter(prefix="/api/v1", tags=["feedback"])

_VERSION = "0.1.0"


def _get_feedback_service(request: Request) -> ArticleReplyFeedbackService:
    """Return the feedback service from application state; 503 if unavailable."""
    svc = getattr(request.app.state, "feedback_service", None)
    if svc is None:
        raise HTTPException(status_code=503, detail="Feedback service not available")
    return svc


FeedbackServiceDep = Annotated[ArticleReplyFeedbackService, Depends(_get_feedback_service)]
CurrentUserDep = Annotated[User | None, Depends(get_current_user)]
LoaderDep = Annotated[IDocumentLoader, Depends(get_document_loader)]


@router.post(
    "/article-reply-feedbacks",
    response_model=ArticleReplyResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Create or update a feedback on an article-reply connection",
)
async def create_or_update_article_reply_feedback(
    body: CreateOrUpdateFeedbackRequest,
    service: FeedbackServiceDep,
    user: CurrentUserDep,
    loader: LoaderDep,
) -> ArticleReplyResponse:
    """Record the caller's vote and return the reply entry with fresh counts."""
    result = await service.record_feedback(
        article_id=body.article_id,
        reply_id=body.reply_id,
        vote=body.vote,
        comment=body.comment,
        user=user,
        loader=loader,
    )
    return ArticleReplyResponse.from_result(result)


@router.get(
    "/articles/{article_id}/replies/{reply_id}/feedbacks",
    response_model=FeedbackListResponse,
    responses={503: {"model": ErrorResponse}},
    summary="List feedback on an article-reply connection",
)
async def list_article_reply_feedbacks(
    article_id: str,
    reply_id: str,
    service: FeedbackServiceDep,
    status: FeedbackStatus | None = None,
) -> FeedbackListResponse:
    feedbacks = await service.list_feedbacks(article_id, reply_id, status=status)
    return FeedbackListResponse(
        article_id=article_id,
        reply_id=reply_id,
        feedbacks=[FeedbackResponse.from_feedback(f) for f in feedbacks],
        total=len(feedbacks),
    )


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health(request: Request) -> HealthResponse:
    providers: dict[str, str] = {}
    for attr in ("feedback_store", "article_store", "user_provider"):
        provider: Any = getattr(request.app.state, attr, None)
        if provider is not None:
            providers[attr] = provider.get_provider_name()
    return HealthResponse(status="ok", version=_VERSION, providers=providers)
