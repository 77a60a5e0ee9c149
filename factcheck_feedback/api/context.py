"""Per-request context: the acting user and the document loader.

Client applications authenticate with ``X-App-Id`` / ``X-App-Secret`` and
act on behalf of the user named in ``X-User-Id``.  A request that does not
carry a trusted pair resolves to no user; the service then refuses it with
``UnauthenticatedError`` before writing anything.
"""

from __future__ import annotations

import structlog
from fastapi import Request

from factcheck_feedback.config.settings import Settings
from factcheck_feedback.interfaces.document_loader import IDocumentLoader
from factcheck_feedback.models.feedback import FEEDBACK_ID_SEPARATOR
from factcheck_feedback.models.user import User
from factcheck_feedback.providers.loader.store_document_loader import StoreDocumentLoader

logger = structlog.get_logger(logger_name=__name__)

APP_ID_HEADER = "x-app-id"
APP_SECRET_HEADER = "x-app-secret"
USER_ID_HEADER = "x-user-id"


async def get_current_user(request: Request) -> User | None:
    """Resolve the acting user from trusted-app headers, or ``None``."""
    settings: Settings = request.app.state.settings
    app_id = request.headers.get(APP_ID_HEADER)
    user_id = request.headers.get(USER_ID_HEADER)

    if not settings.is_trusted_app(app_id, request.headers.get(APP_SECRET_HEADER)):
        if app_id:
            logger.warning("untrusted_app", app_id=app_id)
        return None
    if not user_id:
        return None
    if FEEDBACK_ID_SEPARATOR in app_id or FEEDBACK_ID_SEPARATOR in user_id:
        logger.warning("invalid_identity_header", app_id=app_id, user_id=user_id)
        return None

    return await request.app.state.user_provider.get_or_create_user(app_id, user_id)


def get_document_loader(request: Request) -> IDocumentLoader:
    """Build a fresh loader for this request."""
    settings: Settings = request.app.state.settings
    return StoreDocumentLoader(
        request.app.state.article_store,
        max_size=settings.loader_cache_size,
        ttl=settings.loader_cache_ttl,
    )
