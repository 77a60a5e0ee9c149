"""factcheck-feedback FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml``, configures
structured logging, and exposes ``app`` for uvicorn.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from factcheck_feedback.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from factcheck_feedback.api.routes import router as api_router
from factcheck_feedback.config.loader import load_config
from factcheck_feedback.config.settings import Settings
from factcheck_feedback.providers.article.sqlite_article_store import SQLiteArticleStore
from factcheck_feedback.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
from factcheck_feedback.providers.loader.store_document_loader import StoreDocumentLoader
from factcheck_feedback.providers.user.sqlite_user_provider import SQLiteUserProvider
from factcheck_feedback.services.feedback_service import ArticleReplyFeedbackService
from factcheck_feedback.services.reply_count_projector import ReplyCountProjector
from factcheck_feedback.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component wiring
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service from *app_settings*."""
    db_path = app_settings.database_path
    timeout = app_settings.sqlite_timeout_seconds

    feedback_store = SQLiteFeedbackStore(db_path=db_path, timeout=timeout)
    article_store = SQLiteArticleStore(db_path=db_path, timeout=timeout)
    user_provider = SQLiteUserProvider(db_path=db_path, timeout=timeout)

    feedback_service = ArticleReplyFeedbackService(
        feedback_store=feedback_store,
        projector=ReplyCountProjector(article_store),
        loader_factory=lambda: StoreDocumentLoader(
            article_store,
            max_size=app_settings.loader_cache_size,
            ttl=app_settings.loader_cache_ttl,
        ),
    )

    return {
        "settings": app_settings,
        "feedback_store": feedback_store,
        "article_store": article_store,
        "user_provider": user_provider,
        "feedback_service": feedback_service,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Adopt or build components on startup and create the tables."""
    components = getattr(application.state, "components", None)
    if components is None:
        components = _build_all(application.state.settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    for attr in ("feedback_store", "article_store", "user_provider"):
        provider = getattr(application.state, attr, None)
        if provider is not None:
            await provider.initialize()

    _logger.info(
        "app_startup",
        version="0.1.0",
        environment=application.state.settings.app_env,
        database=application.state.settings.database_path,
    )

    yield

    _logger.info("app_shutdown")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to use; defaults to the module-level environment settings.
    components:
        Optional pre-built components (stores, services).  Tests pass their
        own; otherwise the lifespan builds them with ``_build_all``.
    """
    app_settings = app_settings or settings
    config = load_config(settings=app_settings)

    application = FastAPI(
        title="factcheck-feedback API",
        version="0.1.0",
        description=(
            "Record agree/disagree feedback on replies to disputed articles "
            "and keep each reply's positive/negative tallies in sync."
        ),
        lifespan=_lifespan,
    )
    application.state.settings = app_settings
    if components is not None:
        application.state.components = {"settings": app_settings, **components}

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=config.get("api", {}).get("cors_origins"))

    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "factcheck_feedback.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
