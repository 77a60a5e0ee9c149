# =============================================================================
# factcheck_feedback/cli/admin.py: Operator Commands
# =============================================================================
#
# One-shot maintenance commands that run outside the API server:
#
#   recount     Recompute the positive/negative feedback tallies of one
#               article-reply pair (--article-id/--reply-id) or of every
#               pair that has feedback (--all).  Used to reconcile counts
#               after interrupted requests; safe to run at any time.
#
#   block-user  Set a user's blocked_reason.  Feedback the user creates
#               afterwards starts in the BLOCKED state and is excluded
#               from the tallies.
#
# Typical usage:
#   python -m factcheck_feedback.cli recount --article-id A1 --reply-id R1
#   python -m factcheck_feedback.cli recount --all
#   python -m factcheck_feedback.cli block-user --app-id web --user-id U1 --reason spam
# =============================================================================

"""Operator CLI for factcheck-feedback maintenance tasks."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from factcheck_feedback.config.settings import Settings
from factcheck_feedback.providers.article.sqlite_article_store import SQLiteArticleStore
from factcheck_feedback.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
from factcheck_feedback.providers.loader.store_document_loader import StoreDocumentLoader
from factcheck_feedback.providers.user.sqlite_user_provider import SQLiteUserProvider
from factcheck_feedback.services.feedback_service import ArticleReplyFeedbackService
from factcheck_feedback.services.reply_count_projector import ReplyCountProjector
from factcheck_feedback.utils.errors import FactCheckFeedbackError
from factcheck_feedback.utils.logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m factcheck_feedback.cli",
        description="Maintenance commands for article-reply feedback.",
    )
    subparsers = parser.add_subparsers(dest="command")

    recount_parser = subparsers.add_parser("recount", help="Recompute feedback tallies")
    recount_parser.add_argument("--article-id", help="Article of the pair to recount")
    recount_parser.add_argument("--reply-id", help="Reply of the pair to recount")
    recount_parser.add_argument(
        "--all",
        action="store_true",
        help="Recount every article-reply pair that has feedback",
    )

    block_parser = subparsers.add_parser("block-user", help="Block a user")
    block_parser.add_argument("--app-id", required=True, help="Application the user belongs to")
    block_parser.add_argument("--user-id", required=True, help="User to block")
    block_parser.add_argument("--reason", required=True, help="Reason shown to moderators")

    return parser


def _build_service(app_settings: Settings) -> tuple[ArticleReplyFeedbackService, list]:
    """Build the service plus the stores that need initializing."""
    feedback_store = SQLiteFeedbackStore(
        db_path=app_settings.database_path,
        timeout=app_settings.sqlite_timeout_seconds,
    )
    article_store = SQLiteArticleStore(
        db_path=app_settings.database_path,
        timeout=app_settings.sqlite_timeout_seconds,
    )
    service = ArticleReplyFeedbackService(
        feedback_store=feedback_store,
        projector=ReplyCountProjector(article_store),
        loader_factory=lambda: StoreDocumentLoader(article_store),
    )
    return service, [feedback_store, article_store]


async def _handle_recount(args: argparse.Namespace, app_settings: Settings) -> int:
    service, stores = _build_service(app_settings)
    for store in stores:
        await store.initialize()

    if args.all:
        summary = await service.recount_all(concurrency=app_settings.recount_concurrency)
        print(json.dumps(summary, indent=2))
        return 1 if summary["failed"] else 0

    try:
        updated = await service.recount(args.article_id, args.reply_id)
    except FactCheckFeedbackError as exc:
        print(f"Recount failed: {exc}", file=sys.stderr)
        return 1

    if updated is None:
        print(
            f"Article {args.article_id} has no reply entry {args.reply_id}; nothing updated.",
            file=sys.stderr,
        )
        return 1
    print(json.dumps({"article_id": args.article_id, **updated.model_dump(mode="json")}, indent=2))
    return 0


async def _handle_block_user(args: argparse.Namespace, app_settings: Settings) -> int:
    user_provider = SQLiteUserProvider(
        db_path=app_settings.database_path,
        timeout=app_settings.sqlite_timeout_seconds,
    )
    await user_provider.initialize()
    try:
        user = await user_provider.block_user(args.app_id, args.user_id, args.reason)
    except FactCheckFeedbackError as exc:
        print(f"Block failed: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(user.model_dump(mode="json"), indent=2))
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse the subcommand and dispatch to its handler."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level)

    if args.command == "recount":
        if not args.all and not (args.article_id and args.reply_id):
            parser.error("recount needs --all or both --article-id and --reply-id")
        sys.exit(asyncio.run(_handle_recount(args, app_settings)))

    if args.command == "block-user":
        sys.exit(asyncio.run(_handle_block_user(args, app_settings)))


if __name__ == "__main__":
    main()
