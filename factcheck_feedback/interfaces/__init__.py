"""Public interface definitions for all storage and lookup providers.

Every backend the feedback service touches is accessed exclusively through
the abstract base classes defined in this package.  Concrete adapters
implement these interfaces and are injected at runtime, so unit tests can
swap in mocks and the SQLite backend can be replaced without touching the
service layer.

CONCRETE PROVIDER MAP:
    Interface          →  Concrete implementations (in factcheck_feedback/providers/)
    ─────────────────────────────────────────────────────────────────────
    IFeedbackStore     →  SQLiteFeedbackStore
    IArticleStore      →  SQLiteArticleStore
    IDocumentLoader    →  StoreDocumentLoader
    IUserProvider      →  SQLiteUserProvider
"""

from factcheck_feedback.interfaces.article_store import IArticleStore
from factcheck_feedback.interfaces.document_loader import DocumentCollection, IDocumentLoader
from factcheck_feedback.interfaces.feedback_store import IFeedbackStore
from factcheck_feedback.interfaces.user_provider import IUserProvider

__all__ = [
    "DocumentCollection",
    "IArticleStore",
    "IDocumentLoader",
    "IFeedbackStore",
    "IUserProvider",
]
