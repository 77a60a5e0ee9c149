"""Custom exception hierarchy for factcheck-feedback.

All application exceptions inherit from :class:`FactCheckFeedbackError`,
which carries an optional ``provider_name`` so error handlers can identify
which backend (e.g. "sqlite_feedback", "sqlite_article") caused the failure.

The hierarchy mirrors how callers are expected to react:

    FactCheckFeedbackError  (base -- catch-all for any service error)
    +-- UnauthenticatedError   (no verified acting user)
    +-- NotFoundError          (article, reply or reply entry missing)
    +-- StorageError           (backend unavailable or write failed)
    |   +-- UpdateConflictError (write lost to a concurrent writer / lock)
    +-- ConfigurationError     (startup / missing config)

Each class declares the HTTP ``status_code`` the API layer answers with.
"""


class FactCheckFeedbackError(Exception):
    """Base exception for all factcheck-feedback errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which backend triggered the error.  The
    ``__str__`` method prefixes the provider name in brackets for structured
    log output, e.g. ``[sqlite_article] Article abc not found``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------

class UnauthenticatedError(FactCheckFeedbackError):
    """Raised when an operation requires a verified user and none is present."""

    status_code = 401

    def __init__(
        self,
        message: str = "Invalid authentication header",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(FactCheckFeedbackError):
    """Raised when a referenced article, reply or article-reply entry is missing.

    Surfaced to callers as a data-integrity error.  Writes committed before
    the lookup failed are left in place.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "Referenced document not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Storage errors
# ---------------------------------------------------------------------------

class StorageError(FactCheckFeedbackError):
    """Raised when the storage backend is unavailable or a write fails.

    No automatic retry is performed; the error is surfaced as-is.
    """

    status_code = 503

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UpdateConflictError(StorageError):
    """Raised when a write could not be applied because of a concurrent writer."""

    status_code = 409

    def __init__(
        self,
        message: str = "Update conflicted with a concurrent write",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(FactCheckFeedbackError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
