"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from two sources (in priority order):
#
#   1. **Environment variables**: e.g., DATABASE_PATH=/var/lib/fc.db
#   2. **.env file**: key=value lines in the project root .env file
#
# Field ``database_path`` maps to env var ``DATABASE_PATH``.  Complex
# fields such as ``app_secrets`` are given as JSON:
#
#   APP_SECRETS='{"line-bot": "s3cret", "website": "an0ther"}'
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """factcheck-feedback application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Storage ===
    database_path: str = "data/factcheck.db"
    sqlite_timeout_seconds: float = 5.0

    # === Authentication ===
    # Trusted client applications: app id -> shared secret.  Requests
    # without a matching X-App-Id / X-App-Secret pair are unauthenticated.
    app_secrets: dict[str, str] = Field(default_factory=dict)

    # === Document loader (per request) ===
    loader_cache_size: int = 256
    loader_cache_ttl: int = 60

    # === Reconciliation ===
    recount_concurrency: int = 5

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def is_trusted_app(self, app_id: str | None, app_secret: str | None) -> bool:
        """Return True if *app_secret* matches the configured secret for *app_id*."""
        if not app_id or not app_secret:
            return False
        return self.app_secrets.get(app_id) == app_secret
