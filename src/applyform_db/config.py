"""Database settings read from the environment.

``DATABASE_URL`` wins when set; otherwise the URL is assembled from
``PG_HOST`` / ``PG_PORT`` / ``PG_USER`` / ``PG_PASSWORD`` / ``PG_DATABASE``.
Alembic needs the plain psycopg2 form of the URL while the app engine needs
the asyncpg form, so both are derived from the same base.
"""

import os
from dataclasses import dataclass

_ASYNC_PREFIX = "postgresql+asyncpg://"
_SYNC_PREFIX = "postgresql://"


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection and pool settings for the applications database."""

    url: str
    pool_size: int = 5
    max_overflow: int = 10
    # Log every SQL statement (debugging only)
    echo: bool = False

    @property
    def sync_url(self) -> str:
        return self.url.replace(_ASYNC_PREFIX, _SYNC_PREFIX, 1)

    @property
    def async_url(self) -> str:
        if self.url.startswith(_SYNC_PREFIX):
            return self.url.replace(_SYNC_PREFIX, _ASYNC_PREFIX, 1)
        return self.url


def _url_from_parts() -> str:
    host = os.getenv("PG_HOST", "localhost")
    port = os.getenv("PG_PORT", "5432")
    user = os.getenv("PG_USER", "applyform")
    password = os.getenv("PG_PASSWORD", "applyform")
    database = os.getenv("PG_DATABASE", "applyform")
    return f"{_SYNC_PREFIX}{user}:{password}@{host}:{port}/{database}"


def load_database_settings() -> DatabaseSettings:
    """Build settings from ``DATABASE_URL`` / ``PG_*`` environment variables."""
    return DatabaseSettings(
        url=os.getenv("DATABASE_URL") or _url_from_parts(),
        pool_size=int(os.getenv("PG_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("PG_MAX_OVERFLOW", "10")),
        echo=os.getenv("PG_ECHO", "").lower() in ("1", "true", "yes"),
    )
