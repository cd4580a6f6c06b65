"""Database configuration — connection URL and pool settings from env.

The URL comes from ``DATABASE_URL`` when set, otherwise it is assembled
from ``PG_HOST`` / ``PG_PORT`` / ``PG_USER`` / ``PG_PASSWORD`` /
``PG_DATABASE`` (handy with docker-compose).  Whatever driver suffix the
configured URL carries, two variants are handed out:

    async_url — ``postgresql+asyncpg://`` for the runtime engine
    sync_url  — ``postgresql://`` (psycopg2) for Alembic
"""

import os
from dataclasses import dataclass
from urllib.parse import quote

_DRIVER_PREFIXES = (
    "postgresql+asyncpg://",
    "postgresql+psycopg2://",
    "postgresql+psycopg://",
    "postgres://",
    "postgresql://",
)


@dataclass(frozen=True)
class DatabaseSettings:
    """Immutable database configuration read from environment."""

    url: str
    pool_size: int = 5
    max_overflow: int = 10
    # Recycle pooled connections older than this many seconds (-1 = never)
    pool_recycle: int = 1800
    echo: bool = False

    @property
    def async_url(self) -> str:
        return _with_driver(self.url, "postgresql+asyncpg://")

    @property
    def sync_url(self) -> str:
        return _with_driver(self.url, "postgresql://")


def _with_driver(url: str, prefix: str) -> str:
    """Swap the scheme of a PostgreSQL URL; non-PostgreSQL URLs pass through."""
    for known in _DRIVER_PREFIXES:
        if url.startswith(known):
            return prefix + url[len(known):]
    return url


def _url_from_parts() -> str:
    user = quote(os.getenv("PG_USER", "survey"), safe="")
    password = quote(os.getenv("PG_PASSWORD", "survey"), safe="")
    host = os.getenv("PG_HOST", "localhost")
    port = os.getenv("PG_PORT", "5432")
    database = os.getenv("PG_DATABASE", "survey")
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


def load_db_settings() -> DatabaseSettings:
    """Build settings from ``DATABASE_URL`` / ``PG_*`` environment variables."""
    return DatabaseSettings(
        url=os.getenv("DATABASE_URL") or _url_from_parts(),
        pool_size=int(os.getenv("PG_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("PG_MAX_OVERFLOW", "10")),
        pool_recycle=int(os.getenv("PG_POOL_RECYCLE", "1800")),
        echo=os.getenv("PG_ECHO", "").lower() in ("1", "true", "yes"),
    )


def get_sync_url() -> str:
    """Synchronous (psycopg2) URL, for Alembic."""
    return load_db_settings().sync_url


def get_async_url() -> str:
    """asyncpg URL, for the runtime engine."""
    return load_db_settings().async_url
