"""Async engine, session factory, and a commit-or-rollback session scope.

The engine is a process-wide singleton created on first use, so the API
server and the CLIs each hold exactly one connection pool.  Call
``dispose_engine()`` on shutdown; the next ``get_engine()`` builds a fresh
pool (the seed CLI relies on this between runs in one process).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from survey_db.config import DatabaseSettings, load_db_settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine(settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Return the shared engine, creating it from *settings* (or env) once."""
    global _engine
    if _engine is None:
        settings = settings or load_db_settings()
        _engine = create_async_engine(
            settings.async_url,
            echo=settings.echo,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_recycle=settings.pool_recycle,
            pool_pre_ping=True,
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory bound to ``get_engine()``.

    ``expire_on_commit=False`` keeps ORM rows readable after the commit,
    which the service needs when building response models.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """One unit of work outside a request: commit on success, else roll back."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close every pooled connection and forget the singletons."""
    global _engine, _session_factory
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    _session_factory = None
