"""FastAPI dependency injection — provides DB sessions, the service, and user identity.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  The session is committed on success and rolled back on error,
matching the SDK convention where service/repository call ``flush()`` but
never ``commit()``.
"""

import hmac
from typing import AsyncGenerator

from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from survey_core.catalog import QuestionCatalog
from survey_core.errors import AuthenticationError, AuthorizationError
from survey_core.service import EvaluationService
from survey_db.engine import get_session_factory


# ------------------------------------------------------------------
# Database session: transaction boundary lives here
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; commit on success, rollback on error.

    The SDK's repository methods call ``flush()`` but never ``commit()``,
    so this dependency is the single place where transactions are finalised.
    """
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# Service & catalog: stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_service(request: Request) -> EvaluationService:
    """Return the service singleton from ``app.state``."""
    return request.app.state.service


def get_catalog(request: Request) -> QuestionCatalog:
    """Return the loaded YAML catalog from ``app.state``."""
    return request.app.state.catalog


# ------------------------------------------------------------------
# User identity: extracted from the X-User-ID header
# ------------------------------------------------------------------

async def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str:
    """Extract user identity from the ``X-User-ID`` header.

    Raises ``AuthenticationError`` (401) if the header is missing.

    When ``TRUSTED_PROXY_SECRET`` is configured, the request must also
    carry a matching ``X-Proxy-Secret`` header, proving the identity was
    injected by the trusted gateway and not forged by an external client.
    """
    if not x_user_id:
        raise AuthenticationError("Authentication required")

    expected_secret: str | None = request.app.state.settings.trusted_proxy_secret
    if expected_secret:
        if not x_proxy_secret:
            raise AuthorizationError("X-Proxy-Secret header is required")
        # Constant-time comparison to prevent timing side-channels.
        if not hmac.compare_digest(x_proxy_secret, expected_secret):
            raise AuthorizationError("Invalid proxy secret")

    return x_user_id
