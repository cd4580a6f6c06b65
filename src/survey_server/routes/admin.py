"""Admin endpoints — catalog reload and usage statistics.

Protected by the ``ADMIN_API_KEY`` setting.  Every request must include an
``X-Admin-Key`` header whose value matches the configured key.  Returns
401 if missing, 403 if wrong or if admin access is not configured.
"""

import hmac

from fastapi import APIRouter, Depends, Header, Query, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from survey_core.catalog import QuestionCatalog
from survey_core.errors import AuthenticationError, AuthorizationError
from survey_core.service import EvaluationService

from survey_server.dependencies import get_catalog, get_db, get_service

router = APIRouter(prefix="/admin", tags=["admin"])


# ------------------------------------------------------------------
# Auth dependency
# ------------------------------------------------------------------

async def require_admin_key(
    request: Request,
    x_admin_key: str | None = Header(None, alias="X-Admin-Key"),
) -> str:
    """Validate the ``X-Admin-Key`` header against the configured key."""
    expected: str | None = request.app.state.settings.admin_api_key
    if not expected:
        raise AuthorizationError("Admin endpoints are disabled (ADMIN_API_KEY not configured)")
    if not x_admin_key:
        raise AuthenticationError("X-Admin-Key header is required")
    if not hmac.compare_digest(x_admin_key, expected):
        raise AuthorizationError("Invalid admin key")
    return x_admin_key


# ------------------------------------------------------------------
# Response models
# ------------------------------------------------------------------

class ReloadResult(BaseModel):
    """Response body for a catalog reload."""
    success: bool = True
    questions: int
    deactivated_missing: bool


class StatsResult(BaseModel):
    success: bool = True
    evaluations_by_phase: dict[str, int]


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/questions/reload")
async def reload_questions(
    deactivate_missing: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    service: EvaluationService = Depends(get_service),
    catalog: QuestionCatalog = Depends(get_catalog),
    _admin: str = Depends(require_admin_key),
) -> ReloadResult:
    """Re-read the YAML catalog and upsert it into the questions table.

    Args:
        deactivate_missing: if true, active questions no longer in the
            YAML file are marked inactive
    """
    catalog.load()
    written = await service.sync_catalog(
        db, catalog, deactivate_missing=deactivate_missing,
    )
    return ReloadResult(questions=written, deactivated_missing=deactivate_missing)


@router.get("/stats")
async def stats(
    db: AsyncSession = Depends(get_db),
    service: EvaluationService = Depends(get_service),
    _admin: str = Depends(require_admin_key),
) -> StatsResult:
    """Evaluation counts per phase across all users."""
    return StatsResult(evaluations_by_phase=await service.phase_counts(db))
