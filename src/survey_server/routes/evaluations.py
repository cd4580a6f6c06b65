"""Evaluation endpoints — create, list, and view evaluations.

All endpoints require the ``X-User-ID`` header.  An evaluation is only
visible to the user who created it; any other user gets 403.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from survey_core.models.evaluation import (
    EvaluationDetail,
    EvaluationListItem,
    EvaluationSummary,
    Phase,
)
from survey_core.service import EvaluationService

from survey_server.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from survey_server.dependencies import get_db, get_service, get_user_id

router = APIRouter(tags=["evaluations"])


# ------------------------------------------------------------------
# Request / response models
# ------------------------------------------------------------------

class CreateEvaluationRequest(BaseModel):
    """Body for POST /evaluations.

    ``responses`` maps question id to the encoded answer string
    (multi-select answers are JSON arrays of strings).
    """
    name: str
    description: Optional[str] = None
    phase: Phase
    responses: dict[str, str]


class CreateEvaluationResponse(BaseModel):
    success: bool = True
    message: str = "Evaluation created successfully"
    evaluation: EvaluationSummary


class EvaluationListResponse(BaseModel):
    success: bool = True
    evaluations: list[EvaluationListItem]


class EvaluationDetailResponse(BaseModel):
    success: bool = True
    evaluation: EvaluationDetail


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

@router.post("/evaluations", status_code=201)
async def create_evaluation(
    body: CreateEvaluationRequest,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: EvaluationService = Depends(get_service),
) -> CreateEvaluationResponse:
    """Create an evaluation with all its responses in one transaction.

    Returns 201 on success, 400 for an invalid body or unknown question ids.
    """
    summary = await service.create_evaluation(
        db,
        user_id=user_id,
        name=body.name,
        description=body.description,
        phase=body.phase,
        responses=body.responses,
    )
    return CreateEvaluationResponse(evaluation=summary)


@router.get("/evaluations")
async def list_evaluations(
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: EvaluationService = Depends(get_service),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> EvaluationListResponse:
    """List the current user's evaluations, most recent first."""
    evaluations = await service.list_evaluations(
        db, user_id=user_id, limit=limit, offset=offset,
    )
    return EvaluationListResponse(evaluations=evaluations)


@router.get("/evaluations/{evaluation_id}")
async def get_evaluation(
    evaluation_id: str,
    user_id: str = Depends(get_user_id),
    db: AsyncSession = Depends(get_db),
    service: EvaluationService = Depends(get_service),
) -> EvaluationDetailResponse:
    """Get one evaluation with its responses.

    Raises 404 if it does not exist and 403 if it belongs to another user.
    """
    detail = await service.get_evaluation(
        db, user_id=user_id, evaluation_id=evaluation_id,
    )
    return EvaluationDetailResponse(evaluation=detail)
