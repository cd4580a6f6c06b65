"""Question catalog endpoint — the active questions, in display order."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from survey_core.models.question import Question
from survey_core.service import EvaluationService

from survey_server.dependencies import get_db, get_service

router = APIRouter(tags=["questions"])


class QuestionsResponse(BaseModel):
    success: bool = True
    questions: list[Question]


@router.get("/questions")
async def list_questions(
    db: AsyncSession = Depends(get_db),
    service: EvaluationService = Depends(get_service),
) -> QuestionsResponse:
    """List active questions ordered by ``order``.  No authentication."""
    questions = await service.list_questions(db)
    return QuestionsResponse(questions=questions)
