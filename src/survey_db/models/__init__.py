"""ORM models for survey_db."""

from survey_db.models.base import Base
from survey_db.models.enums import EvaluationPhase, EvaluationStatus
from survey_db.models.evaluation import Evaluation, Response
from survey_db.models.question import Question
from survey_db.models.user import User

__all__ = [
    "Base",
    "Evaluation",
    "EvaluationPhase",
    "EvaluationStatus",
    "Question",
    "Response",
    "User",
]
