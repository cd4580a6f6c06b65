"""survey_db — PostgreSQL persistence layer for the survey service.

This package provides the ORM models, async engine factory, and
repositories for the question catalog, users, and evaluations.  It is
designed to be consumed by the FastAPI server and the seeding CLI.
"""

from survey_db.engine import get_engine, get_session_factory
from survey_db.models import Evaluation, EvaluationPhase, EvaluationStatus, Question, Response, User
from survey_db.repository import EvaluationRepository, QuestionRepository, UserRepository

__all__ = [
    "Evaluation",
    "EvaluationPhase",
    "EvaluationStatus",
    "Question",
    "Response",
    "User",
    "get_engine",
    "get_session_factory",
    "EvaluationRepository",
    "QuestionRepository",
    "UserRepository",
]
