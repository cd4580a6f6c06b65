"""Public model re-exports for survey_core.

Consumers should import from ``survey_core.models`` rather than reaching
into sub-modules directly.
"""

# --- Questions ---
from survey_core.models.question import Question, QuestionKind

# --- Evaluations ---
from survey_core.models.evaluation import (
    EvaluationDetail,
    EvaluationHeader,
    EvaluationListItem,
    EvaluationSummary,
    Phase,
    ResponseDetail,
    group_by_category,
)

# --- Users ---
from survey_core.models.user import UserInfo

__all__ = [
    # Questions
    "Question",
    "QuestionKind",
    # Evaluations
    "EvaluationDetail",
    "EvaluationHeader",
    "EvaluationListItem",
    "EvaluationSummary",
    "Phase",
    "ResponseDetail",
    "group_by_category",
    # Users
    "UserInfo",
]
