"""Database-level enumerations for evaluations."""

import enum


class EvaluationPhase(str, enum.Enum):
    """Whether an evaluation is the baseline or the post-adoption snapshot."""

    BEFORE = "before"
    AFTER = "after"


class EvaluationStatus(str, enum.Enum):
    """Lifecycle states for an evaluation.

    Evaluations are created together with all of their responses, so new
    rows are written directly as ``completed``.  ``draft`` is reserved for
    server-side saving of partial answers.
    """

    DRAFT = "draft"
    COMPLETED = "completed"
