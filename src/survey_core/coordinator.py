"""SubmissionCoordinator — hands a finished draft to the evaluation store.

The coordinator performs exactly one gateway call per ``create_evaluation``
and never retries; whether to try again is up to the caller (the wizard
lets the respondent resubmit from ``failed``).  Failures come back as a
value, not an exception (unexpected gateway faults included), so the wizard only has to distinguish success
from failure:

    result = await coordinator.create_evaluation(header, draft)
    if result.ok:
        result.evaluation.id
    else:
        result.error.kind, result.error.code, result.error.status
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

from pydantic import BaseModel

from survey_core.errors import ErrorCode, ErrorKind, SurveyError
from survey_core.interfaces import EvaluationGateway
from survey_core.models.evaluation import EvaluationHeader, EvaluationSummary

logger = logging.getLogger(__name__)


class SubmissionError(BaseModel):
    """Typed description of a failed submission."""

    kind: ErrorKind
    code: str
    status: int
    message: str
    context: Optional[dict[str, Any]] = None

    @classmethod
    def from_exception(cls, exc: SurveyError) -> SubmissionError:
        return cls(
            kind=exc.kind,
            code=exc.code.value,
            status=exc.status_code,
            message=exc.message,
            context=exc.context,
        )


class SubmissionSuccess(BaseModel):
    type: Literal["success"] = "success"
    evaluation: EvaluationSummary

    @property
    def ok(self) -> bool:
        return True


class SubmissionFailure(BaseModel):
    type: Literal["failure"] = "failure"
    error: SubmissionError

    @property
    def ok(self) -> bool:
        return False


# Callers can match on result.type (or result.ok) to dispatch.
SubmissionResult = SubmissionSuccess | SubmissionFailure


class SubmissionCoordinator:
    """Packages header + answers and performs one store request.

    Args:
        gateway: the :class:`EvaluationGateway` to submit through
    """

    def __init__(self, gateway: EvaluationGateway) -> None:
        self._gateway = gateway

    async def create_evaluation(
        self,
        header: EvaluationHeader,
        draft: dict[str, str],
    ) -> SubmissionResult:
        """Submit *draft* under *header*.

        Never raises: store errors map to their own kind, and any other
        fault from the gateway is reported as a ``store`` failure.
        """
        responses = dict(draft)
        logger.info(
            "Submitting evaluation: name=%r, phase=%s, responses=%d",
            header.name, header.phase, len(responses),
        )
        try:
            summary = await self._gateway.create_evaluation(header, responses)
        except SurveyError as exc:
            logger.warning(
                "Submission failed [%s %d]: %s",
                exc.code.value, exc.status_code, exc.message,
            )
            return SubmissionFailure(error=SubmissionError.from_exception(exc))
        except Exception:
            logger.exception("Unexpected error while submitting evaluation")
            return SubmissionFailure(
                error=SubmissionError(
                    kind=ErrorKind.STORE,
                    code=ErrorCode.EXTERNAL_SERVICE_ERROR.value,
                    status=500,
                    message="Unexpected error while saving the evaluation",
                )
            )

        logger.info("Evaluation created: id=%s", summary.id)
        return SubmissionSuccess(evaluation=summary)
