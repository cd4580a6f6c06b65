"""SurveyWizard — step-by-step state machine for taking a survey.

The wizard owns one respondent's answer draft for the lifetime of a survey
session.  It presents the catalog questions one at a time, validates the
current question before moving forward, and hands the full draft to the
:class:`SubmissionCoordinator` on the last step.

State overview::

    at_step(i) ──advance/retreat──► at_step(i')        i' clamped to [0, N-1]
    at_step(N-1) ──submit──► submitting ──┬──► submitted   (closed)
                                          └──► failed      (draft kept)
    failed ──submit──► submitting                          (retry, same payload)
    failed ──advance/retreat/set_answer──► at_step(i)

Validation runs lazily: ``set_answer`` only clears the error previously
shown for that question, and the new value is checked on the next
``advance()`` or ``submit()``.

The wizard is not shared between callers and does no locking.  The single
suspension point is the coordinator call inside ``submit()``; while it is
in flight every other operation raises :class:`WizardStateError`.
"""

from __future__ import annotations

import enum
import logging
from typing import Optional

from survey_core import codec
from survey_core.constants import MSG_REQUIRED, MSG_SELECT_AT_LEAST_ONE
from survey_core.coordinator import SubmissionCoordinator, SubmissionError, SubmissionResult
from survey_core.models.evaluation import EvaluationHeader
from survey_core.models.question import Question

logger = logging.getLogger(__name__)


class WizardStatus(str, enum.Enum):
    """Lifecycle of a wizard.

    Transitions:
        at_step -> submitting   (submit on the last step, validation passed)
        submitting -> submitted (coordinator reported success)
        submitting -> failed    (coordinator reported failure)
        failed -> submitting    (retry)
        failed -> at_step       (respondent edits or navigates)
    """

    AT_STEP = "at_step"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    FAILED = "failed"


class WizardStateError(RuntimeError):
    """Operation not permitted in the wizard's current state."""


def validate_answer(question: Question, raw: str | None) -> str | None:
    """Return the validation message for *raw*, or ``None`` if it passes.

    Optional questions always pass.  A required multi-select passes only if
    its value decodes to a non-empty list; any other required kind passes
    if the value is not blank.
    """
    if not question.required:
        return None
    if question.is_multiselect:
        if not codec.decode(question.kind, raw):
            return MSG_SELECT_AT_LEAST_ONE
        return None
    if raw is None or not raw.strip():
        return MSG_REQUIRED
    return None


class SurveyWizard:
    """Drives one survey session over a fixed list of questions.

    Args:
        questions: the catalog for this session, in presentation order
            (must not be empty)
        coordinator: the :class:`SubmissionCoordinator` used by ``submit()``
        header: name/description/phase collected before the first question
        initial_values: optional pre-encoded answers to seed the draft with
    """

    def __init__(
        self,
        questions: list[Question],
        coordinator: SubmissionCoordinator,
        header: EvaluationHeader,
        initial_values: dict[str, str] | None = None,
    ) -> None:
        if not questions:
            raise ValueError("A survey needs at least one question")
        self._questions = list(questions)
        self._by_id = {q.id: q for q in self._questions}
        self._coordinator = coordinator
        self._header = header

        self._step = 0
        self._status = WizardStatus.AT_STEP
        self._answers: dict[str, str] = dict(initial_values or {})
        self._errors: dict[str, str] = {}
        self._last_error: SubmissionError | None = None
        self._result: SubmissionResult | None = None

    # ==================================================================
    # Read-only view
    # ==================================================================

    @property
    def status(self) -> WizardStatus:
        return self._status

    @property
    def step_index(self) -> int:
        return self._step

    @property
    def total_steps(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Question:
        return self._questions[self._step]

    @property
    def is_first_step(self) -> bool:
        return self._step == 0

    @property
    def is_last_step(self) -> bool:
        return self._step == self.total_steps - 1

    @property
    def progress(self) -> float:
        """Percent complete, counting the current step as done."""
        return (self._step + 1) / self.total_steps * 100

    @property
    def header(self) -> EvaluationHeader:
        return self._header

    @property
    def answers(self) -> dict[str, str]:
        """Copy of the encoded answer draft."""
        return dict(self._answers)

    @property
    def errors(self) -> dict[str, str]:
        """Copy of the validation errors from the last navigation attempt."""
        return dict(self._errors)

    @property
    def last_error(self) -> SubmissionError | None:
        """The failure reported by the most recent unsuccessful submit."""
        return self._last_error

    @property
    def result(self) -> SubmissionResult | None:
        return self._result

    def answer_for(self, question_id: str) -> str | list[str]:
        """Decoded draft value for input context (``[]`` / ``""`` if unset)."""
        question = self._question(question_id)
        return codec.decode(question.kind, self._answers.get(question_id))

    # ==================================================================
    # Transitions
    # ==================================================================

    def advance(self) -> bool:
        """Validate the current step and move forward one step.

        Returns ``True`` if validation passed.  On the last step a passing
        ``advance()`` leaves the index where it is.
        """
        self._ensure_editable("advance")
        if not self._validate_current():
            return False
        self._step = min(self._step + 1, self.total_steps - 1)
        return True

    def retreat(self) -> None:
        """Move back one step (clamped at 0) and clear validation errors."""
        self._ensure_editable("retreat")
        self._step = max(self._step - 1, 0)
        self._errors = {}

    def set_answer(self, question_id: str, value: str | list[str] | None) -> None:
        """Overwrite the draft value for *question_id*.

        Lists are encoded through the codec for multi-select questions.
        ``None`` removes the answer so the key is absent from the payload.
        Any error shown for this question is cleared without re-validating.
        """
        question = self._question(question_id)
        self._ensure_editable("set_answer")
        if value is None:
            self._answers.pop(question_id, None)
        else:
            self._answers[question_id] = codec.encode(question.kind, value)
        self._errors.pop(question_id, None)

    async def submit(self) -> Optional[SubmissionResult]:
        """Validate the last step and submit the full draft.

        Only valid on the last step, from ``at_step`` or ``failed``.
        Returns ``None`` if validation of the last step failed (nothing was
        sent), otherwise the coordinator's result.
        """
        if self._status == WizardStatus.SUBMITTING:
            raise WizardStateError("submit is not allowed while a submission is in flight")
        if self._status == WizardStatus.SUBMITTED:
            raise WizardStateError("submit is not allowed: survey already submitted")
        if not self.is_last_step:
            raise WizardStateError(
                f"submit is only valid on the last step "
                f"(at step {self._step + 1} of {self.total_steps})"
            )
        if not self._validate_current():
            return None

        self._status = WizardStatus.SUBMITTING
        try:
            result = await self._coordinator.create_evaluation(self._header, self._answers)
        except BaseException:
            # Cancelled mid-flight; keep the draft usable.
            self._status = WizardStatus.FAILED
            raise

        self._result = result
        if result.ok:
            self._status = WizardStatus.SUBMITTED
            self._last_error = None
            logger.info("Survey submitted: evaluation_id=%s", result.evaluation.id)
        else:
            self._status = WizardStatus.FAILED
            self._last_error = result.error
            logger.info("Survey submission failed; draft retained for retry")
        return result

    # ==================================================================
    # Internals
    # ==================================================================

    def _ensure_editable(self, operation: str) -> None:
        """Reject edits while submitting or after success; reopen after failure."""
        if self._status == WizardStatus.SUBMITTING:
            raise WizardStateError(f"{operation} is not allowed while a submission is in flight")
        if self._status == WizardStatus.SUBMITTED:
            raise WizardStateError(f"{operation} is not allowed: survey already submitted")
        if self._status == WizardStatus.FAILED:
            self._status = WizardStatus.AT_STEP

    def _validate_current(self) -> bool:
        """Recompute errors for the current question only (replace, not merge)."""
        question = self.current_question
        message = validate_answer(question, self._answers.get(question.id))
        if message is not None:
            self._errors = {question.id: message}
            return False
        self._errors = {}
        return True

    def _question(self, question_id: str) -> Question:
        try:
            return self._by_id[question_id]
        except KeyError:
            raise KeyError(f"Unknown question: {question_id}") from None
