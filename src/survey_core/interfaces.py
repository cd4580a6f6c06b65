"""Abstract interface for the evaluation store as seen by the client side.

The SDK ships one concrete implementation, ``survey_client.HttpEvaluationGateway``,
which talks to the survey API.  Tests and embedded callers may provide
their own.

Typical integration flow::

    gateway: EvaluationGateway = HttpEvaluationGateway(api_client)
    coordinator = SubmissionCoordinator(gateway)
    wizard = SurveyWizard(questions, coordinator, header)
    # ... drive the wizard ...
    result = await wizard.submit()
"""

from abc import ABC, abstractmethod

from survey_core.models.evaluation import EvaluationHeader, EvaluationSummary


class EvaluationGateway(ABC):
    """Creates an evaluation and all of its responses as one unit.

    Implementations must guarantee atomicity: either every response is
    persisted together with the evaluation, or nothing is.
    """

    @abstractmethod
    async def create_evaluation(
        self,
        header: EvaluationHeader,
        responses: dict[str, str],
    ) -> EvaluationSummary:
        """Persist a new evaluation.

        Parameters
        ----------
        header:
            Name, description, and phase of the evaluation.
        responses:
            Encoded answers keyed by question id.  Unanswered optional
            questions are absent.

        Returns
        -------
        EvaluationSummary
            The created record.

        Raises
        ------
        SurveyError
            Any subclass; the coordinator converts it into a failure result.
        """
        ...
