"""survey_core — survey wizard, answer codec, and evaluation service SDK.

Public API:
    SurveyWizard          — step-by-step state machine for one survey session
    WizardStatus          — at_step / submitting / submitted / failed
    WizardStateError      — operation not allowed in the current wizard state
    SubmissionCoordinator — submits a finished draft through a gateway
    SubmissionResult      — SubmissionSuccess | SubmissionFailure
    EvaluationGateway     — ABC for the evaluation store as seen by clients
    EvaluationService     — server-side catalog / evaluation / user operations
    QuestionCatalog       — loads the YAML question catalog

Codec:
    encode / decode / decode_for_display — answer string encoding

Errors:
    SurveyError and one subclass per failure kind (see ``survey_core.errors``)
"""

from survey_core.catalog import QuestionCatalog
from survey_core.codec import decode, decode_for_display, encode
from survey_core.coordinator import (
    SubmissionCoordinator,
    SubmissionError,
    SubmissionFailure,
    SubmissionResult,
    SubmissionSuccess,
)
from survey_core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    ErrorCode,
    ErrorKind,
    NotFoundError,
    ServiceUnavailableError,
    SurveyError,
    ValidationError,
)
from survey_core.interfaces import EvaluationGateway
from survey_core.models import (
    EvaluationDetail,
    EvaluationHeader,
    EvaluationListItem,
    EvaluationSummary,
    Question,
    ResponseDetail,
    UserInfo,
)
from survey_core.service import EvaluationService
from survey_core.wizard import SurveyWizard, WizardStateError, WizardStatus, validate_answer

__all__ = [
    # Wizard
    "SurveyWizard",
    "WizardStateError",
    "WizardStatus",
    "validate_answer",
    # Submission
    "EvaluationGateway",
    "SubmissionCoordinator",
    "SubmissionError",
    "SubmissionFailure",
    "SubmissionResult",
    "SubmissionSuccess",
    # Service & catalog
    "EvaluationService",
    "QuestionCatalog",
    # Codec
    "decode",
    "decode_for_display",
    "encode",
    # Models
    "EvaluationDetail",
    "EvaluationHeader",
    "EvaluationListItem",
    "EvaluationSummary",
    "Question",
    "ResponseDetail",
    "UserInfo",
    # Errors
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DatabaseError",
    "ErrorCode",
    "ErrorKind",
    "NotFoundError",
    "ServiceUnavailableError",
    "SurveyError",
    "ValidationError",
]
