"""Error taxonomy for the survey SDK.

Every failure the service can report is an operational ``SurveyError``
subclass carrying a machine-readable ``code``, an HTTP-style
``status_code``, and a coarse ``kind`` used by the submission coordinator:

    validation      — user-correctable input problem (400)
    authentication  — caller identity missing or bad credentials (401)
    authorization   — identity present but lacks rights (403)
    not_found       — referenced record absent (404)
    conflict        — duplicate record (409)
    store           — persistence or transport failure (5xx)

The server installs one exception handler for the whole hierarchy and
renders ``format_error_response()``; the HTTP client maps responses back
with ``error_from_response()``.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any


class ErrorCode(str, enum.Enum):
    """Stable error codes exposed in API error bodies."""

    # Authentication (1xxx)
    UNAUTHORIZED = "AUTH_1001"
    INVALID_CREDENTIALS = "AUTH_1002"
    TOKEN_EXPIRED = "AUTH_1003"
    INSUFFICIENT_PERMISSIONS = "AUTH_1004"

    # Validation (2xxx)
    VALIDATION_ERROR = "VAL_2001"
    INVALID_INPUT = "VAL_2002"
    MISSING_REQUIRED_FIELD = "VAL_2003"

    # Database (3xxx)
    DATABASE_ERROR = "DB_3001"
    RECORD_NOT_FOUND = "DB_3002"
    DUPLICATE_RECORD = "DB_3003"
    CONSTRAINT_VIOLATION = "DB_3004"

    # Business rules (4xxx)
    BUSINESS_RULE_VIOLATION = "BUS_4001"
    INVALID_OPERATION = "BUS_4002"

    # System (5xxx)
    INTERNAL_ERROR = "SYS_5001"
    SERVICE_UNAVAILABLE = "SYS_5002"
    EXTERNAL_SERVICE_ERROR = "SYS_5003"


class ErrorKind(str, enum.Enum):
    """Coarse outcome class; the discriminant of a submission failure."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORE = "store"


class SurveyError(Exception):
    """Base class for operational errors raised by the SDK."""

    kind: ErrorKind = ErrorKind.STORE
    default_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code) if code is not None else self.default_code
        self.context = context
        self.timestamp = datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class ValidationError(SurveyError):
    kind = ErrorKind.VALIDATION
    default_code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class AuthenticationError(SurveyError):
    kind = ErrorKind.AUTHENTICATION
    default_code = ErrorCode.UNAUTHORIZED
    status_code = 401

    def __init__(self, message: str = "Authentication required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class AuthorizationError(SurveyError):
    kind = ErrorKind.AUTHORIZATION
    default_code = ErrorCode.INSUFFICIENT_PERMISSIONS
    status_code = 403

    def __init__(self, message: str = "Insufficient permissions", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(SurveyError):
    """Raised with the resource name, e.g. ``NotFoundError("Evaluation")``."""

    kind = ErrorKind.NOT_FOUND
    default_code = ErrorCode.RECORD_NOT_FOUND
    status_code = 404

    def __init__(self, resource: str = "Resource", **kwargs: Any) -> None:
        super().__init__(f"{resource} not found", **kwargs)


class ConflictError(SurveyError):
    kind = ErrorKind.CONFLICT
    default_code = ErrorCode.DUPLICATE_RECORD
    status_code = 409


class DatabaseError(SurveyError):
    default_code = ErrorCode.DATABASE_ERROR

    def __init__(self, message: str = "Database operation failed", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ServiceUnavailableError(SurveyError):
    """The survey API could not be reached (connection refused, timeout)."""

    default_code = ErrorCode.SERVICE_UNAVAILABLE
    status_code = 503


# --- Status code → error class, used when decoding API error bodies ---
_STATUS_CLASSES: dict[int, type[SurveyError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
    503: ServiceUnavailableError,
}


def format_error_response(exc: Exception) -> dict[str, Any]:
    """Render an exception as the JSON error body used by every endpoint.

    Non-SDK exceptions are reported as a generic internal error; their
    message is never sent to the client.
    """
    if isinstance(exc, SurveyError):
        body: dict[str, Any] = {
            "code": exc.code.value,
            "message": exc.message,
            "timestamp": exc.timestamp.isoformat(),
        }
        if exc.context:
            body["context"] = exc.context
    else:
        body = {
            "code": ErrorCode.INTERNAL_ERROR.value,
            "message": "Internal server error",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    return {"success": False, "error": body}


def error_from_response(status_code: int, payload: Any) -> SurveyError:
    """Rebuild a ``SurveyError`` from an API error response.

    Tolerates bodies that are not in the ``format_error_response`` shape
    (e.g. a proxy's HTML error page) by falling back to a generic message.
    """
    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        error = {}
    message = error.get("message") or f"Request failed with status {status_code}"
    context = error.get("context")
    try:
        code = ErrorCode(error.get("code"))
    except ValueError:
        code = None

    cls = _STATUS_CLASSES.get(status_code, SurveyError)
    # NotFoundError formats its own message from a resource name.
    if cls is NotFoundError:
        exc: SurveyError = NotFoundError(code=code, context=context)
        exc.message = message
        exc.args = (message,)
    else:
        exc = cls(message, code=code, context=context)
    if cls is SurveyError:
        exc.status_code = status_code
    return exc
