"""Global exception handlers — map SDK exceptions to HTTP responses.

The SDK raises one ``SurveyError`` subclass per failure kind, each carrying
its HTTP status and error code.  Rather than catching these in every route,
we install global handlers so route handlers stay focused on the happy
path.  Every error body has the same shape::

    {"success": false, "error": {"code": "...", "message": "...", "timestamp": "..."}}
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from survey_core.errors import ErrorCode, ValidationError, SurveyError, format_error_response

logger = logging.getLogger(__name__)


async def survey_error_handler(request: Request, exc: SurveyError) -> JSONResponse:
    """Render an operational SDK error with its own status code."""
    logger.warning(
        "%s [%d %s] at %s: %s",
        type(exc).__name__, exc.status_code, exc.code.value, request.url.path, exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=format_error_response(exc))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map malformed request bodies/params to a 400 validation error.

    The individual messages are joined into one string, and the field
    locations are kept in ``context`` so clients can highlight inputs.
    """
    messages = []
    fields = []
    for err in exc.errors():
        msg = err.get("msg", "Invalid value")
        # Pydantic prefixes custom validator messages with "Value error, "
        messages.append(msg.removeprefix("Value error, "))
        fields.append(".".join(str(part) for part in err.get("loc", ()) if part != "body"))
    error = ValidationError(
        ", ".join(messages) or "Invalid request",
        code=ErrorCode.INVALID_INPUT,
        context={"fields": fields},
    )
    logger.warning("Request validation failed at %s: %s", request.url.path, error.message)
    return JSONResponse(status_code=400, content=format_error_response(error))


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url.path)
    body = format_error_response(exc)
    if request.app.state.settings.debug_errors:
        body["error"]["context"] = {"exception": type(exc).__name__, "detail": str(exc)}
    return JSONResponse(status_code=500, content=body)
