"""
Error Handling Utilities
Scorecard exception types, sanitized error messages and consistent error responses.
"""

import logging
from enum import Enum
from typing import Optional

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ScorecardError(Exception):
    """Base class for errors raised by the scoring engine and its collaborators."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ScorecardIntegrityError(ScorecardError):
    """
    Structural impossibility in the engine's inputs.

    Raised for upstream data-integrity bugs that must not be silently
    resolved, e.g. two records tied for a business's most recent month,
    or a section with a nonzero score and a zero maximum.
    """


class AnalysisGenerationError(ScorecardError):
    """The text-generation service call failed."""


class AnalysisValidationError(ScorecardError):
    """The text-generation service returned a response of the wrong shape."""


class ErrorCode(str, Enum):
    """Error codes for frontend handling."""

    # Scoring errors
    DATA_INTEGRITY_ERROR = "data_integrity_error"

    # Analysis (text-generation) errors
    ANALYSIS_GENERATION_FAILED = "analysis_generation_failed"
    ANALYSIS_INVALID_RESPONSE = "analysis_invalid_response"

    # Access errors
    FORBIDDEN = "forbidden"

    # General errors
    INTERNAL_ERROR = "internal_error"
    SERVICE_UNAVAILABLE = "service_unavailable"


# User-friendly error messages
ERROR_MESSAGES = {
    ErrorCode.DATA_INTEGRITY_ERROR: "Scorecard data is inconsistent and could not be scored. Please contact support.",
    ErrorCode.ANALYSIS_GENERATION_FAILED: "Unable to generate analysis at this time. Scores are unaffected; please try again later.",
    ErrorCode.ANALYSIS_INVALID_RESPONSE: "Analysis response had unexpected format. Please try generating again.",
    ErrorCode.FORBIDDEN: "You do not have access to this information.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again later.",
    ErrorCode.SERVICE_UNAVAILABLE: "Service temporarily unavailable. Please try again in a moment.",
}


def sanitize_error_message(
    exception: Exception,
    error_code: ErrorCode,
    log_details: bool = True,
) -> str:
    """
    Sanitize error message for user-facing responses.

    Logs full exception details internally but returns user-friendly message.

    Args:
        exception: The exception that occurred
        error_code: Error code for categorization
        log_details: Whether to log full exception details

    Returns:
        User-friendly error message
    """
    if log_details:
        logger.error(
            "Error [%s]: %s",
            error_code.value,
            str(exception),
            exc_info=exception,
        )

    return ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.INTERNAL_ERROR])


def get_error_code_for_exception(exception: Exception) -> tuple[ErrorCode, int]:
    """
    Map exception types to error codes and HTTP status codes.

    Args:
        exception: The exception that occurred

    Returns:
        Tuple of (error_code, http_status_code)
    """
    if isinstance(exception, ScorecardIntegrityError):
        return ErrorCode.DATA_INTEGRITY_ERROR, status.HTTP_409_CONFLICT

    if isinstance(exception, AnalysisValidationError):
        return ErrorCode.ANALYSIS_INVALID_RESPONSE, status.HTTP_502_BAD_GATEWAY

    if isinstance(exception, AnalysisGenerationError):
        return ErrorCode.ANALYSIS_GENERATION_FAILED, status.HTTP_502_BAD_GATEWAY

    # Default to internal error
    return ErrorCode.INTERNAL_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR


async def global_exception_handler(_request, exc: ScorecardError) -> JSONResponse:
    """
    Exception handler for FastAPI, registered for ScorecardError.

    Logs the full error and returns a sanitized response with its error code.
    """
    error_code, http_status = get_error_code_for_exception(exc)
    message = sanitize_error_message(exc, error_code)

    return JSONResponse(
        status_code=http_status,
        content={
            "error_code": error_code.value,
            "message": message,
        },
    )


def create_error_response(
    error_code: ErrorCode,
    message: Optional[str] = None,
    http_status: Optional[int] = None,
) -> HTTPException:
    """
    Create a standardized HTTPException with error code.

    Args:
        error_code: Error code enum
        message: Optional custom message (uses default if not provided)
        http_status: Optional HTTP status code (uses default if not provided)

    Returns:
        HTTPException with standardized format
    """
    if message is None:
        message = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.INTERNAL_ERROR])

    if http_status is None:
        # Default status codes by error type
        if error_code == ErrorCode.FORBIDDEN:
            http_status = status.HTTP_403_FORBIDDEN
        elif error_code == ErrorCode.DATA_INTEGRITY_ERROR:
            http_status = status.HTTP_409_CONFLICT
        elif error_code in [
            ErrorCode.ANALYSIS_GENERATION_FAILED,
            ErrorCode.ANALYSIS_INVALID_RESPONSE,
            ErrorCode.SERVICE_UNAVAILABLE,
        ]:
            http_status = status.HTTP_502_BAD_GATEWAY
        else:
            http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    return HTTPException(
        status_code=http_status,
        detail={
            "error_code": error_code.value,
            "message": message,
        },
    )
