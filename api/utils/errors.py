"""
Error Handlers

Maps burner exceptions to consistent JSON error responses.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

from burner.errors import (
    BurnerError,
    JobNotFoundError,
    JobNotReadyError,
    JobValidationError,
)

logger = logging.getLogger(__name__)


# Error Response Helper
def create_error_response(
    error_code: str, message: str, remediation: str = None, details: dict = None
) -> dict:
    """
    Create standardized error response.

    Args:
        error_code: Machine-readable error code
        message: Human-readable error message
        remediation: Suggested fix (optional)
        details: Additional error details (optional)

    Returns:
        Standardized error response dict
    """
    response = {"error": error_code, "message": message}

    if remediation:
        response["remediation"] = remediation

    if details:
        response["details"] = details

    return response


# FastAPI Exception Handlers
async def job_validation_error_handler(
    request: Request, exc: JobValidationError
) -> JSONResponse:
    """Handle submissions rejected before a job is created"""
    logger.warning(f"Job validation error: {exc.message}", extra={"metadata": exc.details})

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=create_error_response(
            error_code="validation_error",
            message=exc.message,
            remediation="Provide a source URL and a non-empty transcript of timed words",
            details=exc.details,
        ),
    )


async def job_not_found_error_handler(
    request: Request, exc: JobNotFoundError
) -> JSONResponse:
    """Handle unknown or expired job ids"""
    logger.info(f"Job not found: {exc.job_id}")

    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=create_error_response(
            error_code="job_not_found",
            message=exc.message,
            remediation="Jobs are removed an hour after creation; submit the job again",
            details=exc.details,
        ),
    )


async def job_not_ready_error_handler(
    request: Request, exc: JobNotReadyError
) -> JSONResponse:
    """Handle result requests for jobs that have not completed"""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=create_error_response(
            error_code="job_not_ready",
            message=exc.message,
            remediation="Poll the job status until it reports completed",
            details=exc.details,
        ),
    )


async def burner_error_handler(request: Request, exc: BurnerError) -> JSONResponse:
    """Handle any other burner error surfacing in a request"""
    logger.error(f"Burner error: {exc.message}", extra={"metadata": exc.details})

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_error_response(
            error_code="burner_error",
            message=exc.message,
            details=exc.details,
        ),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error: {exc.errors()}")

    # Extract field-level errors
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append({"field": field, "message": error["msg"], "type": error["type"]})

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=create_error_response(
            error_code="validation_error",
            message="Request validation failed",
            remediation="Please check the request parameters and try again",
            details={"errors": errors},
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    logger.exception("Unexpected error occurred", exc_info=exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_error_response(
            error_code="internal_server_error",
            message="An unexpected error occurred",
            remediation="Please try again. If the problem persists, contact support.",
        ),
    )


# Register all exception handlers
def register_exception_handlers(app):
    """
    Register all custom exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(JobValidationError, job_validation_error_handler)
    app.add_exception_handler(JobNotFoundError, job_not_found_error_handler)
    app.add_exception_handler(JobNotReadyError, job_not_ready_error_handler)
    app.add_exception_handler(BurnerError, burner_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
