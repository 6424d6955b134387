"""
Exception handlers for FastAPI application.

Domain exceptions are translated here into HTTP status codes and the
{success: false, message, errors?} envelope.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from marketplace.api.responses import error_response
from marketplace.core.domain import (
    AuthorizationException,
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    InvalidOperationException,
    PaymentException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# Most specific first
DOMAIN_STATUS_CODES: tuple[tuple[type[DomainException], int], ...] = (
    (AuthorizationException, status.HTTP_403_FORBIDDEN),
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (BusinessRuleViolationException, status.HTTP_400_BAD_REQUEST),
    (InvalidOperationException, status.HTTP_400_BAD_REQUEST),
    (PaymentException, status.HTTP_400_BAD_REQUEST),
    (IntegrationException, status.HTTP_502_BAD_GATEWAY),
)


def _status_for(exc: DomainException) -> int:
    for exc_type, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _validation_errors(errors: list[dict]) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in errors
    ]


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle domain exceptions with the error envelope."""
    if not isinstance(exc, DomainException):
        return await global_exception_handler(request, exc)

    status_code = _status_for(exc)

    if isinstance(exc, AuthorizationException):
        logger.warning(f"Authorization denied on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status_code, content=error_response("Access forbidden"))

    if isinstance(exc, IntegrationException):
        logger.error(f"Integration failure ({exc.service}) on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    errors = None
    if isinstance(exc, ValidationException):
        errors = [{"field": exc.field, "message": exc.message, "type": "value_error"}]
    elif isinstance(exc, BusinessRuleViolationException):
        errors = [{"field": None, "message": exc.message, "type": exc.rule}]
    elif exc.code != "ENTITY_NOT_FOUND":
        errors = [{"field": None, "message": exc.message, "type": exc.code}]

    return JSONResponse(status_code=status_code, content=error_response(exc.message, errors))


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException with consistent response format."""
    http_exc = exc if isinstance(exc, HTTPException) else HTTPException(status_code=500, detail=str(exc))
    return JSONResponse(
        status_code=http_exc.status_code,
        content=error_response(str(http_exc.detail)),
        headers=http_exc.headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle request validation errors with field-level detail."""
    if not isinstance(exc, RequestValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_response(str(exc)))

    errors = _validation_errors(list(exc.errors()))
    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response("Validation error", errors),
    )


async def pydantic_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle Pydantic validation errors."""
    if not isinstance(exc, ValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_response(str(exc)))

    errors = _validation_errors(list(exc.errors()))
    logger.warning(f"Pydantic validation error: {errors}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response("Validation error", errors),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Logs the full exception with traceback and returns a safe error response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
