"""FastAPI exception handlers for custom exceptions."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from core.exceptions import (
    AnnotationServiceError,
    ConfigurationError,
    NotFoundError,
    StorageError,
    ValidationError,
)


async def annotation_exception_handler(request: Request, exc: AnnotationServiceError) -> JSONResponse:
    """Handle annotation-service exceptions."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    # Map exception types to HTTP status codes
    if isinstance(exc, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (StorageError, ConfigurationError)):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    log = logger.warning if status_code < 500 else logger.error
    log(
        "{method} {path} -> {status}: {type} - {message}",
        method=request.method,
        path=request.url.path,
        status=status_code,
        type=type(exc).__name__,
        message=exc.message,
        details=exc.details,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed parameters or bodies are input errors (400)."""
    logger.warning("Invalid request to {path}: {errors}", path=request.url.path, errors=exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "ValidationError",
            "message": "Invalid request",
            "details": {"errors": [str(error.get("msg", "")) for error in exc.errors()]},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Surface unexpected failures as 500 with the error message."""
    logger.opt(exception=exc).error("Unhandled exception on {path}", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": type(exc).__name__,
            "message": str(exc),
        },
    )
