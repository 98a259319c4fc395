#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class JobNotFoundException(ServiceException):
    """Raised when a job posting is not found."""
    pass


class SwipeSessionNotFoundException(ServiceException):
    """Raised when a swipe session id is unknown."""
    pass


class SummaryNotFoundException(ServiceException):
    """Raised when a user has no stored preference summary."""
    pass


class InvalidRequestException(ServiceException):
    """Raised when request values are invalid."""
    pass


class PermissionDeniedException(ServiceException):
    """Raised when a caller may not modify a resource."""
    pass


class LedgerUnavailableException(ServiceException):
    """Raised when the preference store could not be read or written."""
    pass


class SummaryFailedException(ServiceException):
    """Raised when a preference summary could not be generated."""
    pass


_STATUS_CODES = (
    ((JobNotFoundException, SwipeSessionNotFoundException, SummaryNotFoundException), 404),
    ((InvalidRequestException,), 400),
    ((PermissionDeniedException,), 403),
    ((SummaryFailedException,), 502),
    ((LedgerUnavailableException,), 503),
)


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = 500
    for exc_types, code in _STATUS_CODES:
        if isinstance(exc, exc_types):
            status_code = code
            break

    if status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}")
    else:
        logger.info(f"Request to {request.url.path} rejected: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.

    Args:
        request: The FastAPI request.
        exc: The HTTP exception.

    Returns:
        JSONResponse with error details.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.

    Args:
        request: The FastAPI request.
        exc: The exception.

    Returns:
        JSONResponse with error details.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
