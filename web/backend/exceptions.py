#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the web application.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.matching.errors import (
    AlreadyLiked,
    InvalidInput,
    MatchingError,
    NotFound,
    TransientStoreFailure,
)

logger = logging.getLogger(__name__)

MATCHING_STATUS_CODES = {
    NotFound: 404,
    AlreadyLiked: 409,
    InvalidInput: 400,
    TransientStoreFailure: 503,
}


def _error_body(error: str, error_type: str) -> dict:
    return {
        "success": False,
        "error": error,
        "type": error_type
    }


def status_code_for(exc: MatchingError) -> int:
    for error_type, status_code in MATCHING_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


async def matching_exception_handler(
    request: Request,
    exc: MatchingError
) -> JSONResponse:
    """
    Map matching engine errors to HTTP statuses.

    Args:
        request: The FastAPI request.
        exc: The matching error.

    Returns:
        JSONResponse with error details.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Matching error in {request.url.path}: {exc}")
    else:
        logger.info(f"Rejected request to {request.url.path}: {exc}")

    headers = {"Retry-After": "1"} if isinstance(exc, TransientStoreFailure) else None
    return JSONResponse(
        status_code=status_code,
        content=_error_body(str(exc), exc.__class__.__name__),
        headers=headers
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, "HTTPException")
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions.
    """
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", "InternalError")
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(MatchingError, matching_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
