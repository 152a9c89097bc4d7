"""Translate service exceptions into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from reveal.schemas.common import ErrorResponse
from reveal.services.errors import (
    AlreadyFlaggedError,
    InvalidArgumentError,
    NotFoundError,
    RateLimitedError,
    RevealError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses come before their parents.
_STATUS_BY_ERROR: tuple[tuple[type[RevealError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (RateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
    (AlreadyFlaggedError, status.HTTP_409_CONFLICT),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
)

# OpenAPI documentation for the JSON bodies produced by the handlers below.
ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    status_code: {"model": ErrorResponse} for _, status_code in _STATUS_BY_ERROR
}
ERROR_RESPONSES[status.HTTP_500_INTERNAL_SERVER_ERROR] = {"model": ErrorResponse}


def status_for(error: RevealError) -> int:
    """Return the HTTP status code for a service error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def reveal_error_handler(request: Request, exc: RevealError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(exc),
        content=ErrorResponse(error=exc.message).model_dump(),
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        "Storage failure on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal storage error").model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for expected failures and storage errors."""
    app.add_exception_handler(RevealError, reveal_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
