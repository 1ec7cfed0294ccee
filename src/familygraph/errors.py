# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

"""Domain exceptions and their HTTP rendering.

Services raise these; the handlers registered by :func:`install_error_handlers`
turn them into ``{"error": ..., "details": ...}`` JSON bodies.
"""

from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)


class FamilyGraphError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(FamilyGraphError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationRequired(FamilyGraphError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated", details: Any = None) -> None:
        super().__init__(message, details)


class AuthorizationDenied(FamilyGraphError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(
        self, message: str = "Administrator access required", details: Any = None
    ) -> None:
        super().__init__(message, details)


class NotFound(FamilyGraphError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(FamilyGraphError):
    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamUnavailable(FamilyGraphError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class IdentifierSpaceExhausted(UpstreamUnavailable):
    """No free six-digit identifier was found within the probe budget."""


class ApplyFailure(FamilyGraphError):
    """Approving a proposal failed while mutating the graph."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details not in (None, "", [], {}):
        body["details"] = details
    return body


async def _handle_domain_error(request: Request, error: Exception) -> JSONResponse:
    exc = cast(FamilyGraphError, error)
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s (%s)",
            request.method,
            request.url.path,
            exc.message,
            exc.details,
        )
    else:
        logger.info("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.message, exc.details)),
    )


async def _handle_request_validation(request: Request, exc: Exception) -> JSONResponse:
    errors = cast(RequestValidationError, exc).errors()
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(error_body("Invalid request", errors)),
    )


async def _handle_database_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    if isinstance(exc, (OperationalError, InterfaceError)):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=error_body("Database unavailable", str(exc.orig or exc)),
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Database error", str(exc)),
    )


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", type(exc).__name__),
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FamilyGraphError, _handle_domain_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(SQLAlchemyError, _handle_database_error)
    app.add_exception_handler(Exception, _handle_unexpected)
