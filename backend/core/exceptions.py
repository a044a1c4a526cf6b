"""
Domain errors shared by the booking engine and the review gate, plus the
DRF exception handler that renders them.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(APIException):
    """Base class for business-rule failures; always carries a readable message."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "domain_error"


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "validation_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class AuthorizationError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action."
    default_code = "forbidden"


class UnavailableError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Car is not available."
    default_code = "unavailable"


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource conflict."
    default_code = "conflict"


class InvalidStateError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operation not allowed in the current state."
    default_code = "invalid_state"


def _view_name(context) -> str:
    view = context.get("view")
    return type(view).__name__ if view is not None else "unknown view"


def api_exception_handler(exc, context):
    """
    Render domain errors as {"detail", "code"} and hide unexpected failures
    behind a generic 500.
    """
    response = exception_handler(exc, context)

    if response is None:
        logger.error(
            "api: unhandled exception in %s",
            _view_name(context),
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return Response(
            {"detail": "Internal server error."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, DomainError):
        logger.info(
            "api: %s rejected with %s: %s",
            _view_name(context),
            exc.default_code,
            exc.detail,
        )
        response.data = {"detail": str(exc.detail), "code": exc.default_code}

    return response
