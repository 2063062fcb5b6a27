from __future__ import annotations

import logging
from typing import Any

from django.core.exceptions import PermissionDenied
from django.http import Http404
from django.utils import timezone
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ..exceptions import ServiceError

logger = logging.getLogger(__name__)


def envelope(success: bool, message: str, data: Any = None, errors: Any = None) -> dict[str, Any]:
    """Build the JSON body every endpoint returns."""

    body: dict[str, Any] = {
        "success": success,
        "message": message,
        "timestamp": timezone.now().isoformat(),
    }
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    return body


def success_response(message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> Response:
    return Response(envelope(True, message, data), status=status_code)


def error_response(message: str, status_code: int, errors: Any = None) -> Response:
    return Response(envelope(False, message, errors=errors), status=status_code)


def _validation_message(detail: Any) -> str:
    if isinstance(detail, dict):
        for value in detail.values():
            return _validation_message(value)
    if isinstance(detail, list) and detail:
        return _validation_message(detail[0])
    return str(detail) if detail else "Validation failed"


def envelope_exception_handler(exc, context):
    """Render service errors and DRF errors in the standard envelope."""

    if isinstance(exc, ServiceError):
        return error_response(exc.message, exc.status_code, exc.errors)
    if isinstance(exc, PermissionError):
        return error_response(str(exc) or "Access denied", status.HTTP_403_FORBIDDEN)
    if isinstance(exc, exceptions.ValidationError):
        return error_response(_validation_message(exc.detail), status.HTTP_400_BAD_REQUEST, exc.detail)

    response = exception_handler(exc, context)
    if response is None:
        logger.exception("Unhandled error in %s", context.get("view").__class__.__name__)
        return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, Http404):
        message = "Resource not found"
    elif isinstance(exc, PermissionDenied):
        message = "Access denied"
    elif isinstance(exc, exceptions.APIException):
        message = str(exc.detail)
    else:  # pragma: no cover - exception_handler only handles the types above
        message = "Request failed"
    response.data = envelope(False, message)
    return response
