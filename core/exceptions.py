"""Domain errors raised by the service layer and rendered by the API layer."""

from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    """A business rule rejected the request."""

    status_code = 400

    def __init__(self, message: str, *, status_code: int | None = None, errors: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.errors = errors


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class ExternalServiceError(ServiceError):
    """An upstream HTTP collaborator failed or answered with an error."""

    status_code = 502
