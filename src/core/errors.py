"""
Domain errors and their HTTP rendering.

Every service raises one of these for an expected failure. Views let them
propagate; the DRF exception handler below turns them into
{"error": <code>, "message": <text>} responses.
"""

import logging
from contextlib import contextmanager

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class MemorialError(Exception):
    """Base class for expected, caller-renderable failures."""

    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class ValidationError(MemorialError):
    """Caller input violates a stated constraint."""

    code = "validation_error"

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = list(fields or [])

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.fields:
            data["fields"] = self.fields
        return data


class InvalidTransitionError(ValidationError):
    """Requested status change is not allowed from the current status."""

    code = "invalid_transition"
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(MemorialError):
    """Referenced entity does not exist (or is not visible to the caller)."""

    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class PersistenceError(MemorialError):
    """The storage layer failed; the caller decides whether to retry."""

    code = "persistence_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class PlaybackError(MemorialError):
    """The audio primitive refused to play, usually an autoplay block."""

    code = "playback_error"


class AuthenticationError(MemorialError):
    """Admin credentials or tokens were rejected."""

    code = "invalid_credentials"
    status_code = status.HTTP_401_UNAUTHORIZED


def require_object(data) -> dict:
    """Return a decoded request body, or raise if it is not a JSON object."""
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data


@contextmanager
def persistence_guard(action: str):
    """Convert database failures inside the block into PersistenceError."""
    try:
        yield
    except DatabaseError as e:
        logger.exception(f"Database failure while trying to {action}: {e}")
        raise PersistenceError(f"Could not {action}") from e


def exception_handler(exc, context):
    """DRF exception handler that knows about MemorialError."""
    if isinstance(exc, MemorialError):
        return Response(exc.to_dict(), status=exc.status_code)
    return drf_exception_handler(exc, context)
