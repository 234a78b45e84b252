"""Error taxonomy for the registries and the access layer.

Registries raise these; they never log or swallow them. The access layer
turns them into a failed ServiceResult carrying the HTTP status an HTTP
adapter would answer with.

Ownership failures are reported as :class:`NotFoundError`, never as a
permission error, so other users' data cannot be probed.
"""

from __future__ import annotations


class TaskTrackError(Exception):
    """Base class for all domain errors."""

    status = 500
    default_code = "ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ValidationError(TaskTrackError):
    """Malformed input: empty strings, bad usernames, bad priorities."""

    status = 400
    default_code = "INVALID_INPUT"


class AuthenticationError(TaskTrackError):
    """Missing, unknown or expired session, or bad credentials."""

    status = 401
    default_code = "UNAUTHORIZED"


class NotFoundError(TaskTrackError):
    """Entity does not exist or is not owned by the acting user."""

    status = 404
    default_code = "NOT_FOUND"


class ConflictError(TaskTrackError):
    """Uniqueness violation: username, todo title or task description."""

    status = 409
    default_code = "CONFLICT"


def http_status(error: Exception) -> int:
    """HTTP status code an adapter should answer *error* with."""
    if isinstance(error, TaskTrackError):
        return error.status
    return 500
