"""Domain error taxonomy.

Services and storage adapters raise these; ``main.py`` maps each one to its
HTTP status and a ``{"message": ...}`` body. Request bodies rejected by
pydantic take the same 400 path through the ``RequestValidationError``
handler.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that are surfaced to the client as-is."""

    status_code: int = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or too-short input."""

    status_code = 400
    default_message = "Invalid request data"


class AuthenticationError(AppError):
    """Bad credentials or missing/expired session."""

    status_code = 401
    default_message = "Authentication required"


class NotFoundError(AppError):
    """Missing resource, or one the caller does not own."""

    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Duplicate username or email at registration."""

    status_code = 400
    default_message = "Username already exists"
