"""Error types raised by the service layer.

Services raise these and never build HTTP responses themselves; the
application maps each one to its ``status_code`` in ``qa_forum.main``.
"""

from typing import Any


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


class ValidationError(ServiceError):
    """Raised when input is malformed or references something invalid."""

    def __init__(self, message: str = "Invalid data", errors: list[dict[str, Any]] | None = None):
        super().__init__(message, status_code=400)
        self.errors = errors or []


class AuthenticationRequired(ServiceError):
    """Raised when an operation needs a logged-in user and there is none."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class InvalidCredentials(ServiceError):
    """Raised when a username/password pair does not match."""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message, status_code=401)


class Forbidden(ServiceError):
    """Raised when the actor's role or ownership does not allow an action."""

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, status_code=403)


class NotFoundError(ServiceError):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ConflictError(ServiceError):
    """Raised when a unique value is already taken."""

    def __init__(self, message: str = "Resource already exists"):
        super().__init__(message, status_code=409)


class InvalidOrExpiredToken(ServiceError):
    """Raised when a password reset token is unknown, expired or used."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, status_code=400)
