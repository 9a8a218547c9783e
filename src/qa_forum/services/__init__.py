"""Forum service layer: authentication, policy, karma and content operations."""

from qa_forum.services.base import (
    AuthenticationRequired,
    ConflictError,
    Forbidden,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFoundError,
    ServiceError,
    ValidationError,
)

__all__ = [
    "AuthenticationRequired",
    "ConflictError",
    "Forbidden",
    "InvalidCredentials",
    "InvalidOrExpiredToken",
    "NotFoundError",
    "ServiceError",
    "ValidationError",
]
