"""Security utilities for password hashing and opaque token generation."""

import secrets
from functools import lru_cache

import bcrypt

from qa_forum.config import get_settings

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password.

    A password longer than MAX_PASSWORD_BYTES never matches, since no stored
    hash can have been made from it. The bcrypt comparison still runs.
    """
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    if len(password_bytes) > MAX_PASSWORD_BYTES:
        bcrypt.checkpw(password_bytes[:MAX_PASSWORD_BYTES], hashed_bytes)
        return False
    return bcrypt.checkpw(password_bytes, hashed_bytes)


@lru_cache
def _dummy_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def verify_password_dummy(plain_password: str) -> bool:
    """Spend the same bcrypt work as a real check when there is no user.

    Always returns False.
    """
    verify_password(plain_password, _dummy_hash())
    return False


def generate_token() -> str:
    """Create an opaque, URL-safe identifier for sessions and reset links."""
    return secrets.token_urlsafe(32)
