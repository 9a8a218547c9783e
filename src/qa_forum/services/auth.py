"""Registration, login sessions and password reset."""

import logging
from datetime import timedelta

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.config import get_settings
from qa_forum.database import utcnow
from qa_forum.models.user import PasswordResetToken, User, UserRole, UserSession
from qa_forum.schemas.user import UserCreate
from qa_forum.services.base import ConflictError, InvalidCredentials, InvalidOrExpiredToken
from qa_forum.utils.security import (
    generate_token,
    hash_password,
    verify_password,
    verify_password_dummy,
)

logger = logging.getLogger(__name__)


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(
        select(User)
        .where(User.username == username.lower())
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, data: UserCreate) -> User:
    """Create a member account with a bcrypt-hashed password.

    Raises:
        ConflictError: If the username is already taken
    """
    if await get_user_by_username(db, data.username):
        raise ConflictError("Username already taken")

    user = User(
        username=data.username,
        hashed_password=hash_password(data.password),
        display_name=data.display_name or data.username,
        email=data.email,
        role=UserRole.MEMBER,
        karma=0,
        created_at=utcnow(),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        raise ConflictError("Username already taken") from None
    await db.refresh(user)

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    """Check a username/password pair.

    An unknown username still costs one bcrypt comparison so both failure
    paths take the same work.

    Raises:
        InvalidCredentials: If the user is unknown or the password is wrong
    """
    user = await get_user_by_username(db, username)
    if user is None:
        verify_password_dummy(password)
        logger.warning("Failed login for unknown user %r", username)
        raise InvalidCredentials()

    if not verify_password(password, user.hashed_password):
        logger.warning("Failed login for user %s", user.username)
        raise InvalidCredentials()

    return user


async def create_session(db: AsyncSession, user_id: int) -> UserSession:
    """Open a session that expires a fixed number of days from now."""
    settings = get_settings()
    now = utcnow()
    session = UserSession(
        id=generate_token(),
        user_id=user_id,
        expires_at=now + timedelta(days=settings.session_expire_days),
        created_at=now,
    )
    db.add(session)
    await db.flush()
    return session


async def resolve_session(db: AsyncSession, session_id: str) -> User | None:
    """Return the user behind an unexpired session, or None."""
    query = (
        select(User)
        .join(UserSession, UserSession.user_id == User.id)
        .where(UserSession.id == session_id, UserSession.expires_at > utcnow())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def delete_session(db: AsyncSession, session_id: str) -> None:
    """Remove a session. Deleting an unknown session is not an error."""
    await db.execute(delete(UserSession).where(UserSession.id == session_id))


async def clean_expired_sessions(db: AsyncSession) -> int:
    """Delete every expired session and return how many were removed."""
    result = await db.execute(
        delete(UserSession)
        .where(UserSession.expires_at <= utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.info("Removed %d expired sessions", result.rowcount)
    return result.rowcount


async def request_password_reset(db: AsyncSession, username: str) -> str | None:
    """Issue a single-use reset token for a user.

    Returns:
        The token, or None when no such user exists. Callers must answer
        the same way in both cases.
    """
    user = await get_user_by_username(db, username)
    if user is None:
        logger.info("Password reset requested for unknown user %r", username)
        return None

    settings = get_settings()
    now = utcnow()
    reset = PasswordResetToken(
        user_id=user.id,
        token=generate_token(),
        expires_at=now + timedelta(minutes=settings.password_reset_expire_minutes),
        created_at=now,
    )
    db.add(reset)
    await db.flush()

    logger.info("Password reset token issued for user %s", user.username)
    return reset.token


async def consume_password_reset(db: AsyncSession, token: str, new_password: str) -> None:
    """Use a reset token to set a new password.

    The token is claimed with a single conditional UPDATE, so of two
    concurrent uses only one can succeed. The password change shares the
    caller's transaction with the claim.

    Raises:
        InvalidOrExpiredToken: If the token is unknown, expired or used
    """
    now = utcnow()
    claim = (
        update(PasswordResetToken)
        .where(
            PasswordResetToken.token == token,
            PasswordResetToken.used_at.is_(None),
            PasswordResetToken.expires_at > now,
        )
        .values(used_at=now)
        .returning(PasswordResetToken.user_id)
        .execution_options(synchronize_session=False)
    )
    user_id = (await db.execute(claim)).scalar_one_or_none()
    if user_id is None:
        raise InvalidOrExpiredToken()

    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(hashed_password=hash_password(new_password))
        .execution_options(synchronize_session=False)
    )
    logger.info("Password reset completed for user id=%s", user_id)


async def update_email(db: AsyncSession, user: User, email: str) -> User:
    """Change the user's own email address."""
    user.email = email
    await db.flush()
    return user
