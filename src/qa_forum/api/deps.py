"""Request dependencies: the session cookie, the current user and the actor."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.config import get_settings
from qa_forum.database import get_db
from qa_forum.models.user import User
from qa_forum.services.auth import resolve_session
from qa_forum.services.base import AuthenticationRequired
from qa_forum.services.policy import Actor, ensure_can_manage_users, ensure_can_moderate

settings = get_settings()

# Opaque session id carried in an HTTP-only cookie
session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)


async def get_optional_user(
    session_id: Annotated[str | None, Depends(session_cookie)],
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """Resolve the session cookie to a user, or None if absent or expired."""
    if not session_id:
        return None
    return await resolve_session(db, session_id)


async def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> User:
    """Require a signed-in user.

    Raises:
        AuthenticationRequired: If there is no valid session
    """
    if user is None:
        raise AuthenticationRequired()
    return user


async def get_current_actor(
    user: Annotated[User, Depends(get_current_user)],
) -> Actor:
    return Actor.from_user(user)


async def get_moderator(actor: Annotated[Actor, Depends(get_current_actor)]) -> Actor:
    """Require a moderator, admin or owner."""
    ensure_can_moderate(actor)
    return actor


async def get_user_manager(actor: Annotated[Actor, Depends(get_current_actor)]) -> Actor:
    """Require an admin or owner."""
    ensure_can_manage_users(actor)
    return actor


# Type aliases for use in route dependencies
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentActor = Annotated[Actor, Depends(get_current_actor)]
ModeratorActor = Annotated[Actor, Depends(get_moderator)]
AdminActor = Annotated[Actor, Depends(get_user_manager)]
