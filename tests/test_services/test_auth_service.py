"""Tests for sessions and password reset in the auth service."""

from datetime import timedelta

import pytest
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.database import utcnow
from qa_forum.models.user import PasswordResetToken, UserSession
from qa_forum.schemas.user import UserCreate
from qa_forum.services import auth as auth_service
from qa_forum.services.base import ConflictError, InvalidCredentials, InvalidOrExpiredToken


async def register(db: AsyncSession, username: str = "alice", password: str = "hunter22"):
    return await auth_service.register_user(
        db, UserCreate(username=username, password=password)
    )


class TestSessions:
    """Tests for session lifetime."""

    async def test_resolve_live_session(self, db_session: AsyncSession) -> None:
        user = await register(db_session)
        session = await auth_service.create_session(db_session, user.id)

        resolved = await auth_service.resolve_session(db_session, session.id)

        assert resolved is not None
        assert resolved.id == user.id

    async def test_expired_session_resolves_to_none(self, db_session: AsyncSession) -> None:
        user = await register(db_session)
        session = await auth_service.create_session(db_session, user.id)
        await db_session.execute(
            update(UserSession)
            .where(UserSession.id == session.id)
            .values(expires_at=utcnow() - timedelta(seconds=1))
        )

        assert await auth_service.resolve_session(db_session, session.id) is None

    async def test_clean_expired_sessions(self, db_session: AsyncSession) -> None:
        user = await register(db_session)
        live = await auth_service.create_session(db_session, user.id)
        stale = await auth_service.create_session(db_session, user.id)
        await db_session.execute(
            update(UserSession)
            .where(UserSession.id == stale.id)
            .values(expires_at=utcnow() - timedelta(days=1))
        )

        removed = await auth_service.clean_expired_sessions(db_session)

        assert removed == 1
        remaining = (await db_session.execute(select(UserSession.id))).scalars().all()
        assert remaining == [live.id]

    async def test_session_ids_are_unique(self, db_session: AsyncSession) -> None:
        user = await register(db_session)
        ids = {(await auth_service.create_session(db_session, user.id)).id for _ in range(5)}
        assert len(ids) == 5


class TestCredentials:
    """Tests for registration and authentication."""

    async def test_duplicate_username(self, db_session: AsyncSession) -> None:
        await register(db_session)
        with pytest.raises(ConflictError):
            await register(db_session)

    async def test_password_is_hashed(self, db_session: AsyncSession) -> None:
        user = await register(db_session)
        assert user.hashed_password != "hunter22"
        assert user.hashed_password.startswith("$2")

    async def test_authenticate(self, db_session: AsyncSession) -> None:
        user = await register(db_session)
        assert (await auth_service.authenticate(db_session, "ALICE", "hunter22")).id == user.id

        with pytest.raises(InvalidCredentials):
            await auth_service.authenticate(db_session, "alice", "wrong-pass")
        with pytest.raises(InvalidCredentials):
            await auth_service.authenticate(db_session, "ghost", "hunter22")


class TestPasswordReset:
    """Tests for reset tokens."""

    async def test_unknown_user_gets_no_token(self, db_session: AsyncSession) -> None:
        assert await auth_service.request_password_reset(db_session, "ghost") is None

    async def test_token_is_single_use(self, db_session: AsyncSession) -> None:
        await register(db_session)
        token = await auth_service.request_password_reset(db_session, "alice")
        assert token

        await auth_service.consume_password_reset(db_session, token, "brandnew1")
        user = await auth_service.authenticate(db_session, "alice", "brandnew1")
        assert user.username == "alice"

        with pytest.raises(InvalidOrExpiredToken):
            await auth_service.consume_password_reset(db_session, token, "another1")

    async def test_expired_token(self, db_session: AsyncSession) -> None:
        await register(db_session)
        token = await auth_service.request_password_reset(db_session, "alice")
        await db_session.execute(
            update(PasswordResetToken)
            .where(PasswordResetToken.token == token)
            .values(expires_at=utcnow() - timedelta(seconds=1))
        )

        with pytest.raises(InvalidOrExpiredToken):
            await auth_service.consume_password_reset(db_session, token, "brandnew1")
