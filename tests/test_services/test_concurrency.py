"""Concurrent counter updates against a file-backed database.

Each task uses its own session and connection, so these tests fail if a
counter is ever updated by reading it first and writing the result back.
"""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from qa_forum.database import Base
from qa_forum.models import Category, Question, User
from qa_forum.schemas.common import VoteDirection
from qa_forum.services.karma import KarmaReward, add_karma
from qa_forum.services.questions import vote_question
from qa_forum.services.users import get_user

CONCURRENT_CALLS = 20


@pytest.fixture
async def file_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """SQLite database on disk, one connection per session."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'forum.db'}",
        connect_args={"timeout": 30},
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def file_sessions(file_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(file_engine, class_=AsyncSession, expire_on_commit=False)


async def make_author(sessions: async_sessionmaker[AsyncSession], karma: int = 0) -> int:
    async with sessions() as session:
        user = User(username="author", hashed_password="unused", karma=karma)
        session.add(user)
        await session.commit()
        return user.id


async def make_question(sessions: async_sessionmaker[AsyncSession], author_id: int) -> int:
    async with sessions() as session:
        category = Category(name="Shell", slug="shell", icon="terminal", color="green")
        session.add(category)
        await session.flush()
        question = Question(
            title="How do I follow a log file?",
            content="I want to watch new lines appear in a log as they are written.",
            category_id=category.id,
            author_name="author",
            user_id=author_id,
        )
        session.add(question)
        await session.commit()
        return question.id


class TestConcurrentUpdates:
    """Tests that parallel requests never lose an update."""

    async def test_parallel_upvotes_all_count(
        self, file_sessions: async_sessionmaker[AsyncSession]
    ) -> None:
        author_id = await make_author(file_sessions)
        question_id = await make_question(file_sessions, author_id)

        async def upvote() -> None:
            async with file_sessions() as session:
                await vote_question(session, question_id, VoteDirection.UP)
                await session.commit()

        await asyncio.gather(*(upvote() for _ in range(CONCURRENT_CALLS)))

        async with file_sessions() as session:
            question = await session.get(Question, question_id)
            author = await get_user(session, author_id)
        assert question.votes == CONCURRENT_CALLS
        assert author.karma == CONCURRENT_CALLS * KarmaReward.QUESTION_UPVOTED

    async def test_parallel_karma_deltas_sum(
        self, file_sessions: async_sessionmaker[AsyncSession]
    ) -> None:
        """Mixed deltas that never reach zero add up exactly."""
        user_id = await make_author(file_sessions, karma=100)
        deltas = [10, -2] * (CONCURRENT_CALLS // 2)

        async def apply(delta: int) -> None:
            async with file_sessions() as session:
                await add_karma(session, user_id, delta)
                await session.commit()

        await asyncio.gather(*(apply(delta) for delta in deltas))

        async with file_sessions() as session:
            user = await get_user(session, user_id)
        assert user.karma == 100 + sum(deltas)

    async def test_parallel_penalties_clamp_at_zero(
        self, file_sessions: async_sessionmaker[AsyncSession]
    ) -> None:
        user_id = await make_author(file_sessions, karma=7)

        async def penalise() -> int:
            async with file_sessions() as session:
                karma = await add_karma(session, user_id, -2)
                await session.commit()
                return karma

        results = await asyncio.gather(*(penalise() for _ in range(CONCURRENT_CALLS)))

        async with file_sessions() as session:
            user = await get_user(session, user_id)
        assert user.karma == 0
        assert all(karma >= 0 for karma in results)
