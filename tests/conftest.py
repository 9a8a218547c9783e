"""Pytest fixtures and configuration."""

import os
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing the app
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SESSION_COOKIE_SECURE", "false")
os.environ.setdefault("EXPOSE_RESET_TOKEN", "true")

from qa_forum.database import Base, get_db
from qa_forum.main import app
from qa_forum.models import Category, User, UserRole

DEFAULT_PASSWORD = "hunter22"


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite engine with every table created.

    StaticPool keeps a single connection so all sessions see the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing FastAPI endpoints against the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def category(session_factory: async_sessionmaker[AsyncSession]) -> Category:
    """A single category to post questions in."""
    async with session_factory() as session:
        category = Category(
            name="Linux Basics",
            slug="linux-basics",
            description="Getting started",
            icon="terminal",
            color="green",
        )
        session.add(category)
        await session.commit()
        return category


@pytest.fixture
async def other_category(session_factory: async_sessionmaker[AsyncSession]) -> Category:
    async with session_factory() as session:
        category = Category(name="Networking", slug="networking", icon="wifi", color="blue")
        session.add(category)
        await session.commit()
        return category


async def register(
    client: AsyncClient, username: str, password: str = DEFAULT_PASSWORD, **extra: str
) -> dict:
    """Register a user through the API. The client is signed in as them afterwards."""
    response = await client.post(
        "/api/auth/register",
        json={"username": username, "password": password, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def login(client: AsyncClient, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Sign the client in as an existing user."""
    response = await client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()


async def set_role(
    session_factory: async_sessionmaker[AsyncSession], user_id: int, role: UserRole
) -> None:
    """Change a user's role directly in the database."""
    async with session_factory() as session:
        await session.execute(update(User).where(User.id == user_id).values(role=role))
        await session.commit()


async def ask(client: AsyncClient, category_id: int, title: str = "How do I list files?", **extra) -> dict:
    """Ask a question as the signed-in user."""
    payload = {
        "title": title,
        "content": "I am new to the shell and want to see what is in a directory.",
        "category_id": category_id,
        **extra,
    }
    response = await client.post("/api/questions", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def answer(client: AsyncClient, question_id: int, content: str = "Use ls -la to see everything.") -> dict:
    """Answer a question as the signed-in user."""
    response = await client.post(
        f"/api/questions/{question_id}/answers", json={"content": content}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def make_user(
    db: AsyncSession, username: str, role: UserRole = UserRole.MEMBER, karma: int = 0
) -> User:
    """Insert a user directly, bypassing password hashing."""
    user = User(
        username=username,
        hashed_password="not-a-real-hash",
        display_name=username.title(),
        role=role,
        karma=karma,
    )
    db.add(user)
    await db.flush()
    return user
