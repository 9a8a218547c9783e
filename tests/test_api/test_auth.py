"""Tests for authentication API endpoints."""

from datetime import timedelta

from httpx import AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from qa_forum.config import get_settings
from qa_forum.database import utcnow
from qa_forum.models.user import PasswordResetToken
from tests.conftest import DEFAULT_PASSWORD, login, register


class TestRegister:
    """Tests for user registration endpoint."""

    async def test_register_success(self, client: AsyncClient) -> None:
        """Registering creates a member with zero karma and signs them in."""
        response = await client.post(
            "/api/auth/register",
            json={
                "username": "NewUser",
                "password": "securepassword123",
                "display_name": "New User",
                "email": "new@example.com",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newuser"
        assert data["display_name"] == "New User"
        assert data["email"] == "new@example.com"
        assert data["role"] == "member"
        assert data["karma"] == 0
        # Password should NOT be in response
        assert "password" not in data
        assert "hashed_password" not in data

        cookie_name = get_settings().session_cookie_name
        assert cookie_name in response.cookies
        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "samesite=strict" in set_cookie

        me = await client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["username"] == "newuser"

    async def test_register_display_name_defaults_to_username(self, client: AsyncClient) -> None:
        data = await register(client, "plainuser")
        assert data["display_name"] == "plainuser"

    async def test_register_username_already_exists(self, client: AsyncClient) -> None:
        """Test registration with existing username."""
        await register(client, "taken")

        response = await client.post(
            "/api/auth/register", json={"username": "TAKEN", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "Username already taken"

    async def test_register_invalid_username(self, client: AsyncClient) -> None:
        """Test registration with invalid username characters."""
        response = await client.post(
            "/api/auth/register",
            json={"username": "bad user!", "password": DEFAULT_PASSWORD},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["detail"] == "Invalid data"
        assert data["errors"]

    async def test_register_username_too_short(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register", json={"username": "ab", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 400

    async def test_register_password_too_short(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register", json={"username": "shorty", "password": "12345"}
        )
        assert response.status_code == 400

    async def test_register_password_too_many_bytes(self, client: AsyncClient) -> None:
        """Passwords longer than 72 bytes are rejected, not silently truncated."""
        response = await client.post(
            "/api/auth/register", json={"username": "multibyte", "password": "é" * 40}
        )
        assert response.status_code == 400

    async def test_register_invalid_email(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/register",
            json={"username": "mailer", "password": DEFAULT_PASSWORD, "email": "not-an-email"},
        )
        assert response.status_code == 400


class TestLogin:
    """Tests for user login endpoint."""

    async def test_login_success(self, client: AsyncClient) -> None:
        await register(client, "alice")
        await client.post("/api/auth/logout")

        response = await client.post(
            "/api/auth/login", json={"username": "alice", "password": DEFAULT_PASSWORD}
        )

        assert response.status_code == 200
        assert response.json()["username"] == "alice"
        assert get_settings().session_cookie_name in response.cookies

    async def test_login_is_case_insensitive_on_username(self, client: AsyncClient) -> None:
        await register(client, "alice")
        response = await client.post(
            "/api/auth/login", json={"username": "ALICE", "password": DEFAULT_PASSWORD}
        )
        assert response.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient) -> None:
        """Test login with wrong password."""
        await register(client, "alice")
        await client.post("/api/auth/logout")

        response = await client.post(
            "/api/auth/login", json={"username": "alice", "password": "wrongpassword"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_login_unknown_user_same_error(self, client: AsyncClient) -> None:
        """An unknown username fails exactly like a wrong password."""
        response = await client.post(
            "/api/auth/login", json={"username": "nobody", "password": "whatever1"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_login_overlong_password_known_user(self, client: AsyncClient) -> None:
        """A password past bcrypt's 72-byte limit is a wrong password, not a server error."""
        await register(client, "alice")
        await client.post("/api/auth/logout")

        response = await client.post(
            "/api/auth/login", json={"username": "alice", "password": "x" * 100}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_login_overlong_password_unknown_user(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/login", json={"username": "nobody", "password": "é" * 50}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password"

    async def test_login_overlong_password_with_valid_prefix(self, client: AsyncClient) -> None:
        """Bytes past the limit are not ignored: a correct prefix plus more does not log in."""
        password = "p" * 72
        await register(client, "alice", password=password)
        await client.post("/api/auth/logout")

        response = await client.post(
            "/api/auth/login", json={"username": "alice", "password": password + "extra"}
        )

        assert response.status_code == 401


class TestSession:
    """Tests for /me and logout."""

    async def test_me_without_session(self, client: AsyncClient) -> None:
        """Test that /me requires authentication."""
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    async def test_me_with_unknown_session(self, client: AsyncClient) -> None:
        client.cookies.set(get_settings().session_cookie_name, "forged-session-id")
        response = await client.get("/api/auth/me")
        assert response.status_code == 401

    async def test_logout_ends_session(self, client: AsyncClient) -> None:
        await register(client, "alice")
        session_id = client.cookies.get(get_settings().session_cookie_name)

        response = await client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json()["success"] is True

        # Replaying the old cookie no longer works
        client.cookies.set(get_settings().session_cookie_name, session_id)
        me = await client.get("/api/auth/me")
        assert me.status_code == 401

    async def test_logout_without_session(self, client: AsyncClient) -> None:
        response = await client.post("/api/auth/logout")
        assert response.status_code == 200


class TestPasswordReset:
    """Tests for the password reset flow."""

    async def test_reset_flow(self, client: AsyncClient) -> None:
        """A reset token sets a new password and works exactly once."""
        await register(client, "alice")
        await client.post("/api/auth/logout")

        response = await client.post("/api/auth/request-reset", json={"username": "alice"})
        assert response.status_code == 200
        data = response.json()
        token = data["token"]
        assert token
        assert data["reset_url"].endswith(token)

        response = await client.post(
            "/api/auth/reset-password", json={"token": token, "new_password": "brandnew1"}
        )
        assert response.status_code == 200

        await login(client, "alice", "brandnew1")
        await client.post("/api/auth/logout")
        old = await client.post(
            "/api/auth/login", json={"username": "alice", "password": DEFAULT_PASSWORD}
        )
        assert old.status_code == 401

        again = await client.post(
            "/api/auth/reset-password", json={"token": token, "new_password": "another1"}
        )
        assert again.status_code == 400
        assert again.json()["detail"] == "Invalid or expired token"

    async def test_request_reset_unknown_user(self, client: AsyncClient) -> None:
        """The response for an unknown user carries the same message and no token."""
        await register(client, "alice")
        known = await client.post("/api/auth/request-reset", json={"username": "alice"})
        unknown = await client.post("/api/auth/request-reset", json={"username": "ghost"})

        assert unknown.status_code == 200
        assert unknown.json()["message"] == known.json()["message"]
        assert unknown.json()["token"] is None

    async def test_reset_with_unknown_token(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/auth/reset-password", json={"token": "nope", "new_password": "brandnew1"}
        )
        assert response.status_code == 400

    async def test_reset_with_expired_token(
        self, client: AsyncClient, session_factory: async_sessionmaker[AsyncSession]
    ) -> None:
        await register(client, "alice")
        token = (
            await client.post("/api/auth/request-reset", json={"username": "alice"})
        ).json()["token"]

        async with session_factory() as session:
            await session.execute(
                update(PasswordResetToken)
                .where(PasswordResetToken.token == token)
                .values(expires_at=utcnow() - timedelta(minutes=1))
            )
            await session.commit()

        response = await client.post(
            "/api/auth/reset-password", json={"token": token, "new_password": "brandnew1"}
        )
        assert response.status_code == 400
