"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.api.deps import CurrentUser, session_cookie
from qa_forum.config import get_settings
from qa_forum.database import get_db
from qa_forum.models.user import UserSession
from qa_forum.schemas.user import (
    PasswordReset,
    PasswordResetRequest,
    PasswordResetRequested,
    SuccessResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from qa_forum.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])

RESET_REQUESTED_MESSAGE = "If the account exists, a reset link will be generated"


def set_session_cookie(response: Response, session: UserSession) -> None:
    """Attach the session id as an HTTP-only, same-site strict cookie."""
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.id,
        max_age=settings.session_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="strict",
    )


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    user_data: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Register a new user and sign them in.

    The password is hashed with bcrypt before storage.

    Raises:
        ConflictError 409: If the username already exists
    """
    user = await auth_service.register_user(db, user_data)
    session = await auth_service.create_session(db, user.id)
    set_session_cookie(response, session)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Authenticate a user and set the session cookie.

    Expired sessions are swept on every login.

    Raises:
        InvalidCredentials 401: If the username or password is wrong
    """
    user = await auth_service.authenticate(db, credentials.username, credentials.password)
    await auth_service.clean_expired_sessions(db)
    session = await auth_service.create_session(db, user.id)
    set_session_cookie(response, session)
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    response: Response,
    session_id: str | None = Depends(session_cookie),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """End the current session. Safe to call when not signed in."""
    if session_id:
        await auth_service.delete_session(db, session_id)
    response.delete_cookie(get_settings().session_cookie_name)
    return SuccessResponse()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get the signed-in user's account, including email, role and karma."""
    return UserResponse.model_validate(current_user)


@router.post("/request-reset", response_model=PasswordResetRequested)
async def request_reset(
    request_data: PasswordResetRequest,
    db: AsyncSession = Depends(get_db),
) -> PasswordResetRequested:
    """Request a password reset token.

    Always succeeds so the response does not reveal whether the account
    exists. When EXPOSE_RESET_TOKEN is enabled the token and reset link are
    returned directly instead of being delivered out of band.
    """
    token = await auth_service.request_password_reset(db, request_data.username)
    if token is None or not get_settings().expose_reset_token:
        return PasswordResetRequested(message=RESET_REQUESTED_MESSAGE)

    return PasswordResetRequested(
        message=RESET_REQUESTED_MESSAGE,
        token=token,
        reset_url=f"/reset-password?token={token}",
    )


@router.post("/reset-password", response_model=SuccessResponse)
async def reset_password(
    reset_data: PasswordReset,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Set a new password using a reset token.

    Raises:
        InvalidOrExpiredToken 400: If the token is unknown, expired or used
    """
    await auth_service.consume_password_reset(db, reset_data.token, reset_data.new_password)
    return SuccessResponse(message="Password reset successfully")
