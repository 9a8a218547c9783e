"""Pydantic schemas for user, authentication and administration endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from qa_forum.models.user import UserRole
from qa_forum.schemas.answer import AnswerWithQuestion
from qa_forum.schemas.question import QuestionResponse
from qa_forum.utils.security import MAX_PASSWORD_BYTES


def _check_password_bytes(v: str) -> str:
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        msg = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
        raise ValueError(msg)
    return v


class UserCreate(BaseModel):
    """Schema for user registration."""

    username: str = Field(
        min_length=3,
        max_length=50,
        description="Unique username (3-50 characters)",
    )
    password: str = Field(
        min_length=6,
        max_length=MAX_PASSWORD_BYTES,
        description="Password (6-72 characters)",
    )
    display_name: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Name shown on posts (defaults to the username)",
    )
    email: EmailStr | None = Field(default=None, description="Optional email address")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username contains only allowed characters."""
        if not v.replace("_", "").replace("-", "").isalnum():
            msg = "Username can only contain letters, numbers, underscores, and hyphens"
            raise ValueError(msg)
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password_bytes(v)


class UserLogin(BaseModel):
    """Schema for user login request."""

    username: str = Field(min_length=1, description="Username")
    password: str = Field(min_length=1, description="Password")


class UserResponse(BaseModel):
    """The signed-in user's own account data (excludes password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    display_name: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Email address")
    role: UserRole = Field(description="Forum role")
    karma: int = Field(description="Karma points")
    created_at: datetime = Field(description="When the user was created")


class PublicUser(BaseModel):
    """User data visible to everyone."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    display_name: str | None = Field(default=None, description="Display name")
    role: UserRole = Field(description="Forum role")
    karma: int = Field(description="Karma points")
    created_at: datetime = Field(description="When the user was created")


class UserProfile(PublicUser):
    """Public profile with reputation level and recent activity."""

    level: int = Field(description="Reputation level, starting at 1")
    title: str | None = Field(default=None, description="Honorific for the level")
    next_level_karma: int | None = Field(
        default=None, description="Karma needed for the next level (null at the top)"
    )
    questions_count: int = Field(description="Number of questions asked")
    answers_count: int = Field(description="Number of answers posted")
    questions: list[QuestionResponse] = Field(
        default_factory=list, description="Most recent questions"
    )
    answers: list[AnswerWithQuestion] = Field(
        default_factory=list, description="Most recent answers"
    )


class EmailUpdate(BaseModel):
    """Schema for changing the signed-in user's email."""

    email: EmailStr = Field(description="New email address")


class RoleUpdate(BaseModel):
    """Schema for an admin changing a user's role."""

    role: UserRole = Field(description="New role (owner cannot be assigned)")

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: UserRole) -> UserRole:
        """Reject the owner role, which is never assigned through the API."""
        if v is UserRole.OWNER:
            msg = "Role must be admin, moderator or member"
            raise ValueError(msg)
        return v


class PasswordResetRequest(BaseModel):
    """Schema for requesting a password reset."""

    username: str = Field(min_length=1, description="Username")


class PasswordResetRequested(BaseModel):
    """Response to a reset request; identical whether or not the user exists."""

    success: bool = True
    message: str = Field(description="Human readable outcome")
    token: str | None = Field(default=None, description="Reset token, when exposed")
    reset_url: str | None = Field(default=None, description="Reset link, when exposed")


class PasswordReset(BaseModel):
    """Schema for completing a password reset."""

    token: str = Field(min_length=1, description="Reset token")
    new_password: str = Field(
        min_length=6,
        max_length=MAX_PASSWORD_BYTES,
        description="New password (6-72 characters)",
    )

    @field_validator("new_password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _check_password_bytes(v)


class SuccessResponse(BaseModel):
    """Generic acknowledgement."""

    success: bool = True
    message: str | None = None
