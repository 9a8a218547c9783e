"""User profile and administration API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.api.deps import AdminActor, CurrentUser
from qa_forum.database import get_db
from qa_forum.schemas.user import (
    EmailUpdate,
    PublicUser,
    RoleUpdate,
    UserProfile,
    UserResponse,
)
from qa_forum.services import auth as auth_service
from qa_forum.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@router.patch("/me/email", response_model=UserResponse)
async def update_email(
    current_user: CurrentUser,
    email_data: EmailUpdate,
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Change the signed-in user's email address."""
    user = await auth_service.update_email(db, current_user, email_data.email)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserProfile)
async def get_user_profile(
    user_id: int,
    db: AsyncSession = Depends(get_db),
) -> UserProfile:
    """Get a public profile with karma level and recent activity."""
    return await user_service.get_user_profile(db, user_id)


@admin_router.get("/users", response_model=list[PublicUser])
async def list_users(
    actor: AdminActor,
    db: AsyncSession = Depends(get_db),
) -> list[PublicUser]:
    """List all users, newest first. Admins only."""
    users = await user_service.list_users(db, actor)
    return [PublicUser.model_validate(user) for user in users]


@admin_router.patch("/users/{user_id}/role", response_model=PublicUser)
async def update_user_role(
    actor: AdminActor,
    user_id: int,
    role_data: RoleUpdate,
    db: AsyncSession = Depends(get_db),
) -> PublicUser:
    """Change a user's role. Admins only.

    Only the owner may promote to or demote from admin, and the owner's
    role cannot be changed.

    Raises:
        Forbidden 403: If the change breaks a role-change rule
        NotFoundError 404: If the user does not exist
    """
    user = await user_service.change_role(db, actor, user_id, role_data.role)
    return PublicUser.model_validate(user)
