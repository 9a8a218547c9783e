"""Role hierarchy and permission checks.

Every check is a pure function of the acting user, the resource and the
action. The acting user is an explicit ``Actor`` built once per request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from qa_forum.models.user import UserRole
from qa_forum.services.base import Forbidden

if TYPE_CHECKING:
    from qa_forum.models.user import User

ROLE_TIERS: dict[UserRole, int] = {
    UserRole.OWNER: 4,
    UserRole.ADMIN: 3,
    UserRole.MODERATOR: 2,
    UserRole.MEMBER: 1,
}


def role_tier(role: UserRole | str) -> int:
    """Return the rank of a role; higher outranks lower."""
    return ROLE_TIERS[UserRole(role)]


def can_moderate(role: UserRole | str) -> bool:
    """Moderators and above may edit, delete, pin and accept any content."""
    return role_tier(role) >= ROLE_TIERS[UserRole.MODERATOR]


def can_manage_users(role: UserRole | str) -> bool:
    """Admins and above may reassign roles."""
    return role_tier(role) >= ROLE_TIERS[UserRole.ADMIN]


@dataclass(frozen=True)
class Actor:
    """The user performing a request, with capabilities resolved up front."""

    id: int
    username: str
    role: UserRole
    display_name: str | None = None
    can_moderate: bool = field(init=False)
    can_manage_users: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", UserRole(self.role))
        object.__setattr__(self, "can_moderate", can_moderate(self.role))
        object.__setattr__(self, "can_manage_users", can_manage_users(self.role))

    @classmethod
    def from_user(cls, user: User) -> Actor:
        return cls(
            id=user.id,
            username=user.username,
            role=user.role,
            display_name=user.display_name,
        )

    @property
    def author_name(self) -> str:
        """Name shown on content this actor posts."""
        return self.display_name or self.username


def ensure_can_moderate(actor: Actor) -> None:
    if not actor.can_moderate:
        raise Forbidden("Moderator role required")


def ensure_can_manage_users(actor: Actor) -> None:
    if not actor.can_manage_users:
        raise Forbidden("Admin role required")


def ensure_can_accept(actor: Actor, question_author_id: int | None) -> None:
    """Only the question's author or a moderator may accept an answer."""
    if actor.can_moderate:
        return
    if question_author_id is not None and actor.id == question_author_id:
        return
    raise Forbidden("Only the question author can accept answers")


def ensure_can_change_role(
    actor: Actor,
    target_id: int,
    target_role: UserRole | str,
    new_role: UserRole | str,
) -> None:
    """Apply the role-change rules.

    An actor may only assign a role strictly below their own, so only the
    owner can hand out admin and nobody can hand out owner. The owner's
    role is never changed, and only the owner may change an admin's role.

    Raises:
        Forbidden: If any rule is violated
    """
    ensure_can_manage_users(actor)

    target_role = UserRole(target_role)
    new_role = UserRole(new_role)

    if target_id == actor.id:
        raise Forbidden("Cannot change your own role")
    if target_role is UserRole.OWNER:
        raise Forbidden("Cannot change owner role")
    if target_role is UserRole.ADMIN and actor.role is not UserRole.OWNER:
        raise Forbidden("Only owner can change an admin's role")
    if role_tier(new_role) >= role_tier(actor.role):
        if new_role is UserRole.ADMIN:
            raise Forbidden("Only owner can promote to admin")
        raise Forbidden(f"Cannot assign the {new_role.value} role")
