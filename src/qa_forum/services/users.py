"""User profiles and role administration."""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.models.answer import Answer
from qa_forum.models.question import Question
from qa_forum.models.user import User, UserRole
from qa_forum.schemas.answer import AnswerWithQuestion
from qa_forum.schemas.question import QuestionResponse
from qa_forum.schemas.user import UserProfile
from qa_forum.services.answers import user_answers
from qa_forum.services.base import NotFoundError
from qa_forum.services.karma import level_for_karma
from qa_forum.services.policy import Actor, ensure_can_change_role, ensure_can_manage_users
from qa_forum.services.questions import user_questions

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10


async def get_user(db: AsyncSession, user_id: int) -> User:
    """Load a user with fresh karma and role.

    Raises:
        NotFoundError: If the user does not exist
    """
    query = select(User).where(User.id == user_id).execution_options(populate_existing=True)
    user = (await db.execute(query)).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user_profile(db: AsyncSession, user_id: int) -> UserProfile:
    """Build a public profile: karma level plus recent questions and answers."""
    user = await get_user(db, user_id)
    level = level_for_karma(user.karma)

    questions_count = (
        await db.execute(select(func.count(Question.id)).where(Question.user_id == user_id))
    ).scalar_one()
    answers_count = (
        await db.execute(select(func.count(Answer.id)).where(Answer.user_id == user_id))
    ).scalar_one()
    questions = await user_questions(db, user_id, limit=RECENT_ACTIVITY_LIMIT)
    answers = await user_answers(db, user_id, limit=RECENT_ACTIVITY_LIMIT)

    return UserProfile(
        id=user.id,
        username=user.username,
        display_name=user.display_name,
        role=user.role,
        karma=user.karma,
        created_at=user.created_at,
        level=level.level,
        title=level.title,
        next_level_karma=level.next_level_karma,
        questions_count=questions_count,
        answers_count=answers_count,
        questions=[QuestionResponse.model_validate(q) for q in questions],
        answers=[AnswerWithQuestion.model_validate(a) for a in answers],
    )


async def list_users(db: AsyncSession, actor: Actor) -> list[User]:
    """All users, newest first (admins only)."""
    ensure_can_manage_users(actor)
    result = await db.execute(
        select(User).order_by(User.created_at.desc(), User.id.desc())
    )
    return list(result.scalars().all())


async def change_role(db: AsyncSession, actor: Actor, user_id: int, role: UserRole) -> User:
    """Reassign a user's role, subject to the role-change rules.

    Raises:
        Forbidden: If the actor may not make this change
        NotFoundError: If the user does not exist
    """
    ensure_can_manage_users(actor)
    target = await get_user(db, user_id)
    ensure_can_change_role(actor, target.id, target.role, role)

    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(role=role)
        .execution_options(synchronize_session=False)
    )
    logger.info(
        "Role of %s changed from %s to %s by %s",
        target.username,
        target.role.value,
        UserRole(role).value,
        actor.username,
    )
    return await get_user(db, user_id)


async def promote_to_owner(db: AsyncSession, username: str) -> User:
    """Make an existing user the owner. Used by the seed command only."""
    user = (
        await db.execute(select(User).where(User.username == username.lower()))
    ).scalar_one_or_none()
    if user is None:
        raise NotFoundError(f"User {username!r} not found")

    user.role = UserRole.OWNER
    await db.flush()
    logger.info("User %s promoted to owner", user.username)
    return user
