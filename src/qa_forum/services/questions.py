"""Question lifecycle: asking, listing, searching, voting, moderation."""

import logging

from sqlalchemy import delete, not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from qa_forum.database import utcnow
from qa_forum.models.answer import Answer
from qa_forum.models.category import Category
from qa_forum.models.question import Question
from qa_forum.schemas.common import VoteDirection
from qa_forum.schemas.question import QuestionCreate, QuestionSort, QuestionUpdate
from qa_forum.services.base import NotFoundError, ValidationError
from qa_forum.services.karma import KarmaReward, VoteTarget, add_karma, vote_reward
from qa_forum.services.policy import Actor, ensure_can_moderate

logger = logging.getLogger(__name__)

ANONYMOUS_AUTHOR = "Anonymous"


async def get_question(db: AsyncSession, question_id: int, *, lock: bool = False) -> Question:
    """Load a question with its category.

    With ``lock`` the row is selected FOR UPDATE, serialising operations
    that touch the question's answers.

    Raises:
        NotFoundError: If the question does not exist
    """
    query = (
        select(Question)
        .where(Question.id == question_id)
        .options(selectinload(Question.category))
        .execution_options(populate_existing=True)
    )
    if lock:
        query = query.with_for_update()
    question = (await db.execute(query)).scalar_one_or_none()
    if question is None:
        raise NotFoundError("Question not found")
    return question


async def create_question(
    db: AsyncSession, data: QuestionCreate, author: Actor | None = None
) -> Question:
    """Ask a question and credit the author.

    Anonymous questions use ``data.author_name`` and earn no karma.

    Raises:
        ValidationError: If the category does not exist
    """
    if await db.get(Category, data.category_id) is None:
        raise ValidationError(
            "Invalid data",
            errors=[{"loc": ["body", "category_id"], "msg": "Category does not exist"}],
        )

    question = Question(
        title=data.title,
        content=data.content,
        category_id=data.category_id,
        author_name=author.author_name if author else (data.author_name or ANONYMOUS_AUTHOR),
        user_id=author.id if author else None,
        votes=0,
        view_count=0,
        answer_count=0,
        is_pinned=False,
        created_at=utcnow(),
        image_url=data.image_url,
        video_url=data.video_url,
        code_snippet=data.code_snippet,
        code_language=data.code_language,
    )
    db.add(question)
    await db.flush()
    await db.refresh(question)

    if author is not None:
        await add_karma(db, author.id, KarmaReward.ASK_QUESTION)

    logger.info("Question %s created by %s", question.id, question.author_name)
    return question


def _ordering(sort: QuestionSort) -> list:
    """ORDER BY clauses for a listing; pinned questions always lead."""
    if sort is QuestionSort.TOP:
        keys = [Question.votes.desc()]
    elif sort is QuestionSort.ACTIVE:
        keys = [Question.answer_count.desc()]
    else:
        keys = []
    return [Question.is_pinned.desc(), *keys, Question.created_at.desc(), Question.id.desc()]


async def list_questions(
    db: AsyncSession,
    category_slug: str | None = None,
    sort: QuestionSort = QuestionSort.RECENT,
    limit: int | None = None,
) -> list[Question]:
    """List questions with their categories.

    ``recent`` orders by creation time, ``top`` by votes, ``active`` by
    answer count and ``unanswered`` keeps only questions without answers,
    newest first. An unknown category slug yields an empty list.
    """
    query = (
        select(Question)
        .join(Question.category)
        .options(selectinload(Question.category))
        .execution_options(populate_existing=True)
    )
    if category_slug:
        query = query.where(Category.slug == category_slug)
    if sort is QuestionSort.UNANSWERED:
        query = query.where(Question.answer_count == 0)

    query = query.order_by(*_ordering(sort))
    if limit:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())


async def search_questions(db: AsyncSession, query_text: str) -> list[Question]:
    """Case-insensitive substring search over title and content.

    The text is matched literally; ``%`` and ``_`` are not wildcards.
    Results are ordered pinned first, then by votes.
    """
    query_text = query_text.strip()
    if not query_text:
        return []

    query = (
        select(Question)
        .where(
            Question.title.icontains(query_text, autoescape=True)
            | Question.content.icontains(query_text, autoescape=True)
        )
        .options(selectinload(Question.category))
        .order_by(Question.is_pinned.desc(), Question.votes.desc(), Question.id.desc())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def increment_views(db: AsyncSession, question_id: int) -> None:
    """Count one view of a question. Every call counts."""
    result = await db.execute(
        update(Question)
        .where(Question.id == question_id)
        .values(view_count=Question.view_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Question not found")


async def vote_question(db: AsyncSession, question_id: int, direction: VoteDirection) -> int:
    """Apply one vote to a question and adjust its author's karma.

    Votes are not tied to a voter, so the same caller may vote any number
    of times; each call moves the total by exactly one.

    Returns:
        The new vote total

    Raises:
        NotFoundError: If the question does not exist
    """
    step = 1 if direction is VoteDirection.UP else -1
    stmt = (
        update(Question)
        .where(Question.id == question_id)
        .values(votes=Question.votes + step)
        .returning(Question.votes, Question.user_id)
        .execution_options(synchronize_session=False)
    )
    row = (await db.execute(stmt)).one_or_none()
    if row is None:
        raise NotFoundError("Question not found")

    votes, author_id = row
    if author_id is not None:
        await add_karma(db, author_id, vote_reward(VoteTarget.QUESTION, direction))
    return votes


async def update_question(
    db: AsyncSession, question_id: int, data: QuestionUpdate, actor: Actor
) -> Question:
    """Edit a question's title, content or pinned flag (moderators only)."""
    ensure_can_moderate(actor)
    question = await get_question(db, question_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(question, field, value)
    await db.flush()

    logger.info("Question %s edited by %s", question_id, actor.username)
    return question


async def toggle_pin(db: AsyncSession, question_id: int, actor: Actor) -> bool:
    """Flip a question's pinned flag (moderators only) and return the new state."""
    ensure_can_moderate(actor)
    stmt = (
        update(Question)
        .where(Question.id == question_id)
        .values(is_pinned=not_(Question.is_pinned))
        .returning(Question.is_pinned)
        .execution_options(synchronize_session=False)
    )
    pinned = (await db.execute(stmt)).scalar_one_or_none()
    if pinned is None:
        raise NotFoundError("Question not found")

    logger.info("Question %s %s by %s", question_id, "pinned" if pinned else "unpinned", actor.username)
    return bool(pinned)


async def delete_question(db: AsyncSession, question_id: int, actor: Actor) -> None:
    """Delete a question and all of its answers (moderators only).

    The question row is locked first and both deletes share the caller's
    transaction, so no answer outlives its question.
    """
    ensure_can_moderate(actor)
    await get_question(db, question_id, lock=True)

    await db.execute(delete(Answer).where(Answer.question_id == question_id))
    await db.execute(delete(Question).where(Question.id == question_id))
    logger.info("Question %s deleted by %s", question_id, actor.username)


async def user_questions(db: AsyncSession, user_id: int, limit: int | None = None) -> list[Question]:
    """Questions asked by a user, newest first."""
    query = (
        select(Question)
        .where(Question.user_id == user_id)
        .order_by(Question.created_at.desc(), Question.id.desc())
        .execution_options(populate_existing=True)
    )
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())
