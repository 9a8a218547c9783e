"""Answer lifecycle: posting, voting, acceptance and moderation.

Every change to the set of answers on a question goes through
``_sync_answer_count`` while the question row is locked, so
``Question.answer_count`` cannot drift from the real number of answers.
"""

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from qa_forum.database import utcnow
from qa_forum.models.answer import Answer
from qa_forum.models.question import Question
from qa_forum.schemas.answer import AnswerCreate, AnswerUpdate
from qa_forum.schemas.common import VoteDirection
from qa_forum.services.base import NotFoundError
from qa_forum.services.karma import KarmaReward, VoteTarget, add_karma, vote_reward
from qa_forum.services.policy import Actor, ensure_can_accept, ensure_can_moderate
from qa_forum.services.questions import ANONYMOUS_AUTHOR, get_question

logger = logging.getLogger(__name__)


async def _sync_answer_count(db: AsyncSession, question_id: int) -> None:
    """Set the question's answer_count from a live count of its answers."""
    live_count = (
        select(func.count(Answer.id)).where(Answer.question_id == question_id).scalar_subquery()
    )
    await db.execute(
        update(Question)
        .where(Question.id == question_id)
        .values(answer_count=live_count)
        .execution_options(synchronize_session=False)
    )


async def get_answer(db: AsyncSession, answer_id: int, *, lock: bool = False) -> Answer:
    """Load an answer.

    Raises:
        NotFoundError: If the answer does not exist
    """
    query = (
        select(Answer).where(Answer.id == answer_id).execution_options(populate_existing=True)
    )
    if lock:
        query = query.with_for_update()
    answer = (await db.execute(query)).scalar_one_or_none()
    if answer is None:
        raise NotFoundError("Answer not found")
    return answer


async def list_answers(db: AsyncSession, question_id: int) -> list[Answer]:
    """Answers to a question: the accepted one first, then by votes."""
    query = (
        select(Answer)
        .where(Answer.question_id == question_id)
        .order_by(Answer.is_accepted.desc(), Answer.votes.desc(), Answer.id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_answer(
    db: AsyncSession, question_id: int, data: AnswerCreate, author: Actor | None = None
) -> Answer:
    """Post an answer, update the question's answer count and credit the author.

    Raises:
        NotFoundError: If the question does not exist
    """
    await get_question(db, question_id, lock=True)

    answer = Answer(
        question_id=question_id,
        content=data.content,
        author_name=author.author_name if author else (data.author_name or ANONYMOUS_AUTHOR),
        user_id=author.id if author else None,
        votes=0,
        is_accepted=False,
        created_at=utcnow(),
        image_url=data.image_url,
        video_url=data.video_url,
        code_snippet=data.code_snippet,
        code_language=data.code_language,
    )
    db.add(answer)
    await db.flush()
    await _sync_answer_count(db, question_id)
    await db.refresh(answer)

    if author is not None:
        await add_karma(db, author.id, KarmaReward.POST_ANSWER)

    logger.info("Answer %s posted on question %s by %s", answer.id, question_id, answer.author_name)
    return answer


async def update_answer(
    db: AsyncSession, answer_id: int, data: AnswerUpdate, actor: Actor
) -> Answer:
    """Edit an answer's content (moderators only)."""
    ensure_can_moderate(actor)
    answer = await get_answer(db, answer_id)
    answer.content = data.content
    await db.flush()

    logger.info("Answer %s edited by %s", answer_id, actor.username)
    return answer


async def delete_answer(db: AsyncSession, answer_id: int, actor: Actor) -> None:
    """Delete an answer and update its question's answer count (moderators only).

    The count is recomputed rather than decremented, so a repeated or
    concurrent delete can never push it below the real number of answers.
    """
    ensure_can_moderate(actor)
    answer = await get_answer(db, answer_id)
    question_id = answer.question_id

    await get_question(db, question_id, lock=True)
    result = await db.execute(delete(Answer).where(Answer.id == answer_id))
    if result.rowcount == 0:
        raise NotFoundError("Answer not found")
    await _sync_answer_count(db, question_id)

    logger.info("Answer %s on question %s deleted by %s", answer_id, question_id, actor.username)


async def vote_answer(
    db: AsyncSession,
    answer_id: int,
    direction: VoteDirection,
    question_id: int | None = None,
) -> int:
    """Apply one vote to an answer and adjust its author's karma.

    Like question votes, answer votes are unlimited and anonymous.

    Returns:
        The new vote total

    Raises:
        NotFoundError: If the answer does not exist, or does not belong to
            ``question_id`` when one is given
    """
    step = 1 if direction is VoteDirection.UP else -1
    conditions = [Answer.id == answer_id]
    if question_id is not None:
        conditions.append(Answer.question_id == question_id)

    stmt = (
        update(Answer)
        .where(*conditions)
        .values(votes=Answer.votes + step)
        .returning(Answer.votes, Answer.user_id)
        .execution_options(synchronize_session=False)
    )
    row = (await db.execute(stmt)).one_or_none()
    if row is None:
        raise NotFoundError("Answer not found")

    votes, author_id = row
    if author_id is not None:
        await add_karma(db, author_id, vote_reward(VoteTarget.ANSWER, direction))
    return votes


async def accept_answer(
    db: AsyncSession, answer_id: int, question_id: int, actor: Actor
) -> Answer:
    """Mark an answer as the accepted one for its question.

    Only the question's author or a moderator may accept. The question row
    is locked, every other answer is un-accepted and this one accepted in
    the caller's transaction, so a question never ends up with two accepted
    answers.

    Unlike votes, which credit the author on every call, acceptance credits
    the answer's author only when the answer was not already accepted.
    Accepting the already accepted answer again awards nothing.

    Raises:
        NotFoundError: If the question or answer does not exist, or the
            answer belongs to another question
        Forbidden: If the actor may not accept answers on this question
    """
    question = await get_question(db, question_id, lock=True)
    ensure_can_accept(actor, question.user_id)

    answer = await get_answer(db, answer_id)
    if answer.question_id != question_id:
        raise NotFoundError("Answer not found")
    newly_accepted = not answer.is_accepted

    await db.execute(
        update(Answer)
        .where(Answer.question_id == question_id, Answer.id != answer_id)
        .values(is_accepted=False)
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        update(Answer)
        .where(Answer.id == answer_id)
        .values(is_accepted=True)
        .execution_options(synchronize_session=False)
    )

    if newly_accepted and answer.user_id is not None:
        await add_karma(db, answer.user_id, KarmaReward.ANSWER_ACCEPTED)

    logger.info("Answer %s accepted on question %s by %s", answer_id, question_id, actor.username)
    return await get_answer(db, answer_id)


async def user_answers(db: AsyncSession, user_id: int, limit: int | None = None) -> list[Answer]:
    """Answers posted by a user, newest first, with their questions loaded."""
    query = (
        select(Answer)
        .where(Answer.user_id == user_id)
        .options(selectinload(Answer.question))
        .order_by(Answer.created_at.desc(), Answer.id.desc())
        .execution_options(populate_existing=True)
    )
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())
