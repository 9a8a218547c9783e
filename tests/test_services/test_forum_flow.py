"""End-to-end flow through the services: ask, vote, answer, accept."""

from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.models import Category
from qa_forum.schemas.answer import AnswerCreate
from qa_forum.schemas.common import VoteDirection
from qa_forum.schemas.question import QuestionCreate, QuestionSort
from qa_forum.schemas.user import UserCreate
from qa_forum.services import answers as answer_service
from qa_forum.services import auth as auth_service
from qa_forum.services import questions as question_service
from qa_forum.services.karma import KarmaReward
from qa_forum.services.policy import Actor
from qa_forum.services.users import get_user


async def make_category(db: AsyncSession) -> Category:
    category = Category(name="Command Line", slug="command-line", icon="terminal", color="green")
    db.add(category)
    await db.flush()
    return category


async def karma_of(db: AsyncSession, user_id: int) -> int:
    return (await get_user(db, user_id)).karma


async def test_ask_vote_answer_accept(db_session: AsyncSession) -> None:
    """Karma and counters move exactly as each step promises."""
    category = await make_category(db_session)
    a = await auth_service.register_user(db_session, UserCreate(username="asker", password="hunter22"))
    b = await auth_service.register_user(db_session, UserCreate(username="helper", password="hunter22"))
    actor_a, actor_b = Actor.from_user(a), Actor.from_user(b)
    assert await karma_of(db_session, a.id) == 0

    question = await question_service.create_question(
        db_session,
        QuestionCreate(
            title="How do I follow a log file?",
            content="I want to watch new lines appear in a log as they are written.",
            category_id=category.id,
        ),
        actor_a,
    )
    assert await karma_of(db_session, a.id) == KarmaReward.ASK_QUESTION

    await question_service.vote_question(db_session, question.id, VoteDirection.UP)
    assert await karma_of(db_session, a.id) == (
        KarmaReward.ASK_QUESTION + KarmaReward.QUESTION_UPVOTED
    )
    assert await karma_of(db_session, b.id) == 0

    reply = await answer_service.create_answer(
        db_session, question.id, AnswerCreate(content="Run tail -f on the file."), actor_b
    )
    refreshed = await question_service.get_question(db_session, question.id)
    assert refreshed.answer_count == 1
    karma_before_accept = await karma_of(db_session, b.id)

    accepted = await answer_service.accept_answer(db_session, reply.id, question.id, actor_a)

    assert accepted.is_accepted is True
    assert await karma_of(db_session, b.id) == karma_before_accept + KarmaReward.ANSWER_ACCEPTED


async def test_search_matches_body_only_text(db_session: AsyncSession) -> None:
    category = await make_category(db_session)
    question = await question_service.create_question(
        db_session,
        QuestionCreate(
            title="Shell history question",
            content="Where does zsh keep its history between sessions?",
            category_id=category.id,
            author_name="Guest",
        ),
    )

    results = await question_service.search_questions(db_session, "between sessions")

    assert [q.id for q in results] == [question.id]
    assert results[0].author_name == "Guest"
    assert results[0].user_id is None


async def test_unanswered_never_lists_answered(db_session: AsyncSession) -> None:
    category = await make_category(db_session)
    ids = []
    for n in range(4):
        question = await question_service.create_question(
            db_session,
            QuestionCreate(
                title=f"Question number {n}",
                content="Some body text that is long enough to post.",
                category_id=category.id,
            ),
        )
        ids.append(question.id)
    for question_id in ids[::2]:
        await answer_service.create_answer(
            db_session, question_id, AnswerCreate(content="An answer long enough.")
        )

    listing = await question_service.list_questions(db_session, sort=QuestionSort.UNANSWERED)

    assert {q.id for q in listing} == set(ids[1::2])
    assert all(q.answer_count == 0 for q in listing)
