"""Question API endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.api.deps import CurrentActor, ModeratorActor
from qa_forum.database import get_db
from qa_forum.models.answer import Answer
from qa_forum.models.question import Question
from qa_forum.schemas.answer import AnswerCreate, AnswerResponse
from qa_forum.schemas.common import VoteRequest, VoteResponse
from qa_forum.schemas.question import (
    PinResponse,
    QuestionCreate,
    QuestionDetail,
    QuestionResponse,
    QuestionSort,
    QuestionUpdate,
    QuestionWithCategory,
)
from qa_forum.schemas.user import SuccessResponse
from qa_forum.services import answers as answer_service
from qa_forum.services import questions as question_service

router = APIRouter(prefix="/questions", tags=["questions"])


def question_to_detail(question: Question, answers: list[Answer]) -> QuestionDetail:
    """Convert a Question model and its answers to a QuestionDetail schema.

    Requires question.category to be loaded.
    """
    summary = QuestionWithCategory.model_validate(question)
    return QuestionDetail(
        **summary.model_dump(),
        answers=[AnswerResponse.model_validate(answer) for answer in answers],
    )


@router.get("", response_model=list[QuestionWithCategory])
async def list_questions(
    category: str | None = Query(None, description="Filter by category slug"),
    sort: QuestionSort = Query(QuestionSort.RECENT, description="Sort order"),
    limit: int | None = Query(None, ge=1, le=100, description="Maximum results"),
    db: AsyncSession = Depends(get_db),
) -> list[QuestionWithCategory]:
    """List questions, pinned first, in the requested order."""
    questions = await question_service.list_questions(
        db, category_slug=category, sort=sort, limit=limit
    )
    return [QuestionWithCategory.model_validate(q) for q in questions]


@router.get("/search", response_model=list[QuestionWithCategory])
async def search_questions(
    q: str = Query("", description="Text to find in titles and bodies"),
    db: AsyncSession = Depends(get_db),
) -> list[QuestionWithCategory]:
    """Search question titles and bodies. A blank query returns nothing."""
    questions = await question_service.search_questions(db, q)
    return [QuestionWithCategory.model_validate(question) for question in questions]


@router.get("/{question_id}", response_model=QuestionDetail)
async def get_question(
    question_id: int,
    db: AsyncSession = Depends(get_db),
) -> QuestionDetail:
    """Get a question with its answers. Each fetch counts as one view."""
    await question_service.increment_views(db, question_id)
    question = await question_service.get_question(db, question_id)
    answers = await answer_service.list_answers(db, question_id)
    return question_to_detail(question, answers)


@router.post("", response_model=QuestionResponse, status_code=201)
async def create_question(
    actor: CurrentActor,
    question_data: QuestionCreate,
    db: AsyncSession = Depends(get_db),
) -> QuestionResponse:
    """Ask a question. Requires authentication.

    Raises:
        ValidationError 400: If the category does not exist
    """
    question = await question_service.create_question(db, question_data, actor)
    return QuestionResponse.model_validate(question)


@router.patch("/{question_id}", response_model=QuestionResponse)
async def update_question(
    actor: ModeratorActor,
    question_id: int,
    question_data: QuestionUpdate,
    db: AsyncSession = Depends(get_db),
) -> QuestionResponse:
    """Edit a question's title, content or pinned flag. Moderators only."""
    question = await question_service.update_question(db, question_id, question_data, actor)
    return QuestionResponse.model_validate(question)


@router.delete("/{question_id}", response_model=SuccessResponse)
async def delete_question(
    actor: ModeratorActor,
    question_id: int,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Delete a question and its answers. Moderators only."""
    await question_service.delete_question(db, question_id, actor)
    return SuccessResponse()


@router.post("/{question_id}/pin", response_model=PinResponse)
async def toggle_pin(
    actor: ModeratorActor,
    question_id: int,
    db: AsyncSession = Depends(get_db),
) -> PinResponse:
    """Pin an unpinned question or unpin a pinned one. Moderators only."""
    pinned = await question_service.toggle_pin(db, question_id, actor)
    return PinResponse(is_pinned=pinned)


@router.post("/{question_id}/vote", response_model=VoteResponse)
async def vote_question(
    question_id: int,
    vote: VoteRequest,
    db: AsyncSession = Depends(get_db),
) -> VoteResponse:
    """Vote a question up or down.

    Votes are anonymous and not deduplicated; the author's karma changes
    with every vote.
    """
    votes = await question_service.vote_question(db, question_id, vote.direction)
    return VoteResponse(votes=votes)


@router.post("/{question_id}/answers", response_model=AnswerResponse, status_code=201)
async def create_answer(
    actor: CurrentActor,
    question_id: int,
    answer_data: AnswerCreate,
    db: AsyncSession = Depends(get_db),
) -> AnswerResponse:
    """Answer a question. Requires authentication."""
    answer = await answer_service.create_answer(db, question_id, answer_data, actor)
    return AnswerResponse.model_validate(answer)
