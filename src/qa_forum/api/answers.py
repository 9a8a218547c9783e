"""Answer API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from qa_forum.api.deps import CurrentActor, ModeratorActor
from qa_forum.database import get_db
from qa_forum.schemas.answer import (
    AcceptAnswerRequest,
    AnswerResponse,
    AnswerUpdate,
    AnswerVoteRequest,
)
from qa_forum.schemas.common import VoteResponse
from qa_forum.schemas.user import SuccessResponse
from qa_forum.services import answers as answer_service

router = APIRouter(prefix="/answers", tags=["answers"])


@router.patch("/{answer_id}", response_model=AnswerResponse)
async def update_answer(
    actor: ModeratorActor,
    answer_id: int,
    answer_data: AnswerUpdate,
    db: AsyncSession = Depends(get_db),
) -> AnswerResponse:
    """Edit an answer. Moderators only."""
    answer = await answer_service.update_answer(db, answer_id, answer_data, actor)
    return AnswerResponse.model_validate(answer)


@router.delete("/{answer_id}", response_model=SuccessResponse)
async def delete_answer(
    actor: ModeratorActor,
    answer_id: int,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    """Delete an answer. Moderators only."""
    await answer_service.delete_answer(db, answer_id, actor)
    return SuccessResponse()


@router.post("/{answer_id}/accept", response_model=AnswerResponse)
async def accept_answer(
    actor: CurrentActor,
    answer_id: int,
    accept_data: AcceptAnswerRequest,
    db: AsyncSession = Depends(get_db),
) -> AnswerResponse:
    """Accept an answer. Only the question's author or a moderator may.

    Any previously accepted answer on the question is un-accepted.

    Raises:
        Forbidden 403: If the caller is neither the author nor a moderator
        NotFoundError 404: If the question or answer does not exist
    """
    answer = await answer_service.accept_answer(db, answer_id, accept_data.question_id, actor)
    return AnswerResponse.model_validate(answer)


@router.post("/{answer_id}/vote", response_model=VoteResponse)
async def vote_answer(
    answer_id: int,
    vote: AnswerVoteRequest,
    db: AsyncSession = Depends(get_db),
) -> VoteResponse:
    """Vote an answer up or down. Votes are anonymous and not deduplicated."""
    votes = await answer_service.vote_answer(db, answer_id, vote.direction, vote.question_id)
    return VoteResponse(votes=votes)
