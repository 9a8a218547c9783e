"""Pydantic schemas for answer endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from qa_forum.schemas.common import MediaFields, VoteDirection

ANSWER_MIN_LENGTH = 10


class AnswerCreate(MediaFields):
    """Schema for posting an answer."""

    content: str = Field(min_length=ANSWER_MIN_LENGTH, description="Body (10+ characters)")
    author_name: str | None = Field(
        default=None,
        min_length=2,
        max_length=100,
        description="Name for anonymous posts; ignored when signed in",
    )


class AnswerUpdate(BaseModel):
    """Schema for a moderator editing an answer."""

    content: str = Field(min_length=ANSWER_MIN_LENGTH, description="New body")


class AnswerVoteRequest(BaseModel):
    """Schema for voting on an answer."""

    direction: VoteDirection = Field(description="'up' or 'down'")
    question_id: int | None = Field(
        default=None, description="Question the answer belongs to (checked when given)"
    )


class AcceptAnswerRequest(BaseModel):
    """Schema for accepting an answer."""

    question_id: int = Field(description="Question the answer belongs to")


class AnswerResponse(MediaFields):
    """Response schema for an answer."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Answer ID")
    question_id: int = Field(description="Question ID")
    content: str = Field(description="Body")
    author_name: str = Field(description="Author display name")
    user_id: int | None = Field(default=None, description="Author user ID (null if anonymous)")
    votes: int = Field(description="Vote total")
    is_accepted: bool = Field(description="Whether this is the accepted answer")
    created_at: datetime = Field(description="When the answer was posted")


class QuestionRef(BaseModel):
    """Minimal question info shown next to an answer."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Question ID")
    title: str = Field(description="Question title")


class AnswerWithQuestion(AnswerResponse):
    """Answer with the question it belongs to."""

    question: QuestionRef
