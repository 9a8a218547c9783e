"""Pydantic schemas for question endpoints."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qa_forum.schemas.answer import AnswerResponse
from qa_forum.schemas.category import CategoryResponse
from qa_forum.schemas.common import MediaFields

TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 200
CONTENT_MIN_LENGTH = 20


class QuestionSort(StrEnum):
    """Listing orders. Pinned questions always come first."""

    RECENT = "recent"
    TOP = "top"
    ACTIVE = "active"
    UNANSWERED = "unanswered"


class QuestionCreate(MediaFields):
    """Schema for asking a question."""

    title: str = Field(
        min_length=TITLE_MIN_LENGTH,
        max_length=TITLE_MAX_LENGTH,
        description="Title (10-200 characters)",
    )
    content: str = Field(min_length=CONTENT_MIN_LENGTH, description="Body (20+ characters)")
    category_id: int = Field(description="Category ID")
    author_name: str | None = Field(
        default=None,
        min_length=2,
        max_length=100,
        description="Name for anonymous posts; ignored when signed in",
    )


class QuestionUpdate(BaseModel):
    """Schema for a moderator editing a question. Omitted fields are kept."""

    title: str | None = Field(
        default=None, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH
    )
    content: str | None = Field(default=None, min_length=CONTENT_MIN_LENGTH)
    is_pinned: bool | None = None

    @field_validator("title", "content", "is_pinned")
    @classmethod
    def reject_null(cls, v: object) -> object:
        """Explicit nulls are not allowed; omit the field instead."""
        if v is None:
            msg = "Field may be omitted but not null"
            raise ValueError(msg)
        return v


class PinResponse(BaseModel):
    """Pin state after a toggle."""

    success: bool = True
    is_pinned: bool = Field(description="Whether the question is now pinned")


class QuestionResponse(MediaFields):
    """Response schema for a question."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Question ID")
    title: str = Field(description="Title")
    content: str = Field(description="Body")
    category_id: int = Field(description="Category ID")
    author_name: str = Field(description="Author display name")
    user_id: int | None = Field(default=None, description="Author user ID (null if anonymous)")
    votes: int = Field(description="Vote total")
    view_count: int = Field(description="Number of views")
    answer_count: int = Field(description="Number of answers")
    is_pinned: bool = Field(description="Pinned to the top of listings")
    created_at: datetime = Field(description="When the question was asked")


class QuestionWithCategory(QuestionResponse):
    """Question listing entry with its category."""

    category: CategoryResponse


class QuestionDetail(QuestionWithCategory):
    """Question with category and answers, accepted answer first."""

    answers: list[AnswerResponse] = Field(default_factory=list, description="Answers")
