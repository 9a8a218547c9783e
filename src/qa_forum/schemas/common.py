"""Pydantic schemas shared by questions and answers."""

from enum import StrEnum

from pydantic import BaseModel, Field


class MediaFields(BaseModel):
    """Optional media and code attached to a post."""

    image_url: str | None = Field(default=None, max_length=500, description="Image URL")
    video_url: str | None = Field(default=None, max_length=500, description="Video URL")
    code_snippet: str | None = Field(default=None, description="Code or terminal output")
    code_language: str | None = Field(default=None, max_length=50, description="Code language")


class VoteDirection(StrEnum):
    """Direction of a vote."""

    UP = "up"
    DOWN = "down"


class VoteRequest(BaseModel):
    """Schema for voting on a question."""

    direction: VoteDirection = Field(description="'up' or 'down'")


class VoteResponse(BaseModel):
    """Vote total after the vote was applied."""

    success: bool = True
    votes: int = Field(description="New vote total")
