"""Pydantic schemas for categories, FAQs and site statistics."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(min_length=1, max_length=100, description="Display name")
    slug: str = Field(min_length=1, max_length=100, description="URL slug")
    description: str | None = Field(default=None, description="Short description")
    icon: str = Field(min_length=1, max_length=50, description="Icon name")
    color: str = Field(min_length=1, max_length=20, description="Accent color")

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        """Validate slug is lowercase letters, digits and hyphens."""
        v = v.lower()
        if not v.replace("-", "").isalnum():
            msg = "Slug can only contain letters, numbers, and hyphens"
            raise ValueError(msg)
        return v


class CategoryResponse(BaseModel):
    """Response schema for a category."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Category ID")
    name: str = Field(description="Display name")
    slug: str = Field(description="URL slug")
    description: str | None = Field(default=None, description="Short description")
    icon: str = Field(description="Icon name")
    color: str = Field(description="Accent color")


class FaqCreate(BaseModel):
    """Schema for creating an FAQ entry."""

    question: str = Field(min_length=1, description="Question text")
    answer: str = Field(min_length=1, description="Answer text")
    category_id: int = Field(description="Category ID")
    order: int = Field(default=0, description="Display position, ascending")
    code_snippet: str | None = Field(default=None, description="Example code")
    code_language: str | None = Field(default=None, max_length=50, description="Code language")


class FaqResponse(BaseModel):
    """Response schema for an FAQ entry with its category."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    question: str
    answer: str
    category_id: int
    order: int
    code_snippet: str | None = None
    code_language: str | None = None
    category: CategoryResponse


class StatsResponse(BaseModel):
    """Site-wide totals."""

    total_questions: int = Field(description="Number of questions")
    total_answers: int = Field(description="Number of answers")
    categories: int = Field(description="Number of categories")
