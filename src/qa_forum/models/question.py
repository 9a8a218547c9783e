"""Question ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from qa_forum.database import Base, utcnow

if TYPE_CHECKING:
    from qa_forum.models.answer import Answer
    from qa_forum.models.category import Category
    from qa_forum.models.user import User


class Question(Base):
    """Question posted in a category.

    ``votes``, ``view_count`` and ``answer_count`` are only ever changed by
    in-place UPDATE statements in the service layer.
    """

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), index=True)
    author_name: Mapped[str] = mapped_column(String(100))
    # Null for legacy anonymous posts
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    votes: Mapped[int] = mapped_column(default=0)
    view_count: Mapped[int] = mapped_column(default=0)
    answer_count: Mapped[int] = mapped_column(default=0)
    is_pinned: Mapped[bool] = mapped_column(default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    video_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    code_snippet: Mapped[str | None] = mapped_column(Text, nullable=True)
    code_language: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Relationships
    category: Mapped[Category] = relationship(back_populates="questions")
    author: Mapped[User | None] = relationship(back_populates="questions")
    answers: Mapped[list[Answer]] = relationship(back_populates="question")
