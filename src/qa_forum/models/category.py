"""Category and FAQ ORM models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from qa_forum.database import Base

if TYPE_CHECKING:
    from qa_forum.models.question import Question


class Category(Base):
    """Topic a question or FAQ belongs to."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str] = mapped_column(String(50))
    color: Mapped[str] = mapped_column(String(20))

    # Relationships
    questions: Mapped[list[Question]] = relationship(back_populates="category")
    faqs: Mapped[list[Faq]] = relationship(back_populates="category")


class Faq(Base):
    """Curated frequently asked question."""

    __tablename__ = "faqs"

    id: Mapped[int] = mapped_column(primary_key=True)
    question: Mapped[str] = mapped_column(Text)
    answer: Mapped[str] = mapped_column(Text)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), index=True)
    order: Mapped[int] = mapped_column(default=0)
    code_snippet: Mapped[str | None] = mapped_column(Text, nullable=True)
    code_language: Mapped[str | None] = mapped_column(String(50), nullable=True)

    category: Mapped[Category] = relationship(back_populates="faqs")
