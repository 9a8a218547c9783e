"""SQLAlchemy ORM models."""

from qa_forum.models.answer import Answer
from qa_forum.models.category import Category, Faq
from qa_forum.models.question import Question
from qa_forum.models.user import PasswordResetToken, User, UserRole, UserSession

__all__ = [
    "Answer",
    "Category",
    "Faq",
    "PasswordResetToken",
    "Question",
    "User",
    "UserRole",
    "UserSession",
]
