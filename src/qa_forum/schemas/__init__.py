"""Pydantic schemas for request/response validation."""

from qa_forum.schemas.answer import (
    AcceptAnswerRequest,
    AnswerCreate,
    AnswerResponse,
    AnswerUpdate,
    AnswerVoteRequest,
    AnswerWithQuestion,
    QuestionRef,
)
from qa_forum.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    FaqCreate,
    FaqResponse,
    StatsResponse,
)
from qa_forum.schemas.common import VoteDirection, VoteRequest, VoteResponse
from qa_forum.schemas.question import (
    PinResponse,
    QuestionCreate,
    QuestionDetail,
    QuestionResponse,
    QuestionSort,
    QuestionUpdate,
    QuestionWithCategory,
)
from qa_forum.schemas.user import (
    EmailUpdate,
    PasswordReset,
    PasswordResetRequest,
    PasswordResetRequested,
    PublicUser,
    RoleUpdate,
    SuccessResponse,
    UserCreate,
    UserLogin,
    UserProfile,
    UserResponse,
)

__all__ = [
    # Answer schemas
    "AcceptAnswerRequest",
    "AnswerCreate",
    "AnswerResponse",
    "AnswerUpdate",
    "AnswerVoteRequest",
    "AnswerWithQuestion",
    "QuestionRef",
    # Category, FAQ and stats schemas
    "CategoryCreate",
    "CategoryResponse",
    "FaqCreate",
    "FaqResponse",
    "StatsResponse",
    # Question schemas
    "PinResponse",
    "QuestionCreate",
    "QuestionDetail",
    "QuestionResponse",
    "QuestionSort",
    "QuestionUpdate",
    "QuestionWithCategory",
    # User schemas
    "EmailUpdate",
    "PasswordReset",
    "PasswordResetRequest",
    "PasswordResetRequested",
    "PublicUser",
    "RoleUpdate",
    "SuccessResponse",
    "UserCreate",
    "UserLogin",
    "UserProfile",
    "UserResponse",
    # Vote schemas
    "VoteDirection",
    "VoteRequest",
    "VoteResponse",
]
