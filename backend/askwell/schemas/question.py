"""
Askwell Backend — Question and Answer Schemas
=============================================

What:  Request bodies for asking/answering/accepting, and the aggregate
       response shapes assembled by the query façade.

Response aggregates:
    QuestionWithDetails = question columns + author + tags + answer_count
                          (+ accepted_answer with its author on detail reads)
    AnswerWithAuthor    = answer columns + author
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from askwell.schemas.common import BaseSchema
from askwell.schemas.tag import TagRead
from askwell.schemas.user import UserRead

SortBy = Literal["newest", "active", "unanswered", "votes"]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class QuestionCreate(BaseSchema):
    """
    Body of POST /api/questions.

    Tag count and tag length rules are enforced by QuestionService so that
    they apply to every caller, not just HTTP.
    """
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    tags: List[str] = Field(default_factory=list, description="Tag names, up to 5")
    is_anonymous: bool = False


class AnswerCreate(BaseSchema):
    """Body of POST /api/questions/{id}/answers."""
    content: str = Field(min_length=1)
    is_anonymous: bool = False


class AcceptAnswerRequest(BaseSchema):
    """Body of POST /api/questions/{id}/accept-answer."""
    answer_id: int = Field(gt=0)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AnswerRead(BaseSchema):
    id: int
    content: str
    question_id: int
    author_id: str
    votes: int
    is_accepted: bool
    is_anonymous: bool
    created_at: datetime
    updated_at: datetime


class AnswerWithAuthor(AnswerRead):
    author: UserRead


class QuestionRead(BaseSchema):
    id: int
    title: str
    content: str
    author_id: str
    views: int
    votes: int
    accepted_answer_id: Optional[int] = None
    is_anonymous: bool
    created_at: datetime
    updated_at: datetime


class QuestionWithDetails(QuestionRead):
    author: UserRead
    tags: List[TagRead] = Field(default_factory=list)
    answer_count: int = 0
    accepted_answer: Optional[AnswerWithAuthor] = None
