"""
Askwell Backend — Notification Schemas
======================================
"""

from datetime import datetime
from typing import Optional

from askwell.schemas.common import BaseSchema
from askwell.schemas.question import AnswerRead, QuestionRead
from askwell.schemas.user import UserRead


class NotificationRead(BaseSchema):
    id: int
    user_id: str
    type: str
    title: str
    message: str
    question_id: Optional[int] = None
    answer_id: Optional[int] = None
    triggered_by_id: Optional[str] = None
    is_read: bool
    created_at: datetime


class NotificationWithDetails(NotificationRead):
    """Inbox entry with the referenced question, answer and actor joined in."""
    question: Optional[QuestionRead] = None
    answer: Optional[AnswerRead] = None
    triggered_by: Optional[UserRead] = None


class UnreadCount(BaseSchema):
    count: int


class MarkAllReadResponse(BaseSchema):
    message: str
    updated: int
