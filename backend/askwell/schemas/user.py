"""
Askwell Backend — User Schemas
==============================
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from askwell.schemas.common import BaseSchema


class UserRead(BaseSchema):
    """Public profile of a user, embedded as `author` in questions and answers."""
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    xp: int = 0
    level: int = 1
    streak: int = 0
    created_at: datetime


class UserUpsert(BaseSchema):
    """Profile fields supplied by the identity provider on sign-in."""
    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    profile_image_url: Optional[str] = Field(default=None, max_length=1024)


class UserStats(BaseSchema):
    """Gamification dashboard numbers for one user."""
    xp: int
    level: int
    streak: int
    questions_asked: int
    answers_provided: int
    votes_received: int
    accepted_answers: int


class SiteStats(BaseSchema):
    """Community-wide totals shown on the landing page."""
    total_questions: int
    total_answers: int
    total_users: int
