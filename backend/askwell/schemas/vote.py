"""
Askwell Backend — Vote Schemas
==============================
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from askwell.models.vote import TargetType, VoteType
from askwell.schemas.common import BaseSchema


class VoteCast(BaseSchema):
    """Body of POST /api/votes. Repeating the same vote removes it."""
    target_type: TargetType
    target_id: int = Field(gt=0)
    vote_type: VoteType


class VoteRead(BaseSchema):
    id: int
    user_id: str
    target_type: TargetType
    target_id: int
    vote_type: VoteType
    created_at: datetime


class VoteResult(BaseSchema):
    """
    Outcome of casting a vote.

    removed=True means the call toggled an identical vote off and `vote` is
    null. `votes` is the target's counter after the change.
    """
    removed: bool = False
    created: bool = False
    vote: Optional[VoteRead] = None
    votes: int
