"""
Askwell Backend — Tag Schemas
=============================
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from askwell.schemas.common import BaseSchema


class TagRead(BaseSchema):
    id: int
    name: str
    description: Optional[str] = None
    color: str
    question_count: int
    created_at: datetime


class TagCreate(BaseSchema):
    """Manual tag creation. Tags are normally created implicitly by new questions."""
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=2000)
    color: Optional[str] = Field(
        default=None,
        pattern=r"^#[0-9A-Fa-f]{6}$",
        description="Hex colour; picked from the palette when omitted",
    )
