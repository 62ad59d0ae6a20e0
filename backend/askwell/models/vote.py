"""
Askwell Backend — Vote SQLAlchemy Model (the vote ledger)
=========================================================

What:  One row per (voter, target type, target id). The ledger is the
       source of truth; questions.votes and answers.votes are derived from it.

Constraints:
    - UNIQUE (user_id, target_type, target_id): a user holds at most one
      vote per target. A concurrent duplicate insert fails here and is
      reported as a conflict instead of double counting.
    - CHECK on target_type and vote_type.

target_id is polymorphic (question or answer id), so it carries no
foreign key; VoteService verifies the target exists before writing.
"""

from datetime import datetime
from enum import Enum as PyEnum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from askwell.database import Base
from askwell.models.user import utcnow


class TargetType(str, PyEnum):
    """What a vote points at."""

    QUESTION = "question"
    ANSWER = "answer"


class VoteType(str, PyEnum):
    """Direction of a vote."""

    UP = "up"
    DOWN = "down"

    @property
    def weight(self) -> int:
        """Contribution of this vote to the target's counter."""
        return 1 if self is VoteType.UP else -1


class Vote(Base):
    """A single user's vote on a question or answer."""

    __tablename__ = "votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id"), nullable=False,
    )
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    vote_type: Mapped[str] = mapped_column(String(10), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "target_type", "target_id"),
        CheckConstraint("target_type IN ('question', 'answer')", name="target_type"),
        CheckConstraint("vote_type IN ('up', 'down')", name="vote_type"),
    )

    def __repr__(self) -> str:
        return (
            f"<Vote(user_id='{self.user_id}', target={self.target_type}:{self.target_id}, "
            f"vote_type='{self.vote_type}')>"
        )
