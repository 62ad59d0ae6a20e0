"""
Askwell Backend — Question SQLAlchemy Model
===========================================

What:  ORM model for the `questions` table.
Who:   Written by QuestionService and AcceptanceService, counters moved by
       VoteService and QueryService, read by QueryService.

Column Ownership:
    - votes:              derived from the vote ledger; only ever changed
                          with `votes = votes + :delta` update expressions
    - views:              additive `views = views + 1`, never decreases
    - accepted_answer_id: written only by the acceptance controller
    - author_id:          fixed at creation

accepted_answer_id is a plain integer column without a foreign key:
answers already reference questions, and a second FK in the other
direction would make the two tables mutually dependent at DDL time.
The acceptance controller checks that the answer belongs to the question.

Query Patterns:
    - Newest / unanswered feed: ORDER BY created_at DESC
    - Active feed:              ORDER BY updated_at DESC
    - Top voted:                ORDER BY votes DESC
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column

from askwell.database import Base
from askwell.models.user import utcnow


class Question(Base):
    """A question asked by a community member."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # Rich-text (HTML) body produced by the client editor; stored verbatim
    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id"), nullable=False, index=True,
    )

    # ── Counters ──────────────────────────────────────────────────────────
    views: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )
    votes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )

    accepted_answer_id: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True, default=None,
    )

    is_anonymous: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    # Bumped when the question gets a new answer or an accepted answer
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("ix_questions_created_at", created_at.desc()),
        Index("ix_questions_updated_at", updated_at.desc()),
        Index("ix_questions_votes", votes.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Question(id={self.id}, votes={self.votes}, "
            f"accepted_answer_id={self.accepted_answer_id})>"
        )
