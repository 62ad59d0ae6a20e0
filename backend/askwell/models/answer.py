"""
Askwell Backend — Answer SQLAlchemy Model
=========================================

What:  ORM model for the `answers` table.

Invariant:
    At most one answer per question has is_accepted = true, and that
    answer's id equals questions.accepted_answer_id. Only the acceptance
    controller writes either column.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column

from askwell.database import Base
from askwell.models.user import utcnow


class Answer(Base):
    """An answer to a question."""

    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id"), nullable=False, index=True,
    )

    votes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )
    is_accepted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )
    is_anonymous: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Answer listing: WHERE question_id = :id ORDER BY votes DESC, created_at DESC
    __table_args__ = (
        Index("ix_answers_question_id_votes", "question_id", votes.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Answer(id={self.id}, question_id={self.question_id}, "
            f"votes={self.votes}, is_accepted={self.is_accepted})>"
        )
