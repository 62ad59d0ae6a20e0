"""
Askwell Backend — Tag and QuestionTag SQLAlchemy Models
=======================================================

What:  `tags` (unique lowercase names with a denormalized question count)
       and `question_tags` (the association rows).

Invariant:
    tags.question_count == number of question_tags rows for that tag.
    Both sides are written in the same transaction by the tag counter;
    questions are never deleted, so the count only grows.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from askwell.database import Base
from askwell.models.user import utcnow

DEFAULT_TAG_COLOR = "#3B82F6"


class Tag(Base):
    """A topic label shared across questions."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Always stored normalized (trimmed, lowercase)
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    color: Mapped[str] = mapped_column(
        String(7), nullable=False, default=DEFAULT_TAG_COLOR,
        server_default=text(f"'{DEFAULT_TAG_COLOR}'"),
    )

    question_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Tag(name='{self.name}', question_count={self.question_count})>"


class QuestionTag(Base):
    """Links one question to one tag."""

    __tablename__ = "question_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False,
    )
    tag_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    __table_args__ = (
        UniqueConstraint("question_id", "tag_id"),
    )
