"""
Askwell Backend — Notification SQLAlchemy Model
===============================================

What:  In-app notifications. Rows are immutable once written except for
       `is_read`. They are produced only by the notification dispatcher,
       inside the transaction of the write that triggered them.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column

from askwell.database import Base
from askwell.models.user import utcnow


class NotificationType(str, PyEnum):
    """Kinds of notification the dispatcher emits."""

    ANSWER = "answer"
    ACCEPTED = "accepted"


class Notification(Base):
    """A message for one recipient about activity on their content."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Recipient
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id"), nullable=False,
    )

    # Wide enough for future 'comment' / 'mention' kinds
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    question_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("questions.id"), nullable=True, default=None,
    )
    answer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("answers.id"), nullable=True, default=None,
    )
    triggered_by_id: Mapped[Optional[str]] = mapped_column(
        String(255), ForeignKey("users.id"), nullable=True, default=None,
    )

    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Inbox query: WHERE user_id = :me ORDER BY created_at DESC
    __table_args__ = (
        Index("ix_notifications_user_id_created_at", "user_id", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Notification(id={self.id}, user_id='{self.user_id}', "
            f"type='{self.type}', is_read={self.is_read})>"
        )
