"""
Askwell Backend — Notifications
===============================

What:  Two halves of the notification feature.

       NotificationDispatcher (write side)
           Turns domain events into Notification rows inside the session of
           the write that emitted them. A rollback of that write removes the
           notification too. Nobody is notified about their own action.

       NotificationService (read side)
           The recipient's inbox: list with joined details, unread count,
           mark one / mark all as read. Every query is scoped to the
           recipient, so one user can never read or flip another's rows.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Optional, Type

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from askwell.config import settings
from askwell.events import AnswerAccepted, AnswerCreated, DomainEvent
from askwell.exceptions import NotFoundError
from askwell.models.answer import Answer
from askwell.models.notification import Notification, NotificationType
from askwell.models.question import Question
from askwell.models.user import User
from askwell.schemas.notification import NotificationRead, NotificationWithDetails
from askwell.schemas.question import AnswerRead, QuestionRead
from askwell.schemas.user import UserRead
from askwell.services.base import translate_db_errors

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Maps each domain event type to the notification it produces."""

    def __init__(self) -> None:
        self._handlers: Dict[
            Type[DomainEvent],
            Callable[[AsyncSession, DomainEvent], Awaitable[Optional[Notification]]],
        ] = {
            AnswerCreated: self._on_answer_created,
            AnswerAccepted: self._on_answer_accepted,
        }

    async def dispatch(self, db: AsyncSession, event: DomainEvent) -> Optional[Notification]:
        """
        Write the notification for `event`, or return None when suppressed.

        Raises:
            TypeError: no handler is registered for the event type
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"No notification handler for {type(event).__name__}")
        return await handler(db, event)

    async def _on_answer_created(
        self, db: AsyncSession, event: DomainEvent,
    ) -> Optional[Notification]:
        return await self._notify(
            db,
            recipient_id=event.question_author_id,
            actor_id=event.answer_author_id,
            type_=NotificationType.ANSWER,
            title="New Answer",
            message="Someone answered your question!",
            event=event,
        )

    async def _on_answer_accepted(
        self, db: AsyncSession, event: DomainEvent,
    ) -> Optional[Notification]:
        return await self._notify(
            db,
            recipient_id=event.answer_author_id,
            actor_id=event.question_author_id,
            type_=NotificationType.ACCEPTED,
            title="Answer Accepted",
            message="Your answer has been accepted!",
            event=event,
        )

    async def _notify(
        self,
        db: AsyncSession,
        recipient_id: str,
        actor_id: str,
        type_: NotificationType,
        title: str,
        message: str,
        event: DomainEvent,
    ) -> Optional[Notification]:
        if recipient_id == actor_id:
            logger.debug(
                "Skipping %s notification: user %s acted on own content",
                type_.value, actor_id,
            )
            return None

        async with translate_db_errors("notify", recipient_id=recipient_id, type=type_.value):
            notification = Notification(
                user_id=recipient_id,
                type=type_.value,
                title=title,
                message=message,
                question_id=event.question_id,
                answer_id=event.answer_id,
                triggered_by_id=actor_id,
            )
            db.add(notification)
            await db.flush()

        logger.info(
            "Notification %s (%s) for user %s", notification.id, type_.value, recipient_id,
        )
        return notification


class NotificationService:
    """Inbox queries for a single recipient."""

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: str,
        limit: Optional[int] = None,
    ) -> List[NotificationWithDetails]:
        """
        Newest first, with the referenced question, answer and actor.

        Query plan:
            notifications
              LEFT JOIN questions ON question_id
              LEFT JOIN answers   ON answer_id
              LEFT JOIN users     ON triggered_by_id
            WHERE user_id = :user ORDER BY created_at DESC, id DESC LIMIT :n
            → one round trip, ix_notifications_user_id_created_at
        """
        limit = limit or settings.notification_page_size
        actor = aliased(User)

        async with translate_db_errors("list_notifications", user_id=user_id):
            result = await db.execute(
                select(Notification, Question, Answer, actor)
                .outerjoin(Question, Notification.question_id == Question.id)
                .outerjoin(Answer, Notification.answer_id == Answer.id)
                .outerjoin(actor, Notification.triggered_by_id == actor.id)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            rows = result.all()

        return [
            NotificationWithDetails(
                **NotificationRead.model_validate(notification).model_dump(),
                question=QuestionRead.model_validate(question) if question else None,
                answer=AnswerRead.model_validate(answer) if answer else None,
                triggered_by=UserRead.model_validate(triggered_by) if triggered_by else None,
            )
            for notification, question, answer, triggered_by in rows
        ]

    async def unread_count(self, db: AsyncSession, user_id: str) -> int:
        async with translate_db_errors("unread_count", user_id=user_id):
            count = await db.scalar(
                select(func.count(Notification.id)).where(
                    Notification.user_id == user_id,
                    Notification.is_read.is_(False),
                )
            )
        return count or 0

    async def mark_read(self, db: AsyncSession, notification_id: int, user_id: str) -> None:
        """
        Mark one of the caller's notifications as read.

        Raises:
            NotFoundError: no such notification for this user. Someone
                           else's notification is indistinguishable from a
                           missing one.
        """
        async with translate_db_errors("mark_read", notification_id=notification_id):
            result = await db.execute(
                update(Notification)
                .where(
                    Notification.id == notification_id,
                    Notification.user_id == user_id,
                )
                .values(is_read=True)
            )
        if result.rowcount == 0:
            raise NotFoundError(resource="notification", resource_id=notification_id)

    async def mark_all_read(self, db: AsyncSession, user_id: str) -> int:
        """Returns how many notifications changed state."""
        async with translate_db_errors("mark_all_read", user_id=user_id):
            result = await db.execute(
                update(Notification)
                .where(
                    Notification.user_id == user_id,
                    Notification.is_read.is_(False),
                )
                .values(is_read=True)
            )
        logger.info("Marked %d notifications read for user %s", result.rowcount, user_id)
        return result.rowcount


# Module-level singletons
notification_dispatcher = NotificationDispatcher()
notification_service = NotificationService()
