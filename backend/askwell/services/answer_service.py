"""
Askwell Backend — Answer Service
================================

What:  Posting an answer. Inserts the answer, bumps the question's
       `updated_at` (the "active" feed) and dispatches AnswerCreated so the
       question's author is notified, all in the caller's transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from askwell.events import AnswerCreated
from askwell.exceptions import NotFoundError, ValidationError
from askwell.models.answer import Answer
from askwell.models.question import Question
from askwell.models.user import User, utcnow
from askwell.schemas.question import AnswerRead, AnswerWithAuthor
from askwell.schemas.user import UserRead
from askwell.services.base import translate_db_errors
from askwell.services.notification_service import notification_dispatcher

logger = logging.getLogger(__name__)


class AnswerService:

    async def create_answer(
        self,
        db: AsyncSession,
        question_id: int,
        author_id: str,
        content: str,
        is_anonymous: bool = False,
    ) -> AnswerWithAuthor:
        """
        Raises:
            ValidationError: empty content
            NotFoundError:   question or author does not exist
        """
        if not (content or "").strip():
            raise ValidationError("Content is required", field="content")

        async with translate_db_errors("create_answer", question_id=question_id):
            question = await db.get(Question, question_id)
            if question is None:
                raise NotFoundError(resource="question", resource_id=question_id)
            author = await db.get(User, author_id)
            if author is None:
                raise NotFoundError(resource="user", resource_id=author_id)

            answer = Answer(
                question_id=question_id,
                author_id=author_id,
                content=content,
                is_anonymous=is_anonymous,
            )
            db.add(answer)
            question.updated_at = utcnow()
            await db.flush()

        logger.info("Answer %s posted on question %s by %s", answer.id, question_id, author_id)
        await notification_dispatcher.dispatch(
            db,
            AnswerCreated(
                question_id=question_id,
                answer_id=answer.id,
                question_author_id=question.author_id,
                answer_author_id=author_id,
            ),
        )
        return AnswerWithAuthor(
            **AnswerRead.model_validate(answer).model_dump(),
            author=UserRead.model_validate(author),
        )


# Module-level singleton
answer_service = AnswerService()
