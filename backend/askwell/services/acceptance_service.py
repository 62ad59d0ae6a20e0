"""
Askwell Backend — Acceptance Service
====================================

What:  Lets a question's author mark exactly one answer as accepted.
Who:   Called by POST /api/questions/{id}/accept-answer.

Checks, in order (nothing is written until all pass):
    1. Question exists (loaded FOR UPDATE)         else NotFoundError
    2. Acting user is the question's author         else UnauthorizedError
    3. Answer exists and belongs to this question   else NotFoundError

Effect:
    - any other answer of the question with is_accepted = true is cleared
    - questions.accepted_answer_id = :answer_id, updated_at bumped
    - answers.is_accepted = true
    - AnswerAccepted dispatched (no notification when accepting one's own answer)

Accepting the answer that is already accepted changes nothing and sends no
second notification.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.events import AnswerAccepted
from askwell.exceptions import NotFoundError, UnauthorizedError
from askwell.models.answer import Answer
from askwell.models.question import Question
from askwell.models.user import utcnow
from askwell.services.base import translate_db_errors
from askwell.services.notification_service import notification_dispatcher

logger = logging.getLogger(__name__)


class AcceptanceService:

    async def accept_answer(
        self,
        db: AsyncSession,
        question_id: int,
        answer_id: int,
        user_id: str,
    ) -> None:
        """
        Raises:
            NotFoundError:     missing question, missing answer, or an answer
                               that belongs to a different question
            UnauthorizedError: acting user is not the question's author
            DatabaseError:     unexpected store failure
        """
        async with translate_db_errors(
            "accept_answer", question_id=question_id, answer_id=answer_id,
        ):
            result = await db.execute(
                select(Question)
                .where(Question.id == question_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            question = result.scalar_one_or_none()
            if question is None:
                raise NotFoundError(resource="question", resource_id=question_id)

            if question.author_id != user_id:
                logger.warning(
                    "User %s tried to accept an answer on question %s owned by %s",
                    user_id, question_id, question.author_id,
                )
                raise UnauthorizedError(
                    message="Only the question's author can accept an answer",
                    context={"question_id": question_id},
                )

            answer = await db.get(Answer, answer_id, populate_existing=True)
            if answer is None or answer.question_id != question_id:
                raise NotFoundError(resource="answer", resource_id=answer_id)

            if question.accepted_answer_id == answer_id and answer.is_accepted:
                logger.info("Answer %s already accepted on question %s", answer_id, question_id)
                return

            previous = await db.scalars(
                select(Answer).where(
                    Answer.question_id == question_id,
                    Answer.id != answer_id,
                    Answer.is_accepted.is_(True),
                )
            )
            for prior in previous:
                prior.is_accepted = False
                prior.updated_at = utcnow()
                logger.info("Cleared accepted flag on answer %s", prior.id)

            now = utcnow()
            question.accepted_answer_id = answer_id
            question.updated_at = now
            answer.is_accepted = True
            answer.updated_at = now
            await db.flush()

        logger.info("Answer %s accepted on question %s", answer_id, question_id)
        await notification_dispatcher.dispatch(
            db,
            AnswerAccepted(
                question_id=question_id,
                answer_id=answer_id,
                question_author_id=question.author_id,
                answer_author_id=answer.author_id,
            ),
        )


# Module-level singleton
acceptance_service = AcceptanceService()
