"""
Askwell Backend — Question Service
==================================

What:  Asking a question: the question row, its tags and the tag counters
       in one transaction.
Who:   Called by POST /api/questions.

Flow:
    validate title/content/tags  (ValidationError, nothing written)
      → author exists            (NotFoundError)
      → INSERT questions
      → TagService.resolve_tags_for_question (counts + question_tags rows)
      → QueryService.get_question_detail     (response aggregate)

A failure at any step after the insert propagates and the request's
transaction rolls back, so a question never exists with partial tags.
"""

import logging
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from askwell.exceptions import NotFoundError, ValidationError
from askwell.models.question import Question
from askwell.models.user import User
from askwell.schemas.question import QuestionWithDetails
from askwell.services.base import translate_db_errors
from askwell.services.query_service import query_service
from askwell.services.tag_service import tag_service

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255


class QuestionService:

    async def create_question(
        self,
        db: AsyncSession,
        author_id: str,
        title: str,
        content: str,
        tag_names: Iterable[str],
        is_anonymous: bool = False,
    ) -> QuestionWithDetails:
        """
        Create a question with its tags.

        Args:
            db:           Async database session
            author_id:    Acting user
            title:        Non-empty, at most 255 characters after trimming
            content:      Non-empty rich text
            tag_names:    1 to max_tags_per_question names, normalized here
            is_anonymous: Hide the author in the client

        Raises:
            ValidationError: bad title, content or tags
            NotFoundError:   author does not exist
            DatabaseError:   unexpected store failure
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required", field="title")
        if len(title) > MAX_TITLE_LENGTH:
            raise ValidationError(
                f"Title can be at most {MAX_TITLE_LENGTH} characters", field="title",
            )
        if not (content or "").strip():
            raise ValidationError("Content is required", field="content")
        names = tag_service.validate_tag_names(tag_names)

        async with translate_db_errors("create_question", author_id=author_id):
            if await db.get(User, author_id) is None:
                raise NotFoundError(resource="user", resource_id=author_id)

            question = Question(
                title=title,
                content=content,
                author_id=author_id,
                is_anonymous=is_anonymous,
            )
            db.add(question)
            await db.flush()

        await tag_service.resolve_tags_for_question(db, question.id, names)
        logger.info(
            "Question %s created by %s with %d tags", question.id, author_id, len(names),
        )
        return await query_service.get_question_detail(db, question.id)


# Module-level singleton
question_service = QuestionService()
