"""
Askwell Backend — Query Service (read-side façade)
==================================================

What:  Builds the response aggregates for questions and answers. Owns no
       state apart from the additive view counter.
Who:   Question routes, and QuestionService to return a freshly created
       question in its detail shape.

Batching (list_questions):
    1. SELECT questions JOIN users                      (the page)
    2. SELECT question_tags JOIN tags WHERE question_id IN (:page)
    3. SELECT question_id, count(*) FROM answers WHERE question_id IN (:page)
       GROUP BY question_id
    Three queries per page regardless of page size.

Every read sets `populate_existing` so objects already in the session's
identity map pick up counters changed by UPDATE expressions earlier in
the same transaction.
"""

import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.config import settings
from askwell.exceptions import NotFoundError, ValidationError
from askwell.models.answer import Answer
from askwell.models.question import Question
from askwell.models.tag import QuestionTag, Tag
from askwell.models.user import User
from askwell.schemas.question import (
    AnswerRead,
    AnswerWithAuthor,
    QuestionRead,
    QuestionWithDetails,
)
from askwell.schemas.tag import TagRead
from askwell.schemas.user import UserRead
from askwell.services.base import translate_db_errors

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("newest", "active", "unanswered", "votes")


def _answer_with_author(answer: Answer, author: User) -> AnswerWithAuthor:
    return AnswerWithAuthor(
        **AnswerRead.model_validate(answer).model_dump(),
        author=UserRead.model_validate(author),
    )


class QueryService:
    """Question and answer read models."""

    def _page_size(self, limit: Optional[int]) -> int:
        if limit is None:
            return settings.default_page_size
        if limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")
        return min(limit, settings.max_page_size)

    async def list_questions(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        offset: int = 0,
        sort_by: str = "newest",
    ) -> List[QuestionWithDetails]:
        """
        One page of the question feed.

        Sort orders:
            newest      created_at DESC
            active      updated_at DESC (new answers and acceptances bump it)
            votes       votes DESC
            unanswered  accepted_answer_id IS NULL, created_at DESC
        `id DESC` breaks ties so pages are stable.

        Raises:
            ValidationError: unknown sort_by, limit < 1 or offset < 0
        """
        if sort_by not in SORT_OPTIONS:
            raise ValidationError(
                f"sort_by must be one of: {', '.join(SORT_OPTIONS)}",
                field="sort_by",
            )
        if offset < 0:
            raise ValidationError("offset cannot be negative", field="offset")
        page_size = self._page_size(limit)

        stmt = select(Question, User).join(User, Question.author_id == User.id)
        if sort_by == "active":
            stmt = stmt.order_by(Question.updated_at.desc())
        elif sort_by == "votes":
            stmt = stmt.order_by(Question.votes.desc())
        else:
            if sort_by == "unanswered":
                stmt = stmt.where(Question.accepted_answer_id.is_(None))
            stmt = stmt.order_by(Question.created_at.desc())
        stmt = (
            stmt.order_by(Question.id.desc())
            .limit(page_size)
            .offset(offset)
            .execution_options(populate_existing=True)
        )

        async with translate_db_errors("list_questions", sort_by=sort_by):
            rows = (await db.execute(stmt)).all()
            ids = [question.id for question, _ in rows]
            tags_by_question = await self._tags_for(db, ids)
            answer_counts = await self._answer_counts(db, ids)

        logger.debug("Listed %d questions (sort=%s, offset=%d)", len(rows), sort_by, offset)
        return [
            self._question_details(
                question,
                author,
                tags_by_question.get(question.id, []),
                answer_counts.get(question.id, 0),
            )
            for question, author in rows
        ]

    async def get_question_detail(
        self, db: AsyncSession, question_id: int,
    ) -> QuestionWithDetails:
        """
        Raises:
            NotFoundError: question does not exist
        """
        async with translate_db_errors("get_question_detail", question_id=question_id):
            result = await db.execute(
                select(Question, User)
                .join(User, Question.author_id == User.id)
                .where(Question.id == question_id)
                .execution_options(populate_existing=True)
            )
            row = result.one_or_none()
            if row is None:
                raise NotFoundError(resource="question", resource_id=question_id)
            question, author = row

            tags = await self._tags_for(db, [question.id])
            counts = await self._answer_counts(db, [question.id])

            accepted = None
            if question.accepted_answer_id is not None:
                accepted_row = (
                    await db.execute(
                        select(Answer, User)
                        .join(User, Answer.author_id == User.id)
                        .where(Answer.id == question.accepted_answer_id)
                        .execution_options(populate_existing=True)
                    )
                ).one_or_none()
                if accepted_row is not None:
                    accepted = _answer_with_author(*accepted_row)

        return self._question_details(
            question,
            author,
            tags.get(question.id, []),
            counts.get(question.id, 0),
            accepted,
        )

    async def list_answers(self, db: AsyncSession, question_id: int) -> List[AnswerWithAuthor]:
        """Best answers first: votes DESC, then newest."""
        async with translate_db_errors("list_answers", question_id=question_id):
            exists = await db.scalar(select(Question.id).where(Question.id == question_id))
            if exists is None:
                raise NotFoundError(resource="question", resource_id=question_id)

            result = await db.execute(
                select(Answer, User)
                .join(User, Answer.author_id == User.id)
                .where(Answer.question_id == question_id)
                .order_by(Answer.votes.desc(), Answer.created_at.desc(), Answer.id.desc())
                .execution_options(populate_existing=True)
            )
            rows = result.all()
        return [_answer_with_author(answer, author) for answer, author in rows]

    async def increment_views(self, db: AsyncSession, question_id: int) -> None:
        """`views = views + 1`, evaluated by the store so concurrent hits add up."""
        async with translate_db_errors("increment_views", question_id=question_id):
            result = await db.execute(
                update(Question)
                .where(Question.id == question_id)
                .values(views=Question.views + 1)
            )
        if result.rowcount == 0:
            raise NotFoundError(resource="question", resource_id=question_id)

    # ── Batch helpers ─────────────────────────────────────────────────────

    async def _tags_for(
        self, db: AsyncSession, question_ids: Sequence[int],
    ) -> Dict[int, List[Tag]]:
        if not question_ids:
            return {}
        result = await db.execute(
            select(QuestionTag.question_id, Tag)
            .join(Tag, Tag.id == QuestionTag.tag_id)
            .where(QuestionTag.question_id.in_(question_ids))
            .order_by(QuestionTag.id)
            .execution_options(populate_existing=True)
        )
        grouped: Dict[int, List[Tag]] = {}
        for question_id, tag in result.all():
            grouped.setdefault(question_id, []).append(tag)
        return grouped

    async def _answer_counts(
        self, db: AsyncSession, question_ids: Sequence[int],
    ) -> Dict[int, int]:
        if not question_ids:
            return {}
        result = await db.execute(
            select(Answer.question_id, func.count(Answer.id))
            .where(Answer.question_id.in_(question_ids))
            .group_by(Answer.question_id)
        )
        return {question_id: count for question_id, count in result.all()}

    def _question_details(
        self,
        question: Question,
        author: User,
        tags: List[Tag],
        answer_count: int,
        accepted_answer: Optional[AnswerWithAuthor] = None,
    ) -> QuestionWithDetails:
        return QuestionWithDetails(
            **QuestionRead.model_validate(question).model_dump(),
            author=UserRead.model_validate(author),
            tags=[TagRead.model_validate(t) for t in tags],
            answer_count=answer_count,
            accepted_answer=accepted_answer,
        )


# Module-level singleton
query_service = QueryService()
