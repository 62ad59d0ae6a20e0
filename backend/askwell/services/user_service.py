"""
Askwell Backend — User Service
==============================

What:  User directory (upsert from the identity provider's profile, lookup,
       listing) and the statistics shown on profiles and the landing page.
How:   Gamification fields (xp, level, streak) are read here but never
       written; an upsert only touches profile fields.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.exceptions import NotFoundError
from askwell.models.answer import Answer
from askwell.models.question import Question
from askwell.models.user import User, utcnow
from askwell.schemas.user import SiteStats, UserRead, UserStats
from askwell.services.base import translate_db_errors

logger = logging.getLogger(__name__)


class UserService:

    async def upsert_user(
        self,
        db: AsyncSession,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
    ) -> UserRead:
        """
        Insert the user, or refresh the profile fields of an existing one.

        Raises:
            ConflictError: email already used by another user, or a
                           concurrent insert of the same id
        """
        async with translate_db_errors("upsert_user", user_id=user_id):
            user = await db.get(User, user_id)
            if user is None:
                user = User(id=user_id)
                db.add(user)
                logger.info("Creating user %s", user_id)
            user.email = email
            user.first_name = first_name
            user.last_name = last_name
            user.profile_image_url = profile_image_url
            user.updated_at = utcnow()
            await db.flush()
        return UserRead.model_validate(user)

    async def get_user(self, db: AsyncSession, user_id: str) -> UserRead:
        async with translate_db_errors("get_user", user_id=user_id):
            user = await db.get(User, user_id, populate_existing=True)
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return UserRead.model_validate(user)

    async def user_exists(self, db: AsyncSession, user_id: str) -> bool:
        async with translate_db_errors("user_exists", user_id=user_id):
            found = await db.scalar(select(User.id).where(User.id == user_id))
        return found is not None

    async def list_users(self, db: AsyncSession) -> List[UserRead]:
        async with translate_db_errors("list_users"):
            result = await db.execute(
                select(User)
                .order_by(User.created_at.desc(), User.id)
                .execution_options(populate_existing=True)
            )
            return [UserRead.model_validate(u) for u in result.scalars()]

    async def get_user_stats(self, db: AsyncSession, user_id: str) -> UserStats:
        """
        Profile numbers for one user.

        votes_received is the sum of the vote counters on the user's
        questions and answers, so downvotes reduce it.
        """
        async with translate_db_errors("get_user_stats", user_id=user_id):
            user = await db.get(User, user_id, populate_existing=True)
            if user is None:
                raise NotFoundError(resource="user", resource_id=user_id)

            question_count, question_votes = (
                await db.execute(
                    select(
                        func.count(Question.id),
                        func.coalesce(func.sum(Question.votes), 0),
                    ).where(Question.author_id == user_id)
                )
            ).one()
            answer_count, answer_votes, accepted_count = (
                await db.execute(
                    select(
                        func.count(Answer.id),
                        func.coalesce(func.sum(Answer.votes), 0),
                        func.count(Answer.id).filter(Answer.is_accepted.is_(True)),
                    ).where(Answer.author_id == user_id)
                )
            ).one()

        return UserStats(
            xp=user.xp,
            level=user.level,
            streak=user.streak,
            questions_asked=question_count,
            answers_provided=answer_count,
            votes_received=int(question_votes) + int(answer_votes),
            accepted_answers=accepted_count,
        )

    async def get_site_stats(self, db: AsyncSession) -> SiteStats:
        async with translate_db_errors("get_site_stats"):
            total_questions = await db.scalar(select(func.count(Question.id)))
            total_answers = await db.scalar(select(func.count(Answer.id)))
            total_users = await db.scalar(select(func.count(User.id)))
        return SiteStats(
            total_questions=total_questions or 0,
            total_answers=total_answers or 0,
            total_users=total_users or 0,
        )


# Module-level singleton
user_service = UserService()
