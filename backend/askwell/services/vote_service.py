"""
Askwell Backend — Vote Service (the vote ledger)
================================================

What:  Records at most one vote per (user, target) and keeps the target's
       `votes` counter equal to the sum of the ledger's contributions.
Who:   Called by POST /api/votes and GET /api/votes/{type}/{id}.

Branches of cast_vote (weight: up = +1, down = -1):

    existing vote │ requested │ ledger change        │ counter delta
    ──────────────┼───────────┼──────────────────────┼──────────────────
    none          │ up/down   │ INSERT               │ +weight(new)
    same type     │ same      │ DELETE (toggle-off)  │ -weight(old)
    other type    │ other     │ UPDATE vote_type     │ weight(new) - weight(old) = ±2

Consistency:
    - The ledger row change and `UPDATE … SET votes = votes + :delta` run in
      the request's single transaction; either both commit or neither does.
    - The counter is never read-modified-written in Python, so concurrent
      voters on one target cannot lose each other's increments.
    - The existing-vote lookup takes a row lock (FOR UPDATE) on dialects
      that support it. Two simultaneous first votes by the same user hit
      the unique constraint and the loser gets a ConflictError.
"""

import logging
from typing import Optional, Type, Union

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.exceptions import NotFoundError, ValidationError
from askwell.models.answer import Answer
from askwell.models.question import Question
from askwell.models.vote import TargetType, Vote, VoteType
from askwell.schemas.vote import VoteRead, VoteResult
from askwell.services.base import translate_db_errors

logger = logging.getLogger(__name__)

_TARGET_MODELS = {
    TargetType.QUESTION: Question,
    TargetType.ANSWER: Answer,
}


def _parse(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            message=f"Invalid {field} '{value}'. Expected one of: {allowed}",
            field=field,
        )


class VoteService:
    """Vote ledger operations."""

    def _target_model(self, target_type: TargetType) -> Type[Union[Question, Answer]]:
        return _TARGET_MODELS[target_type]

    async def cast_vote(
        self,
        db: AsyncSession,
        user_id: str,
        target_type: Union[TargetType, str],
        target_id: int,
        vote_type: Union[VoteType, str],
    ) -> VoteResult:
        """
        Create, flip or remove the caller's vote on a question or answer.

        Args:
            db:          Async database session
            user_id:     The voter
            target_type: "question" or "answer"
            target_id:   Id of the question/answer
            vote_type:   "up" or "down"

        Returns:
            VoteResult with the surviving vote (None when toggled off) and the
            target's counter after the change

        Raises:
            ValidationError: unknown target_type or vote_type
            NotFoundError:  target does not exist
            ConflictError:  concurrent duplicate first vote by the same user
            DatabaseError:  unexpected store failure
        """
        target_type = _parse(TargetType, target_type, "target_type")
        vote_type = _parse(VoteType, vote_type, "vote_type")
        model = self._target_model(target_type)

        async with translate_db_errors(
            "cast_vote", user_id=user_id, target_type=target_type.value, target_id=target_id,
        ):
            target_exists = await db.scalar(select(model.id).where(model.id == target_id))
            if target_exists is None:
                raise NotFoundError(resource=target_type.value, resource_id=target_id)

            result = await db.execute(
                select(Vote)
                .where(
                    Vote.user_id == user_id,
                    Vote.target_type == target_type.value,
                    Vote.target_id == target_id,
                )
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            existing = result.scalar_one_or_none()

            vote: Optional[Vote]
            created = removed = False
            if existing is None:
                vote = Vote(
                    user_id=user_id,
                    target_type=target_type.value,
                    target_id=target_id,
                    vote_type=vote_type.value,
                )
                db.add(vote)
                delta = vote_type.weight
                created = True
            elif existing.vote_type == vote_type.value:
                await db.delete(existing)
                vote = None
                delta = -vote_type.weight
                removed = True
            else:
                delta = vote_type.weight - VoteType(existing.vote_type).weight
                existing.vote_type = vote_type.value
                vote = existing

            await db.flush()
            await db.execute(
                update(model)
                .where(model.id == target_id)
                .values(votes=model.votes + delta)
            )
            votes = await db.scalar(select(model.votes).where(model.id == target_id))

        logger.info(
            "Vote by %s on %s %s: %s (delta=%+d, votes=%d)",
            user_id, target_type.value, target_id,
            "removed" if removed else vote_type.value, delta, votes,
        )
        return VoteResult(
            removed=removed,
            created=created,
            vote=VoteRead.model_validate(vote) if vote is not None else None,
            votes=votes,
        )

    async def get_user_vote(
        self,
        db: AsyncSession,
        user_id: str,
        target_type: Union[TargetType, str],
        target_id: int,
    ) -> Optional[VoteRead]:
        """The caller's current vote on a target, or None."""
        target_type = _parse(TargetType, target_type, "target_type")
        async with translate_db_errors("get_user_vote", user_id=user_id, target_id=target_id):
            result = await db.execute(
                select(Vote)
                .where(
                    Vote.user_id == user_id,
                    Vote.target_type == target_type.value,
                    Vote.target_id == target_id,
                )
                .execution_options(populate_existing=True)
            )
            vote = result.scalar_one_or_none()
        return VoteRead.model_validate(vote) if vote is not None else None


# Module-level singleton
vote_service = VoteService()
