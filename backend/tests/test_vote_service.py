"""
Askwell Backend — Vote Service Tests
====================================

What we test:
    ✅ New up/down votes move the counter by ±1
    ✅ Repeating a vote removes it and restores the counter
    ✅ Flipping a vote moves the counter by 2 and keeps one row
    ✅ Votes on answers move the answer's counter only
    ✅ Missing targets raise NotFoundError and write nothing
    ✅ Concurrent up-votes from N users add exactly N
"""

import asyncio

import pytest
from sqlalchemy import func, select

from askwell.exceptions import NotFoundError, ValidationError
from askwell.models import Answer, Question, Vote
from askwell.services.answer_service import answer_service
from askwell.services.question_service import question_service
from askwell.services.vote_service import VoteService


async def _ask(db, author="alice"):
    question = await question_service.create_question(
        db,
        author_id=author,
        title="How do I cancel an asyncio task?",
        content="<p>Task keeps running after cancel()</p>",
        tag_names=["python", "asyncio"],
    )
    return question.id


async def _counter(db, model, target_id):
    return await db.scalar(
        select(model.votes)
        .where(model.id == target_id)
        .execution_options(populate_existing=True)
    )


async def _vote_rows(db, user_id, target_type, target_id):
    return await db.scalar(
        select(func.count(Vote.id)).where(
            Vote.user_id == user_id,
            Vote.target_type == target_type,
            Vote.target_id == target_id,
        )
    )


class TestCastVote:

    def setup_method(self):
        self.service = VoteService()

    @pytest.mark.asyncio
    async def test_new_up_vote_adds_one(self, db, users):
        question_id = await _ask(db)

        result = await self.service.cast_vote(db, "bob", "question", question_id, "up")

        assert result.created is True
        assert result.removed is False
        assert result.vote.vote_type.value == "up"
        assert result.votes == 1
        assert await _counter(db, Question, question_id) == 1

    @pytest.mark.asyncio
    async def test_new_down_vote_subtracts_one(self, db, users):
        question_id = await _ask(db)

        result = await self.service.cast_vote(db, "bob", "question", question_id, "down")

        assert result.votes == -1
        assert await _counter(db, Question, question_id) == -1

    @pytest.mark.asyncio
    async def test_same_vote_twice_toggles_off(self, db, users):
        question_id = await _ask(db)
        before = await _counter(db, Question, question_id)

        await self.service.cast_vote(db, "bob", "question", question_id, "up")
        result = await self.service.cast_vote(db, "bob", "question", question_id, "up")

        assert result.removed is True
        assert result.vote is None
        assert result.votes == before
        assert await _vote_rows(db, "bob", "question", question_id) == 0
        assert await _counter(db, Question, question_id) == before

    @pytest.mark.asyncio
    async def test_down_vote_twice_toggles_off(self, db, users):
        question_id = await _ask(db)

        await self.service.cast_vote(db, "bob", "question", question_id, "down")
        result = await self.service.cast_vote(db, "bob", "question", question_id, "down")

        assert result.removed is True
        assert await _counter(db, Question, question_id) == 0

    @pytest.mark.asyncio
    async def test_flip_up_to_down_moves_by_two(self, db, users):
        question_id = await _ask(db)
        await self.service.cast_vote(db, "bob", "question", question_id, "up")
        after_first = await _counter(db, Question, question_id)

        result = await self.service.cast_vote(db, "bob", "question", question_id, "down")

        assert result.created is False
        assert result.removed is False
        assert result.vote.vote_type.value == "down"
        assert await _counter(db, Question, question_id) == after_first - 2
        assert await _vote_rows(db, "bob", "question", question_id) == 1
        stored = await db.scalar(
            select(Vote.vote_type).where(Vote.user_id == "bob", Vote.target_id == question_id)
        )
        assert stored == "down"

    @pytest.mark.asyncio
    async def test_flip_down_to_up_moves_by_two(self, db, users):
        question_id = await _ask(db)
        await self.service.cast_vote(db, "bob", "question", question_id, "down")

        result = await self.service.cast_vote(db, "bob", "question", question_id, "up")

        assert result.votes == 1

    @pytest.mark.asyncio
    async def test_answer_vote_changes_only_the_answer(self, db, users):
        question_id = await _ask(db)
        answer = await answer_service.create_answer(db, question_id, "bob", "Use a timeout")

        result = await self.service.cast_vote(db, "carol", "answer", answer.id, "up")

        assert result.votes == 1
        assert await _counter(db, Answer, answer.id) == 1
        assert await _counter(db, Question, question_id) == 0

    @pytest.mark.asyncio
    async def test_same_id_question_and_answer_are_separate_targets(self, db, users):
        question_id = await _ask(db)
        answer = await answer_service.create_answer(db, question_id, "bob", "Answer")
        assert answer.id == question_id  # both are the first row of their table

        await self.service.cast_vote(db, "carol", "question", question_id, "up")
        result = await self.service.cast_vote(db, "carol", "answer", answer.id, "up")

        assert result.created is True
        assert await _counter(db, Question, question_id) == 1
        assert await _counter(db, Answer, answer.id) == 1

    @pytest.mark.asyncio
    async def test_missing_question_raises_not_found(self, db, users):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.cast_vote(db, "bob", "question", 999, "up")

        assert exc_info.value.resource == "question"
        assert await db.scalar(select(func.count(Vote.id))) == 0

    @pytest.mark.asyncio
    async def test_missing_answer_raises_not_found(self, db, users):
        await _ask(db)

        with pytest.raises(NotFoundError):
            await self.service.cast_vote(db, "bob", "answer", 12345, "down")

    @pytest.mark.asyncio
    async def test_invalid_vote_type_rejected(self, db, users):
        question_id = await _ask(db)

        with pytest.raises(ValidationError) as exc_info:
            await self.service.cast_vote(db, "bob", "question", question_id, "sideways")

        assert exc_info.value.field == "vote_type"
        assert await _counter(db, Question, question_id) == 0

    @pytest.mark.asyncio
    async def test_invalid_target_type_rejected(self, db, users):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.cast_vote(db, "bob", "comment", 1, "up")

        assert exc_info.value.field == "target_type"
        assert await db.scalar(select(func.count(Vote.id))) == 0


class TestGetUserVote:

    def setup_method(self):
        self.service = VoteService()

    @pytest.mark.asyncio
    async def test_returns_current_vote(self, db, users):
        question_id = await _ask(db)
        await self.service.cast_vote(db, "bob", "question", question_id, "down")

        vote = await self.service.get_user_vote(db, "bob", "question", question_id)

        assert vote is not None
        assert vote.vote_type.value == "down"
        assert vote.user_id == "bob"

    @pytest.mark.asyncio
    async def test_returns_none_without_vote(self, db, users):
        question_id = await _ask(db)

        assert await self.service.get_user_vote(db, "carol", "question", question_id) is None


class TestConcurrentVotes:

    @pytest.mark.asyncio
    async def test_concurrent_up_votes_are_not_lost(self, db, users, session_factory):
        from askwell.models import User

        voters = [f"voter-{i}" for i in range(10)]
        for voter in voters:
            db.add(User(id=voter))
        question_id = await _ask(db)
        await db.commit()

        service = VoteService()

        async def vote(voter):
            async with session_factory() as session:
                await service.cast_vote(session, voter, "question", question_id, "up")
                await session.commit()

        await asyncio.gather(*(vote(voter) for voter in voters))

        assert await _counter(db, Question, question_id) == len(voters)
        assert await db.scalar(
            select(func.count(Vote.id)).where(Vote.target_id == question_id)
        ) == len(voters)
