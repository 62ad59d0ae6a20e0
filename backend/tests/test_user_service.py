"""
Askwell Backend — User Service Tests
====================================
"""

import pytest

from askwell.exceptions import ConflictError, NotFoundError
from askwell.services.acceptance_service import acceptance_service
from askwell.services.answer_service import answer_service
from askwell.services.question_service import question_service
from askwell.services.user_service import UserService
from askwell.services.vote_service import vote_service


class TestUpsertUser:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_insert_then_update_profile(self, db):
        created = await self.service.upsert_user(db, "sub-1", email="a@example.com", first_name="Ann")
        assert created.xp == 0
        assert created.level == 1

        updated = await self.service.upsert_user(
            db, "sub-1", email="ann@example.com", first_name="Ann", last_name="Lee",
        )

        assert updated.id == "sub-1"
        assert updated.email == "ann@example.com"
        assert updated.last_name == "Lee"
        # SQLite hands back naive datetimes once the row is re-read
        assert updated.created_at.replace(tzinfo=None) == created.created_at.replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, db, users):
        with pytest.raises(ConflictError):
            await self.service.upsert_user(db, "newcomer", email="alice@example.com")

    @pytest.mark.asyncio
    async def test_get_missing_user(self, db):
        with pytest.raises(NotFoundError):
            await self.service.get_user(db, "ghost")

    @pytest.mark.asyncio
    async def test_list_users(self, db, users):
        listed = await self.service.list_users(db)
        assert {u.id for u in listed} == set(users)

    @pytest.mark.asyncio
    async def test_user_exists(self, db, users):
        assert await self.service.user_exists(db, "alice") is True
        assert await self.service.user_exists(db, "ghost") is False


class TestStats:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_user_stats(self, db, users):
        question = await question_service.create_question(db, "bob", "Q", "c", ["t"])
        other = await question_service.create_question(db, "alice", "Other", "c", ["t"])
        answer = await answer_service.create_answer(db, other.id, "bob", "A")
        await answer_service.create_answer(db, question.id, "carol", "A2")
        await vote_service.cast_vote(db, "alice", "question", question.id, "up")
        await vote_service.cast_vote(db, "carol", "question", question.id, "up")
        await vote_service.cast_vote(db, "dave", "answer", answer.id, "down")
        await acceptance_service.accept_answer(db, other.id, answer.id, "alice")

        stats = await self.service.get_user_stats(db, "bob")

        assert stats.questions_asked == 1
        assert stats.answers_provided == 1
        assert stats.votes_received == 1
        assert stats.accepted_answers == 1
        assert stats.level == 1

    @pytest.mark.asyncio
    async def test_user_stats_for_inactive_user(self, db, users):
        stats = await self.service.get_user_stats(db, "erin")

        assert stats.questions_asked == 0
        assert stats.answers_provided == 0
        assert stats.votes_received == 0
        assert stats.accepted_answers == 0

    @pytest.mark.asyncio
    async def test_user_stats_missing_user(self, db):
        with pytest.raises(NotFoundError):
            await self.service.get_user_stats(db, "ghost")

    @pytest.mark.asyncio
    async def test_site_stats(self, db, users):
        question = await question_service.create_question(db, "alice", "Q", "c", ["t"])
        await answer_service.create_answer(db, question.id, "bob", "A")

        stats = await self.service.get_site_stats(db)

        assert stats.total_questions == 1
        assert stats.total_answers == 1
        assert stats.total_users == len(users)
