"""
Askwell Backend — API Endpoint Tests
====================================

What:  Drives the FastAPI app over HTTPX's ASGI transport against the test
       database, checking status codes and the error body shape.

What we test:
    ✅ Happy path: ask → view → answer → vote → accept → notifications
    ✅ Status mapping: 400, 401, 403, 404, 409, 422
    ✅ Vote endpoint answers 201 for a new vote, 200 for flip/removal
    ✅ Request id header, health check, write rate limiting
"""

import pytest

from askwell.config import settings


def _as(user_id):
    return {"X-User-ID": user_id}


async def _ask(client, author="alice", tags=("python", "fastapi")):
    response = await client.post(
        "/api/questions",
        json={"title": "How do I test FastAPI?", "content": "<p>?</p>", "tags": list(tags)},
        headers=_as(author),
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestQuestionFlow:

    @pytest.mark.asyncio
    async def test_full_flow(self, client, users):
        question = await _ask(client)
        question_id = question["id"]
        assert [t["name"] for t in question["tags"]] == ["python", "fastapi"]

        detail = await client.get(f"/api/questions/{question_id}")
        assert detail.status_code == 200
        assert detail.json()["views"] == 1

        answer = await client.post(
            f"/api/questions/{question_id}/answers",
            json={"content": "Use httpx"},
            headers=_as("bob"),
        )
        assert answer.status_code == 201
        answer_id = answer.json()["id"]
        assert answer.json()["author"]["id"] == "bob"

        vote = await client.post(
            "/api/votes",
            json={"target_type": "answer", "target_id": answer_id, "vote_type": "up"},
            headers=_as("carol"),
        )
        assert vote.status_code == 201
        assert vote.json()["votes"] == 1

        accept = await client.post(
            f"/api/questions/{question_id}/accept-answer",
            json={"answer_id": answer_id},
            headers=_as("alice"),
        )
        assert accept.status_code == 200

        answers = await client.get(f"/api/questions/{question_id}/answers")
        assert answers.json()[0]["is_accepted"] is True

        inbox = await client.get("/api/notifications", headers=_as("bob"))
        assert [n["type"] for n in inbox.json()] == ["accepted"]
        unread = await client.get("/api/notifications/unread-count", headers=_as("alice"))
        assert unread.json() == {"count": 1}

        feed = await client.get("/api/questions", params={"sort_by": "unanswered"})
        assert feed.status_code == 200
        assert feed.json() == []

    @pytest.mark.asyncio
    async def test_mark_notifications_read(self, client, users):
        question = await _ask(client)
        await client.post(
            f"/api/questions/{question['id']}/answers",
            json={"content": "first"},
            headers=_as("bob"),
        )
        await client.post(
            f"/api/questions/{question['id']}/answers",
            json={"content": "second"},
            headers=_as("carol"),
        )
        inbox = (await client.get("/api/notifications", headers=_as("alice"))).json()

        denied = await client.patch(
            f"/api/notifications/{inbox[0]['id']}/read", headers=_as("bob"),
        )
        assert denied.status_code == 404

        marked = await client.patch(
            f"/api/notifications/{inbox[0]['id']}/read", headers=_as("alice"),
        )
        assert marked.status_code == 200

        read_all = await client.patch("/api/notifications/read-all", headers=_as("alice"))
        assert read_all.json()["updated"] == 1


class TestVoteEndpoint:

    @pytest.mark.asyncio
    async def test_status_codes_for_create_flip_and_remove(self, client, users):
        question = await _ask(client)
        body = {"target_type": "question", "target_id": question["id"], "vote_type": "up"}

        created = await client.post("/api/votes", json=body, headers=_as("bob"))
        flipped = await client.post(
            "/api/votes", json={**body, "vote_type": "down"}, headers=_as("bob"),
        )
        removed = await client.post(
            "/api/votes", json={**body, "vote_type": "down"}, headers=_as("bob"),
        )

        assert created.status_code == 201
        assert flipped.status_code == 200
        assert flipped.json()["votes"] == -1
        assert removed.status_code == 200
        assert removed.json() == {"removed": True, "created": False, "vote": None, "votes": 0}

    @pytest.mark.asyncio
    async def test_get_user_vote(self, client, users):
        question = await _ask(client)
        target = f"/api/votes/question/{question['id']}"

        assert (await client.get(target, headers=_as("bob"))).json() is None

        await client.post(
            "/api/votes",
            json={"target_type": "question", "target_id": question["id"], "vote_type": "up"},
            headers=_as("bob"),
        )
        vote = await client.get(target, headers=_as("bob"))
        assert vote.json()["vote_type"] == "up"

    @pytest.mark.asyncio
    async def test_vote_on_missing_target(self, client, users):
        response = await client.post(
            "/api/votes",
            json={"target_type": "answer", "target_id": 99, "vote_type": "up"},
            headers=_as("bob"),
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_bad_vote_type_is_422(self, client, users):
        response = await client.post(
            "/api/votes",
            json={"target_type": "question", "target_id": 1, "vote_type": "meh"},
            headers=_as("bob"),
        )
        assert response.status_code == 422


class TestErrorMapping:

    @pytest.mark.asyncio
    async def test_missing_user_header_is_401(self, client, users):
        response = await client.post(
            "/api/questions", json={"title": "t", "content": "c", "tags": ["a"]},
        )
        body = response.json()
        assert response.status_code == 401
        assert body["error"] == "authentication_required"
        assert "request_id" in body

    @pytest.mark.asyncio
    async def test_unknown_user_is_401(self, client, users):
        response = await client.get("/api/notifications", headers=_as("ghost"))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_too_many_tags_is_400(self, client, users):
        response = await client.post(
            "/api/questions",
            json={"title": "t", "content": "c", "tags": ["a", "b", "c", "d", "e", "f"]},
            headers=_as("alice"),
        )
        body = response.json()
        assert response.status_code == 400
        assert body["error"] == "validation_error"
        assert body["details"]["field"] == "tags"

    @pytest.mark.asyncio
    async def test_accept_by_non_author_is_403(self, client, users):
        question = await _ask(client)
        answer = await client.post(
            f"/api/questions/{question['id']}/answers",
            json={"content": "mine"},
            headers=_as("bob"),
        )

        response = await client.post(
            f"/api/questions/{question['id']}/accept-answer",
            json={"answer_id": answer.json()["id"]},
            headers=_as("bob"),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "unauthorized"
        detail = await client.get(f"/api/questions/{question['id']}")
        assert detail.json()["accepted_answer_id"] is None

    @pytest.mark.asyncio
    async def test_missing_question_is_404(self, client, users):
        response = await client.get("/api/questions/12345")
        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "question"

    @pytest.mark.asyncio
    async def test_duplicate_tag_is_409(self, client, users):
        first = await client.post("/api/tags", json={"name": "docker"}, headers=_as("alice"))
        second = await client.post("/api/tags", json={"name": "Docker"}, headers=_as("bob"))

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_failed_write_is_rolled_back(self, client, users):
        response = await client.post(
            "/api/questions/999/answers", json={"content": "lost"}, headers=_as("bob"),
        )
        assert response.status_code == 404

        stats = await client.get("/api/stats")
        assert stats.json()["total_answers"] == 0


class TestDirectoryEndpoints:

    @pytest.mark.asyncio
    async def test_tags_endpoints(self, client, users):
        await _ask(client, tags=("python", "fastapi"))
        await _ask(client, author="bob", tags=("python",))

        popular = (await client.get("/api/tags/popular")).json()
        assert popular[0]["name"] == "python"
        assert popular[0]["question_count"] == 2

        search = (await client.get("/api/tags/search", params={"q": "fast"})).json()
        assert [t["name"] for t in search] == ["fastapi"]

        listed = (await client.get("/api/tags")).json()
        assert [t["name"] for t in listed] == ["fastapi", "python"]

    @pytest.mark.asyncio
    async def test_user_endpoints(self, client, users):
        upserted = await client.put(
            "/api/users/new-user",
            json={"email": "new@example.com", "first_name": "New"},
            headers=_as("new-user"),
        )
        assert upserted.status_code == 200
        assert upserted.json()["id"] == "new-user"

        fetched = await client.get("/api/users/new-user")
        assert fetched.json()["first_name"] == "New"

        stats = await client.get("/api/users/new-user/stats")
        assert stats.json()["questions_asked"] == 0

        assert (await client.get("/api/users/nobody")).status_code == 404

    @pytest.mark.asyncio
    async def test_profile_upsert_requires_identity(self, client, users):
        response = await client.put("/api/users/alice", json={})

        assert response.status_code == 401
        alice = (await client.get("/api/users/alice")).json()
        assert alice["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_profile_upsert_rejects_other_users(self, client, users):
        response = await client.put(
            "/api/users/alice", json={"first_name": "Mallory"}, headers=_as("bob"),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "unauthorized"
        alice = (await client.get("/api/users/alice")).json()
        assert alice["first_name"] == "Alice"



class TestInfrastructure:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/api/tags", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client):
        response = await client.get("/api/tags")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_writes_are_rate_limited(self, client, users, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 2)

        statuses = [
            (await client.post("/api/tags", json={"name": f"t{i}"}, headers=_as("alice"))).status_code
            for i in range(3)
        ]
        reads = await client.get("/api/tags")

        assert statuses == [201, 201, 429]
        assert reads.status_code == 200
