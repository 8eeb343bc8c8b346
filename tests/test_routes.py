"""
HackReg Backend - API Endpoint Tests
======================================

What:  End-to-end HTTP behaviour of the registration, challenge and health routes.
How:   httpx AsyncClient over ASGITransport with get_db_session pointed at a
       throwaway SQLite database (see conftest.test_client).

What we test:
    ✅ Missing identity → 401
    ✅ Challenge GET is idempotent and never exposes the solution
    ✅ Wrong answer → 400 and the attempt is still counted
    ✅ Right answer → 200 complete; any later POST → 403
    ✅ Registration closed → 403 before anything is touched
    ✅ Non-integer answers → 422
    ✅ Registration status and health endpoints
"""

from unittest.mock import AsyncMock, patch

import pytest

from hackreg.services.challenge_store import SQLAlchemyChallengeStore

ALICE = {"X-User-Id": "alice"}


async def _stored_solution(session_factory, user_id="alice"):
    async with session_factory() as session:
        challenge = await SQLAlchemyChallengeStore().find_by_user_id(session, user_id)
        return challenge.solution


class TestIdentity:
    """Requests without a resolved user id."""

    @pytest.mark.asyncio
    async def test_get_without_user_is_unauthorized(self, test_client):
        response = await test_client.get("/registration/challenge/")
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_blank_user_is_unauthorized(self, test_client):
        response = await test_client.post(
            "/registration/challenge/", json={"solution": 1}, headers={"X-User-Id": "  "}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_overlong_user_is_rejected(self, test_client):
        response = await test_client.get(
            "/registration/challenge/", headers={"X-User-Id": "u" * 256}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestGetChallenge:
    """GET /registration/challenge/."""

    @pytest.mark.asyncio
    async def test_first_get_creates_challenge(self, test_client):
        response = await test_client.get("/registration/challenge/", headers=ALICE)

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"people", "alliances", "attempts", "complete"}
        assert body["attempts"] == 0
        assert body["complete"] is False
        assert body["people"]
        for a, b in body["alliances"]:
            assert a in body["people"] and b in body["people"]

    @pytest.mark.asyncio
    async def test_get_is_idempotent(self, test_client, session_factory):
        first = await test_client.get("/registration/challenge/", headers=ALICE)
        solution = await _stored_solution(session_factory)
        second = await test_client.get("/registration/challenge/", headers=ALICE)

        assert first.json() == second.json()

        # The solution read after the first GET still solves it after the second
        response = await test_client.post(
            "/registration/challenge/", json={"solution": solution}, headers=ALICE
        )
        assert response.status_code == 200
        assert response.json()["complete"] is True

    @pytest.mark.asyncio
    async def test_users_get_their_own_challenge(self, test_client, session_factory):
        await test_client.get("/registration/challenge/", headers=ALICE)
        await test_client.get("/registration/challenge/", headers={"X-User-Id": "bob"})

        alice = await _stored_solution(session_factory, "alice")
        bob = await _stored_solution(session_factory, "bob")
        assert alice is not None and bob is not None

    @pytest.mark.asyncio
    async def test_solution_never_in_response(self, test_client):
        response = await test_client.get("/registration/challenge/", headers=ALICE)
        assert "solution" not in response.text

    @pytest.mark.asyncio
    async def test_response_carries_request_id(self, test_client):
        response = await test_client.get(
            "/registration/challenge/", headers={**ALICE, "X-Request-ID": "abc123"}
        )
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_overlong_request_id_is_replaced(self, test_client):
        supplied = "r" * 500
        response = await test_client.get(
            "/registration/challenge/", headers={**ALICE, "X-Request-ID": supplied}
        )

        echoed = response.headers["X-Request-ID"]
        assert echoed != supplied
        assert 0 < len(echoed) <= 64


class TestSubmitChallenge:
    """POST /registration/challenge/."""

    @pytest.mark.asyncio
    async def test_wrong_answer_is_counted(self, test_client, session_factory):
        await test_client.get("/registration/challenge/", headers=ALICE)
        solution = await _stored_solution(session_factory)

        response = await test_client.post(
            "/registration/challenge/", json={"solution": solution + 1}, headers=ALICE
        )

        assert response.status_code == 400
        assert response.json()["error"] == "incorrect_answer"
        assert "solution" not in response.text

        status = await test_client.get("/registration/challenge/", headers=ALICE)
        assert status.json()["attempts"] == 1
        assert status.json()["complete"] is False

    @pytest.mark.asyncio
    async def test_correct_answer_completes(self, test_client, session_factory):
        await test_client.get("/registration/challenge/", headers=ALICE)
        solution = await _stored_solution(session_factory)

        await test_client.post(
            "/registration/challenge/", json={"solution": solution - 1}, headers=ALICE
        )
        response = await test_client.post(
            "/registration/challenge/", json={"solution": solution}, headers=ALICE
        )

        assert response.status_code == 200
        body = response.json()
        assert body["complete"] is True
        assert body["attempts"] == 2
        assert "solution" not in body

    @pytest.mark.asyncio
    async def test_post_after_solved_is_forbidden(self, test_client, session_factory):
        await test_client.get("/registration/challenge/", headers=ALICE)
        solution = await _stored_solution(session_factory)
        await test_client.post(
            "/registration/challenge/", json={"solution": solution}, headers=ALICE
        )

        response = await test_client.post(
            "/registration/challenge/", json={"solution": solution}, headers=ALICE
        )

        assert response.status_code == 403
        assert response.json()["error"] == "challenge_already_solved"
        status = await test_client.get("/registration/challenge/", headers=ALICE)
        assert status.json()["attempts"] == 1

    @pytest.mark.asyncio
    async def test_post_without_challenge_is_incorrect(self, test_client):
        response = await test_client.post(
            "/registration/challenge/", json={"solution": 12_345_678}, headers=ALICE
        )

        assert response.status_code == 400
        assert response.json()["error"] == "incorrect_answer"

    @pytest.mark.asyncio
    async def test_registration_closed(self, test_client, session_factory):
        await test_client.get("/registration/challenge/", headers=ALICE)
        solution = await _stored_solution(session_factory)

        with patch("hackreg.routes.challenge.is_registration_alive", return_value=False):
            response = await test_client.post(
                "/registration/challenge/", json={"solution": solution}, headers=ALICE
            )

        assert response.status_code == 403
        assert response.json()["error"] == "registration_closed"
        status = await test_client.get("/registration/challenge/", headers=ALICE)
        assert status.json()["attempts"] == 0
        assert status.json()["complete"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"solution": "123"}, {"solution": 1.5}, {}])
    async def test_non_integer_answer_rejected(self, test_client, payload):
        response = await test_client.post(
            "/registration/challenge/", json=payload, headers=ALICE
        )
        assert response.status_code == 422


class TestRegistrationStatus:
    """GET /registration/status/."""

    @pytest.mark.asyncio
    async def test_open(self, test_client):
        response = await test_client.get("/registration/status/")
        assert response.status_code == 200
        assert response.json() == {"alive": True}

    @pytest.mark.asyncio
    async def test_closed(self, test_client):
        with patch("hackreg.routes.registration.is_registration_alive", return_value=False):
            response = await test_client.get("/registration/status/")
        assert response.json() == {"alive": False}


class TestHealth:
    """GET /health."""

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        with patch("hackreg.routes.health.ping_database", new=AsyncMock()):
            response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["registration"] == "open"

    @pytest.mark.asyncio
    async def test_database_down(self, test_client):
        failing = AsyncMock(side_effect=OSError("connection refused"))
        with patch("hackreg.routes.health.ping_database", new=failing):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
