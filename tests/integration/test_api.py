"""Integration tests for the HTTP API, served in-process through httpx."""

import asyncio
from datetime import timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from cogni.domain.exam import PLACEMENT_EXAM_ID
from cogni.domain.user import utcnow
from cogni.engines.assessment.exam_session import SessionState
from cogni.main import app

API = "/api/v1"


@pytest_asyncio.fixture
async def client(platform):
    app.state.platform = platform
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.state.platform = None


async def register(client, email, role="CITIZEN", password="secret123"):
    response = await client.post(
        f"{API}/auth/register",
        json={"name": email.split("@")[0], "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture
async def teacher_headers(client):
    return await register(client, "teacher@example.com", "TEACHER")


@pytest_asyncio.fixture
async def citizen_headers(client):
    headers = await register(client, "citizen@example.com")
    response = await client.post(
        f"{API}/exams/placement/submit",
        json={"answers": {"p1": {"kind": "option", "selected_option": 0}}},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return headers


class TestAuthAPI:

    async def test_register_and_me(self, client):
        headers = await register(client, "sara@example.com")
        response = await client.get(f"{API}/auth/me", headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "sara@example.com"
        assert body["level"] == 0

    async def test_duplicate_email_conflicts(self, client):
        await register(client, "sara@example.com")
        response = await client.post(
            f"{API}/auth/register",
            json={"name": "Sara", "email": "sara@example.com", "password": "secret456"},
        )
        assert response.status_code == 409

    async def test_login(self, client):
        await register(client, "sara@example.com")
        ok = await client.post(f"{API}/auth/login", json={"email": "sara@example.com", "password": "secret123"})
        bad = await client.post(f"{API}/auth/login", json={"email": "sara@example.com", "password": "nope"})

        assert ok.status_code == 200
        assert ok.json()["token_type"] == "bearer"
        assert bad.status_code == 401

    async def test_missing_token(self, client):
        assert (await client.get(f"{API}/auth/me")).status_code == 401

    async def test_invalid_token(self, client):
        response = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer junk"})
        assert response.status_code == 401

    async def test_request_id_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "req-123"


class TestPlacementAPI:

    async def test_placement_hides_answer_key(self, client):
        headers = await register(client, "sara@example.com")
        response = await client.get(f"{API}/exams/placement", headers=headers)

        assert response.status_code == 200
        questions = response.json()["questions"]
        assert [q["id"] for q in questions] == ["p1", "p2"]
        assert all("correct_option" not in q for q in questions)

    async def test_placement_assigns_level(self, client, citizen_headers):
        me = (await client.get(f"{API}/auth/me", headers=citizen_headers)).json()
        assert me["level"] == 9
        assert me["score_history"][0]["score"] == 90

    async def test_second_placement_rejected(self, client, citizen_headers):
        response = await client.post(
            f"{API}/exams/placement/submit",
            json={"answers": {}},
            headers=citizen_headers,
        )
        assert response.status_code == 400


class TestContentAPI:

    async def test_teacher_publishes_and_citizen_browses(self, client, teacher_headers, citizen_headers):
        for title, level in [("Basics", 1), ("Expert", 10)]:
            response = await client.post(
                f"{API}/contents",
                json={"title": title, "kind": "TEXT", "min_level": level, "body": "..."},
                headers=teacher_headers,
            )
            assert response.status_code == 201, response.text

        library = (await client.get(f"{API}/contents/library", headers=citizen_headers)).json()
        assert [c["title"] for c in library["available"]] == ["Basics"]
        assert [c["title"] for c in library["locked"]] == ["Expert"]

        locked_id = library["locked"][0]["id"]
        response = await client.get(f"{API}/contents/{locked_id}", headers=citizen_headers)
        assert response.status_code == 403

    async def test_citizen_cannot_publish(self, client, citizen_headers):
        response = await client.post(
            f"{API}/contents",
            json={"title": "Mine", "kind": "TEXT", "body": "..."},
            headers=citizen_headers,
        )
        assert response.status_code == 403

    async def test_payload_must_match_kind(self, client, teacher_headers):
        response = await client.post(
            f"{API}/contents",
            json={"title": "Video", "kind": "VIDEO", "body": "text instead"},
            headers=teacher_headers,
        )
        assert response.status_code == 400

    async def test_unknown_content(self, client, citizen_headers):
        response = await client.get(f"{API}/contents/missing", headers=citizen_headers)
        assert response.status_code == 404


class TestExamAndGradingAPI:

    @pytest.fixture
    async def exam_id(self, client, teacher_headers):
        content = await client.post(
            f"{API}/contents",
            json={"title": "Memory", "kind": "TEXT", "min_level": 1, "body": "..."},
            headers=teacher_headers,
        )
        exam = await client.post(
            f"{API}/contents/{content.json()['id']}/exams",
            json={
                "title": "Quiz",
                "time_limit": 5,
                "questions": [
                    {"id": "q1", "text": "Pick", "kind": "MCQ", "options": ["a", "b"], "correct_option": 1},
                    {"id": "d1", "text": "Explain", "kind": "DESCRIPTIVE"},
                ],
            },
            headers=teacher_headers,
        )
        assert exam.status_code == 201, exam.text
        return exam.json()["id"]

    async def test_session_submit_then_grade(self, client, exam_id, citizen_headers, teacher_headers):
        session = await client.post(f"{API}/exams/{exam_id}/sessions", json={}, headers=citizen_headers)
        assert session.status_code == 201
        session_id = session.json()["id"]
        assert session.json()["remaining_seconds"] > 0

        for question_id, answer in [
            ("q1", {"kind": "option", "selected_option": 1}),
            ("d1", {"kind": "text", "text": "Chunking helps."}),
        ]:
            response = await client.put(
                f"{API}/exams/sessions/{session_id}/answers",
                json={"question_id": question_id, "answer": answer},
                headers=citizen_headers,
            )
            assert response.status_code == 200, response.text

        submitted = await client.post(f"{API}/exams/sessions/{session_id}/submit", headers=citizen_headers)
        attempt = submitted.json()["attempt"]
        assert attempt["score"] is None
        assert attempt["is_graded"] is False

        pending = (await client.get(f"{API}/grading/pending", headers=teacher_headers)).json()
        assert [a["id"] for a in pending] == [attempt["id"]]

        suggestion = await client.post(
            f"{API}/grading/attempts/{attempt['id']}/suggestion", headers=teacher_headers
        )
        assert suggestion.json()["fallback"] is True

        graded = await client.post(
            f"{API}/grading/attempts/{attempt['id']}/grade", json={"score": 62}, headers=teacher_headers
        )
        assert graded.status_code == 200
        assert graded.json()["applied"] is True

        repeat = await client.post(
            f"{API}/grading/attempts/{attempt['id']}/grade", json={"score": 62}, headers=teacher_headers
        )
        assert repeat.json()["applied"] is False

        conflict = await client.post(
            f"{API}/grading/attempts/{attempt['id']}/grade", json={"score": 10}, headers=teacher_headers
        )
        assert conflict.status_code == 409

        out_of_range = await client.post(
            f"{API}/grading/attempts/{attempt['id']}/grade", json={"score": 101}, headers=teacher_headers
        )
        assert out_of_range.status_code == 400

    async def test_citizen_cannot_grade(self, client, citizen_headers):
        response = await client.get(f"{API}/grading/pending", headers=citizen_headers)
        assert response.status_code == 403

    async def test_cancelled_session_is_gone(self, client, exam_id, citizen_headers):
        session_id = (
            await client.post(f"{API}/exams/{exam_id}/sessions", json={}, headers=citizen_headers)
        ).json()["id"]

        cancel = await client.post(f"{API}/exams/sessions/{session_id}/cancel", headers=citizen_headers)
        assert cancel.status_code == 204
        response = await client.get(f"{API}/exams/sessions/{session_id}", headers=citizen_headers)
        assert response.status_code == 404

    async def test_other_users_session_forbidden(self, client, exam_id, citizen_headers):
        session_id = (
            await client.post(f"{API}/exams/{exam_id}/sessions", json={}, headers=citizen_headers)
        ).json()["id"]
        other = await register(client, "other@example.com")
        response = await client.get(f"{API}/exams/sessions/{session_id}", headers=other)
        assert response.status_code == 403

    async def test_bad_option_is_400(self, client, exam_id, citizen_headers):
        response = await client.post(
            f"{API}/exams/{exam_id}/attempts",
            json={"answers": {"q1": {"kind": "option", "selected_option": 7}}},
            headers=citizen_headers,
        )
        assert response.status_code == 400


class TestScenarioAPI:

    async def test_walk(self, client, teacher_headers, citizen_headers):
        content = await client.post(
            f"{API}/contents",
            json={
                "title": "Deadline",
                "kind": "SCENARIO",
                "scenario_steps": [
                    {
                        "id": "s1",
                        "text": "Start",
                        "options": [
                            {"text": "Plan", "impact": 5, "feedback": "Good", "next_step_id": "s2"},
                            {"text": "Quit", "impact": -5, "feedback": "Bad"},
                        ],
                    },
                    {"id": "s2", "text": "End", "options": [{"text": "Done", "impact": 1, "feedback": "Fine"}]},
                ],
            },
            headers=teacher_headers,
        )
        assert content.status_code == 201, content.text

        session = await client.post(
            f"{API}/scenarios/{content.json()['id']}/sessions", headers=citizen_headers
        )
        session_id = session.json()["id"]

        step = await client.post(
            f"{API}/scenarios/sessions/{session_id}/choices", json={"choice_index": 0}, headers=citizen_headers
        )
        assert step.json()["next_step_id"] == "s2"

        bad = await client.post(
            f"{API}/scenarios/sessions/{session_id}/choices", json={"choice_index": 5}, headers=citizen_headers
        )
        assert bad.status_code == 400

        final = await client.post(
            f"{API}/scenarios/sessions/{session_id}/choices", json={"choice_index": 0}, headers=citizen_headers
        )
        assert final.json()["outcome"]["feedback"] == "Fine"

    async def test_malformed_scenario_rejected(self, client, teacher_headers):
        response = await client.post(
            f"{API}/contents",
            json={
                "title": "Broken",
                "kind": "SCENARIO",
                "scenario_steps": [
                    {"id": "s1", "text": "Start", "options": [{"text": "Go", "next_step_id": "ghost"}]},
                ],
            },
            headers=teacher_headers,
        )
        assert response.status_code == 400


class TestAdminAPI:

    async def test_alerts_and_analytics(self, client, citizen_headers):
        admin = await register(client, "admin@example.com", "ADMIN")

        created = await client.post(
            f"{API}/admin/alerts",
            json={"title": "Maintenance", "message": "Tonight", "severity": "high"},
            headers=admin,
        )
        assert created.status_code == 201

        alerts = (await client.get(f"{API}/admin/alerts", headers=citizen_headers)).json()
        assert [a["title"] for a in alerts] == ["Maintenance"]

        stats = (await client.get(f"{API}/admin/analytics", headers=admin)).json()
        assert stats["citizens"] == 1
        assert stats["level_distribution"]["4+"] == 1

    async def test_citizen_cannot_broadcast(self, client, citizen_headers):
        response = await client.post(
            f"{API}/admin/alerts", json={"title": "x", "message": "y"}, headers=citizen_headers
        )
        assert response.status_code == 403

    async def test_dashboard_insight(self, client, citizen_headers):
        response = await client.get(f"{API}/dashboard/insight", headers=citizen_headers)
        assert response.status_code == 200
        assert response.json()["text"]

        attempts = (await client.get(f"{API}/dashboard/attempts", headers=citizen_headers)).json()
        assert len(attempts) == 1


class TestLifespan:

    async def test_sweeper_expires_abandoned_sessions(self, platform):
        user = await platform.register("Sara", "sara@example.com", "secret123")
        session = await platform.start_exam(
            user.id, PLACEMENT_EXAM_ID, now=utcnow() - timedelta(hours=1)
        )

        app.state.platform = platform
        try:
            async with app.router.lifespan_context(app):
                for _ in range(100):
                    if platform.get_exam_session(session.id).is_finalized:
                        break
                    await asyncio.sleep(0.01)
        finally:
            app.state.platform = None

        assert platform.get_exam_session(session.id).state == SessionState.EXPIRED
        assert len(platform.list_attempts(user.id)) == 1
