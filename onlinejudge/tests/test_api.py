"""
Tests for the HTTP API: problems, users and submissions end to end
against the in-memory database and queue.
"""

import json
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from onlinejudge.main import app
from onlinejudge.database import get_db
from onlinejudge.api.deps import get_dispatcher
from onlinejudge.auth.jwt_handler import create_access_token
from onlinejudge.models import Submission, TestCase


@pytest.fixture
def client(db, dispatcher):
    """TestClient wired to the test session and fake queue."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(make_user):
    return make_user("admin", authority=2)


@pytest.fixture
def alice(make_user):
    return make_user("alice", authority=1)


PROBLEM_BODY = {
    "title": "A + B",
    "description": "Add two integers",
    "test_cases": [
        {"input": "3 4", "expected_output": "7", "comment": "small", "score": 50, "timeout_seconds": 10.0},
        {"input": "1 1", "expected_output": "2", "comment": "", "score": 50, "timeout_seconds": 1.0},
    ],
}


class TestProblemsAPI:
    """Tests for /api/problems."""

    def test_create_requires_privileged_user(self, client, alice):
        response = client.post("/api/problems", json=PROBLEM_BODY, headers=auth_headers(alice))
        assert response.status_code == 403

    def test_create_requires_authentication(self, client):
        response = client.post("/api/problems", json=PROBLEM_BODY)
        assert response.status_code == 401

    def test_create_and_get(self, client, admin):
        created = client.post("/api/problems", json=PROBLEM_BODY, headers=auth_headers(admin))
        assert created.status_code == 201
        problem_id = created.json()["problem_id"]

        response = client.get(f"/api/problems/{problem_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "A + B"
        assert [t["input"] for t in data["test_cases"]] == ["3 4", "1 1"]
        assert all("id" in t for t in data["test_cases"])

    def test_list_problems(self, client, make_problem):
        make_problem([], title="First")
        make_problem([], title="Second")

        response = client.get("/api/problems")

        assert response.status_code == 200
        assert [p["title"] for p in response.json()] == ["First", "Second"]

    def test_get_missing_problem(self, client):
        response = client.get("/api/problems/999")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_update_reconciles_test_cases(self, client, admin, db):
        problem_id = client.post("/api/problems", json=PROBLEM_BODY, headers=auth_headers(admin)).json()["problem_id"]
        current = client.get(f"/api/problems/{problem_id}").json()["test_cases"]
        kept = dict(current[0], score=80)

        response = client.put(
            f"/api/problems/{problem_id}",
            json={
                "title": "A plus B",
                "description": "Add",
                "test_cases": [kept, {"input": "5 5", "expected_output": "10", "score": 20}],
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True, "created": 1, "updated": 1, "deleted": 1}
        data = client.get(f"/api/problems/{problem_id}").json()
        assert data["title"] == "A plus B"
        assert [(t["id"] == kept["id"], t["score"]) for t in data["test_cases"]] == [(True, 80), (False, 20)]

    def test_update_with_foreign_id_is_rejected(self, client, admin):
        problem_id = client.post("/api/problems", json=PROBLEM_BODY, headers=auth_headers(admin)).json()["problem_id"]

        response = client.put(
            f"/api/problems/{problem_id}",
            json={"title": "x", "description": "", "test_cases": [{"id": 9999, "input": "", "expected_output": ""}]},
            headers=auth_headers(admin),
        )

        assert response.status_code == 404
        assert len(client.get(f"/api/problems/{problem_id}").json()["test_cases"]) == 2

    def test_update_missing_problem(self, client, admin):
        response = client.put(
            "/api/problems/999",
            json={"title": "x", "description": "", "test_cases": []},
            headers=auth_headers(admin),
        )
        assert response.status_code == 404

    def test_update_store_failure(self, client, admin, db):
        problem_id = client.post("/api/problems", json=PROBLEM_BODY, headers=auth_headers(admin)).json()["problem_id"]

        with patch.object(db, "commit", side_effect=OperationalError("COMMIT", {}, Exception("database is locked"))):
            response = client.put(
                f"/api/problems/{problem_id}",
                json={"title": "Changed", "description": "", "test_cases": []},
                headers=auth_headers(admin),
            )

        assert response.status_code == 500
        assert response.json()["error"] == "store_failure"
        data = client.get(f"/api/problems/{problem_id}").json()
        assert data["title"] == "A + B"
        assert len(data["test_cases"]) == 2

    def test_delete_removes_test_cases(self, client, admin, db):
        problem_id = client.post("/api/problems", json=PROBLEM_BODY, headers=auth_headers(admin)).json()["problem_id"]

        response = client.delete(f"/api/problems/{problem_id}", headers=auth_headers(admin))

        assert response.status_code == 204
        assert client.get(f"/api/problems/{problem_id}").status_code == 404
        assert db.query(TestCase).filter(TestCase.problem_id == problem_id).count() == 0


class TestUsersAPI:
    """Tests for /api/users."""

    def test_register_and_login(self, client):
        created = client.post("/api/users", json={"username": "bob", "password": "pw", "name": "Bob"})
        assert created.status_code == 201
        assert created.json()["authority"] == 1

        login = client.post("/api/users/login", json={"username": "bob", "password": "pw"})

        assert login.status_code == 200
        body = login.json()
        assert body["token_type"] == "bearer"
        assert body["user_id"] == created.json()["id"]
        assert body["user_authority"] == 1

    def test_duplicate_username(self, client, alice):
        response = client.post("/api/users", json={"username": "alice", "password": "pw"})
        assert response.status_code == 409

    def test_wrong_password(self, client, alice):
        response = client.post("/api/users/login", json={"username": "alice", "password": "nope"})
        assert response.status_code == 401

    def test_logout_requires_token(self, client, alice):
        assert client.post("/api/users/logout").status_code == 401
        assert client.post("/api/users/logout", headers=auth_headers(alice)).status_code == 200

    def test_token_is_usable(self, client, alice):
        token = client.post("/api/users/login", json={"username": "alice", "password": "secret"}).json()["access_token"]

        response = client.post("/api/users/logout", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200


class TestSubmissionsAPI:
    """Tests for /api/submissions."""

    def test_submit_dispatches(self, client, alice, broker, make_problem, sample_test_cases):
        problem = make_problem(sample_test_cases)

        response = client.post(
            "/api/submissions",
            json={"problem_id": problem.id, "language": "kotlin", "code": "fun main() {}"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["queued"] is True
        assert json.loads(broker.queues["kotlin"][0])["submissionId"] == body["submission_id"]

    def test_submit_when_queue_down(self, client, alice, broker, db, make_problem, sample_test_cases):
        problem = make_problem(sample_test_cases)
        broker.down = True

        response = client.post(
            "/api/submissions",
            json={"problem_id": problem.id, "language": "kotlin", "code": "x"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 201
        assert response.json()["queued"] is False
        assert db.get(Submission, response.json()["submission_id"]).result == "-"

    def test_submit_unsupported_language(self, client, alice, make_problem, sample_test_cases):
        problem = make_problem(sample_test_cases)

        response = client.post(
            "/api/submissions",
            json={"problem_id": problem.id, "language": "brainfuck", "code": "+"},
            headers=auth_headers(alice),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "unsupported_language"

    def test_submit_requires_login(self, client, make_problem):
        problem = make_problem([])
        response = client.post("/api/submissions", json={"problem_id": problem.id, "language": "kotlin", "code": ""})
        assert response.status_code == 401

    def test_get_own_submission(self, client, alice, make_problem, make_submission):
        submission = make_submission(make_problem([]), alice)

        response = client.get(f"/api/submissions/{submission.id}", headers=auth_headers(alice))

        assert response.status_code == 200
        assert response.json()["result"] == "-"
        assert response.json()["executed_time"] == -1.0

    def test_get_other_users_submission(self, client, alice, make_user, make_problem, make_submission):
        submission = make_submission(make_problem([]), alice)
        mallory = make_user("mallory")

        response = client.get(f"/api/submissions/{submission.id}", headers=auth_headers(mallory))

        assert response.status_code == 403

    def test_restart_submission(self, client, alice, broker, make_problem, make_submission, sample_test_cases):
        submission = make_submission(make_problem(sample_test_cases), alice)

        response = client.post(f"/api/submissions/{submission.id}/restart", headers=auth_headers(alice))

        assert response.status_code == 200
        assert response.json() == {"submission_id": submission.id, "queued": True}
        assert len(broker.queues["kotlin"]) == 1

    def test_restart_missing_submission(self, client, alice):
        response = client.post("/api/submissions/404/restart", headers=auth_headers(alice))
        assert response.status_code == 404

    def test_restart_queue_unavailable(self, client, alice, broker, make_problem, make_submission, sample_test_cases):
        submission = make_submission(make_problem(sample_test_cases), alice)
        broker.down = True

        response = client.post(f"/api/submissions/{submission.id}/restart", headers=auth_headers(alice))

        assert response.status_code == 503
        assert response.json()["error"] == "queue_unavailable"

    def test_sweep_requires_privileged(self, client, alice):
        response = client.post("/api/submissions/restart", headers=auth_headers(alice))
        assert response.status_code == 403

    def test_sweep(self, client, admin, alice, broker, make_problem, make_submission, sample_test_cases):
        problem = make_problem(sample_test_cases)
        make_submission(problem, alice)
        make_submission(problem, alice)

        response = client.post("/api/submissions/restart", headers=auth_headers(admin))

        assert response.status_code == 200
        assert response.json() == {"ok": True, "total": 2, "dispatched": 2, "skipped": 0}

    def test_sweep_reports_queue_failure(self, client, admin, alice, broker, make_problem, make_submission, sample_test_cases):
        make_submission(make_problem(sample_test_cases), alice)
        broker.down = True

        response = client.post("/api/submissions/restart", headers=auth_headers(admin))

        assert response.status_code == 503
        assert response.json()["ok"] is False


class TestHealthAPI:
    """Tests for health endpoints."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_queue_health(self, client, broker):
        assert client.get("/health/queue").status_code == 200
        broker.down = True
        assert client.get("/health/queue").status_code == 503
