"""API tests using FastAPI TestClient."""
import pytest
from fastapi.testclient import TestClient

from qa_forum.api.auth import create_access_token
from qa_forum.application.qa_app_service import QAAppService
from qa_forum.container import get_qa_app_service
from qa_forum.main import app
from qa_forum.persistence.repositories.sqlite import sqlite_thread_repository
from qa_forum.persistence.repositories.sqlite.sqlite_thread_repository import SqliteThreadRepository


@pytest.fixture
def client(db_path):
    svc = QAAppService(repo=SqliteThreadRepository(db_path))
    app.dependency_overrides[get_qa_app_service] = lambda: svc
    yield TestClient(app)
    app.dependency_overrides.clear()


def _headers(user_id, name, user_type):
    return {"Authorization": f"Bearer {create_access_token(user_id, name, user_type)}"}


@pytest.fixture
def student_headers():
    return _headers("user1", "Alice Johnson", "student")


@pytest.fixture
def instructor_headers():
    return _headers("instructor1", "John Smith", "instructor")


def _ask(client, headers, lesson_id="lesson-1", title="Why useEffect?", content="..."):
    resp = client.post(
        f"/lessons/{lesson_id}/questions",
        json={"title": title, "content": content},
        headers=headers,
    )
    assert resp.status_code == 201
    return resp.json()


# ------------------------------------------------------------------
# Health
# ------------------------------------------------------------------
def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ------------------------------------------------------------------
# Auth
# ------------------------------------------------------------------
def test_create_question_requires_token(client):
    resp = client.post("/lessons/lesson-1/questions", json={"title": "t", "content": "c"})
    assert resp.status_code == 401


def test_expired_token_rejected(client):
    token = create_access_token("user1", "Alice", "student", expires_minutes=-5)
    resp = client.post(
        "/lessons/lesson-1/questions",
        json={"title": "t", "content": "c"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert resp.status_code == 401


def test_unknown_user_type_rejected(client):
    resp = client.post(
        "/lessons/lesson-1/questions",
        json={"title": "t", "content": "c"},
        headers=_headers("root", "Root", "admin"),
    )
    assert resp.status_code == 401


# ------------------------------------------------------------------
# Questions
# ------------------------------------------------------------------
def test_create_question(client, student_headers):
    data = _ask(client, student_headers, title="  Why useEffect?  ")
    assert data["title"] == "Why useEffect?"
    assert data["lessonId"] == "lesson-1"
    assert data["userId"] == "user1"
    assert data["userName"] == "Alice Johnson"
    assert data["userType"] == "student"
    assert data["upvotes"] == 0
    assert data["isResolved"] is False
    assert data["acceptedAnswerId"] is None


def test_create_question_blank_title(client, student_headers):
    resp = client.post(
        "/lessons/lesson-1/questions",
        json={"title": "   ", "content": "body"},
        headers=student_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["kind"] == "ValidationError"


def test_list_search_filter(client, student_headers, instructor_headers):
    state = _ask(client, student_headers, title="State management", content="useState vs useReducer")
    _ask(client, student_headers, title="Lifecycle error", content="componentDidMount")
    _ask(client, student_headers, lesson_id="lesson-2", title="Other lesson")

    answer = client.post(
        f"/questions/{state['id']}/answers", json={"content": "Use useReducer"}, headers=instructor_headers
    ).json()
    client.post(f"/answers/{answer['id']}/accept", headers=instructor_headers)

    all_threads = client.get("/lessons/lesson-1/questions").json()
    assert len(all_threads) == 2
    assert all(set(t) == {"question", "answers", "totalAnswers"} for t in all_threads)

    found = client.get("/lessons/lesson-1/questions", params={"q": "usereducer"}).json()
    assert [t["question"]["id"] for t in found] == [state["id"]]
    assert found[0]["totalAnswers"] == 1

    resolved = client.get("/lessons/lesson-1/questions", params={"status": "resolved"}).json()
    assert [t["question"]["id"] for t in resolved] == [state["id"]]

    unresolved = client.get("/lessons/lesson-1/questions", params={"status": "unresolved"}).json()
    assert [t["question"]["title"] for t in unresolved] == ["Lifecycle error"]

    summary = client.get("/lessons/lesson-1/questions/summary").json()
    assert summary == {"all": 2, "unresolved": 1, "resolved": 1}


def test_list_rejects_unknown_status(client):
    resp = client.get("/lessons/lesson-1/questions", params={"status": "archived"})
    assert resp.status_code == 422


def test_get_thread_unknown(client):
    resp = client.get("/questions/missing")
    assert resp.status_code == 404
    assert resp.json()["kind"] == "NotFoundError"


# ------------------------------------------------------------------
# Answers and votes
# ------------------------------------------------------------------
def test_create_answer(client, student_headers, instructor_headers):
    question = _ask(client, student_headers)
    resp = client.post(
        f"/questions/{question['id']}/answers", json={"content": "Because..."}, headers=instructor_headers
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["questionId"] == question["id"]
    assert data["userType"] == "instructor"
    assert data["isAccepted"] is False

    thread = client.get(f"/questions/{question['id']}").json()
    assert thread["totalAnswers"] == 1


def test_create_answer_errors(client, student_headers):
    resp = client.post("/questions/missing/answers", json={"content": "hi"}, headers=student_headers)
    assert resp.status_code == 404

    question = _ask(client, student_headers)
    resp = client.post(f"/questions/{question['id']}/answers", json={"content": " "}, headers=student_headers)
    assert resp.status_code == 400


def test_upvotes(client, student_headers):
    question = _ask(client, student_headers)
    for expected in (1, 2, 3):
        resp = client.post(f"/questions/{question['id']}/upvote")
        assert resp.status_code == 200
        assert resp.json()["upvotes"] == expected

    answer = client.post(
        f"/questions/{question['id']}/answers", json={"content": "hi"}, headers=student_headers
    ).json()
    assert client.post(f"/answers/{answer['id']}/upvote").json()["upvotes"] == 1

    assert client.post("/questions/missing/upvote").status_code == 404
    assert client.post("/answers/missing/upvote").status_code == 404


# ------------------------------------------------------------------
# Acceptance
# ------------------------------------------------------------------
def test_accept_flow(client, student_headers, instructor_headers):
    question = _ask(client, student_headers)
    first = client.post(
        f"/questions/{question['id']}/answers", json={"content": "first"}, headers=student_headers
    ).json()
    second = client.post(
        f"/questions/{question['id']}/answers", json={"content": "second"}, headers=instructor_headers
    ).json()

    denied = client.post(f"/answers/{first['id']}/accept", headers=student_headers)
    assert denied.status_code == 403
    assert denied.json()["kind"] == "PermissionError"
    assert client.get(f"/questions/{question['id']}").json()["question"]["isResolved"] is False

    resp = client.post(f"/answers/{second['id']}/accept", headers=instructor_headers)
    assert resp.status_code == 200
    thread = resp.json()
    assert thread["question"]["isResolved"] is True
    assert thread["question"]["acceptedAnswerId"] == second["id"]
    assert thread["answers"][0]["id"] == second["id"]

    switched = client.post(f"/answers/{first['id']}/accept", headers=instructor_headers).json()
    flags = {a["id"]: a["isAccepted"] for a in switched["answers"]}
    assert flags == {first["id"]: True, second["id"]: False}
    assert switched["question"]["acceptedAnswerId"] == first["id"]


def test_accept_errors(client, student_headers, instructor_headers):
    assert client.post("/answers/missing/accept").status_code == 401
    assert client.post("/answers/missing/accept", headers=instructor_headers).status_code == 404
    assert client.post("/answers/missing/accept", headers=student_headers).status_code == 403


def test_inconsistent_acceptance_returns_500(client, monkeypatch, student_headers, instructor_headers):
    question = _ask(client, student_headers)
    answer = client.post(
        f"/questions/{question['id']}/answers", json={"content": "Because..."}, headers=instructor_headers
    ).json()
    monkeypatch.setattr(sqlite_thread_repository, "consistency_errors", lambda thread: ["forced"])

    resp = client.post(f"/answers/{answer['id']}/accept", headers=instructor_headers)
    assert resp.status_code == 500
    assert resp.json()["kind"] == "InvariantViolation"

    thread = client.get(f"/questions/{question['id']}").json()
    assert thread["question"]["isResolved"] is False
    assert [a["isAccepted"] for a in thread["answers"]] == [False]
