from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import QUESTIONS, FakeAnalyzer, FakeStore

from practice.api.deps import get_client, get_engine, get_use_case
from practice.clients.career_api import CareerAPIClient
from practice.core.engine import CoachEngine
from practice.core.question_source import QuestionSource
from practice.core.use_case import PracticeUseCase
from practice.main import prepare_app
from practice.storages.session_storage import SessionStorage
from practice.system.exceptions import AnalysisError

ANSWER = "At my last job I owned the checkout service and cut its error rate by forty percent."
BASE = "/api/v1/practice"


class FakeBank:
    async def get_questions(self, category=None):
        return [dict(q) for q in QUESTIONS]


class BrokenEngine:
    async def analyze_answer(self, question, answer, job_title=None, company_name=None):
        raise AnalysisError("model down")

    async def generate_questions(self, job_title, skills):
        raise AnalysisError("model down")


@pytest.fixture
def practice_store():
    return FakeStore()


@pytest.fixture
def use_case(practice_store):
    # a long tick keeps the countdown from moving during a request sequence
    return PracticeUseCase(
        QuestionSource(FakeBank()),
        FakeAnalyzer(),
        practice_store,
        SessionStorage(),
        time_limit=120,
        tick_interval=60.0,
        log_dir=None,
    )


@pytest.fixture
def client(use_case):
    app = prepare_app()
    app.dependency_overrides[get_use_case] = lambda: use_case
    app.dependency_overrides[get_engine] = lambda: BrokenEngine()
    with TestClient(app) as test_client:
        yield test_client


def open_session(client):
    response = client.post(f"{BASE}/sessions", json={})
    assert response.status_code == 201
    return response.json()["session_id"]


def test_full_practice_flow(client, practice_store):
    session_id = open_session(client)

    state = client.post(f"{BASE}/sessions/{session_id}/start").json()
    assert state["phase"] == "question"
    assert state["time_remaining"] == 120

    state = client.post(f"{BASE}/sessions/{session_id}/hint").json()
    assert state["hint"].endswith("...")

    state = client.post(f"{BASE}/sessions/{session_id}/answer", json={"answer": ANSWER}).json()
    assert state["records"][0]["answer"] == ANSWER

    state = client.post(f"{BASE}/sessions/{session_id}/submit", json={}).json()
    assert state["phase"] == "feedback"
    assert state["score"] == 80
    assert state["records"][0]["feedback"] == "Solid answer."

    state = client.post(f"{BASE}/sessions/{session_id}/rate", json={"helpful": True}).json()
    assert state["score"] == 90

    state = client.post(f"{BASE}/sessions/{session_id}/next").json()
    assert state["phase"] == "intro"
    assert state["current_question_index"] == 1
    assert state["score"] == 90 + 100 + 12 + 20
    assert state["confidence"] == 5

    for _ in range(2):
        client.post(f"{BASE}/sessions/{session_id}/start")
        state = client.post(f"{BASE}/sessions/{session_id}/skip").json()
    assert state["phase"] == "summary"
    assert state["score"] == 222 - 100

    state = client.post(f"{BASE}/sessions/{session_id}/save").json()
    assert state["saved"] is True
    assert state["closed"] is True
    assert practice_store.saved[0]["score"] == 122

    response = client.get(f"{BASE}/sessions/{session_id}")
    assert response.status_code == 404


def test_invalid_action_returns_conflict(client):
    session_id = open_session(client)
    response = client.post(f"{BASE}/sessions/{session_id}/submit", json={"answer": ANSWER})

    assert response.status_code == 409
    body = response.json()
    assert "not allowed" in body["detail"]
    assert body["path"].endswith(f"/sessions/{session_id}/submit")


def test_unknown_session_returns_not_found(client):
    response = client.post(f"{BASE}/sessions/practice_missing/start")
    assert response.status_code == 404
    assert response.json()["detail"] == "Practice session practice_missing not found"


def test_discarded_session_is_gone(client):
    session_id = open_session(client)
    client.post(f"{BASE}/sessions/{session_id}/start")

    state = client.delete(f"{BASE}/sessions/{session_id}").json()
    assert state["closed"] is True
    assert state["phase"] == "intro"
    assert client.get(f"{BASE}/sessions/{session_id}").status_code == 404


def test_history_comes_from_store(client, practice_store):
    practice_store.history = [{"id": 1, "score": 300}]
    assert client.get(f"{BASE}/history").json() == [{"id": 1, "score": 300}]


def test_coach_analysis_degrades_when_model_fails(client):
    response = client.post("/api/v1/interview/analyze-answer", json={"question": "Q", "answer": "A"})

    assert response.status_code == 200
    assert response.json()["overall"] == 3


def test_coach_analysis_degrades_on_empty_model_reply(client):
    def complete(**kwargs):
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=None))], usage=None)

    engine = CoachEngine(client=SimpleNamespace(chat=SimpleNamespace(complete=complete)), model="test-model")
    client.app.dependency_overrides[get_engine] = lambda: engine

    response = client.post("/api/v1/interview/analyze-answer", json={"question": "Q", "answer": "A real answer"})
    assert response.status_code == 200
    assert response.json()["overall"] == 3


def test_process_errors_are_passed_through(client):
    def handler(request):
        return httpx.Response(404, json={"message": "Interview process not found"})

    career = CareerAPIClient(base_url="http://career.test", token="", transport=httpx.MockTransport(handler))
    client.app.dependency_overrides[get_client] = lambda: career

    response = client.get("/api/v1/processes/42")
    assert response.status_code == 404
    assert response.json()["detail"] == "Interview process not found"


def test_websocket_session(client):
    with client.websocket_connect(f"{BASE}/ws") as websocket:
        websocket.send_json({"action": "start"})
        assert websocket.receive_json()["type"] == "error"

        websocket.send_json([1])
        assert websocket.receive_json() == {"type": "error", "message": "Messages must be JSON objects"}

        websocket.send_json({"action": "open"})
        assert websocket.receive_json()["type"] == "session_id"
        assert websocket.receive_json()["state"]["phase"] == "intro"

        websocket.send_json({"action": "start"})
        assert websocket.receive_json()["state"]["phase"] == "question"

        websocket.send_json({"action": "next"})
        error = websocket.receive_json()
        assert error["type"] == "error"
        assert error["status"] == 409

        websocket.send_json({"action": "close"})
        state = websocket.receive_json()["state"]
        assert state["closed"] is True
        assert state["phase"] == "intro"
