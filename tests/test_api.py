"""
API endpoint tests for the EduVision backend.

Uses FastAPI TestClient — no running server or Gemini access required.
The shared runner is swapped for one backed by a scripted fake client.
"""

import json

import pytest

from fastapi.testclient import TestClient

from backend.api import deps
from backend.api.main import app
from backend.features import FeatureRunner
from backend.llm_router import KeyPool, LLMError, RetryOrchestrator
from backend.utils.session_store import SessionStore

from conftest import FakeClientFactory, SleepRecorder, failing_store, rate_limited

client = TestClient(app)

KEYS = "AIzaSyA-first-key-0000,AIzaSyB-second-key-1111"


@pytest.fixture(autouse=True)
def fresh_dependencies(sqlite_db):
    deps.reset_dependencies()
    deps._key_pool = KeyPool(KEYS)
    deps._session_store = SessionStore(redis_url=None)
    yield
    deps.reset_dependencies()


def use_client(*script) -> FakeClientFactory:
    factory = FakeClientFactory(*script)
    deps._runner = FeatureRunner(
        RetryOrchestrator(deps._key_pool, sleep=SleepRecorder()), client_factory=factory
    )
    return factory


WORKSHEET_JSON = json.dumps({
    "title": "Linear Equations",
    "questions": [{"id": 1, "question": "2x = 4", "answer": "2", "explanation": "", "difficulty": "Easy", "topic": "Algebra"}],
})


# =============================================================================
# HEALTH ENDPOINT
# =============================================================================

class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_200(self):
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_response_shape(self):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["key_count"] == 2
        assert data["database_connected"] is True
        assert data["db_type"] == "sqlite"

    def test_health_never_leaks_keys(self):
        data = client.get("/health").json()
        assert data["keys"] == ["AIzaSyA-...0000", "AIzaSyB-...1111"]
        for key in KEYS.split(","):
            assert key not in json.dumps(data)


# =============================================================================
# FEATURE ENDPOINTS
# =============================================================================

class TestWorksheetEndpoint:
    """Tests for POST /worksheets."""

    def test_worksheet_returns_camel_case(self):
        use_client(WORKSHEET_JSON)
        response = client.post("/worksheets", json={"topic": "Algebra", "difficulty": "Easy", "count": 1})
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Linear Equations"
        assert data["questions"][0]["question"] == "2x = 4"

    def test_rate_limit_rotates_keys(self):
        factory = use_client(rate_limited(), WORKSHEET_JSON)
        response = client.post("/worksheets", json={"topic": "Algebra"})
        assert response.status_code == 200
        assert factory.calls == ["AIzaSyA-first-key-0000", "AIzaSyB-second-key-1111"]

    def test_all_keys_rate_limited_returns_429(self):
        use_client(rate_limited(), rate_limited())
        response = client.post("/worksheets", json={"topic": "Algebra"})
        assert response.status_code == 429

    def test_terminal_failure_returns_502(self):
        factory = use_client(LLMError("API key not valid", status_code=400))
        response = client.post("/worksheets", json={"topic": "Algebra"})
        assert response.status_code == 502
        assert factory.calls == ["AIzaSyA-first-key-0000"]

    def test_count_out_of_range_returns_422(self):
        response = client.post("/worksheets", json={"topic": "Algebra", "count": 31})
        assert response.status_code == 422

    def test_unknown_difficulty_returns_422(self):
        response = client.post("/worksheets", json={"topic": "Algebra", "difficulty": "Impossible"})
        assert response.status_code == 422

    def test_result_stored_in_session(self):
        use_client(WORKSHEET_JSON)
        client.post("/worksheets", json={"topic": "Algebra", "user_id": "u1", "session_id": "s1"})

        response = client.get("/history/u1/s1/sheet")
        assert response.status_code == 200
        assert response.json()["title"] == "Linear Equations"

    def test_session_store_failure_still_returns_result(self):
        factory = use_client(WORKSHEET_JSON)
        deps._session_store = failing_store()
        response = client.post("/worksheets", json={"topic": "Algebra", "user_id": "u1", "session_id": "s1"})
        assert response.status_code == 200
        assert response.json()["title"] == "Linear Equations"
        assert len(factory.calls) == 1


class TestProfessorEndpoint:
    """Tests for POST /professor/ask."""

    def test_requires_query_or_audio(self):
        response = client.post("/professor/ask", json={"level": "College (Undergrad)"})
        assert response.status_code == 422

    def test_answer(self):
        use_client("Because of Rayleigh scattering.")
        response = client.post("/professor/ask", json={"query": "Why is the sky blue?"})
        assert response.status_code == 200
        data = response.json()
        assert data["text"] == "Because of Rayleigh scattering."
        assert data["groundingMetadata"] is None


class TestSolverEndpoint:
    """Tests for POST /solver/messages."""

    def test_reply_and_transcript(self):
        use_client("x = 2")
        response = client.post("/solver/messages", json={
            "user_id": "u1",
            "session_id": "s9",
            "history": [],
            "message": {"role": "user", "text": "Solve 2x = 4"},
        })
        assert response.status_code == 200
        assert response.json() == {"text": "x = 2"}

        transcript = client.get("/history/u1/s9/solver").json()
        assert [m["role"] for m in transcript] == ["user", "model"]
        assert transcript[-1]["text"] == "x = 2"

    def test_bad_attachment_type_returns_422(self):
        response = client.post("/solver/messages", json={
            "message": {"text": "hi", "attachments": [{"type": "video", "data": "AA", "mimeType": "video/mp4"}]},
        })
        assert response.status_code == 422


class TestQuizEndpoint:

    def test_question(self):
        use_client(json.dumps({
            "question": "sin(90°)?", "options": ["0", "1"], "correctAnswer": "1", "explanation": "",
        }))
        response = client.post("/quiz/questions", json={"topic": "Trigonometry"})
        assert response.status_code == 200
        assert response.json()["correctAnswer"] == "1"

    def test_missing_topic_returns_422(self):
        response = client.post("/quiz/questions", json={})
        assert response.status_code == 422


class TestImageEndpoints:

    def test_exam_missing_data_returns_422(self):
        response = client.post("/exam/analyze", json={})
        assert response.status_code == 422

    def test_camera(self):
        use_client(json.dumps({"rawTextResponse": "x = 1", "hint": "isolate x"}))
        response = client.post("/camera/analyze", json={"data": "AAAA", "mode": "teacher"})
        assert response.status_code == 200
        assert response.json()["hint"] == "isolate x"

    def test_notebook(self):
        use_client(json.dumps({"summary": "Cells", "keyConcepts": [{"name": "Nucleus"}]}))
        response = client.post("/notebook/analyze", json={"data": "AAAA"})
        assert response.status_code == 200
        assert response.json()["keyConcepts"][0]["name"] == "Nucleus"


# =============================================================================
# LEADERBOARD ENDPOINTS
# =============================================================================

class TestLeaderboardEndpoints:

    def test_scores_and_leaderboard(self):
        assert client.post("/scores", json={"user_id": "u1", "username": "ada", "score": 300}).status_code == 201
        client.post("/scores", json={"user_id": "u2", "username": "bob", "score": 500})

        entries = client.get("/leaderboard").json()["entries"]
        assert [e["username"] for e in entries] == ["bob", "ada"]

    def test_leaderboard_limit(self):
        for i in range(3):
            client.post("/scores", json={"user_id": f"u{i}", "username": f"p{i}", "score": i})
        assert len(client.get("/leaderboard", params={"limit": 1}).json()["entries"]) == 1

    def test_negative_score_returns_422(self):
        response = client.post("/scores", json={"user_id": "u1", "username": "ada", "score": -5})
        assert response.status_code == 422

    def test_xp(self):
        client.post("/profiles/u1/xp", json={"xp": 100, "username": "ada"})
        response = client.post("/profiles/u1/xp", json={"xp": 20})
        assert response.json() == {"user_id": "u1", "total_xp": 120}


# =============================================================================
# HISTORY ENDPOINTS
# =============================================================================

class TestHistoryEndpoints:

    def test_upsert_list_delete(self):
        client.put("/history/u1/s1", json={"title": "Exam 1", "type": "exam"})
        client.put("/history/u1/s2", json={"title": "Notes", "type": "notebook"})

        items = client.get("/history/u1").json()["items"]
        assert [i["id"] for i in items] == ["s2", "s1"]

        remaining = client.delete("/history/u1/s2").json()["items"]
        assert [i["id"] for i in remaining] == ["s1"]

    def test_invalid_type_returns_422(self):
        response = client.put("/history/u1/s1", json={"title": "x", "type": "quiz"})
        assert response.status_code == 422

    def test_missing_result_returns_404(self):
        assert client.get("/history/u1/nope/exam").status_code == 404

    def test_unknown_feature_returns_404(self):
        assert client.get("/history/u1/s1/quiz").status_code == 404
