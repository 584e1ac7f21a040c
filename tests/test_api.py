"""
API tests against the FastAPI app with timers disabled and no AI models.

Run with: pytest tests/test_api.py -v
"""
import time

import pytest
from fastapi.testclient import TestClient

from api import dependencies
from api.dependencies import store, timers
from api.main import app
from question_bank import get_fallback_question


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(timers, "enabled", False)
    store.clear_all_data()
    with TestClient(app) as test_client:
        yield test_client
    store.clear_all_data()


@pytest.fixture
def candidate(client, complete_details):
    response = client.post("/api/candidates", json=complete_details)
    assert response.status_code == 201
    return response.json()


def answer(client, candidate_id, text="short", **extra):
    return client.post(f"/api/candidates/{candidate_id}/answer", json={"answer": text, **extra})


# ---------------------------------------------------------------------------
# Candidates
# ---------------------------------------------------------------------------

def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["status"] == "ok"


def test_create_and_fetch_candidate(client, candidate):
    assert candidate["status"] == "pending"
    assert candidate["name"] == "Jane Doe"

    fetched = client.get(f"/api/candidates/{candidate['id']}").json()
    assert fetched["email"] == "jane@example.com"


def test_unknown_candidate_is_404(client):
    assert client.get("/api/candidates/missing").status_code == 404
    assert client.post("/api/candidates/missing/start").status_code == 404


def test_list_search_and_sort(client):
    client.post("/api/candidates", json={"name": "Alice Adams", "email": "alice@example.com"})
    client.post("/api/candidates", json={"name": "Bob Brown", "email": "bob@example.com"})

    names = [c["name"] for c in client.get("/api/candidates", params={"sort_by": "name", "order": "asc"}).json()]
    assert names == ["Alice Adams", "Bob Brown"]

    found = client.get("/api/candidates", params={"search": "BOB"}).json()
    assert [c["name"] for c in found] == ["Bob Brown"]


def test_list_for_user(client):
    client.post("/api/candidates", json={"name": "Mine Only", "user_id": "u1"})
    client.post("/api/candidates", json={"name": "Someone Else", "user_id": "u2"})
    client.post("/api/candidates", json={"name": "Nobody Yet"})

    names = {c["name"] for c in client.get("/api/candidates", params={"user_id": "u1"}).json()}
    assert names == {"Mine Only", "Nobody Yet"}


# ---------------------------------------------------------------------------
# Interview flow
# ---------------------------------------------------------------------------

def test_start_asks_first_question(client, candidate):
    session = client.post(f"/api/candidates/{candidate['id']}/start").json()

    assert session["phase"] == "active"
    assert session["status"] == "in-progress"
    assert session["question_type"] == "easy"
    assert session["time_limit"] == 20
    assert session["timer"] == 20
    assert session["timer_running"] is True
    assert session["current_question"]["source"] == "fallback"
    assert session["current_question"]["question_index"] == 0


def test_question_generation_time_is_not_charged(client, candidate, monkeypatch):
    def slow_question(difficulty, index, role):
        time.sleep(1.2)
        return get_fallback_question(difficulty, index)

    monkeypatch.setattr(dependencies, "generate_question", slow_question)
    monkeypatch.setattr(timers, "enabled", True)
    monkeypatch.setattr(timers, "interval", 0.05)

    session = client.post(f"/api/candidates/{candidate['id']}/start").json()

    assert session["current_question_index"] == 0
    assert session["timer"] == 20
    assert session["current_question"]["question_index"] == 0
    assert client.get(f"/api/candidates/{candidate['id']}").json()["answers"] == []


def test_start_twice_conflicts(client, candidate):
    client.post(f"/api/candidates/{candidate['id']}/start")
    assert client.post(f"/api/candidates/{candidate['id']}/start").status_code == 409


def test_missing_details_are_collected(client):
    candidate = client.post("/api/candidates", json={"name": "Jane Doe"}).json()
    cid = candidate["id"]

    session = client.post(f"/api/candidates/{cid}/start").json()
    assert session["phase"] == "collecting-info"
    assert session["missing_fields"] == ["email", "phone"]

    bad = client.post(f"/api/candidates/{cid}/fields", json={"field": "email", "value": "not-an-email"})
    assert bad.status_code == 422
    assert bad.json()["detail"]["field"] == "email"

    step = client.post(f"/api/candidates/{cid}/fields", json={"field": "email", "value": "Jane@Example.com"}).json()
    assert step == {"phase": "collecting-info", "missing_fields": ["phone"]}

    step = client.post(f"/api/candidates/{cid}/fields", json={"field": "phone", "value": "555 123 4567"}).json()
    assert step == {"phase": "ready", "missing_fields": []}

    assert client.get(f"/api/candidates/{cid}").json()["phone"] == "(555) 123-4567"
    assert client.post(f"/api/candidates/{cid}/start").json()["phase"] == "active"


def test_answer_advances_to_next_question(client, candidate):
    cid = candidate["id"]
    client.post(f"/api/candidates/{cid}/start")

    body = answer(client, cid, "idk", question_index=0).json()
    assert body["record"]["score"] == 0.8
    assert body["evaluation"]["score_out_of_100"] == 15
    assert body["session"]["current_question_index"] == 1
    assert body["session"]["current_question"]["question_index"] == 1


def test_stale_answer_is_rejected(client, candidate):
    cid = candidate["id"]
    client.post(f"/api/candidates/{cid}/start")
    answer(client, cid, question_index=0)

    stale = answer(client, cid, "late answer for the first question", question_index=0)
    assert stale.status_code == 409
    assert len(client.get(f"/api/candidates/{cid}").json()["answers"]) == 1


def test_answer_before_start_conflicts(client, candidate):
    assert answer(client, candidate["id"]).status_code == 409


def test_full_interview_then_publish(client, candidate):
    cid = candidate["id"]
    client.post(f"/api/candidates/{cid}/start")
    assert client.post(f"/api/candidates/{cid}/publish").status_code == 409

    for i in range(6):
        body = answer(client, cid, question_index=i).json()

    assert body["session"]["phase"] == "finished"
    assert body["session"]["final_score"] == pytest.approx(4.8)

    published = client.post(f"/api/candidates/{cid}/publish")
    assert published.status_code == 200
    assert published.json()["scores_published"] is True


def test_pause_and_resume(client, candidate):
    cid = candidate["id"]
    client.post(f"/api/candidates/{cid}/start")
    answer(client, cid, question_index=0)
    answer(client, cid, question_index=1)

    paused = client.post(f"/api/candidates/{cid}/pause").json()
    assert paused["phase"] == "paused"
    assert paused["timer_running"] is False
    assert answer(client, cid).status_code == 409

    resumed = client.post(f"/api/candidates/{cid}/resume").json()
    assert resumed["phase"] == "active"
    assert resumed["current_question_index"] == 2
    assert resumed["timer"] == 60


def test_resume_without_pause_conflicts(client, candidate):
    client.post(f"/api/candidates/{candidate['id']}/start")
    assert client.post(f"/api/candidates/{candidate['id']}/resume").status_code == 409


def test_reset_assessment(client, candidate):
    cid = candidate["id"]
    client.post(f"/api/candidates/{cid}/start")
    answer(client, cid, question_index=0)

    session = client.post(f"/api/candidates/{cid}/reset").json()
    assert session["phase"] == "idle"
    assert session["status"] == "pending"
    assert client.get(f"/api/candidates/{cid}").json()["answers"] == []


# ---------------------------------------------------------------------------
# AI endpoints
# ---------------------------------------------------------------------------

def test_generate_full_question_set(client):
    questions = client.post("/api/ai/generate-questions", json={}).json()["questions"]
    assert [q["difficulty"] for q in questions] == ["easy", "easy", "medium", "medium", "hard", "hard"]


def test_generate_questions_for_one_tier(client):
    body = client.post("/api/ai/generate-questions", json={"difficulty": "hard", "count": 2}).json()
    assert [q["difficulty"] for q in body["questions"]] == ["hard", "hard"]


def test_generate_questions_count_is_bounded(client):
    response = client.post("/api/ai/generate-questions", json={"difficulty": "easy", "count": 50})
    assert response.status_code == 422


def test_evaluate_answer_endpoint(client):
    result = client.post("/api/ai/evaluate-answer", json={"question": "What is a closure?", "answer": ""}).json()
    assert result["score"] == 0


def test_summary_for_stored_candidate(client, candidate):
    body = client.post("/api/ai/interview-summary", json={"candidate_id": candidate["id"]}).json()
    assert body["success"] is True
    assert body["summary"]["recommendation"] == "No Hire"


def test_summary_requires_answers(client):
    response = client.post("/api/ai/interview-summary", json={"candidate_name": "Jane Doe"})
    assert response.status_code == 400


def test_chatbot_endpoint(client):
    body = client.post("/api/ai/chatbot", json={"message": "How is scoring done?"}).json()
    assert body["success"] is True
    assert "out of 30" in body["message"]

    assert client.post("/api/ai/chatbot", json={"message": "   "}).status_code == 400


def test_ats_score_endpoint(client):
    assert client.post("/api/ai/ats-score", json={"resume_text": ""}).status_code == 400
    assert client.post("/api/ai/ats-score", json={"resume_text": "React developer"}).json()["success"] is False


def test_ai_health_reports_models(client):
    body = client.get("/api/ai/health").json()
    assert set(body) >= {"success", "configured", "models", "message"}


# ---------------------------------------------------------------------------
# Resume upload
# ---------------------------------------------------------------------------

def test_upload_text_resume(client):
    content = b"Jane Doe\njane@example.com\n(555) 123-4567\nReact developer"
    response = client.post(
        "/api/files/resume",
        files={"file": ("jane.txt", content, "text/plain")},
        data={"role": "Frontend Developer"},
    )
    assert response.status_code == 201

    body = response.json()
    assert body["missing_fields"] == []
    assert body["candidate"]["name"] == "Jane Doe"
    assert body["candidate"]["role"] == "Frontend Developer"
    assert body["candidate"]["resume_data"]["file_name"] == "jane.txt"


def test_upload_reports_missing_fields(client):
    response = client.post(
        "/api/files/resume",
        files={"file": ("notes.txt", b"Jane Doe\nno contact details here", "text/plain")},
    )
    assert response.json()["missing_fields"] == ["email", "phone"]


def test_upload_rejects_unsupported_type(client):
    response = client.post(
        "/api/files/resume",
        files={"file": ("resume.exe", b"MZ binary", "application/octet-stream")},
    )
    assert response.status_code == 400
