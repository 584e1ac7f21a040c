"""
Interview progression tests.

Walks candidates through the full lifecycle: details collection, six timed
questions, pause/resume, timeouts, reset and the dashboard queries.

Run with: pytest tests/test_store.py -v
"""
from datetime import datetime, timedelta

import pytest

from state import CandidateStatus, InterviewPhase
from store import (
    CandidateNotFoundError,
    FieldValidationError,
    InterviewStore,
    InvalidTransitionError,
)


def answer_all(store, candidate_id, scores):
    for score in scores:
        store.submit_answer(candidate_id, "an answer of some length", evaluation={"score": score})


# ---------------------------------------------------------------------------
# Starting
# ---------------------------------------------------------------------------

def test_add_candidate_is_pending_and_active(store, complete_details):
    candidate_id = store.add_candidate(complete_details)
    candidate = store.get_candidate(candidate_id)

    assert candidate["status"] == CandidateStatus.PENDING.value
    assert candidate["answers"] == []
    assert store.active_candidate_id == candidate_id
    assert store.get_phase(candidate_id) == InterviewPhase.IDLE


def test_start_with_complete_details_goes_active(store, active_candidate):
    session = store.get_session(active_candidate)
    candidate = store.get_candidate(active_candidate)

    assert session["phase"] == InterviewPhase.ACTIVE.value
    assert session["current_question_index"] == 0
    assert session["timer"] == 20
    assert session["timer_running"] is True
    assert candidate["status"] == CandidateStatus.IN_PROGRESS.value


def test_start_with_missing_details_collects_info(store):
    candidate_id = store.add_candidate({"name": "Jane Doe"})

    assert store.start_interview(candidate_id) == InterviewPhase.COLLECTING_INFO
    assert store.get_candidate(candidate_id)["missing_fields"] == ["email", "phone"]


def test_invalid_details_count_as_missing(store):
    candidate_id = store.add_candidate({"name": "J", "email": "not-an-email", "phone": "123"})
    store.start_interview(candidate_id)
    assert store.get_candidate(candidate_id)["missing_fields"] == ["name", "email", "phone"]


def test_cannot_start_twice(store, active_candidate):
    with pytest.raises(InvalidTransitionError):
        store.start_interview(active_candidate)


def test_unknown_candidate_raises(store):
    with pytest.raises(CandidateNotFoundError):
        store.start_interview("missing")
    with pytest.raises(CandidateNotFoundError):
        store.get_session("missing")


# ---------------------------------------------------------------------------
# Collecting details
# ---------------------------------------------------------------------------

def test_invalid_field_keeps_phase_and_reprompts(store):
    candidate_id = store.add_candidate({"name": "Jane Doe", "phone": "5551234567"})
    store.start_interview(candidate_id)

    with pytest.raises(FieldValidationError) as exc_info:
        store.provide_field(candidate_id, "email", "jane at example")

    assert exc_info.value.field == "email"
    assert store.get_phase(candidate_id) == InterviewPhase.COLLECTING_INFO
    assert store.get_candidate(candidate_id)["missing_fields"] == ["email"]


def test_fields_are_normalized_and_phase_becomes_ready(store):
    candidate_id = store.add_candidate({})
    store.start_interview(candidate_id)

    assert store.provide_field(candidate_id, "name", "  jane   doe ") == ["email", "phone"]
    assert store.provide_field(candidate_id, "email", "Jane@Example.com") == ["phone"]
    assert store.provide_field(candidate_id, "phone", "555-123-4567") == []

    candidate = store.get_candidate(candidate_id)
    assert candidate["name"] == "Jane Doe"
    assert candidate["email"] == "jane@example.com"
    assert candidate["phone"] == "(555) 123-4567"
    assert store.get_phase(candidate_id) == InterviewPhase.READY

    assert store.start_interview(candidate_id) == InterviewPhase.ACTIVE


def test_unknown_field_rejected(store):
    candidate_id = store.add_candidate({})
    store.start_interview(candidate_id)
    with pytest.raises(FieldValidationError):
        store.provide_field(candidate_id, "address", "1 Main St")


def test_provide_field_outside_collection_rejected(store, active_candidate):
    with pytest.raises(InvalidTransitionError):
        store.provide_field(active_candidate, "name", "Jane Doe")


# ---------------------------------------------------------------------------
# Answering
# ---------------------------------------------------------------------------

def test_answer_advances_and_restarts_timer(store, active_candidate):
    store.tick(active_candidate, 5)
    record = store.submit_answer(active_candidate, "A closure captures its scope", evaluation={"score": 4})

    assert record["question_index"] == 0
    assert record["score"] == 4
    assert record["question_type"] == "easy"
    assert record["time_used"] == 5

    session = store.get_session(active_candidate)
    assert session["current_question_index"] == 1
    assert session["timer"] == 20
    assert store.get_candidate(active_candidate)["current_question_index"] == 1


def test_answer_appends_transcript(store, active_candidate):
    store.set_question(active_candidate, {"question": "What is a closure?", "category": "JS"})
    store.submit_answer(active_candidate, "A function with its scope", evaluation={"score": 3, "feedback": "ok"})

    history = store.get_candidate(active_candidate)["chat_history"]
    assert [m["sender"] for m in history] == ["bot", "user"]
    assert history[0]["question"]["question_index"] == 0
    assert history[1]["text"] == "A function with its scope"
    assert history[1]["score"] == 3
    assert store.get_candidate(active_candidate)["answers"][0]["question"] == "What is a closure?"


def test_empty_answer_scores_zero(store, active_candidate):
    record = store.submit_answer(active_candidate, "", evaluation={"score": 5})
    assert record["score"] == 0


def test_store_evaluator_used_without_evaluation(complete_details):
    calls = []

    def evaluator(question, answer, difficulty):
        calls.append((question, answer, difficulty))
        return {"score": 2.5, "feedback": "fair"}

    store = InterviewStore(evaluator=evaluator)
    candidate_id = store.add_candidate(complete_details)
    store.start_interview(candidate_id)
    store.set_question(candidate_id, {"question": "Explain let vs var"})
    record = store.submit_answer(candidate_id, "let is block scoped")

    assert calls == [("Explain let vs var", "let is block scoped", "easy")]
    assert record["score"] == 2.5
    assert record["feedback"] == "fair"


def test_scores_are_clamped(store, active_candidate):
    assert store.submit_answer(active_candidate, "answer", evaluation={"score": 9})["score"] == 5.0
    assert store.submit_answer(active_candidate, "answer", evaluation={"score": -2})["score"] == 0.0


def test_stale_answer_rejected(store, active_candidate):
    store.submit_answer(active_candidate, "first", evaluation={"score": 3})
    with pytest.raises(InvalidTransitionError):
        store.submit_answer(active_candidate, "late", evaluation={"score": 3}, question_index=0)
    assert len(store.get_candidate(active_candidate)["answers"]) == 1


def test_answer_outside_active_rejected(store, complete_details):
    candidate_id = store.add_candidate(complete_details)
    with pytest.raises(InvalidTransitionError):
        store.submit_answer(candidate_id, "too early")


def test_six_answers_finish_interview(store, active_candidate):
    answer_all(store, active_candidate, [4, 3.5, 3, 2, 4, 3.5])

    candidate = store.get_candidate(active_candidate)
    session = store.get_session(active_candidate)
    assert session["phase"] == InterviewPhase.FINISHED.value
    assert session["timer_running"] is False
    assert candidate["status"] == CandidateStatus.COMPLETED.value
    assert candidate["final_score"] == 20.0
    assert "Good performance" in candidate["summary"]
    assert "(66.7%)" in candidate["summary"]
    assert [a["question_type"] for a in candidate["answers"]] == [
        "easy", "easy", "medium", "medium", "hard", "hard"
    ]


def test_not_finished_before_last_answer(store, active_candidate):
    answer_all(store, active_candidate, [3, 3, 3, 3, 3])
    assert store.get_phase(active_candidate) == InterviewPhase.ACTIVE
    with pytest.raises(InvalidTransitionError):
        store.finish_interview(active_candidate)


def test_no_answers_after_finish(store, active_candidate):
    answer_all(store, active_candidate, [3] * 6)
    with pytest.raises(InvalidTransitionError):
        store.submit_answer(active_candidate, "one more")


# ---------------------------------------------------------------------------
# Timer
# ---------------------------------------------------------------------------

def test_tick_counts_down(store, active_candidate):
    assert store.tick(active_candidate) is False
    assert store.tick(active_candidate, 3) is False
    assert store.get_session(active_candidate)["timer"] == 16


def test_timeout_at_third_question_submits_empty_answer(store, active_candidate):
    answer_all(store, active_candidate, [4, 4])
    assert store.get_session(active_candidate)["timer"] == 60

    assert store.tick(active_candidate, 60) is True

    record = store.get_candidate(active_candidate)["answers"][-1]
    assert record["question_index"] == 2
    assert record["answer"] == ""
    assert record["score"] == 0
    assert record["time_used"] == 60

    session = store.get_session(active_candidate)
    assert session["current_question_index"] == 3
    assert session["timer"] == 60
    assert session["timer_running"] is True


def test_leftover_seconds_do_not_carry_over(store, active_candidate):
    assert store.tick(active_candidate, 500) is True
    session = store.get_session(active_candidate)
    assert session["current_question_index"] == 1
    assert session["timer"] == 20


def test_timeout_on_last_question_finishes(store, active_candidate):
    answer_all(store, active_candidate, [3] * 5)
    store.tick(active_candidate, 120)
    assert store.get_phase(active_candidate) == InterviewPhase.FINISHED
    assert store.get_candidate(active_candidate)["final_score"] == 15.0


def test_tick_ignored_when_not_active(store, complete_details):
    candidate_id = store.add_candidate(complete_details)
    assert store.tick(candidate_id, 100) is False
    assert store.get_session(candidate_id)["timer"] == 0


# ---------------------------------------------------------------------------
# Pause / resume
# ---------------------------------------------------------------------------

def test_pause_stops_timer(store, active_candidate):
    store.tick(active_candidate, 5)
    store.pause_interview(active_candidate)

    assert store.get_phase(active_candidate) == InterviewPhase.PAUSED
    assert store.tick(active_candidate, 50) is False
    assert store.get_session(active_candidate)["timer"] == 15


def test_resume_restarts_full_budget_at_same_index(store, active_candidate):
    answer_all(store, active_candidate, [3, 3, 3])
    store.tick(active_candidate, 30)
    store.pause_interview(active_candidate)
    store.resume_interview(active_candidate)

    session = store.get_session(active_candidate)
    assert session["phase"] == InterviewPhase.ACTIVE.value
    assert session["current_question_index"] == 3
    assert session["timer"] == 60
    assert session["timer_running"] is True


def test_answers_rejected_while_paused(store, active_candidate):
    store.pause_interview(active_candidate)
    with pytest.raises(InvalidTransitionError):
        store.submit_answer(active_candidate, "answer")


def test_resume_requires_paused(store, active_candidate):
    with pytest.raises(InvalidTransitionError):
        store.resume_interview(active_candidate)


def test_pause_requires_active(store, complete_details):
    candidate_id = store.add_candidate(complete_details)
    with pytest.raises(InvalidTransitionError):
        store.pause_interview(candidate_id)


# ---------------------------------------------------------------------------
# Reset / publish
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("answered", [0, 3, 6])
def test_reset_from_any_point(store, active_candidate, answered):
    answer_all(store, active_candidate, [4] * answered)
    store.reset_candidate_assessment(active_candidate)

    candidate = store.get_candidate(active_candidate)
    session = store.get_session(active_candidate)
    assert candidate["status"] == CandidateStatus.PENDING.value
    assert candidate["answers"] == []
    assert candidate["chat_history"] == []
    assert candidate["final_score"] is None
    assert candidate["summary"] == ""
    assert candidate["scores_published"] is False
    assert session["phase"] == InterviewPhase.IDLE.value
    assert session["current_question_index"] == 0
    assert session["timer"] == 0


def test_reset_keeps_contact_details(store, active_candidate, complete_details):
    store.reset_candidate_assessment(active_candidate)
    candidate = store.get_candidate(active_candidate)
    assert candidate["email"] == complete_details["email"]


def test_publish_requires_completed(store, active_candidate):
    with pytest.raises(InvalidTransitionError):
        store.publish_scores(active_candidate)

    answer_all(store, active_candidate, [3] * 6)
    store.publish_scores(active_candidate)
    assert store.get_candidate(active_candidate)["scores_published"] is True


def test_reset_interview_clears_active_candidate(store, active_candidate):
    answer_all(store, active_candidate, [3, 3])
    store.reset_interview()

    assert store.active_candidate_id is None
    assert store.get_candidate(active_candidate)["answers"] == []
    assert store.get_phase(active_candidate) == InterviewPhase.IDLE


# ---------------------------------------------------------------------------
# Dashboard queries
# ---------------------------------------------------------------------------

def test_search_by_name_email_or_phone(store):
    alice = store.add_candidate({"name": "Alice Smith", "email": "alice@example.com", "phone": "(555) 111-2222"})
    bob = store.add_candidate({"name": "Bob Jones", "email": "bob@corp.io", "phone": "(555) 333-4444"})

    assert [c["id"] for c in store.search_candidates("alice")] == [alice]
    assert [c["id"] for c in store.search_candidates("CORP.IO")] == [bob]
    assert [c["id"] for c in store.search_candidates("333")] == [bob]
    assert len(store.search_candidates("")) == 2


def test_sort_by_score_treats_missing_as_zero(store):
    low = store.add_candidate({"name": "Low Score"})
    high = store.add_candidate({"name": "High Score"})
    none = store.add_candidate({"name": "No Score"})
    store.update_candidate(low, {"final_score": 10.0})
    store.update_candidate(high, {"final_score": 25.5})

    ordered = store.sort_candidates(store.list_candidates(), "final_score", "desc")
    assert [c["id"] for c in ordered] == [high, low, none]

    ordered = store.sort_candidates(store.list_candidates(), "name", "asc")
    assert [c["name"] for c in ordered] == ["High Score", "Low Score", "No Score"]


def test_candidates_for_user_include_unassigned(store):
    mine = store.add_candidate({"name": "Mine"}, user_id="u1")
    theirs = store.add_candidate({"name": "Theirs"}, user_id="u2")
    shared = store.add_candidate({"name": "Shared"})

    ids = {c["id"] for c in store.get_candidates_for_user("u1")}
    assert ids == {mine, shared}
    assert theirs not in ids


def test_clear_all_data(store, active_candidate):
    store.clear_all_data()
    assert store.candidates == {}
    assert store.sessions == {}
    assert store.active_candidate_id is None


def test_chat_messages_get_ids_and_timestamps(store, complete_details):
    candidate_id = store.add_candidate(complete_details)
    message = store.add_chat_message(candidate_id, {"sender": "system", "text": "Welcome"})
    assert message["id"]
    assert message["timestamp"]
    assert store.get_candidate(candidate_id)["chat_history"] == [message]


def test_timestamps_are_utc_aware(store, active_candidate):
    record = store.submit_answer(active_candidate, "first answer", evaluation={"score": 3})
    candidate = store.get_candidate(active_candidate)

    for stamp in (candidate["created_at"], record["timestamp"], candidate["chat_history"][-1]["timestamp"]):
        assert datetime.fromisoformat(stamp).utcoffset() == timedelta(0)
