"""
Candidate and interview lifecycle routes.
Wraps the shared InterviewStore for the candidate-facing and dashboard clients.
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from typing import Optional, Dict, Any, List

from agents.evaluator import evaluate_answer
from api.dependencies import store, timers, ask_current_question, to_http_error
from state import InterviewPhase, get_question_type, get_time_limit
from store import CandidateNotFoundError, InvalidTransitionError, FieldValidationError

router = APIRouter(prefix="/api/candidates", tags=["interview"])

DOMAIN_ERRORS = (CandidateNotFoundError, InvalidTransitionError, FieldValidationError)


class CreateCandidateRequest(BaseModel):
    name: Optional[str] = ""
    email: Optional[str] = ""
    phone: Optional[str] = ""
    role: Optional[str] = None
    resume_data: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None


class FieldRequest(BaseModel):
    field: str
    value: str


class AnswerRequest(BaseModel):
    answer: str = ""
    question_index: Optional[int] = None


class SessionResponse(BaseModel):
    candidate_id: str
    status: str
    phase: str
    current_question_index: int
    question_type: Optional[str]
    time_limit: Optional[int]
    timer: int
    timer_running: bool
    current_question: Optional[Dict[str, Any]]
    missing_fields: List[str]
    final_score: Optional[float]


class FieldResponse(BaseModel):
    phase: str
    missing_fields: List[str]


class AnswerResponse(BaseModel):
    record: Dict[str, Any]
    evaluation: Dict[str, Any]
    session: SessionResponse


def session_view(candidate_id: str) -> SessionResponse:
    candidate = store.get_candidate(candidate_id)
    session = store.get_session(candidate_id)
    index = session["current_question_index"]
    in_interview = session["phase"] in (InterviewPhase.ACTIVE.value, InterviewPhase.PAUSED.value)

    return SessionResponse(
        candidate_id=candidate_id,
        status=candidate["status"],
        phase=session["phase"],
        current_question_index=index,
        question_type=get_question_type(index).value if in_interview else None,
        time_limit=get_time_limit(index) if in_interview else None,
        timer=session["timer"],
        timer_running=session["timer_running"],
        current_question=session["current_question"],
        missing_fields=candidate["missing_fields"],
        final_score=candidate["final_score"],
    )


@router.get("")
async def list_candidates(
    search: Optional[str] = None,
    sort_by: str = "final_score",
    order: str = "desc",
    user_id: Optional[str] = None,
):
    """List candidates for the dashboard, filtered and sorted."""
    candidates = store.search_candidates(search)
    if user_id:
        allowed = {c["id"] for c in store.get_candidates_for_user(user_id)}
        candidates = [c for c in candidates if c["id"] in allowed]
    return store.sort_candidates(candidates, sort_by, order)


@router.post("", status_code=201)
async def create_candidate(request: CreateCandidateRequest):
    data = request.model_dump(exclude={"user_id"})
    candidate_id = store.add_candidate(data, request.user_id)
    return store.get_candidate(candidate_id)


@router.get("/{candidate_id}")
async def get_candidate(candidate_id: str):
    try:
        return store.get_candidate(candidate_id)
    except CandidateNotFoundError as e:
        raise to_http_error(e) from e


@router.get("/{candidate_id}/session", response_model=SessionResponse)
async def get_session(candidate_id: str):
    try:
        return session_view(candidate_id)
    except CandidateNotFoundError as e:
        raise to_http_error(e) from e


@router.post("/{candidate_id}/start", response_model=SessionResponse)
async def start_interview(candidate_id: str):
    """Start the interview, or begin collecting missing details first."""
    try:
        phase = store.start_interview(candidate_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e

    if phase == InterviewPhase.ACTIVE:
        await ask_current_question(candidate_id)
        timers.start(candidate_id)
    return session_view(candidate_id)


@router.post("/{candidate_id}/fields", response_model=FieldResponse)
async def provide_field(candidate_id: str, request: FieldRequest):
    try:
        missing_fields = store.provide_field(candidate_id, request.field, request.value)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return FieldResponse(phase=store.get_phase(candidate_id).value, missing_fields=missing_fields)


@router.post("/{candidate_id}/answer", response_model=AnswerResponse)
async def submit_answer(candidate_id: str, request: AnswerRequest):
    """
    Evaluate and record an answer for the current question.

    The countdown keeps running while the answer is evaluated. If the question
    times out in the meantime the evaluation is discarded (409).
    """
    try:
        session = store.get_session(candidate_id)
    except CandidateNotFoundError as e:
        raise to_http_error(e) from e
    if session["phase"] != InterviewPhase.ACTIVE.value:
        raise HTTPException(status_code=409, detail="No active interview for this candidate")

    index = session["current_question_index"]
    if request.question_index is not None and request.question_index != index:
        raise HTTPException(status_code=409, detail="Question is no longer current")

    question = session["current_question"] or {}
    evaluation = await run_in_threadpool(
        evaluate_answer,
        question.get("question", ""),
        request.answer,
        get_question_type(index).value,
        question,
    )

    try:
        record = store.submit_answer(
            candidate_id, request.answer, evaluation=evaluation, question_index=index
        )
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e

    if store.get_phase(candidate_id) == InterviewPhase.FINISHED:
        timers.cancel(candidate_id)
    else:
        await ask_current_question(candidate_id)
        timers.start(candidate_id)

    return AnswerResponse(record=record, evaluation=evaluation, session=session_view(candidate_id))


@router.post("/{candidate_id}/pause", response_model=SessionResponse)
async def pause_interview(candidate_id: str):
    try:
        store.pause_interview(candidate_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    timers.cancel(candidate_id)
    return session_view(candidate_id)


@router.post("/{candidate_id}/resume", response_model=SessionResponse)
async def resume_interview(candidate_id: str):
    try:
        store.resume_interview(candidate_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    await ask_current_question(candidate_id)
    timers.start(candidate_id)
    return session_view(candidate_id)


@router.post("/{candidate_id}/reset", response_model=SessionResponse)
async def reset_assessment(candidate_id: str):
    """Reset a candidate's assessment so they can retake the interview."""
    timers.cancel(candidate_id)
    try:
        store.reset_candidate_assessment(candidate_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return session_view(candidate_id)


@router.post("/{candidate_id}/publish")
async def publish_scores(candidate_id: str):
    try:
        store.publish_scores(candidate_id)
    except DOMAIN_ERRORS as e:
        raise to_http_error(e) from e
    return store.get_candidate(candidate_id)
