"""
Shared interview store and timers for the API routes.
"""
import logging

from fastapi import HTTPException
from starlette.concurrency import run_in_threadpool

from agents.question_generator import generate_question
from api.timers import TimerRegistry
from resume_parser import ResumeParseError
from state import InterviewPhase, get_question_type
from store import (
    InterviewStore,
    CandidateNotFoundError,
    InvalidTransitionError,
    FieldValidationError,
)

logger = logging.getLogger(__name__)

# In-memory store (one process, no database)
store = InterviewStore()


async def ask_current_question(candidate_id: str) -> None:
    """Generate the question for the session's current slot, if it has none yet."""
    session = store.get_session(candidate_id)
    if session["phase"] != InterviewPhase.ACTIVE.value or session["current_question"]:
        return

    index = session["current_question_index"]
    role = store.get_candidate(candidate_id)["role"]
    question = await run_in_threadpool(
        generate_question, get_question_type(index).value, index, role
    )

    # The slot may have timed out while the question was being generated
    session = store.get_session(candidate_id)
    if (
        session["phase"] == InterviewPhase.ACTIVE.value
        and session["current_question_index"] == index
        and not session["current_question"]
    ):
        store.set_question(candidate_id, question)


timers = TimerRegistry(store, on_expire=ask_current_question)


def to_http_error(error: Exception) -> HTTPException:
    """Map domain errors to HTTP status codes."""
    if isinstance(error, CandidateNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, FieldValidationError):
        return HTTPException(status_code=422, detail={"field": error.field, "message": str(error)})
    if isinstance(error, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, ResumeParseError):
        return HTTPException(status_code=400, detail=str(error))
    logger.error("Unexpected error: %s", error)
    return HTTPException(status_code=500, detail="Internal server error")
