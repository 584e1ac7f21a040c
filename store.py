"""
Interview progression state machine for the Crisp Interview Assistant.

Flow per candidate:
1. idle -> collecting-info when name/email/phone are missing or invalid
2. collecting-info -> ready once every missing field passes validation
3. ready (or idle with complete details) -> active on start
4. active -> active on each answer, until the sixth answer -> finished
5. active <-> paused on explicit pause/resume

Phase, question index and countdown live in a SessionState keyed by
candidate id. The countdown is driven from outside through tick(); nothing in
this module sleeps or spawns threads.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional, Callable

from candidate_loader import initialize_candidate, blank_assessment
from config import INTERVIEW_STORAGE_KEY
from persistence import JsonStorage
from resume_parser import (
    FIELD_VALIDATORS,
    check_missing_fields,
    clean_name,
    format_phone_number,
)
from scoring import (
    calculate_final_score,
    clamp_score,
    generate_feedback,
    generate_summary,
    heuristic_evaluation,
)
from state import (
    AnswerRecord,
    Candidate,
    CandidateStatus,
    ChatMessage,
    InterviewPhase,
    REQUIRED_FIELDS,
    SessionState,
    TOTAL_QUESTIONS,
    get_question_type,
    get_time_limit,
    new_session_state,
)

logger = logging.getLogger(__name__)

# (question, answer, difficulty) -> {"score": 0-5, "feedback": str, ...}
Evaluator = Callable[[str, str, str], Dict[str, Any]]


class CandidateNotFoundError(LookupError):
    """Raised when an action names a candidate the store does not hold."""


class InvalidTransitionError(ValueError):
    """Raised when an action is not allowed in the candidate's current phase."""


class FieldValidationError(ValueError):
    """Raised when a supplied candidate field fails format validation."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


FIELD_ERROR_MESSAGES = {
    "name": "Please enter your full name (letters only, at least 2 characters).",
    "email": "Please enter a valid email address.",
    "phone": "Please enter a valid phone number (at least 10 digits).",
}


class InterviewStore:
    """
    Holds every candidate plus the per-candidate interview sessions.

    All actions are synchronous. When a storage backend is attached, the
    persisted subset of the state is written after every mutating action.
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        storage: Optional[JsonStorage] = None,
        storage_key: str = INTERVIEW_STORAGE_KEY,
    ):
        self.candidates: Dict[str, Candidate] = {}
        self.sessions: Dict[str, SessionState] = {}
        self.active_candidate_id: Optional[str] = None
        self.show_welcome_back = False
        self.evaluator = evaluator or heuristic_evaluation
        self.storage = storage
        self.storage_key = storage_key

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_candidate(self, candidate_id: str) -> Candidate:
        try:
            return self.candidates[candidate_id]
        except KeyError:
            raise CandidateNotFoundError(f"Candidate not found: {candidate_id}") from None

    def get_session(self, candidate_id: str) -> SessionState:
        self.get_candidate(candidate_id)
        if candidate_id not in self.sessions:
            self.sessions[candidate_id] = new_session_state()
        return self.sessions[candidate_id]

    def get_phase(self, candidate_id: str) -> InterviewPhase:
        return InterviewPhase(self.get_session(candidate_id)["phase"])

    def get_active_candidate(self) -> Optional[Candidate]:
        if self.active_candidate_id is None:
            return None
        return self.candidates.get(self.active_candidate_id)

    def list_candidates(self) -> List[Candidate]:
        return list(self.candidates.values())

    # ------------------------------------------------------------------
    # Candidate records
    # ------------------------------------------------------------------

    def add_candidate(self, candidate_data: Dict[str, Any], user_id: Optional[str] = None) -> str:
        """Create a candidate (status pending) and make it the active one."""
        candidate = initialize_candidate(candidate_data, user_id)
        self.candidates[candidate["id"]] = candidate
        self.sessions[candidate["id"]] = new_session_state()
        self.active_candidate_id = candidate["id"]
        logger.info("Added candidate %s", candidate["id"])
        self.persist()
        return candidate["id"]

    def update_candidate(self, candidate_id: str, updates: Dict[str, Any]) -> Candidate:
        candidate = self.get_candidate(candidate_id)
        candidate.update(updates)
        self.persist()
        return candidate

    def set_active_candidate(self, candidate_id: Optional[str]) -> None:
        if candidate_id is not None:
            self.get_candidate(candidate_id)
        self.active_candidate_id = candidate_id
        self.persist()

    def add_chat_message(self, candidate_id: str, message: Dict[str, Any]) -> ChatMessage:
        candidate = self.get_candidate(candidate_id)
        record = ChatMessage(
            id=uuid.uuid4().hex,
            timestamp=datetime.now(timezone.utc).isoformat(),
            **message,
        )
        candidate["chat_history"] = candidate["chat_history"] + [record]
        self.persist()
        return record

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def start_interview(self, candidate_id: str) -> InterviewPhase:
        """
        Start (or try to start) the interview.

        Goes to collecting-info when required details are missing, otherwise
        straight to active with the first question's timer running.
        """
        candidate = self.get_candidate(candidate_id)
        phase = self.get_phase(candidate_id)
        if phase not in (InterviewPhase.IDLE, InterviewPhase.READY):
            raise InvalidTransitionError(f"Cannot start interview from phase '{phase.value}'")

        self.active_candidate_id = candidate_id
        missing_fields = check_missing_fields(candidate)
        if missing_fields:
            candidate["missing_fields"] = missing_fields
            self._set_phase(candidate_id, InterviewPhase.COLLECTING_INFO)
            self.persist()
            return InterviewPhase.COLLECTING_INFO

        self._begin(candidate_id)
        return InterviewPhase.ACTIVE

    def provide_field(self, candidate_id: str, field: str, value: str) -> List[str]:
        """
        Supply one missing detail during collecting-info.

        Returns the fields still missing. Raises FieldValidationError for bad
        input, leaving the phase unchanged so the same field is asked again.
        """
        candidate = self.get_candidate(candidate_id)
        if self.get_phase(candidate_id) != InterviewPhase.COLLECTING_INFO:
            raise InvalidTransitionError("Candidate details are not being collected")
        if field not in REQUIRED_FIELDS:
            raise FieldValidationError(field, f"Unknown field '{field}'")

        value = (value or "").strip()
        if not FIELD_VALIDATORS[field](value):
            raise FieldValidationError(field, FIELD_ERROR_MESSAGES[field])

        if field == "name":
            value = clean_name(value)
        elif field == "email":
            value = value.lower()
        else:
            value = format_phone_number(value)

        candidate[field] = value
        missing_fields = check_missing_fields(candidate)
        candidate["missing_fields"] = missing_fields
        if not missing_fields:
            self._set_phase(candidate_id, InterviewPhase.READY)
        self.persist()
        return missing_fields

    def set_question(self, candidate_id: str, question_data: Dict[str, Any]) -> ChatMessage:
        """Record the question being asked at the current index."""
        session = self.get_session(candidate_id)
        if InterviewPhase(session["phase"]) not in (InterviewPhase.ACTIVE, InterviewPhase.PAUSED):
            raise InvalidTransitionError("No interview in progress")

        index = session["current_question_index"]
        session["current_question"] = {**question_data, "question_index": index}
        return self.add_chat_message(candidate_id, {
            "sender": "bot",
            "text": question_data.get("question", ""),
            "question": session["current_question"],
        })

    def submit_answer(
        self,
        candidate_id: str,
        answer: str,
        evaluation: Optional[Dict[str, Any]] = None,
        question_index: Optional[int] = None,
    ) -> AnswerRecord:
        """
        Record an answer for the current question and move on.

        evaluation is an already-computed {"score", "feedback"} result (for
        example from the AI evaluator); without one the store's own evaluator
        is used. An empty answer always scores 0. Passing question_index
        rejects answers that arrive after their question has timed out.
        """
        candidate = self.get_candidate(candidate_id)
        session = self.get_session(candidate_id)
        if InterviewPhase(session["phase"]) != InterviewPhase.ACTIVE:
            raise InvalidTransitionError("Answers can only be submitted during an active interview")

        index = session["current_question_index"]
        if question_index is not None and question_index != index:
            raise InvalidTransitionError(
                f"Question {question_index} is no longer current (now at {index})"
            )

        answer = answer or ""
        question_type = get_question_type(index)
        current_question = session.get("current_question") or {}
        question_text = current_question.get("question", "")

        if not answer.strip():
            evaluation = {"score": 0, "feedback": generate_feedback(0)}
        elif evaluation is None:
            evaluation = self.evaluator(question_text, answer, question_type.value)

        score = clamp_score(evaluation.get("score") or 0)
        feedback = evaluation.get("feedback") or generate_feedback(score)

        record = AnswerRecord(
            question_index=index,
            answer=answer,
            score=score,
            question_type=question_type.value,
            time_used=max(0, get_time_limit(index) - session["timer"]),
            timestamp=datetime.now(timezone.utc).isoformat(),
            question=question_text,
            feedback=feedback,
        )
        candidate["answers"] = candidate["answers"] + [record]
        self.add_chat_message(candidate_id, {
            "sender": "user",
            "text": answer,
            "score": score,
            "feedback": feedback,
        })
        logger.info("Candidate %s answered question %d (score %.1f)", candidate_id, index, score)

        self._stop_timer(session)
        self._advance(candidate_id)
        return record

    def tick(self, candidate_id: str, seconds: int = 1) -> bool:
        """
        Advance the countdown by whole seconds.

        When it reaches zero an empty answer is submitted for the current
        question. Returns True if that happened. Leftover seconds are not
        carried into the next question.
        """
        session = self.get_session(candidate_id)
        if InterviewPhase(session["phase"]) != InterviewPhase.ACTIVE or not session["timer_running"]:
            return False

        for _ in range(seconds):
            session["timer"] -= 1
            if session["timer"] <= 0:
                session["timer"] = 0
                logger.info(
                    "Time expired for candidate %s on question %d",
                    candidate_id, session["current_question_index"],
                )
                self.submit_answer(candidate_id, "")
                return True
        return False

    def pause_interview(self, candidate_id: str) -> None:
        session = self.get_session(candidate_id)
        if InterviewPhase(session["phase"]) != InterviewPhase.ACTIVE:
            raise InvalidTransitionError("Only an active interview can be paused")
        self._stop_timer(session)
        self._set_phase(candidate_id, InterviewPhase.PAUSED)
        self.persist()

    def resume_interview(self, candidate_id: str) -> None:
        """
        Resume a paused interview, or one restored from storage.

        The current question keeps its index; its timer restarts at the full
        budget for its tier.
        """
        candidate = self.get_candidate(candidate_id)
        session = self.get_session(candidate_id)
        phase = InterviewPhase(session["phase"])
        restored = phase == InterviewPhase.ACTIVE and not session["timer_running"]
        if phase != InterviewPhase.PAUSED and not restored:
            raise InvalidTransitionError(f"Cannot resume from phase '{phase.value}'")
        if candidate["status"] != CandidateStatus.IN_PROGRESS.value:
            raise InvalidTransitionError("Interview is not in progress")

        self.active_candidate_id = candidate_id
        self.show_welcome_back = False
        self._set_phase(candidate_id, InterviewPhase.ACTIVE)
        self._start_timer(session, get_time_limit(session["current_question_index"]))
        self.persist()

    def reset_candidate_assessment(self, candidate_id: str) -> None:
        """Return a candidate to pending with an empty transcript, from any phase."""
        candidate = self.get_candidate(candidate_id)
        candidate.update(blank_assessment())
        self.sessions[candidate_id] = new_session_state()
        if self.active_candidate_id == candidate_id:
            self.show_welcome_back = False
        logger.info("Reset assessment for candidate %s", candidate_id)
        self.persist()

    def publish_scores(self, candidate_id: str) -> None:
        candidate = self.get_candidate(candidate_id)
        if candidate["status"] != CandidateStatus.COMPLETED.value:
            raise InvalidTransitionError("Scores can only be published for completed interviews")
        candidate["scores_published"] = True
        self.persist()

    # ------------------------------------------------------------------
    # Welcome back / session reset
    # ------------------------------------------------------------------

    def check_for_incomplete_session(self) -> bool:
        candidate = self.get_active_candidate()
        self.show_welcome_back = bool(
            candidate and candidate["status"] == CandidateStatus.IN_PROGRESS.value
        )
        return self.show_welcome_back

    def reset_interview(self) -> None:
        """Start fresh: drop the active candidate's progress and clear the selection."""
        if self.active_candidate_id in self.candidates:
            self.reset_candidate_assessment(self.active_candidate_id)
        self.active_candidate_id = None
        self.show_welcome_back = False
        self.persist()

    def clear_all_data(self) -> None:
        self.candidates = {}
        self.sessions = {}
        self.active_candidate_id = None
        self.show_welcome_back = False
        self.persist()

    # ------------------------------------------------------------------
    # Dashboard queries
    # ------------------------------------------------------------------

    def search_candidates(self, search_term: Optional[str] = None) -> List[Candidate]:
        candidates = self.list_candidates()
        if not search_term:
            return candidates

        term = search_term.lower()
        return [
            c for c in candidates
            if term in c["name"].lower()
            or term in c["email"].lower()
            or search_term in c["phone"]
        ]

    @staticmethod
    def sort_candidates(
        candidates: List[Candidate], sort_by: str = "final_score", sort_order: str = "desc"
    ) -> List[Candidate]:
        def sort_key(candidate: Candidate):
            value = candidate.get(sort_by)
            if sort_by == "final_score":
                return value or 0
            if isinstance(value, str):
                return value.lower()
            return value if value is not None else ""

        return sorted(candidates, key=sort_key, reverse=(sort_order != "asc"))

    def get_candidates_for_user(self, user_id: str) -> List[Candidate]:
        return [
            c for c in self.candidates.values()
            if c.get("assigned_user_id") in (user_id, None)
        ]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_snapshot(self) -> Dict[str, Any]:
        """The persisted subset of the store; timer values are left out."""
        return {
            "candidates": list(self.candidates.values()),
            "active_candidate_id": self.active_candidate_id,
            "sessions": {
                candidate_id: {
                    "phase": session["phase"],
                    "current_question_index": session["current_question_index"],
                }
                for candidate_id, session in self.sessions.items()
            },
            "show_welcome_back": self.show_welcome_back,
        }

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Dict[str, Any],
        evaluator: Optional[Evaluator] = None,
        storage: Optional[JsonStorage] = None,
        storage_key: str = INTERVIEW_STORAGE_KEY,
    ) -> "InterviewStore":
        store = cls(evaluator=evaluator, storage=storage, storage_key=storage_key)
        for candidate in snapshot.get("candidates", []):
            store.candidates[candidate["id"]] = candidate

        for candidate_id, saved in snapshot.get("sessions", {}).items():
            if candidate_id not in store.candidates:
                continue
            session = new_session_state()
            session["phase"] = InterviewPhase(saved.get("phase", "idle")).value
            session["current_question_index"] = int(saved.get("current_question_index", 0))
            store.sessions[candidate_id] = session

        active_id = snapshot.get("active_candidate_id")
        store.active_candidate_id = active_id if active_id in store.candidates else None
        store.show_welcome_back = bool(snapshot.get("show_welcome_back", False))
        return store

    @classmethod
    def load(
        cls,
        storage: JsonStorage,
        evaluator: Optional[Evaluator] = None,
        storage_key: str = INTERVIEW_STORAGE_KEY,
    ) -> "InterviewStore":
        """Restore from storage and flag an unfinished interview for the welcome-back prompt."""
        snapshot = storage.load(storage_key)
        if snapshot is None:
            return cls(evaluator=evaluator, storage=storage, storage_key=storage_key)

        store = cls.from_snapshot(snapshot, evaluator, storage, storage_key)
        store.check_for_incomplete_session()
        logger.info("Restored %d candidates from storage", len(store.candidates))
        return store

    def refresh(self) -> None:
        """
        Pick up changes another process wrote to storage, such as a reset or
        publish from the reviewer dashboard.

        Candidate records are replaced by the stored ones. A session keeps its
        in-memory countdown only while its phase and question index still match
        what is stored.
        """
        if self.storage is None:
            return
        snapshot = self.storage.load(self.storage_key)
        if snapshot is None:
            return

        stored = InterviewStore.from_snapshot(snapshot)
        sessions = {}
        for candidate_id in stored.candidates:
            fresh = stored.get_session(candidate_id)
            current = self.sessions.get(candidate_id)
            unchanged = current is not None and (
                current["phase"] == fresh["phase"]
                and current["current_question_index"] == fresh["current_question_index"]
            )
            sessions[candidate_id] = current if unchanged else fresh

        self.candidates = stored.candidates
        self.sessions = sessions
        if self.active_candidate_id not in self.candidates:
            self.active_candidate_id = None

    def persist(self) -> None:
        if self.storage is not None:
            self.storage.save(self.storage_key, self.to_snapshot())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_phase(self, candidate_id: str, phase: InterviewPhase) -> None:
        session = self.get_session(candidate_id)
        logger.debug("Candidate %s: %s -> %s", candidate_id, session["phase"], phase.value)
        session["phase"] = phase.value

    def _begin(self, candidate_id: str) -> None:
        candidate = self.get_candidate(candidate_id)
        session = self.get_session(candidate_id)

        candidate["status"] = CandidateStatus.IN_PROGRESS.value
        candidate["current_question_index"] = 0
        candidate["missing_fields"] = []
        session["current_question_index"] = 0
        session["current_question"] = None
        self._set_phase(candidate_id, InterviewPhase.ACTIVE)
        self._start_timer(session, get_time_limit(0))
        logger.info("Interview started for candidate %s", candidate_id)
        self.persist()

    def _advance(self, candidate_id: str) -> None:
        candidate = self.get_candidate(candidate_id)
        session = self.get_session(candidate_id)

        next_index = session["current_question_index"] + 1
        if next_index >= TOTAL_QUESTIONS:
            self.finish_interview(candidate_id)
            return

        candidate["current_question_index"] = next_index
        session["current_question_index"] = next_index
        session["current_question"] = None
        self._start_timer(session, get_time_limit(next_index))
        self.persist()

    def finish_interview(self, candidate_id: str) -> None:
        """Close the interview once the last question has an answer (possibly empty)."""
        candidate = self.get_candidate(candidate_id)
        session = self.get_session(candidate_id)
        answered = {a["question_index"] for a in candidate["answers"]}
        if TOTAL_QUESTIONS - 1 not in answered:
            raise InvalidTransitionError("The last question has not been answered yet")

        self._stop_timer(session)
        candidate["status"] = CandidateStatus.COMPLETED.value
        candidate["final_score"] = calculate_final_score(candidate["answers"])
        candidate["summary"] = generate_summary(candidate)
        session["current_question"] = None
        self._set_phase(candidate_id, InterviewPhase.FINISHED)
        logger.info(
            "Interview finished for candidate %s: %s/30",
            candidate_id, candidate["final_score"],
        )
        self.persist()

    @staticmethod
    def _start_timer(session: SessionState, seconds: int) -> None:
        session["timer"] = seconds
        session["timer_running"] = True

    @staticmethod
    def _stop_timer(session: SessionState) -> None:
        session["timer_running"] = False
