"""
State definitions for the Crisp Interview Assistant.
"""
from typing import TypedDict, List, Optional, Literal, Dict, Any
from enum import Enum


TOTAL_QUESTIONS = 6
MAX_SCORE_PER_QUESTION = 5
MAX_TOTAL_SCORE = TOTAL_QUESTIONS * MAX_SCORE_PER_QUESTION


class InterviewPhase(str, Enum):
    IDLE = "idle"
    COLLECTING_INFO = "collecting-info"
    READY = "ready"
    ACTIVE = "active"
    PAUSED = "paused"
    FINISHED = "finished"


class CandidateStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class QuestionType(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Seconds allowed per question, by tier
QUESTION_TIMERS = {
    QuestionType.EASY: 20,
    QuestionType.MEDIUM: 60,
    QuestionType.HARD: 120,
}

REQUIRED_FIELDS = ("name", "email", "phone")


class ChatMessage(TypedDict, total=False):
    id: str
    timestamp: str
    sender: Literal["bot", "user", "system"]
    text: str
    question: Optional[Dict[str, Any]]
    score: Optional[float]
    feedback: Optional[str]


class AnswerRecord(TypedDict, total=False):
    question_index: int
    answer: str
    score: float  # 0-5
    question_type: str
    time_used: int
    timestamp: str
    question: Optional[str]
    feedback: Optional[str]


class Candidate(TypedDict):
    # Identity
    id: str
    name: str
    email: str
    phone: str
    role: str
    created_at: str
    resume_data: Optional[Dict[str, Any]]
    assigned_user_id: Optional[str]

    # Progress
    status: str
    current_question_index: int
    missing_fields: List[str]

    # Transcript
    chat_history: List[ChatMessage]
    answers: List[AnswerRecord]

    # Results
    final_score: Optional[float]
    summary: str
    scores_published: bool


class SessionState(TypedDict):
    """Per-candidate interview progression. Timer values are never persisted."""
    phase: str
    current_question_index: int
    timer: int
    timer_running: bool
    current_question: Optional[Dict[str, Any]]


def get_question_type(question_index: int) -> QuestionType:
    """Map a question slot (0-5) to its difficulty tier."""
    if not 0 <= question_index < TOTAL_QUESTIONS:
        raise ValueError(f"Question index out of range: {question_index}")
    if question_index < 2:
        return QuestionType.EASY
    if question_index < 4:
        return QuestionType.MEDIUM
    return QuestionType.HARD


def get_time_limit(question_index: int) -> int:
    """Seconds allowed for the question at this slot."""
    return QUESTION_TIMERS[get_question_type(question_index)]


def new_session_state() -> SessionState:
    return SessionState(
        phase=InterviewPhase.IDLE.value,
        current_question_index=0,
        timer=0,
        timer_running=False,
        current_question=None,
    )
