"""
Candidate creation and reset utilities.
"""
import uuid
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from config import DEFAULT_ROLE
from state import Candidate, CandidateStatus


def initialize_candidate(
    candidate_data: Dict[str, Any], user_id: Optional[str] = None
) -> Candidate:
    """Create a fresh candidate record from parsed resume or form data."""
    return Candidate(
        # Identity
        id=candidate_data.get("id") or uuid.uuid4().hex,
        name=candidate_data.get("name") or "",
        email=candidate_data.get("email") or "",
        phone=candidate_data.get("phone") or "",
        role=candidate_data.get("role") or DEFAULT_ROLE,
        created_at=datetime.now(timezone.utc).isoformat(),
        resume_data=candidate_data.get("resume_data"),
        assigned_user_id=user_id,

        # Progress
        status=CandidateStatus.PENDING.value,
        current_question_index=0,
        missing_fields=[],

        # Transcript
        chat_history=[],
        answers=[],

        # Results
        final_score=None,
        summary="",
        scores_published=False,
    )


def blank_assessment() -> Dict[str, Any]:
    """Fields overwritten when an interviewer resets a candidate's assessment."""
    return {
        "status": CandidateStatus.PENDING.value,
        "current_question_index": 0,
        "missing_fields": [],
        "chat_history": [],
        "answers": [],
        "final_score": None,
        "summary": "",
        "scores_published": False,
    }
