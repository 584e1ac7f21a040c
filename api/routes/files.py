"""
Resume upload route.
"""
import logging

from fastapi import APIRouter, File, Form, UploadFile
from typing import Optional

from api.dependencies import store, to_http_error
from resume_parser import ResumeParseError, check_missing_fields, parse_resume

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/files", tags=["files"])


@router.post("/resume", status_code=201)
async def upload_resume(
    file: UploadFile = File(...),
    role: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None),
):
    """Parse an uploaded resume and create a candidate from it."""
    content = await file.read()
    try:
        parsed = parse_resume(content, file.filename or "")
    except ResumeParseError as e:
        logger.warning("Resume upload rejected: %s", e)
        raise to_http_error(e) from e

    candidate_id = store.add_candidate(
        {
            "name": parsed["name"],
            "email": parsed["email"],
            "phone": parsed["phone"],
            "role": role,
            "resume_data": parsed,
        },
        user_id,
    )
    return {
        "candidate": store.get_candidate(candidate_id),
        "missing_fields": check_missing_fields(parsed),
    }
