"""
AI service routes: questions, evaluation, summaries, chatbot and ATS scoring.
All of them degrade to their offline fallbacks when no model is reachable.
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool
from typing import Optional, Dict, Any, List

from agents import (
    analyze_resume,
    evaluate_answer,
    generate_candidate_summary,
    generate_question,
    generate_question_set,
    get_chatbot_response,
)
from agents.question_generator import question_chain
from api.dependencies import store, to_http_error
from config import DEFAULT_ROLE
from store import CandidateNotFoundError

router = APIRouter(prefix="/api/ai", tags=["ai"])


class GenerateQuestionsRequest(BaseModel):
    role: str = DEFAULT_ROLE
    difficulty: Optional[str] = None
    count: int = Field(default=1, ge=1, le=10)


class EvaluateAnswerRequest(BaseModel):
    question: str
    answer: str = ""
    difficulty: str = "medium"
    question_data: Optional[Dict[str, Any]] = None


class InterviewSummaryRequest(BaseModel):
    candidate_id: Optional[str] = None
    candidate_name: Optional[str] = None
    answers: List[Dict[str, Any]] = []
    role: str = DEFAULT_ROLE


class ChatbotRequest(BaseModel):
    message: str
    user_role: str = "Interviewee"
    conversation_history: List[Dict[str, Any]] = []


class AtsScoreRequest(BaseModel):
    resume_text: str
    job_description: str = ""


@router.post("/generate-questions")
async def generate_questions(request: GenerateQuestionsRequest):
    """Generate questions for one tier, or the full six-question set when no tier is given."""
    if request.difficulty is None:
        questions = await run_in_threadpool(generate_question_set, request.role)
    else:
        questions = [
            await run_in_threadpool(generate_question, request.difficulty, i, request.role)
            for i in range(request.count)
        ]
    return {"success": True, "questions": questions}


@router.post("/evaluate-answer")
async def evaluate(request: EvaluateAnswerRequest):
    return await run_in_threadpool(
        evaluate_answer,
        request.question,
        request.answer,
        request.difficulty,
        request.question_data,
    )


@router.post("/interview-summary")
async def interview_summary(request: InterviewSummaryRequest):
    if request.candidate_id:
        try:
            candidate = store.get_candidate(request.candidate_id)
        except CandidateNotFoundError as e:
            raise to_http_error(e) from e
        role = candidate.get("role") or request.role
    else:
        if not request.candidate_name or not request.answers:
            raise HTTPException(status_code=400, detail="Candidate name and answers are required")
        candidate = {"name": request.candidate_name, "email": "", "answers": request.answers}
        role = request.role

    summary = await run_in_threadpool(generate_candidate_summary, candidate, role)
    return {"success": True, "summary": summary}


@router.post("/chatbot")
async def chatbot(request: ChatbotRequest):
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    reply = await run_in_threadpool(
        get_chatbot_response, request.message, request.user_role, request.conversation_history
    )
    return {"success": True, "message": reply}


@router.post("/ats-score")
async def ats_score(request: AtsScoreRequest):
    if not request.resume_text.strip():
        raise HTTPException(status_code=400, detail="Resume text is required")
    return await run_in_threadpool(analyze_resume, request.resume_text, request.job_description)


@router.get("/health")
async def ai_health():
    """Report whether any AI model is configured."""
    configured = question_chain.available
    return {
        "success": configured,
        "configured": configured,
        "models": question_chain.model_names,
        "message": (
            "AI service is configured and ready"
            if configured
            else "No AI model configured; offline fallbacks are in use."
        ),
    }
