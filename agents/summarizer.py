"""
Summarizer Agent - AI hiring assessment for a finished interview.
"""
import logging
from typing import Dict, Any

from agents.llm import ModelChain, ModelChainError
from config import DEFAULT_ROLE
from prompts.summary_prompt import get_summary_system_prompt, build_summary_prompt
from state import Candidate, MAX_SCORE_PER_QUESTION

logger = logging.getLogger(__name__)

summary_chain = ModelChain.from_config(temperature=0.7, max_tokens=2048)


def recommendation_for(score_out_of_100: float) -> str:
    if score_out_of_100 >= 80:
        return "Strong Hire"
    if score_out_of_100 >= 70:
        return "Hire"
    if score_out_of_100 >= 60:
        return "Maybe"
    return "No Hire"


def average_score_out_of_100(candidate: Candidate) -> float:
    answers = candidate.get("answers") or []
    if not answers:
        return 0.0
    average = sum(a.get("score") or 0 for a in answers) / len(answers)
    return average / MAX_SCORE_PER_QUESTION * 100


def fallback_summary(candidate: Candidate) -> Dict[str, Any]:
    """Score-derived assessment used when no model is reachable."""
    avg = average_score_out_of_100(candidate)
    return {
        "overall_score": round(avg),
        "recommendation": recommendation_for(avg),
        "confidence": "Medium",
        "summary": (
            f"Candidate demonstrated {'strong' if avg >= 70 else 'adequate'} "
            f"technical abilities during the interview process."
        ),
        "strengths": ["Technical knowledge", "Problem-solving approach"],
        "weaknesses": ["Could improve detail in responses"],
        "technical_skills": {
            "Fundamentals": round(avg),
            "Practical Application": round(avg * 0.9),
            "System Design": round(avg * 0.85),
        },
        "soft_skills": {
            "Communication": round(avg * 0.9),
            "Problem Solving": round(avg),
            "Adaptability": round(avg * 0.85),
        },
        "recommendations": ["Review technical strengths", "Consider for next round"],
        "source": "fallback",
    }


def parse_summary(data: Dict[str, Any], candidate: Candidate) -> Dict[str, Any]:
    fallback = fallback_summary(candidate)

    def pick(snake: str, camel: str):
        value = data.get(snake, data.get(camel))
        return fallback[snake] if value in (None, "", [], {}) else value

    summary = {
        key: pick(key, camel)
        for key, camel in (
            ("overall_score", "overallScore"),
            ("recommendation", "recommendation"),
            ("confidence", "confidence"),
            ("summary", "summary"),
            ("strengths", "strengths"),
            ("weaknesses", "weaknesses"),
            ("technical_skills", "technicalSkills"),
            ("soft_skills", "softSkills"),
            ("recommendations", "recommendations"),
        )
    }
    summary["source"] = "ai"
    return summary


def generate_candidate_summary(candidate: Candidate, role: str = DEFAULT_ROLE) -> Dict[str, Any]:
    prompt = build_summary_prompt(candidate, role)
    try:
        data = summary_chain.invoke_json(get_summary_system_prompt(), prompt)
    except (ModelChainError, ValueError) as e:
        logger.warning("Summary generation failed, using score-based summary: %s", e)
        return fallback_summary(candidate)
    return parse_summary(data, candidate)
