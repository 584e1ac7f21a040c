"""
ATS-style resume scoring.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Any

from agents.llm import ModelChain, ModelChainError
from prompts.resume_prompt import get_ats_system_prompt, build_ats_prompt

logger = logging.getLogger(__name__)

ats_chain = ModelChain.from_config(temperature=0.3, max_tokens=2000)

BREAKDOWN_KEYS = ("formatting", "keywords", "experience", "education", "skills")


def failed_analysis(error: str) -> Dict[str, Any]:
    return {
        "success": False,
        "error": error,
        "ats_score": 0,
        "breakdown": {key: 0 for key in BREAKDOWN_KEYS},
        "strengths": ["Unable to analyze"],
        "weaknesses": ["Analysis failed"],
        "recommendations": ["Please try again"],
        "extracted_skills": [],
        "experience_years": 0,
        "match_percentage": 0,
        "source": "fallback",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def parse_analysis(data: Dict[str, Any]) -> Dict[str, Any]:
    breakdown = data.get("breakdown") or data.get("atsBreakdown") or {}
    return {
        "success": True,
        "ats_score": data.get("ats_score", data.get("atsScore", 0)),
        "breakdown": {key: breakdown.get(key, 0) for key in BREAKDOWN_KEYS},
        "strengths": data.get("strengths") or [],
        "weaknesses": data.get("weaknesses") or [],
        "recommendations": data.get("recommendations") or [],
        "extracted_skills": data.get("extracted_skills") or data.get("extractedSkills") or [],
        "experience_years": data.get("experience_years", data.get("experienceYears", 0)),
        "match_percentage": data.get("match_percentage", data.get("matchPercentage", 0)),
        "source": "ai",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def analyze_resume(resume_text: str, job_description: str = "") -> Dict[str, Any]:
    if not resume_text or not resume_text.strip():
        return failed_analysis("Resume text is empty")

    prompt = build_ats_prompt(resume_text, job_description)
    try:
        data = ats_chain.invoke_json(get_ats_system_prompt(), prompt)
    except (ModelChainError, ValueError) as e:
        logger.warning("ATS analysis failed: %s", e)
        return failed_analysis(str(e))
    return parse_analysis(data)
