"""
Hiring assessment prompts.
"""

from typing import Dict, Any

from state import TOTAL_QUESTIONS


def get_summary_system_prompt() -> str:
    return """You are an expert HR analyst creating comprehensive candidate assessments.

Your role is to analyze interview performance and provide detailed hiring recommendations.

Analysis Areas:
- Overall Performance: holistic view of candidate abilities
- Technical Skills: specific strengths in technologies
- Soft Skills: communication, problem-solving, adaptability
- Strengths and Areas for Improvement
- Hiring Recommendation: clear guidance for decision-makers

Response Format:
Return ONLY a JSON object with this structure:
{
  "overall_score": 85,
  "recommendation": "Strong Hire / Hire / Maybe / No Hire",
  "confidence": "High / Medium / Low",
  "summary": "2-3 sentence overview",
  "strengths": ["Strength 1", "Strength 2", "Strength 3"],
  "weaknesses": ["Area 1", "Area 2"],
  "technical_skills": {"JavaScript": 90, "React": 85, "System Design": 70},
  "soft_skills": {"Communication": 85, "Problem Solving": 80, "Adaptability": 75},
  "recommendations": ["Next step 1", "Next step 2"]
}

overall_score and all skill ratings are on a 0-100 scale."""


def build_summary_prompt(candidate: Dict[str, Any], role: str) -> str:
    """Build the per-candidate prompt. Answer scores are shown out of 5."""
    answers = candidate.get("answers") or []

    answer_lines = []
    for i, record in enumerate(answers, 1):
        answer_lines.append(
            f"Question {i} ({record.get('question_type', 'medium')}): {record.get('question', '')}\n"
            f"Answer: {record.get('answer') or '(no answer)'}\n"
            f"Score: {record.get('score', 0)}/5\n"
            f"Feedback: {record.get('feedback') or 'N/A'}"
        )

    average = sum(r.get("score") or 0 for r in answers) / len(answers) if answers else 0
    completion = len(answers) / TOTAL_QUESTIONS * 100

    return f"""Generate a comprehensive hiring assessment for this candidate:

Candidate Information:
- Name: {candidate.get('name') or 'N/A'}
- Email: {candidate.get('email') or 'N/A'}
- Role: {role}

Interview Performance:
{chr(10).join(answer_lines) or 'No answers recorded.'}

Overall Statistics:
- Questions Answered: {len(answers)}
- Average Score: {average:.1f}/5
- Completion Rate: {completion:.0f}%

Provide a comprehensive assessment suitable for hiring decisions.
Return the response as a valid JSON object only."""
