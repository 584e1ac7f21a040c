"""
Answer evaluation prompts.

Models score on a 0-100 scale; the evaluator converts to the 0-5 scale
stored on each answer.
"""

from typing import Dict, Any, Optional

from state import QUESTION_TIMERS, QuestionType


def answer_time_limit(difficulty: str) -> int:
    """Seconds the candidate had to answer, by tier (medium for unknown tiers)."""
    try:
        tier = QuestionType(difficulty)
    except ValueError:
        tier = QuestionType.MEDIUM
    return QUESTION_TIMERS[tier]


def get_evaluator_system_prompt() -> str:
    """
    System prompt for the answer evaluator.

    The weighting below is what the candidate-facing chatbot describes, so the
    two must change together.
    """
    return """You are an expert technical interviewer.
Your role is to provide RIGOROUS, FAIR, and DETAILED assessment of interview responses.

Scoring Scale (0-100):
- 90-100: Exceptional - goes beyond expectations
- 80-89: Excellent - comprehensive, accurate, well communicated
- 70-79: Good - covers most key points with minor gaps
- 60-69: Satisfactory - basic understanding, missing important details
- 50-59: Below Average - partially correct with significant gaps
- 40-49: Poor - minimal understanding, major technical errors
- 0-39: Inadequate - incorrect, irrelevant, or fundamental misunderstanding

Evaluation Criteria:
1. Technical Accuracy (40%)
2. Completeness (30%)
3. Communication (20%)
4. Practical Understanding (10%)

Guidelines:
- Do not inflate scores. An average answer scores 60-70, not 80-90
- Give credit for correct concepts even if the explanation is weak
- Deduct points for technical inaccuracies
- Consider the difficulty level and time constraint
- Provide SPECIFIC feedback, not generic praise

Response Format (MUST BE VALID JSON):
{
  "score": 75,
  "feedback": "Specific, actionable feedback",
  "strengths": ["Specific strength 1", "Specific strength 2"],
  "improvements": ["Specific improvement 1", "Specific improvement 2"],
  "technical_accuracy": 80,
  "completeness": 70,
  "communication": 75,
  "key_points_covered": ["Point that was mentioned"],
  "key_points_missed": ["Point that was missed"]
}"""


def build_evaluation_prompt(question: str, answer: str, difficulty: str,
                            question_data: Optional[Dict[str, Any]] = None) -> str:
    question_data = question_data or {}

    expected_points = question_data.get("expected_points") or []
    expected_text = ""
    if expected_points:
        expected_text = "\n\nExpected Key Points to Cover:\n" + "\n".join(
            f"{i}. {point}" for i, point in enumerate(expected_points, 1)
        )

    category = question_data.get("category")
    category_text = f"\nCategory: {category}" if category else ""

    answer = answer.strip()
    return f"""Evaluate this technical interview answer with RIGOR and PRECISION:

Question ({difficulty.upper()} level):{category_text}
"{question}"{expected_text}

Candidate's Answer:
"{answer}"

Answer Length: {len(answer)} characters ({len(answer.split())} words)
Time Constraint: {answer_time_limit(difficulty)} seconds

Evaluation Instructions:
1. Check if the answer addresses the question directly
2. Identify which expected key points were covered
3. Assess technical accuracy of statements made
4. Evaluate completeness and depth of explanation
5. Consider communication clarity

Return ONLY valid JSON in the structure described in your instructions."""
