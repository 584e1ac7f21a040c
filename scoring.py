"""
Scoring helpers shared by the interview store and the AI adapters.

All per-answer scores handled here are on the 0-5 scale. Model output on the
0-100 scale is converted once, with to_five_point().
"""
from typing import Dict, Any, List

from state import Candidate, AnswerRecord, MAX_SCORE_PER_QUESTION, MAX_TOTAL_SCORE, TOTAL_QUESTIONS


def to_five_point(score_out_of_100: float) -> float:
    """Convert a 0-100 score to the 0-5 scale, rounded to one decimal."""
    return round(score_out_of_100 / 100 * MAX_SCORE_PER_QUESTION, 1)


def clamp_score(score: float) -> float:
    return max(0.0, min(float(MAX_SCORE_PER_QUESTION), float(score)))


def calculate_final_score(answers: List[AnswerRecord]) -> float:
    """Sum of all answer scores (out of 30), rounded to one decimal."""
    if not answers:
        return 0.0
    total = sum(answer.get("score") or 0 for answer in answers)
    return round(total, 1)


def performance_label(percentage: float) -> str:
    if percentage >= 80:
        return "Excellent"
    if percentage >= 60:
        return "Good"
    if percentage >= 40:
        return "Fair"
    return "Poor"


def generate_summary(candidate: Candidate) -> str:
    """Templated summary written when an interview finishes."""
    answers = candidate.get("answers") or []
    total_score = calculate_final_score(answers)
    percentage = total_score / MAX_TOTAL_SCORE * 100
    performance = performance_label(percentage)

    return (
        f"Candidate {candidate.get('name') or 'Unknown'} completed the interview with "
        f"{performance} performance. Total score: {total_score}/{MAX_TOTAL_SCORE} "
        f"({percentage:.1f}%). Answered {len(answers)}/{TOTAL_QUESTIONS} questions."
    )


def generate_feedback(score: float) -> str:
    if score == 0:
        return "No answer provided within time limit."
    if score >= 4.5:
        return "Excellent answer! Well structured and comprehensive."
    if score >= 3.5:
        return "Good answer with solid understanding."
    if score >= 2.5:
        return "Fair answer, could use more detail."
    if score >= 1.5:
        return "Needs improvement. Consider more specific examples."
    return "Answer needs significant improvement."


def word_count_score(answer: str) -> float:
    """Score an answer out of 100 from its length alone."""
    words = len(answer.split())
    if words < 10:
        return 25
    if words < 20:
        return 40
    if words < 40:
        return 55
    if words < 80:
        return 70
    return min(85, 70 + (words - 80) / 10)


def heuristic_evaluation(question: str, answer: str, difficulty: str) -> Dict[str, Any]:
    """
    Offline evaluation used when no model is reachable.

    Returns the same shape as the AI evaluator so callers never branch on
    where a score came from.
    """
    if not answer or not answer.strip():
        return {
            "score": 0,
            "score_out_of_100": 0,
            "feedback": generate_feedback(0),
            "strengths": [],
            "improvements": ["Provide an answer within the time limit"],
            "correct": False,
            "source": "heuristic",
        }

    score_out_of_100 = word_count_score(answer)
    words = len(answer.split())
    detail = (
        "Consider providing more detail and examples."
        if words < 30
        else "Good effort! Focus on technical accuracy and completeness."
    )
    return {
        "score": to_five_point(score_out_of_100),
        "score_out_of_100": round(score_out_of_100),
        "feedback": f"Answer received ({words} words). {detail}",
        "strengths": ["Provided detailed response"] if words > 30 else ["Attempted the question"],
        "improvements": ["Answer logged for manual review", "Ensure technical accuracy in future responses"],
        "correct": score_out_of_100 >= 60,
        "breakdown": {
            "technical_accuracy": round(score_out_of_100),
            "completeness": round(score_out_of_100),
            "communication": round(score_out_of_100),
        },
        "source": "heuristic",
    }
