"""
Evaluator Agent - scores a single answer.

Models score out of 100; everything returned here carries the 0-5 score the
store records plus the original 0-100 value for display.
"""
import logging
from typing import Dict, Any, Optional

from agents.llm import ModelChain, ModelChainError
from prompts.evaluator_prompt import get_evaluator_system_prompt, build_evaluation_prompt
from scoring import to_five_point, heuristic_evaluation

logger = logging.getLogger(__name__)

evaluator_chain = ModelChain.from_config(temperature=0.7, max_tokens=2048)

MIN_ANSWER_CHARS = 10
# Scores above the threshold on answers shorter than SCORE_CAP_MAX_CHARS are capped
SCORE_CAP_MAX_CHARS = 200
SCORE_CAP_THRESHOLD = 95
SCORE_CAP = 85


def _expected_points(question_data: Optional[Dict[str, Any]]):
    return list((question_data or {}).get("expected_points") or [])


def empty_answer_evaluation(question_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "score": 0,
        "score_out_of_100": 0,
        "feedback": "No answer provided. Please provide a response to the question.",
        "strengths": [],
        "improvements": ["Provide an answer to the question", "Explain your understanding of the concept"],
        "correct": False,
        "breakdown": {"technical_accuracy": 0, "completeness": 0, "communication": 0},
        "key_points_covered": [],
        "key_points_missed": _expected_points(question_data),
        "source": "rule",
    }


def brief_answer_evaluation(question_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "score": 0.8,
        "score_out_of_100": 15,
        "feedback": "Answer is too brief. Please provide a more detailed explanation.",
        "strengths": ["Attempted to answer"],
        "improvements": ["Provide more detail and explanation", "Cover key concepts thoroughly"],
        "correct": False,
        "breakdown": {"technical_accuracy": 20, "completeness": 10, "communication": 15},
        "key_points_covered": [],
        "key_points_missed": _expected_points(question_data),
        "source": "rule",
    }


def parse_evaluation(data: Dict[str, Any], answer_length: int) -> Dict[str, Any]:
    """Normalize a model's evaluation payload and convert its score to 0-5."""
    raw_score = float(data.get("score") or 0)
    raw_score = max(0.0, min(100.0, raw_score))
    if raw_score > SCORE_CAP_THRESHOLD and answer_length < SCORE_CAP_MAX_CHARS:
        raw_score = SCORE_CAP

    def component(snake: str, camel: str):
        return data.get(snake) or data.get(camel) or raw_score

    return {
        "score": to_five_point(raw_score),
        "score_out_of_100": raw_score,
        "feedback": data.get("feedback") or "Answer evaluated",
        "strengths": data.get("strengths") or [],
        "improvements": data.get("improvements") or [],
        "correct": raw_score >= 60,
        "breakdown": {
            "technical_accuracy": component("technical_accuracy", "technicalAccuracy"),
            "completeness": component("completeness", "completeness"),
            "communication": component("communication", "communication"),
        },
        "key_points_covered": data.get("key_points_covered") or data.get("keyPointsCovered") or [],
        "key_points_missed": data.get("key_points_missed") or data.get("keyPointsMissed") or [],
        "source": "ai",
    }


def evaluate_answer(
    question: str,
    answer: str,
    difficulty: str = "medium",
    question_data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Score an answer on the 0-5 scale.

    Empty and very short answers are scored by rule without calling a model.
    Model failures fall back to the word-count heuristic.
    """
    answer = answer or ""
    answer_length = len(answer.strip())

    if answer_length == 0:
        return empty_answer_evaluation(question_data)
    if answer_length < MIN_ANSWER_CHARS:
        return brief_answer_evaluation(question_data)

    prompt = build_evaluation_prompt(question, answer, difficulty, question_data)
    try:
        data = evaluator_chain.invoke_json(get_evaluator_system_prompt(), prompt)
        return parse_evaluation(data, answer_length)
    except (ModelChainError, ValueError, TypeError) as e:
        logger.warning("AI evaluation failed, using heuristic score: %s", e)

    evaluation = heuristic_evaluation(question, answer, difficulty)
    evaluation["key_points_covered"] = []
    evaluation["key_points_missed"] = _expected_points(question_data)
    return evaluation
