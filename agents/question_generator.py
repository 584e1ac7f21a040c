"""
Question Generator - produces one interview question per slot.
Falls back to the static question bank whenever no model answers usefully.
"""
import logging
import random
import uuid
from typing import Dict, Any, List, Optional

from agents.llm import ModelChain, ModelChainError
from config import DEFAULT_ROLE
from prompts.question_prompt import (
    TOPIC_VARIATIONS,
    get_question_system_prompt,
    build_question_prompt,
)
from question_bank import TIME_ESTIMATES, get_fallback_question
from state import QuestionType, TOTAL_QUESTIONS, get_question_type

logger = logging.getLogger(__name__)

question_chain = ModelChain.from_config(temperature=0.95, max_tokens=1024)


def parse_question_response(data: Dict[str, Any]) -> Dict[str, Any]:
    """Validate a model's question payload, accepting camelCase keys."""
    question = data.get("question")
    category = data.get("category")
    expected_points = data.get("expected_points") or data.get("expectedPoints")

    if not question or not category or not expected_points:
        raise ValueError("Missing required fields in question data")
    if isinstance(expected_points, str):
        expected_points = [expected_points]

    return {
        "question": str(question).strip(),
        "category": str(category).strip(),
        "expected_points": [str(p) for p in expected_points],
    }


def generate_question(
    difficulty: str,
    question_index: int,
    role: str = DEFAULT_ROLE,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """
    Generate the question for one slot.

    Never raises for model problems: on any failure a bank question of the
    same tier is returned with source "fallback".
    """
    if difficulty not in TIME_ESTIMATES:
        difficulty = QuestionType.MEDIUM.value

    time_estimate = TIME_ESTIMATES[difficulty]
    topic = (rng or random).choice(TOPIC_VARIATIONS[difficulty])
    prompt = build_question_prompt(
        difficulty, question_index, role, topic, time_estimate, TOTAL_QUESTIONS
    )

    try:
        data = question_chain.invoke_json(get_question_system_prompt(), prompt)
        parsed = parse_question_response(data)
    except (ModelChainError, ValueError) as e:
        logger.warning("Question generation failed, using question bank: %s", e)
        return get_fallback_question(difficulty, question_index, rng)

    return {
        "id": f"ai_{difficulty}_{question_index}_{uuid.uuid4().hex[:8]}",
        **parsed,
        "expected_answer": ". ".join(parsed["expected_points"]),
        "difficulty": difficulty,
        "time_estimate": time_estimate,
        "question_number": question_index + 1,
        "total_questions": TOTAL_QUESTIONS,
        "source": "ai",
    }


def generate_question_set(role: str = DEFAULT_ROLE,
                          rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """All six questions for an interview, in tier order."""
    return [
        generate_question(get_question_type(i).value, i, role, rng)
        for i in range(TOTAL_QUESTIONS)
    ]
