"""
Static question bank used when no model can generate a question.
"""
import json
import random
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, List, Optional

from state import QuestionType, TOTAL_QUESTIONS

QUESTIONS_DIR = Path(__file__).parent / "questions"

TIME_ESTIMATES = {
    QuestionType.EASY.value: "1-2 minutes",
    QuestionType.MEDIUM.value: "2-3 minutes",
    QuestionType.HARD.value: "3-4 minutes",
}


@lru_cache(maxsize=None)
def load_pool(difficulty: str) -> List[Dict[str, Any]]:
    """Load the question pool for a difficulty tier from its JSON file."""
    pool_path = QUESTIONS_DIR / f"{difficulty}.json"
    if not pool_path.exists():
        raise FileNotFoundError(f"Question pool not found: {difficulty}")

    with open(pool_path, "r", encoding="utf-8") as f:
        return json.load(f)["questions"]


def get_available_difficulties() -> List[str]:
    return sorted(f.stem for f in QUESTIONS_DIR.glob("*.json"))


def get_fallback_question(
    difficulty: str, question_index: int, rng: Optional[random.Random] = None
) -> Dict[str, Any]:
    """
    Pick a question from the static pool.

    With an rng the pick is random (as when a live model is down mid-interview);
    without one the pool is rotated by question index so output is repeatable.
    """
    if difficulty not in TIME_ESTIMATES:
        difficulty = QuestionType.MEDIUM.value

    pool = load_pool(difficulty)
    selected = rng.choice(pool) if rng else pool[question_index % len(pool)]

    return {
        "id": f"fallback_{difficulty}_{question_index}",
        "question": selected["question"],
        "category": selected["category"],
        "expected_points": list(selected["expected_points"]),
        "expected_answer": ". ".join(selected["expected_points"]),
        "difficulty": difficulty,
        "time_estimate": TIME_ESTIMATES[difficulty],
        "question_number": question_index + 1,
        "total_questions": TOTAL_QUESTIONS,
        "source": "fallback",
    }
