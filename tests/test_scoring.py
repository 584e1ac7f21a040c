"""
Score conversion, totals and summary templates.

Run with: pytest tests/test_scoring.py -v
"""
import pytest

from scoring import (
    calculate_final_score,
    clamp_score,
    generate_feedback,
    generate_summary,
    heuristic_evaluation,
    performance_label,
    to_five_point,
    word_count_score,
)


def answers_with(scores):
    return [{"question_index": i, "score": s} for i, s in enumerate(scores)]


def test_final_score_is_sum_of_answer_scores():
    assert calculate_final_score(answers_with([4, 3.5, 3, 2, 4, 3.5])) == 20.0


def test_final_score_of_no_answers_is_zero():
    assert calculate_final_score([]) == 0.0


def test_summary_for_good_performance():
    candidate = {"name": "Jane Doe", "answers": answers_with([4, 3.5, 3, 2, 4, 3.5])}
    assert generate_summary(candidate) == (
        "Candidate Jane Doe completed the interview with Good performance. "
        "Total score: 20.0/30 (66.7%). Answered 6/6 questions."
    )


@pytest.mark.parametrize("percentage, label", [
    (100, "Excellent"),
    (80, "Excellent"),
    (79.9, "Good"),
    (60, "Good"),
    (40, "Fair"),
    (39.9, "Poor"),
    (0, "Poor"),
])
def test_performance_label_thresholds(percentage, label):
    assert performance_label(percentage) == label


def test_to_five_point_conversion():
    assert to_five_point(0) == 0
    assert to_five_point(80) == 4.0
    assert to_five_point(100) == 5.0
    assert to_five_point(62) == pytest.approx(3.1)


def test_clamp_score_bounds():
    assert clamp_score(-1) == 0.0
    assert clamp_score(7) == 5.0
    assert clamp_score(2.5) == 2.5


def test_feedback_for_zero_score():
    assert generate_feedback(0) == "No answer provided within time limit."
    assert generate_feedback(4.8).startswith("Excellent")


@pytest.mark.parametrize("words, expected", [
    (5, 25),
    (15, 40),
    (30, 55),
    (60, 70),
    (100, 72),
    (500, 85),
])
def test_word_count_score_bands(words, expected):
    assert word_count_score(" ".join(["word"] * words)) == expected


def test_heuristic_evaluation_of_empty_answer():
    result = heuristic_evaluation("What is a closure?", "   ", "easy")
    assert result["score"] == 0
    assert result["correct"] is False


def test_heuristic_evaluation_uses_five_point_scale():
    answer = " ".join(["closure"] * 60)
    result = heuristic_evaluation("What is a closure?", answer, "easy")
    assert result["score_out_of_100"] == 70
    assert result["score"] == pytest.approx(3.5)
    assert result["correct"] is True
    assert result["source"] == "heuristic"
