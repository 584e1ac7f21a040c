"""
AI adapters for the Crisp Interview Assistant.
"""
from .question_generator import generate_question, generate_question_set
from .evaluator import evaluate_answer
from .chatbot import get_chatbot_response
from .summarizer import generate_candidate_summary
from .resume_analyzer import analyze_resume

__all__ = [
    "generate_question",
    "generate_question_set",
    "evaluate_answer",
    "get_chatbot_response",
    "generate_candidate_summary",
    "analyze_resume",
]
