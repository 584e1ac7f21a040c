"""
Prompt templates for the AI adapters.
"""
from .question_prompt import get_question_system_prompt, build_question_prompt
from .evaluator_prompt import get_evaluator_system_prompt, build_evaluation_prompt
from .chatbot_prompt import get_chatbot_system_prompt, build_chatbot_prompt
from .summary_prompt import get_summary_system_prompt, build_summary_prompt
from .resume_prompt import get_ats_system_prompt, build_ats_prompt

__all__ = [
    "get_question_system_prompt",
    "build_question_prompt",
    "get_evaluator_system_prompt",
    "build_evaluation_prompt",
    "get_chatbot_system_prompt",
    "build_chatbot_prompt",
    "get_summary_system_prompt",
    "build_summary_prompt",
    "get_ats_system_prompt",
    "build_ats_prompt",
]
