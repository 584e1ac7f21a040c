"""
Help assistant for interviewers and interviewees.
"""
import logging
from typing import Dict, Any, List, Optional

from agents.llm import ModelChain, ModelChainError
from prompts.chatbot_prompt import get_chatbot_system_prompt, build_chatbot_prompt

logger = logging.getLogger(__name__)

chatbot_chain = ModelChain.from_config(temperature=0.8, max_tokens=512)

# (keywords, reply) pairs, first match wins
INTERVIEWER_REPLIES = [
    (("evaluate", "assessment"),
     "To evaluate candidates effectively:\n\n"
     "1. Review their AI Summary for strengths, weaknesses and a hiring recommendation\n"
     "2. Read the chat history for communication skills\n"
     "3. Look at per-question scores and the final score out of 30\n"
     "4. Consider their problem-solving approach on the hard questions"),
    (("question", "ask"),
     "Every interview asks six questions: two easy, two medium and two hard. "
     "Questions are generated for the selected role, or drawn from the built-in "
     "question bank when no AI model is available."),
    (("summary", "ai"),
     "The AI Summary analyzes:\n\n"
     "- Overall performance score\n"
     "- Technical and soft skills\n"
     "- Strengths and areas for improvement\n"
     "- A hiring recommendation\n\n"
     "Open a candidate in the dashboard to generate it."),
    (("best practice", "conduct"),
     "Best practices for reviewing interviews:\n\n"
     "1. Compare candidates by final score, then read the transcripts\n"
     "2. Check how answers changed as difficulty increased\n"
     "3. Publish scores only after reviewing the summary\n\n"
     "Consistency is key for fair evaluation."),
]

INTERVIEWEE_REPLIES = [
    (("prepare", "ready"),
     "To prepare for your interview:\n\n"
     "1. Review the job description carefully\n"
     "2. Practice explaining concepts out loud\n"
     "3. Prepare examples from your experience\n"
     "4. Have your resume ready as a PDF or DOCX\n\n"
     "Be authentic and show enthusiasm!"),
    (("question", "asked"),
     "You will get six technical questions: two easy, two medium and two hard. "
     "Expect a mix of conceptual, scenario-based and problem-solving questions."),
    (("score", "scoring"),
     "Each answer is scored out of 5, for a total out of 30. The evaluation weighs:\n\n"
     "- Technical accuracy (40%)\n"
     "- Completeness (30%)\n"
     "- Communication (20%)\n"
     "- Practical understanding (10%)"),
    (("technical", "coding"),
     "Tips for technical questions:\n\n"
     "1. State your approach before the details\n"
     "2. Start simple, then refine\n"
     "3. Mention edge cases and trade-offs\n\n"
     "Show your problem-solving process, not just the answer."),
    (("nervous", "anxiety", "stress"),
     "Feeling nervous is completely normal. Take a deep breath, read each question "
     "carefully and focus on the key points. You've prepared for this!"),
    (("time", "timer"),
     "About the interview timing:\n\n"
     "- Easy questions: 20 seconds each (questions 1-2)\n"
     "- Medium questions: 60 seconds each (questions 3-4)\n"
     "- Hard questions: 120 seconds each (questions 5-6)\n\n"
     "When time runs out the question is submitted automatically, "
     "so get your key points down early."),
]


def get_fallback_chatbot_response(message: str, user_role: str = "Interviewee") -> str:
    """Keyword-matched canned reply used when no model is reachable."""
    lower_message = message.lower()
    is_interviewer = user_role == "Interviewer"

    for keywords, reply in INTERVIEWER_REPLIES if is_interviewer else INTERVIEWEE_REPLIES:
        if any(keyword in lower_message for keyword in keywords):
            return reply

    if is_interviewer:
        topics = ("- How to evaluate candidates\n- Interview questions\n"
                  "- Understanding AI summaries\n- Interview best practices")
    else:
        topics = ("- How to prepare for the interview\n- What questions to expect\n"
                  "- How scoring works\n- Time limits")
    return f"I'm here to help! You can ask me about:\n\n{topics}\n\nWhat would you like to know more about?"


def get_chatbot_response(
    message: str,
    user_role: str = "Interviewee",
    history: Optional[List[Dict[str, Any]]] = None,
) -> str:
    if not chatbot_chain.available:
        return get_fallback_chatbot_response(message, user_role)

    prompt = build_chatbot_prompt(message, user_role, history or [])
    try:
        return chatbot_chain.invoke(get_chatbot_system_prompt(user_role), prompt).strip()
    except ModelChainError as e:
        logger.warning("Chatbot model unavailable, using canned reply: %s", e)
        return get_fallback_chatbot_response(message, user_role)
