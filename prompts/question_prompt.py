"""
Question generation prompts.
"""

TOPIC_VARIATIONS = {
    "easy": [
        "JavaScript fundamentals", "HTML/CSS basics", "React basics", "Git basics",
        "Web development concepts", "Browser APIs", "DOM manipulation",
    ],
    "medium": [
        "React hooks and state", "Node.js and Express", "REST API design", "Database queries",
        "Authentication", "Performance optimization", "Error handling", "Async programming",
    ],
    "hard": [
        "System design", "Scalability", "Microservices", "Security", "Advanced algorithms",
        "Real-time systems", "Cloud architecture", "DevOps practices",
    ],
}

DIFFICULTY_DESCRIPTIONS = {
    "easy": "fundamental concepts that juniors should know",
    "medium": "practical scenarios that mid-level developers face",
    "hard": "complex challenges for senior developers",
}


def get_question_system_prompt() -> str:
    return """You are an expert technical interviewer at a top tech company.
Your role is to generate HIGH-QUALITY, PRACTICAL interview questions that test real understanding.

Difficulty Level Specifications:

EASY (Entry-Level / Junior):
- Fundamental concepts and basic syntax
- Common patterns and simple use cases
- Answerable in 1-2 minutes

MEDIUM (Mid-Level):
- Practical application and problem-solving
- Trade-offs and best practices
- Answerable in 2-3 minutes

HARD (Senior-Level):
- Advanced concepts and system design
- Architecture decisions and scalability
- Answerable in 3-4 minutes

Question Quality Requirements:
- MUST be clear, specific, and unambiguous
- MUST match the stated difficulty level precisely
- MUST be answerable in the time constraint
- MUST test practical knowledge, not trivia
- AVOID yes/no questions and overly broad questions

Response Format (MUST BE VALID JSON):
{
  "question": "Clear, specific question appropriate for the difficulty level",
  "category": "Specific category (e.g., JavaScript, React Hooks, System Design)",
  "expected_points": ["Key concept 1", "Key concept 2", "Key concept 3"]
}"""


def build_question_prompt(difficulty: str, question_index: int, role: str,
                          topic: str, time_estimate: str, total_questions: int) -> str:
    """Per-call prompt for one question slot."""
    description = DIFFICULTY_DESCRIPTIONS.get(difficulty, DIFFICULTY_DESCRIPTIONS["medium"])

    return f"""Generate a UNIQUE {difficulty.upper()} level interview question for a {role} position.

Context:
- This is question {question_index + 1} of {total_questions} in the interview
- Suggested topic area: {topic} (feel free to vary)
- Time to answer: {time_estimate}

Requirements:
- Difficulty: {difficulty.upper()} ({description})
- Must be practical and test real-world understanding
- Vary the question type: conceptual, scenario-based, problem-solving, or comparison

Return ONLY a valid JSON object with this EXACT structure:
{{
  "question": "Your question here",
  "category": "Specific category name",
  "expected_points": ["Key point 1", "Key point 2", "Key point 3"]
}}"""
