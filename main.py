"""
Main entry point for the Crisp Interview Assistant.
Provides a CLI interface for running a timed interview in the terminal.
"""
import sys
import time
from pathlib import Path

from agents import evaluate_answer, generate_question
from config import DEFAULT_ROLE, setup_logging
from question_bank import get_fallback_question
from resume_parser import ResumeParseError, parse_resume
from scoring import heuristic_evaluation, performance_label
from state import (
    InterviewPhase,
    MAX_TOTAL_SCORE,
    TOTAL_QUESTIONS,
    get_question_type,
    get_time_limit,
)
from store import InterviewStore, FieldValidationError

FIELD_PROMPTS = {
    "name": "Full name",
    "email": "Email address",
    "phone": "Phone number",
}


def print_separator():
    print("=" * 60)


def load_resume(path: str) -> dict:
    """Parse a resume file into candidate data, exiting on failure."""
    resume_path = Path(path)
    if not resume_path.exists():
        print(f"Resume not found: {path}")
        sys.exit(1)

    try:
        parsed = parse_resume(resume_path.read_bytes(), resume_path.name)
    except ResumeParseError as e:
        print(f"Could not read resume: {e}")
        sys.exit(1)

    return {
        "name": parsed["name"],
        "email": parsed["email"],
        "phone": parsed["phone"],
        "resume_data": parsed,
    }


def collect_missing_fields(store: InterviewStore, candidate_id: str):
    """Prompt for each missing detail until it validates."""
    print("\nWe need a few details before starting.\n")
    while store.get_phase(candidate_id) == InterviewPhase.COLLECTING_INFO:
        field = store.get_candidate(candidate_id)["missing_fields"][0]
        value = input(f"{FIELD_PROMPTS[field]}: ").strip()
        try:
            store.provide_field(candidate_id, field, value)
        except FieldValidationError as e:
            print(f"  {e}")


def run_interview(resume_path: str = None, role: str = DEFAULT_ROLE, offline: bool = False):
    """Run an interactive interview session."""
    print_separator()
    print("CRISP INTERVIEW ASSISTANT")
    print_separator()

    ask = get_fallback_question if offline else (
        lambda difficulty, index: generate_question(difficulty, index, role)
    )
    store = InterviewStore()

    candidate_data = load_resume(resume_path) if resume_path else {}
    candidate_data["role"] = role
    candidate_id = store.add_candidate(candidate_data)

    if store.start_interview(candidate_id) == InterviewPhase.COLLECTING_INFO:
        collect_missing_fields(store, candidate_id)
        store.start_interview(candidate_id)

    candidate = store.get_candidate(candidate_id)
    print(f"\nWelcome, {candidate['name']}! You will answer {TOTAL_QUESTIONS} questions.")
    print("Type 'quit' to end the interview early.\n")

    while store.get_phase(candidate_id) == InterviewPhase.ACTIVE:
        session = store.get_session(candidate_id)
        index = session["current_question_index"]
        difficulty = get_question_type(index).value
        question = ask(difficulty, index)
        store.set_question(candidate_id, question)

        print(f"\nQuestion {index + 1}/{TOTAL_QUESTIONS} [{difficulty.upper()}, {get_time_limit(index)}s]")
        print(f"{question['question']}\n")

        started = time.monotonic()
        try:
            answer = input("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nEnding interview...")
            return
        if answer.lower() in ["quit", "exit", "q"]:
            print("\nEnding interview early...")
            return

        # The store submits an empty answer once the budget runs out
        if store.tick(candidate_id, int(time.monotonic() - started)):
            print("Time's up! The question was submitted without an answer.")
            continue

        if offline:
            evaluation = heuristic_evaluation(question["question"], answer, difficulty)
        else:
            evaluation = evaluate_answer(question["question"], answer, difficulty, question)
        record = store.submit_answer(candidate_id, answer, evaluation=evaluation, question_index=index)
        print(f"Score: {record['score']}/5 - {record['feedback']}")

    # Show final results
    candidate = store.get_candidate(candidate_id)
    score = candidate["final_score"] or 0
    percentage = score / MAX_TOTAL_SCORE * 100

    print()
    print_separator()
    print("INTERVIEW COMPLETE")
    print_separator()
    print(f"\nFinal Score: {score}/{MAX_TOTAL_SCORE} ({percentage:.1f}%, {performance_label(percentage)})")
    print(f"\n{candidate['summary']}\n")

    print("Answers:")
    print("-" * 40)
    for record in candidate["answers"]:
        print(
            f"  Q{record['question_index'] + 1} [{record['question_type']}] "
            f"{record['score']}/5 in {record['time_used']}s"
        )
    print()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Crisp Interview Assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands during interview:
  quit, exit, q  - End the interview early

Examples:
  python main.py                      # Enter your details by hand
  python main.py resume.pdf           # Read details from a resume
  python main.py --role "Data Engineer"
  python main.py --offline            # Question bank and heuristic scoring only
        """,
    )
    parser.add_argument("resume", nargs="?", help="Resume file (PDF or DOCX, optional)")
    parser.add_argument("--role", default=DEFAULT_ROLE, help="Role being interviewed for")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Do not call any AI model",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show log output during the interview",
    )

    args = parser.parse_args()
    setup_logging("DEBUG" if args.verbose else "WARNING")

    run_interview(args.resume, role=args.role, offline=args.offline)


if __name__ == "__main__":
    main()
