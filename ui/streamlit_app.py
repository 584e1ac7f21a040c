"""
Streamlit interviewee app for the Crisp Interview Assistant.

Upload a resume, fill in any missing details, then answer six timed
questions. Progress is saved locally, so a reload offers to resume.

Run with: streamlit run ui/streamlit_app.py
"""
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st

from agents import evaluate_answer, generate_question, get_chatbot_response
from config import STORAGE_DIR, DEFAULT_ROLE, setup_logging
from persistence import JsonStorage
from resume_parser import ResumeParseError, parse_resume
from scoring import performance_label
from state import (
    InterviewPhase,
    MAX_TOTAL_SCORE,
    TOTAL_QUESTIONS,
    get_question_type,
    get_time_limit,
)
from store import InterviewStore, InvalidTransitionError, FieldValidationError

setup_logging()

st.set_page_config(
    page_title="Crisp Interview Assistant",
    page_icon="🎯",
    layout="wide",
)

FIELD_PROMPTS = {
    "name": "What is your full name?",
    "email": "What is your email address?",
    "phone": "What is your phone number?",
}

# Initialize session state
if "store" not in st.session_state:
    st.session_state.store = InterviewStore.load(JsonStorage(STORAGE_DIR), evaluator=evaluate_answer)
else:
    # The reviewer dashboard may have reset or published this candidate
    st.session_state.store.refresh()
if "last_tick" not in st.session_state:
    st.session_state.last_tick = time.monotonic()
if "help_messages" not in st.session_state:
    st.session_state.help_messages = []

store: InterviewStore = st.session_state.store


def catch_up_timer(candidate_id: str) -> bool:
    """Apply wall-clock seconds elapsed since the last rerun. True if the question expired."""
    now = time.monotonic()
    elapsed = int(now - st.session_state.last_tick)
    if elapsed <= 0:
        return False
    st.session_state.last_tick += elapsed
    return store.tick(candidate_id, elapsed)


def reset_clock():
    st.session_state.last_tick = time.monotonic()


def ensure_question(candidate_id: str):
    session = store.get_session(candidate_id)
    if session["phase"] != InterviewPhase.ACTIVE.value or session["current_question"]:
        return
    index = session["current_question_index"]
    with st.spinner(f"Preparing question {index + 1} of {TOTAL_QUESTIONS}..."):
        question = generate_question(
            get_question_type(index).value, index, store.get_candidate(candidate_id)["role"]
        )
    store.set_question(candidate_id, question)
    reset_clock()


@st.fragment(run_every=1)
def countdown(candidate_id: str):
    store.refresh()
    if candidate_id not in store.candidates or store.get_phase(candidate_id) != InterviewPhase.ACTIVE:
        st.rerun()
    if catch_up_timer(candidate_id):
        st.rerun()

    session = store.get_session(candidate_id)
    if session["phase"] != InterviewPhase.ACTIVE.value:
        return

    index = session["current_question_index"]
    limit = get_time_limit(index)
    remaining = session["timer"]
    st.progress(remaining / limit, text=f"⏱️ {remaining}s remaining")


def render_transcript(candidate):
    for message in candidate["chat_history"]:
        if message["sender"] == "bot":
            with st.chat_message("assistant", avatar="🤖"):
                question = message.get("question") or {}
                if question:
                    index = question.get("question_index", 0)
                    st.caption(
                        f"Question {index + 1}/{TOTAL_QUESTIONS} · "
                        f"{get_question_type(index).value.upper()} · {question.get('category', '')}"
                    )
                st.write(message["text"])
        elif message["sender"] == "user":
            with st.chat_message("user", avatar="👤"):
                st.write(message["text"] or "_No answer (time expired)_")
                if message.get("score") is not None:
                    st.caption(f"Score: {message['score']}/5 · {message.get('feedback', '')}")
        else:
            st.info(message["text"])


# Sidebar
with st.sidebar:
    st.title("Interview")

    candidate = store.get_active_candidate()
    if candidate:
        session = store.get_session(candidate["id"])
        st.metric("Candidate", candidate["name"] or "Unknown")
        col1, col2 = st.columns(2)
        with col1:
            st.metric("Phase", session["phase"])
        with col2:
            st.metric("Answered", f"{len(candidate['answers'])}/{TOTAL_QUESTIONS}")

        if session["phase"] == InterviewPhase.ACTIVE.value:
            if st.button("Pause Interview", use_container_width=True):
                store.pause_interview(candidate["id"])
                st.rerun()

    st.divider()

    with st.expander("Need help?", expanded=False):
        for entry in st.session_state.help_messages[-6:]:
            st.markdown(f"**{'You' if entry['sender'] == 'user' else 'Assistant'}:** {entry['text']}")
        question = st.text_input("Ask the assistant", key="help_input")
        if st.button("Ask", key="help_ask") and question.strip():
            with st.spinner("..."):
                reply = get_chatbot_response(question, "Interviewee", st.session_state.help_messages)
            st.session_state.help_messages += [
                {"sender": "user", "text": question},
                {"sender": "bot", "text": reply},
            ]
            st.rerun()


st.title("Crisp Interview Assistant")

# Welcome back
if store.show_welcome_back and store.get_active_candidate():
    candidate = store.get_active_candidate()
    st.info(
        f"Welcome back, {candidate['name'] or 'candidate'}! You have an unfinished interview "
        f"({len(candidate['answers'])}/{TOTAL_QUESTIONS} questions answered)."
    )
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Resume Interview", type="primary", use_container_width=True):
            store.resume_interview(candidate["id"])
            reset_clock()
            st.rerun()
    with col2:
        if st.button("Start Fresh", use_container_width=True):
            store.reset_interview()
            st.rerun()
    st.stop()

candidate = store.get_active_candidate()
phase = store.get_phase(candidate["id"]) if candidate else InterviewPhase.IDLE

# Resume upload
if candidate is None or (phase == InterviewPhase.IDLE and not candidate["resume_data"]):
    st.subheader("Upload your resume to begin")
    role = st.text_input("Role you are applying for", value=DEFAULT_ROLE)
    resume_file = st.file_uploader("Resume (PDF or DOCX)", type=["pdf", "docx"])

    if resume_file is not None and st.button("Continue", type="primary"):
        try:
            parsed = parse_resume(resume_file.getvalue(), resume_file.name)
        except ResumeParseError as e:
            st.error(str(e))
        else:
            store.add_candidate({
                "name": parsed["name"],
                "email": parsed["email"],
                "phone": parsed["phone"],
                "role": role,
                "resume_data": parsed,
            })
            st.rerun()

elif phase in (InterviewPhase.IDLE, InterviewPhase.READY):
    st.subheader(f"Ready when you are, {candidate['name'] or 'candidate'}")
    st.write(
        f"You will answer {TOTAL_QUESTIONS} questions: two easy (20s each), "
        "two medium (60s each) and two hard (120s each). "
        "Unanswered questions are submitted automatically when time runs out."
    )
    if st.button("Start Interview", type="primary"):
        store.start_interview(candidate["id"])
        reset_clock()
        st.rerun()

elif phase == InterviewPhase.COLLECTING_INFO:
    field = candidate["missing_fields"][0]
    st.subheader("We need a few more details")
    with st.form("missing_field"):
        value = st.text_input(FIELD_PROMPTS[field])
        submitted = st.form_submit_button("Submit")
    if submitted:
        try:
            remaining = store.provide_field(candidate["id"], field, value)
        except FieldValidationError as e:
            st.error(str(e))
        else:
            if not remaining:
                st.success("Thanks! Your details are complete.")
            st.rerun()

elif phase == InterviewPhase.PAUSED:
    render_transcript(candidate)
    st.warning("Interview paused. The current question's timer restarts when you resume.")
    if st.button("Resume Interview", type="primary"):
        store.resume_interview(candidate["id"])
        reset_clock()
        st.rerun()

elif phase == InterviewPhase.ACTIVE:
    if catch_up_timer(candidate["id"]):
        st.rerun()
    ensure_question(candidate["id"])
    render_transcript(candidate)
    countdown(candidate["id"])

    session = store.get_session(candidate["id"])
    if answer := st.chat_input("Your answer..."):
        index = session["current_question_index"]
        question = session["current_question"] or {}
        with st.spinner("Evaluating your answer..."):
            evaluation = evaluate_answer(
                question.get("question", ""), answer, get_question_type(index).value, question
            )
        catch_up_timer(candidate["id"])
        try:
            store.submit_answer(candidate["id"], answer, evaluation=evaluation, question_index=index)
        except InvalidTransitionError:
            st.warning("Time ran out before your answer was recorded.")
        reset_clock()
        st.rerun()

elif phase == InterviewPhase.FINISHED:
    render_transcript(candidate)
    st.success("Interview Complete")

    score = candidate["final_score"] or 0
    percentage = score / MAX_TOTAL_SCORE * 100
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Final Score", f"{score}/{MAX_TOTAL_SCORE}")
    with col2:
        st.metric("Percentage", f"{percentage:.1f}%")
    with col3:
        st.metric("Performance", performance_label(percentage))
    st.write(candidate["summary"])

    if st.button("Start New Interview", type="primary"):
        store.set_active_candidate(None)
        st.rerun()

st.divider()
st.caption("Crisp Interview Assistant")
