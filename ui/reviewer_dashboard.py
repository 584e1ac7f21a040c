"""
Streamlit interviewer dashboard for the Crisp Interview Assistant.

Lists every candidate with search and sorting, and shows the full transcript,
scores and AI assessments for one candidate at a time.

Run with: streamlit run ui/reviewer_dashboard.py
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st

from agents import analyze_resume, generate_candidate_summary, get_chatbot_response
from config import STORAGE_DIR, setup_logging
from persistence import JsonStorage
from state import CandidateStatus, MAX_TOTAL_SCORE, TOTAL_QUESTIONS
from store import InterviewStore, InvalidTransitionError

setup_logging()

st.set_page_config(
    page_title="Crisp Interviewer Dashboard",
    page_icon="📊",
    layout="wide",
)

SORT_OPTIONS = {
    "Score": "final_score",
    "Date": "created_at",
    "Name": "name",
}

STATUS_BADGES = {
    CandidateStatus.PENDING.value: "⏳ Pending",
    CandidateStatus.IN_PROGRESS.value: "▶️ In progress",
    CandidateStatus.COMPLETED.value: "✅ Completed",
}

# Reloaded on every run; the interviewee app writes the same file
store = InterviewStore.load(JsonStorage(STORAGE_DIR))

if "ai_summaries" not in st.session_state:
    st.session_state.ai_summaries = {}
if "ats_results" not in st.session_state:
    st.session_state.ats_results = {}
if "help_messages" not in st.session_state:
    st.session_state.help_messages = []


def render_ai_summary(summary):
    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Overall", f"{summary['overall_score']}/100")
    with col2:
        st.metric("Recommendation", summary["recommendation"])
    with col3:
        st.metric("Confidence", summary["confidence"])
    st.write(summary["summary"])

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Strengths**")
        for item in summary["strengths"]:
            st.write(f"• {item}")
        st.markdown("**Technical skills**")
        for skill, rating in summary["technical_skills"].items():
            st.progress(min(int(rating), 100) / 100, text=f"{skill}: {rating}")
    with col2:
        st.markdown("**Areas for improvement**")
        for item in summary["weaknesses"]:
            st.write(f"• {item}")
        st.markdown("**Soft skills**")
        for skill, rating in summary["soft_skills"].items():
            st.progress(min(int(rating), 100) / 100, text=f"{skill}: {rating}")

    if summary["recommendations"]:
        st.markdown("**Next steps**")
        for item in summary["recommendations"]:
            st.write(f"• {item}")


def render_candidate(candidate):
    st.header(candidate["name"] or "Unnamed candidate")
    st.caption(f"{candidate['email']} · {candidate['phone']} · {candidate['role']}")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Status", STATUS_BADGES.get(candidate["status"], candidate["status"]))
    with col2:
        score = candidate["final_score"]
        st.metric("Final Score", f"{score}/{MAX_TOTAL_SCORE}" if score is not None else "-")
    with col3:
        st.metric("Answered", f"{len(candidate['answers'])}/{TOTAL_QUESTIONS}")

    if candidate["summary"]:
        st.info(candidate["summary"])

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Publish Scores", disabled=candidate["scores_published"], use_container_width=True):
            try:
                store.publish_scores(candidate["id"])
            except InvalidTransitionError as e:
                st.error(str(e))
            else:
                st.rerun()
    with col2:
        if st.button("Reset Assessment", type="secondary", use_container_width=True):
            store.reset_candidate_assessment(candidate["id"])
            st.session_state.ai_summaries.pop(candidate["id"], None)
            st.rerun()

    answers_tab, transcript_tab, summary_tab, resume_tab = st.tabs(
        ["Answers", "Transcript", "AI Summary", "Resume"]
    )

    with answers_tab:
        if not candidate["answers"]:
            st.write("No answers recorded yet.")
        for record in candidate["answers"]:
            with st.expander(
                f"Q{record['question_index'] + 1} · {record['question_type'].upper()} · "
                f"{record['score']}/5 · {record['time_used']}s"
            ):
                st.markdown(f"**Question:** {record.get('question') or '-'}")
                st.markdown(f"**Answer:** {record['answer'] or '_No answer_'}")
                st.caption(record.get("feedback") or "")

    with transcript_tab:
        for message in candidate["chat_history"]:
            role = "assistant" if message["sender"] == "bot" else "user"
            with st.chat_message(role):
                st.write(message["text"] or "_No answer_")

    with summary_tab:
        summary = st.session_state.ai_summaries.get(candidate["id"])
        if st.button("Generate AI Summary", disabled=not candidate["answers"]):
            with st.spinner("Analyzing interview..."):
                summary = generate_candidate_summary(candidate, candidate["role"])
            st.session_state.ai_summaries[candidate["id"]] = summary
        if summary:
            render_ai_summary(summary)

    with resume_tab:
        resume = candidate["resume_data"] or {}
        if not resume.get("raw_text"):
            st.write("No resume on file.")
        else:
            st.caption(f"{resume.get('file_name', '')} · {resume.get('file_size', 0)} bytes")
            job_description = st.text_area("Job description (optional)", key=f"jd_{candidate['id']}")
            if st.button("Calculate ATS Score"):
                with st.spinner("Scoring resume..."):
                    st.session_state.ats_results[candidate["id"]] = analyze_resume(
                        resume["raw_text"], job_description
                    )
            result = st.session_state.ats_results.get(candidate["id"])
            if result:
                if not result["success"]:
                    st.error(f"ATS analysis unavailable: {result.get('error', '')}")
                else:
                    st.metric("ATS Score", f"{result['ats_score']}/100")
                    st.json(result)
            with st.expander("Resume text"):
                st.text(resume["raw_text"])


# Sidebar
with st.sidebar:
    st.title("Candidates")
    search = st.text_input("Search name, email or phone")
    sort_label = st.selectbox("Sort by", list(SORT_OPTIONS))
    descending = st.toggle("Descending", value=True)

    st.divider()

    with st.expander("Assistant", expanded=False):
        for entry in st.session_state.help_messages[-6:]:
            st.markdown(f"**{'You' if entry['sender'] == 'user' else 'Assistant'}:** {entry['text']}")
        question = st.text_input("Ask the assistant", key="help_input")
        if st.button("Ask", key="help_ask") and question.strip():
            with st.spinner("..."):
                reply = get_chatbot_response(question, "Interviewer", st.session_state.help_messages)
            st.session_state.help_messages += [
                {"sender": "user", "text": question},
                {"sender": "bot", "text": reply},
            ]
            st.rerun()

    st.divider()
    if st.button("Clear All Data", type="secondary", use_container_width=True):
        store.clear_all_data()
        st.session_state.ai_summaries = {}
        st.session_state.ats_results = {}
        st.rerun()


st.title("Interviewer Dashboard")

candidates = store.sort_candidates(
    store.search_candidates(search),
    SORT_OPTIONS[sort_label],
    "desc" if descending else "asc",
)

if not candidates:
    st.write("No candidates yet.")
    st.stop()

st.dataframe(
    [
        {
            "Name": c["name"],
            "Email": c["email"],
            "Phone": c["phone"],
            "Status": STATUS_BADGES.get(c["status"], c["status"]),
            "Score": c["final_score"],
            "Published": c["scores_published"],
            "Created": c["created_at"][:16].replace("T", " "),
        }
        for c in candidates
    ],
    use_container_width=True,
    hide_index=True,
)

labels = {f"{c['name'] or 'Unnamed'} <{c['email'] or c['id'][:8]}>": c["id"] for c in candidates}
selected = st.selectbox("Candidate", list(labels))
st.divider()
render_candidate(store.get_candidate(labels[selected]))
