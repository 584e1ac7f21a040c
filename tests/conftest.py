"""
Shared fixtures.

Every test runs with all AI model chains emptied, so nothing reaches the
network; tests that exercise the model path install FakeListChatModel chains.
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from langchain_core.language_models import FakeListChatModel

from agents import chatbot, evaluator, question_generator, resume_analyzer, summarizer
from agents.llm import ModelChain
from persistence import JsonStorage
from store import InterviewStore

CHAINS = [
    (question_generator, "question_chain"),
    (evaluator, "evaluator_chain"),
    (chatbot, "chatbot_chain"),
    (summarizer, "summary_chain"),
    (resume_analyzer, "ats_chain"),
]


class BrokenModel:
    """Chat model stand-in that always fails, like an unreachable provider."""

    def invoke(self, messages):
        raise ConnectionError("provider unreachable")


@pytest.fixture(autouse=True)
def offline_models(monkeypatch):
    for module, name in CHAINS:
        monkeypatch.setattr(module, name, ModelChain([]))


@pytest.fixture
def fake_chain():
    """Build a chain of fake models replying with the given texts in order."""
    def build(*responses, broken_first=False):
        models = []
        if broken_first:
            models.append(("broken:model", BrokenModel()))
        models.append(("fake:model", FakeListChatModel(responses=list(responses))))
        return ModelChain(models)
    return build


@pytest.fixture
def complete_details():
    return {"name": "Jane Doe", "email": "jane@example.com", "phone": "(555) 123-4567"}


@pytest.fixture
def store():
    return InterviewStore()


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(str(tmp_path / "storage"))


@pytest.fixture
def active_candidate(store, complete_details):
    """A candidate whose interview has just started (question 1, 20s on the clock)."""
    candidate_id = store.add_candidate(complete_details)
    store.start_interview(candidate_id)
    return candidate_id
