"""
Shared test fixtures for the whole suite.

Provides: deterministic fake collaborators (embedder, answerer, planner),
in-memory store and settings fixtures.
Dependencies: pytest
"""

from typing import List, Optional, Sequence

import pytest

from app.config import Settings
from chunking.paragraph_splitter import Paragraph
from chunking.plan_validator import ChunkPlan
from retrieval.vector_store import InMemoryVectorStore
from shared.errors import EmbeddingError


class FakeEmbedder:
    """Counts vocabulary words, so texts sharing keywords score high."""

    VOCABULARY = ("payment", "invoice", "refund", "shipping", "warranty", "chair")

    def __init__(self, fail_on: Optional[str] = None):
        self.fail_on = fail_on
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise ValueError("Text to embed must not be blank.")
        self.calls.append(text)
        if self.fail_on and self.fail_on in text:
            raise EmbeddingError(f"cannot embed text containing {self.fail_on!r}")
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.VOCABULARY]


class FakeAnswerer:
    """Records prompts and returns a canned answer."""

    def __init__(self, answer: str = "Payment is due in 30 days."):
        self.answer = answer
        self.prompts: List[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


class FakePlanner:
    """Returns a fixed plan or raises a fixed error."""

    def __init__(self, plan: Optional[ChunkPlan] = None, error: Optional[Exception] = None):
        self.plan_to_return = plan
        self.error = error
        self.calls: List[Sequence[Paragraph]] = []

    def plan(self, paragraphs, config) -> ChunkPlan:
        self.calls.append(list(paragraphs))
        if self.error is not None:
            raise self.error
        return self.plan_to_return


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def fake_answerer() -> FakeAnswerer:
    return FakeAnswerer()


@pytest.fixture
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the process environment."""
    return Settings().validate()


@pytest.fixture
def words25() -> str:
    return " ".join(f"w{i}" for i in range(25))
