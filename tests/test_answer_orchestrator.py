"""
Test suite for retrieval-augmented answering and prompt assembly.
"""

from unittest.mock import MagicMock, patch

import pytest

from context.answer_orchestrator import (
    EMPTY_QUESTION_MESSAGE,
    NO_CONTEXT_MESSAGE,
    AnswerOrchestrator,
)
from context.context_builder import assemble_context, build_prompt
from shared.models import RankedResult


def ranked(text: str, score: float, index: int = 0) -> RankedResult:
    return RankedResult(
        id=f"doc::chunk::{index:05d}", source_id="doc", chunk_index=index, text=text, score=score
    )


@pytest.fixture
def retriever() -> MagicMock:
    mock = MagicMock()
    mock.retrieve.return_value = [
        ranked("Payment is due in 30 days.", 0.9),
        ranked("Late payments incur a fee.", 0.8123456, 1),
    ]
    return mock


class TestAnswerOrchestrator:

    @pytest.mark.parametrize("question", ["", "   ", None])
    def test_empty_question_should_not_call_collaborators(self, question, retriever) -> None:
        answerer = MagicMock()
        orchestrator = AnswerOrchestrator(retriever, answerer)

        assert orchestrator.ask(question) == EMPTY_QUESTION_MESSAGE
        retriever.retrieve.assert_not_called()
        answerer.ask.assert_not_called()

    def test_no_context_should_skip_language_model(self) -> None:
        retriever = MagicMock()
        retriever.retrieve.return_value = []
        answerer = MagicMock()

        answer = AnswerOrchestrator(retriever, answerer).ask("When is payment due?")

        assert answer == NO_CONTEXT_MESSAGE
        answerer.ask.assert_not_called()

    def test_should_return_answer_verbatim(self, retriever, fake_answerer) -> None:
        answer = AnswerOrchestrator(retriever, fake_answerer).ask("When is payment due?")

        assert answer == fake_answerer.answer

    def test_prompt_should_contain_scored_context_and_question(self, retriever, fake_answerer) -> None:
        AnswerOrchestrator(retriever, fake_answerer).ask("When is payment due?")

        prompt = fake_answerer.prompts[0]
        assert "[score:0.9000] Payment is due in 30 days." in prompt
        assert "[score:0.8123] Late payments incur a fee." in prompt
        assert 'answer with "I don\'t know"' in prompt
        assert prompt.rstrip().endswith("When is payment due?\nAnswer:")

    def test_should_forward_retrieval_settings(self, retriever, fake_answerer) -> None:
        AnswerOrchestrator(retriever, fake_answerer, top_k=3, threshold=0.5).ask("q")

        retriever.retrieve.assert_called_once_with("q", top_k=3, threshold=0.5, cancel_event=None)

    def test_answer_should_include_sources(self, retriever, fake_answerer) -> None:
        result = AnswerOrchestrator(retriever, fake_answerer).answer("When is payment due?")

        assert [s["id"] for s in result.sources] == ["doc::chunk::00000", "doc::chunk::00001"]
        assert result.prompt == fake_answerer.prompts[0]


class TestContextBudget:

    def test_unlimited_budget_includes_every_chunk(self) -> None:
        context = assemble_context([ranked("a", 0.9), ranked("b", 0.8, 1)])

        assert context.chunks_included == 2
        assert context.text == "[score:0.9000] a\n[score:0.8000] b\n"

    def test_budget_should_drop_trailing_chunks(self) -> None:
        with patch("context.context_builder.count_tokens", return_value=10):
            context = assemble_context(
                [ranked("a", 0.9), ranked("b", 0.8, 1), ranked("c", 0.7, 2)], max_tokens=25
            )

        assert context.chunks_included == 2
        assert context.chunks_dropped == 1

    def test_first_chunk_is_always_included(self) -> None:
        with patch("context.context_builder.count_tokens", return_value=100):
            context = assemble_context([ranked("a", 0.9), ranked("b", 0.8, 1)], max_tokens=5)

        assert context.chunks_included == 1
        assert context.sources[0]["id"] == "doc::chunk::00000"

    def test_build_prompt_layout(self) -> None:
        prompt = build_prompt("[score:0.9000] a\n", "Why?")

        assert prompt.startswith("Use only the context below.")
        assert "Context:\n[score:0.9000] a\n" in prompt
        assert "Question:\nWhy?\nAnswer:" in prompt
