"""
Test suite for the Ollama HTTP collaborators.

Uses httpx.MockTransport so no server is needed.
"""

import json

import httpx
import pytest

from chunking.paragraph_splitter import Paragraph
from chunking.semantic_chunker import SemanticChunkingConfig
from llm.chunk_planner import (
    OllamaChunkPlanner,
    build_user_prompt,
    format_paragraphs,
    parse_plan_response,
)
from llm.ollama_client import OllamaAnswerer, OllamaClient, OllamaEmbedder
from shared.errors import EmbeddingError, LanguageModelError, PlanningError


class Recorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, status_code: int = 200, body=None, error: Exception = None):
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)


def make_client(handler) -> OllamaClient:
    return OllamaClient("http://ollama.test/", transport=httpx.MockTransport(handler))


def paragraphs(*texts: str):
    return [Paragraph(index=i, text=t, heading_path="", is_heading=False) for i, t in enumerate(texts)]


class TestOllamaEmbedder:

    def test_should_post_model_and_prompt(self) -> None:
        handler = Recorder(body={"embedding": [0.1, 0.2, 0.3]})

        vector = OllamaEmbedder(make_client(handler), model="nomic-embed-text").embed("hello")

        assert vector == [0.1, 0.2, 0.3]
        assert handler.requests[0].url.path == "/api/embeddings"
        assert handler.last_payload == {"model": "nomic-embed-text", "prompt": "hello"}

    def test_server_error_should_raise_embedding_error(self) -> None:
        embedder = OllamaEmbedder(make_client(Recorder(status_code=500)))

        with pytest.raises(EmbeddingError, match="status 500"):
            embedder.embed("hello")

    def test_timeout_should_raise_embedding_error(self) -> None:
        handler = Recorder(error=httpx.ReadTimeout("timed out"))

        with pytest.raises(EmbeddingError, match="timed out"):
            OllamaEmbedder(make_client(handler)).embed("hello")

    def test_connection_failure_should_raise_embedding_error(self) -> None:
        handler = Recorder(error=httpx.ConnectError("connection refused"))

        with pytest.raises(EmbeddingError):
            OllamaEmbedder(make_client(handler)).embed("hello")

    @pytest.mark.parametrize("body", [{}, {"embedding": []}, {"embedding": ["x"]}])
    def test_unusable_embedding_should_raise(self, body) -> None:
        with pytest.raises(EmbeddingError):
            OllamaEmbedder(make_client(Recorder(body=body))).embed("hello")

    def test_blank_text_should_not_call_server(self) -> None:
        handler = Recorder()

        with pytest.raises(ValueError):
            OllamaEmbedder(make_client(handler)).embed("  ")
        assert handler.requests == []


class TestOllamaAnswerer:

    def test_should_return_message_content(self) -> None:
        handler = Recorder(body={"message": {"role": "assistant", "content": "30 days."}})

        answer = OllamaAnswerer(make_client(handler), model="llama3.1").ask("When?")

        assert answer == "30 days."
        assert handler.requests[0].url.path == "/api/chat"
        assert handler.last_payload == {
            "model": "llama3.1",
            "messages": [{"role": "user", "content": "When?"}],
            "stream": False,
        }

    def test_missing_content_should_return_empty_answer(self) -> None:
        assert OllamaAnswerer(make_client(Recorder(body={"done": True}))).ask("When?") == ""

    def test_blank_prompt_should_not_call_server(self) -> None:
        handler = Recorder()

        assert OllamaAnswerer(make_client(handler)).ask("") == ""
        assert handler.requests == []

    def test_failure_should_raise_language_model_error(self) -> None:
        answerer = OllamaAnswerer(make_client(Recorder(status_code=503)))

        with pytest.raises(LanguageModelError):
            answerer.ask("When?")


class TestPlannerPrompt:

    def test_paragraphs_are_numbered_and_truncated(self) -> None:
        rendered = format_paragraphs(paragraphs("Intro text", "abcdefghij"), max_chars=5)

        assert rendered == 'p0: """Intro"""\np1: """abcde"""\n'

    def test_user_prompt_substitutes_placeholders(self) -> None:
        config = SemanticChunkingConfig(target_words=300, min_words=100, max_words=500)

        prompt = build_user_prompt(paragraphs("Only paragraph"), config)

        assert "Target chunk size: 300 words, min 100, max 500" in prompt
        assert 'p0: """Only paragraph"""' in prompt
        assert "{{" not in prompt


class TestParsePlanResponse:

    def test_should_parse_plain_json(self) -> None:
        plan = parse_plan_response('{"chunks": [{"paragraphs": [0, 1], "title": "Intro"}, {"paragraphs": [2]}]}')

        assert [tuple(i.paragraph_indices) for i in plan.items] == [(0, 1), (2,)]
        assert plan.items[0].title == "Intro"
        assert plan.items[1].title is None

    def test_should_extract_json_wrapped_in_prose(self) -> None:
        content = 'Here you go:\n```json\n{"chunks": [{"paragraphs": [0]}]}\n```'

        plan = parse_plan_response(content)

        assert len(plan.items) == 1

    @pytest.mark.parametrize(
        "content",
        ["", "no json here", '{"chunks": []}', '{"chunks": ["p0"]}', '{"chunks": [{"paragraphs": 3}]}'],
    )
    def test_unusable_content_should_raise(self, content) -> None:
        with pytest.raises(PlanningError):
            parse_plan_response(content)


class TestOllamaChunkPlanner:

    def test_should_send_system_and_user_messages(self) -> None:
        handler = Recorder(body={"message": {"content": '{"chunks": [{"paragraphs": [0, 1]}]}'}})
        config = SemanticChunkingConfig(model="qwen2.5:14b-instruct")

        plan = OllamaChunkPlanner(make_client(handler)).plan(paragraphs("a", "b"), config)

        payload = handler.last_payload
        assert payload["model"] == "qwen2.5:14b-instruct"
        assert payload["stream"] is False
        assert [m["role"] for m in payload["messages"]] == ["system", "user"]
        assert tuple(plan.items[0].paragraph_indices) == (0, 1)

    def test_too_many_paragraphs_should_not_call_server(self) -> None:
        handler = Recorder()
        config = SemanticChunkingConfig(max_paragraphs_per_request=1)

        with pytest.raises(PlanningError):
            OllamaChunkPlanner(make_client(handler)).plan(paragraphs("a", "b"), config)
        assert handler.requests == []

    def test_backend_failure_should_raise_planning_error(self) -> None:
        handler = Recorder(error=httpx.ReadTimeout("timed out"))

        with pytest.raises(PlanningError, match="timed out"):
            OllamaChunkPlanner(make_client(handler)).plan(paragraphs("a"), SemanticChunkingConfig())
