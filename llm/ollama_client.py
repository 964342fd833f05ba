"""
Ollama HTTP collaborators.

- OllamaClient: JSON transport over httpx with error translation
- OllamaEmbedder: POST /api/embeddings
- OllamaAnswerer: POST /api/chat (non-streaming)

Every transport failure (connection error, timeout, non-2xx status,
undecodable body) surfaces as a CollaboratorError subclass chosen by the
caller, so the core never sees httpx exceptions.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

import httpx

from shared.errors import CollaboratorError, EmbeddingError, LanguageModelError

logger = logging.getLogger(__name__)


@dataclass
class OllamaConfig:
    """Connection and model selection for an Ollama server."""

    base_url: str = "http://localhost:11434"
    embedding_model: str = "nomic-embed-text"
    chat_model: str = "llama3.1"
    timeout: float = 120.0  # seconds


class OllamaClient:
    """
    Thin JSON client for the Ollama REST API.

    Usage:
        client = OllamaClient("http://localhost:11434")
        data = client.post("/api/embeddings", {"model": "nomic-embed-text", "prompt": "hi"})
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            base_url: Ollama server URL
            timeout: Default request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        """Lazily created, reused connection pool."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def post(
        self,
        path: str,
        payload: Dict[str, Any],
        timeout: Optional[float] = None,
        error_cls: Type[CollaboratorError] = CollaboratorError,
    ) -> Dict[str, Any]:
        """
        POST a JSON payload and decode the JSON response.

        Args:
            path: API path, e.g. "/api/chat"
            payload: JSON body
            timeout: Per-request timeout override in seconds
            error_cls: CollaboratorError subclass raised on failure

        Returns:
            Decoded JSON object

        Raises:
            error_cls: On timeout, connection failure, HTTP error or bad JSON
        """
        request_timeout = self.timeout if timeout is None else timeout
        try:
            response = self.client.post(path, json=payload, timeout=request_timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise error_cls(
                f"Ollama request to {path} timed out after {request_timeout}s"
            ) from e
        except httpx.HTTPStatusError as e:
            raise error_cls(
                f"Ollama request to {path} failed with status "
                f"{e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise error_cls(f"Ollama request to {path} failed: {e}") from e
        except ValueError as e:
            raise error_cls(f"Ollama returned invalid JSON from {path}") from e

        if not isinstance(data, dict):
            raise error_cls(f"Ollama returned an unexpected payload from {path}")
        return data

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None


def extract_message_content(data: Dict[str, Any]) -> str:
    """Read ``message.content`` from an /api/chat response."""
    message = data.get("message") or {}
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""


class OllamaEmbedder:
    """
    Embedder backed by Ollama's /api/embeddings endpoint.

    Usage:
        embedder = OllamaEmbedder(OllamaClient(), model="nomic-embed-text")
        vector = embedder.embed("payment terms")
    """

    def __init__(self, client: OllamaClient, model: str = "nomic-embed-text"):
        self.client = client
        self.model = model or "nomic-embed-text"

    def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise ValueError("Text to embed must not be blank.")

        data = self.client.post(
            "/api/embeddings",
            {"model": self.model, "prompt": text},
            error_cls=EmbeddingError,
        )

        embedding = data.get("embedding")
        if not embedding:
            raise EmbeddingError("Ollama returned an empty embedding.")

        try:
            return [float(v) for v in embedding]
        except (TypeError, ValueError) as e:
            raise EmbeddingError("Ollama returned a non-numeric embedding.") from e


class OllamaAnswerer:
    """
    Answerer backed by Ollama's /api/chat endpoint.

    Usage:
        answerer = OllamaAnswerer(OllamaClient(), model="llama3.1")
        answer = answerer.ask(prompt)
    """

    def __init__(self, client: OllamaClient, model: str = "llama3.1"):
        self.client = client
        self.model = model or "llama3.1"

    def ask(self, prompt: str) -> str:
        if not prompt or not prompt.strip():
            return ""

        data = self.client.post(
            "/api/chat",
            {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "stream": False,
            },
            error_cls=LanguageModelError,
        )
        return extract_message_content(data)
