"""
Component wiring.

Builds the chunker, collaborators, store and orchestration objects from
Settings. Any collaborator can be injected, which is how tests and the HTTP
API swap in fakes.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from chunking.adaptive_chunker import AdaptiveSectionChunker
from chunking.base import TextChunker
from chunking.semantic_chunker import ChunkPlanner, SemanticChunker
from chunking.word_chunker import WordChunker
from context.answer_orchestrator import AnswerOrchestrator
from embeddings.base import Embedder
from embeddings.embedder import SentenceTransformerConfig, SentenceTransformerEmbedder
from ingestion.ingest_pipeline import VectorIndexer
from llm.base import Answerer
from llm.chunk_planner import OllamaChunkPlanner
from llm.ollama_client import OllamaAnswerer, OllamaClient, OllamaEmbedder
from llm.openai_client import OpenAIAnswerer, OpenAIConfig
from retrieval.vector_retriever import VectorRetriever
from retrieval.vector_store import ChromaVectorStore, InMemoryVectorStore, VectorStore

from .config import Settings, get_settings, normalize_mode

logger = logging.getLogger(__name__)


@dataclass
class RagComponents:
    """Everything a surface (CLI, HTTP API) needs."""

    settings: Settings
    chunker: TextChunker
    embedder: Embedder
    answerer: Answerer
    store: VectorStore
    indexer: VectorIndexer
    retriever: VectorRetriever
    orchestrator: AnswerOrchestrator


def build_ollama_client(settings: Settings) -> OllamaClient:
    return OllamaClient(
        base_url=settings.ollama.base_url,
        timeout=settings.ollama.timeout,
    )


def build_chunker(
    settings: Settings,
    mode: Optional[str] = None,
    planner: Optional[ChunkPlanner] = None,
    ollama_client: Optional[OllamaClient] = None,
) -> TextChunker:
    """
    Select the chunking strategy.

    Args:
        settings: Application settings
        mode: Override for settings.chunking.mode
        planner: Planner for semantic mode (Ollama planner when omitted)
        ollama_client: Client used to build the default planner
    """
    mode = normalize_mode(mode or settings.chunking.mode)
    chunking = settings.chunking

    if mode == "word":
        return WordChunker(
            window_size=chunking.word.window_size,
            overlap=chunking.word.overlap,
        )
    if mode == "semantic":
        if planner is None:
            planner = OllamaChunkPlanner(ollama_client or build_ollama_client(settings))
        return SemanticChunker(planner=planner, config=chunking.semantic)
    return AdaptiveSectionChunker(config=chunking.adaptive)


def build_embedder(
    settings: Settings, ollama_client: Optional[OllamaClient] = None
) -> Embedder:
    if settings.embedding.provider == "sentence_transformers":
        return SentenceTransformerEmbedder(
            SentenceTransformerConfig(
                model_name=settings.embedding.model_name,
                normalize=settings.embedding.normalize,
            )
        )
    return OllamaEmbedder(
        ollama_client or build_ollama_client(settings),
        model=settings.ollama.embedding_model,
    )


def build_answerer(
    settings: Settings, ollama_client: Optional[OllamaClient] = None
) -> Answerer:
    if settings.llm.provider == "openai":
        return OpenAIAnswerer(
            OpenAIConfig(
                model=settings.llm.model,
                api_key=settings.llm.api_key,
                temperature=settings.llm.temperature,
                max_tokens=settings.llm.max_tokens,
                timeout=settings.llm.timeout,
            )
        )
    return OllamaAnswerer(
        ollama_client or build_ollama_client(settings),
        model=settings.ollama.chat_model,
    )


def build_store(settings: Settings) -> VectorStore:
    if settings.retrieval.vector_store == "chroma":
        return ChromaVectorStore(collection_name=settings.retrieval.collection_name)
    return InMemoryVectorStore()


def build_components(
    settings: Optional[Settings] = None,
    chunker: Optional[TextChunker] = None,
    embedder: Optional[Embedder] = None,
    answerer: Optional[Answerer] = None,
    planner: Optional[ChunkPlanner] = None,
    store: Optional[VectorStore] = None,
) -> RagComponents:
    """
    Wire a complete pipeline.

    Usage:
        components = build_components()
        components.indexer.index_text("doc-1", text)
        print(components.orchestrator.ask("What are the payment terms?"))
    """
    settings = settings or get_settings()

    ollama_client = None
    if embedder is None or answerer is None or (
        chunker is None and planner is None and settings.chunking.mode == "semantic"
    ):
        ollama_client = build_ollama_client(settings)

    chunker = chunker or build_chunker(
        settings, planner=planner, ollama_client=ollama_client
    )
    embedder = embedder or build_embedder(settings, ollama_client)
    answerer = answerer or build_answerer(settings, ollama_client)
    store = store if store is not None else build_store(settings)

    retriever = VectorRetriever(embedder, store)
    orchestrator = AnswerOrchestrator(
        retriever,
        answerer,
        top_k=settings.retrieval.top_k,
        threshold=settings.retrieval.threshold,
        max_context_tokens=settings.retrieval.max_context_tokens,
    )

    logger.info(
        f"Built components: chunking={settings.chunking.mode}, "
        f"embedding={settings.embedding.provider}, llm={settings.llm.provider}, "
        f"store={type(store).__name__}"
    )

    return RagComponents(
        settings=settings,
        chunker=chunker,
        embedder=embedder,
        answerer=answerer,
        store=store,
        indexer=VectorIndexer(chunker, embedder, store),
        retriever=retriever,
        orchestrator=orchestrator,
    )
