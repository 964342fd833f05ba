"""
FastAPI application for the RAG core.

Endpoints:
- GET  /health  record count and chunking mode
- POST /index   chunk, embed and store raw text
- POST /search  direct vector search without LLM generation
- POST /ask     retrieval-augmented answer with sources
- POST /chunk   chunk preview (nothing stored)

Errors map to status codes: 400 for invalid input, 502 for backend
(collaborator) failures, 500 otherwise.
"""

import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from app.config import Settings, get_settings
from app.factory import RagComponents, build_components
from chunking.base import count_words
from shared.errors import CollaboratorError, ConfigurationError, RagError
from shared.schemas import (
    AskRequest,
    AskResponse,
    ChunkInfo,
    ChunkRequest,
    ChunkResponse,
    HealthResponse,
    IndexRequest,
    IndexResponse,
    SearchRequest,
    SearchResponse,
    SearchResult,
    SourceInfo,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

__version__ = "1.0.0"


def create_app(
    settings: Optional[Settings] = None,
    components: Optional[RagComponents] = None,
) -> FastAPI:
    """
    Build the API around a set of components.

    Args:
        settings: Application settings (loaded from the environment if None)
        components: Pre-built components (built from settings if None)
    """
    if components is not None:
        settings = components.settings
    settings = settings or get_settings()
    components = components or build_components(settings)

    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)

    app = FastAPI(
        title="RAG Core",
        description="Chunking engine and vector retrieval API",
        version=__version__,
    )
    app.state.components = components

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID for tracing."""
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"- {response.status_code} - {duration_ms:.1f}ms"
        )

        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(CollaboratorError)
    async def collaborator_error_handler(request: Request, exc: CollaboratorError):
        logger.error(f"Backend failure on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={"error": "Backend unavailable", "detail": str(exc)},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid configuration", "detail": str(exc)},
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "detail": str(exc)},
        )

    @app.exception_handler(RagError)
    async def rag_error_handler(request: Request, exc: RagError):
        logger.exception(f"Request failed: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal error", "detail": str(exc)},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            chunking_mode=components.settings.chunking.mode,
            record_count=components.store.count(),
        )

    @app.post("/index", response_model=IndexResponse)
    async def index_endpoint(body: IndexRequest):
        """Chunk, embed and store a document."""
        count = await run_in_threadpool(
            components.indexer.index_text, body.source_id, body.text
        )
        return IndexResponse(source_id=body.source_id, chunks_indexed=count)

    @app.post("/search", response_model=SearchResponse)
    async def search_endpoint(body: SearchRequest):
        """
        Direct vector search without LLM generation.
        Useful for debugging and exploring the index.
        """
        results = await run_in_threadpool(
            components.retriever.retrieve,
            body.query,
            body.top_k,
            body.threshold,
        )
        return SearchResponse(
            results=[
                SearchResult(
                    id=r.id,
                    source_id=r.source_id,
                    chunk_index=r.chunk_index,
                    text=r.text,
                    score=r.score,
                )
                for r in results
            ],
            total_found=len(results),
        )

    @app.post("/ask", response_model=AskResponse)
    async def ask_endpoint(body: AskRequest):
        """Main RAG endpoint: retrieve, build the prompt, answer."""
        result = await run_in_threadpool(
            components.orchestrator.answer, body.question
        )
        return AskResponse(
            answer=result.answer,
            sources=[SourceInfo(**s) for s in result.sources],
        )

    @app.post("/chunk", response_model=ChunkResponse)
    async def chunk_endpoint(body: ChunkRequest):
        """Preview how the configured chunker splits a text."""
        chunks = await run_in_threadpool(
            components.chunker.chunk, body.source_id, body.text
        )
        return ChunkResponse(
            chunks=[
                ChunkInfo(
                    id=c.id,
                    chunk_index=c.chunk_index,
                    word_count=count_words(c.text),
                    text=c.text,
                )
                for c in chunks
            ],
            total_chunks=len(chunks),
        )

    return app


def main() -> None:
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
