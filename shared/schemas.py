"""
Pydantic schemas for API request/response models.
"""

from typing import List

from pydantic import BaseModel, Field


class IndexRequest(BaseModel):
    """Request model for indexing raw text."""

    source_id: str = Field(..., min_length=1, description="Document identifier")
    text: str = Field(..., description="Document text")


class IndexResponse(BaseModel):
    """Response model for indexing."""

    source_id: str
    chunks_indexed: int


class SearchRequest(BaseModel):
    """Request model for direct vector search (no LLM)."""

    query: str
    top_k: int = Field(default=5, ge=0, le=100)
    threshold: float = Field(default=0.72, ge=-1.0, le=1.0)


class SearchResult(BaseModel):
    """A single search result."""

    id: str
    source_id: str
    chunk_index: int
    text: str
    score: float


class SearchResponse(BaseModel):
    """Response model for search endpoint."""

    results: List[SearchResult]
    total_found: int


class AskRequest(BaseModel):
    """Request model for question answering."""

    question: str = Field(..., description="The user's question")


class SourceInfo(BaseModel):
    """Information about a source chunk."""

    id: str
    source_id: str
    chunk_index: int
    score: float


class AskResponse(BaseModel):
    """Response model for question answering."""

    answer: str
    sources: List[SourceInfo] = Field(default_factory=list)


class ChunkRequest(BaseModel):
    """Request model for chunk preview."""

    text: str
    source_id: str = Field(default="preview", min_length=1)


class ChunkInfo(BaseModel):
    id: str
    chunk_index: int
    word_count: int
    text: str


class ChunkResponse(BaseModel):
    """Response model for chunk preview."""

    chunks: List[ChunkInfo]
    total_chunks: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    chunking_mode: str
    record_count: int
