"""
Core data model.

Chunk -> EmbeddedRecord -> RankedResult mirrors the one-way data flow:
raw text is chunked, chunks are embedded and stored, and a search call
produces ranked results that are never persisted.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple


def make_chunk_id(source_id: str, chunk_index: int) -> str:
    """Stable chunk identifier, e.g. ``doc::chunk::00003``."""
    return f"{source_id}::chunk::{chunk_index:05d}"


@dataclass(frozen=True)
class Chunk:
    """An ordered, bounded segment of a document's text."""

    id: str
    source_id: str
    chunk_index: int
    text: str


@dataclass(frozen=True)
class EmbeddedRecord:
    """A chunk together with its embedding vector."""

    id: str
    source_id: str
    chunk_index: int
    text: str
    vector: Tuple[float, ...]

    @classmethod
    def from_chunk(cls, chunk: Chunk, vector: Sequence[float]) -> "EmbeddedRecord":
        return cls(
            id=chunk.id,
            source_id=chunk.source_id,
            chunk_index=chunk.chunk_index,
            text=chunk.text,
            vector=tuple(float(v) for v in vector),
        )


@dataclass(frozen=True)
class RankedResult:
    """A stored record scored against a query vector."""

    id: str
    source_id: str
    chunk_index: int
    text: str
    score: float
