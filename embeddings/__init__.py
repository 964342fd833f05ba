"""
Embeddings Module.

CRITICAL: Never mix vectors from different models in the same index.

This module provides:
- The Embedder contract used by the indexer and retriever
- A local sentence-transformers backend

The Ollama HTTP backend lives in llm.ollama_client.

Usage:
    from embeddings import SentenceTransformerEmbedder

    embedder = SentenceTransformerEmbedder()
    vector = embedder.embed("text")
"""

from .base import Embedder
from .embedder import SentenceTransformerConfig, SentenceTransformerEmbedder

__all__ = [
    "Embedder",
    "SentenceTransformerEmbedder",
    "SentenceTransformerConfig",
]
