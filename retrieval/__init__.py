"""
Vector Retrieval Module.

Retrieval is the optical lens for your LLM.

This module implements:
- Cosine similarity scoring
- Similarity stores (in-memory reference, Chroma alternative)
- Vector retrieval with top-k and score threshold

Usage:
    from retrieval import InMemoryVectorStore, VectorRetriever

    retriever = VectorRetriever(embedder, InMemoryVectorStore())
    results = retriever.retrieve("What are the payment terms?", top_k=5)
"""

from .similarity import cosine_similarity
from .vector_retriever import DEFAULT_THRESHOLD, DEFAULT_TOP_K, VectorRetriever
from .vector_store import ChromaVectorStore, InMemoryVectorStore, VectorStore

__all__ = [
    "cosine_similarity",
    "VectorStore",
    "InMemoryVectorStore",
    "ChromaVectorStore",
    "VectorRetriever",
    "DEFAULT_TOP_K",
    "DEFAULT_THRESHOLD",
]
