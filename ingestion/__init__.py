"""
Document Indexing Module.

This module handles the indexing pipeline:
- Chunking raw text with any TextChunker
- Embedding each chunk sequentially
- One all-or-nothing upsert per document
- Batch indexing of .txt/.md files and directories

Usage:
    from ingestion import VectorIndexer

    indexer = VectorIndexer(chunker, embedder, store)
    stats = indexer.index_directory("./documents")
"""

from .ingest_pipeline import (
    SUPPORTED_EXTENSIONS,
    IndexingStats,
    VectorIndexer,
    stats_to_dict,
)

__all__ = [
    "VectorIndexer",
    "IndexingStats",
    "SUPPORTED_EXTENSIONS",
    "stats_to_dict",
]
