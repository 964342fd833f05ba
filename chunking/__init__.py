"""
Chunking Module.

Chunking determines what the retriever can find.
This module provides three interchangeable strategies:
- Word windows (fixed size, fixed overlap)
- Adaptive section chunking (heading/paragraph-aware, target/max/min words)
- Semantic chunking (planner-assisted grouping with deterministic fallback)

Rules of thumb:
- Prefer structure-aware chunking over fixed length
- Use sentence overlap to preserve context
- Preserve hierarchical structure (heading paths)

Usage:
    from chunking import AdaptiveSectionChunker

    chunker = AdaptiveSectionChunker()
    chunks = chunker.chunk("doc-1", text)
"""

from .adaptive_chunker import AdaptiveChunkingConfig, AdaptiveSectionChunker
from .base import TextChunker, count_words, split_words
from .chunk_eval_tools import ChunkSizeReport, evaluate_chunk_sizes
from .paragraph_splitter import Paragraph, split_paragraphs
from .plan_validator import ChunkPlan, PlanItem, is_valid_plan, validate_plan
from .section_parser import Section, SectionParser
from .semantic_chunker import (
    ChunkPlanner,
    SemanticChunker,
    SemanticChunkingConfig,
    build_fallback_plan,
)
from .sentence_splitter import SentenceSplitter, split_into_sentences
from .word_chunker import WordChunker

__all__ = [
    "TextChunker",
    "WordChunker",
    "AdaptiveSectionChunker",
    "AdaptiveChunkingConfig",
    "SemanticChunker",
    "SemanticChunkingConfig",
    "ChunkPlanner",
    "build_fallback_plan",
    "SectionParser",
    "Section",
    "Paragraph",
    "split_paragraphs",
    "ChunkPlan",
    "PlanItem",
    "validate_plan",
    "is_valid_plan",
    "SentenceSplitter",
    "split_into_sentences",
    "count_words",
    "split_words",
    "ChunkSizeReport",
    "evaluate_chunk_sizes",
]
