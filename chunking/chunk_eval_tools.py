"""
Chunk size evaluation tools.

Helps tune chunking parameters by measuring:
- Size distribution (words per chunk)
- Chunks outside the min/max bounds
- Overlap effectiveness between consecutive chunks
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from shared.models import Chunk

from .base import split_words

logger = logging.getLogger(__name__)


@dataclass
class ChunkSizeReport:
    """Report on chunk size metrics."""

    total_chunks: int
    avg_words: float
    min_words: int
    max_words: int
    std_words: float
    chunks_too_small: int  # Below min threshold
    chunks_too_large: int  # Above max threshold
    overlap_quality: float
    recommendations: List[str] = field(default_factory=list)


def evaluate_chunk_sizes(
    chunks: Sequence[Chunk],
    min_words: int = 200,
    max_words: int = 1100,
    target_words: int = 700,
) -> ChunkSizeReport:
    """
    Evaluate the size distribution of a chunk sequence.

    Args:
        chunks: Chunks produced by any chunker
        min_words: Minimum acceptable words
        max_words: Maximum acceptable words
        target_words: Target words per chunk

    Returns:
        ChunkSizeReport with metrics and recommendations
    """
    if not chunks:
        return ChunkSizeReport(
            total_chunks=0,
            avg_words=0.0,
            min_words=0,
            max_words=0,
            std_words=0.0,
            chunks_too_small=0,
            chunks_too_large=0,
            overlap_quality=0.0,
            recommendations=["No chunks to evaluate"],
        )

    word_counts = np.array([len(split_words(c.text)) for c in chunks])

    avg_words = float(np.mean(word_counts))
    std_words = float(np.std(word_counts))

    # The last chunk of a document is allowed to be short only when alone
    too_small = int(np.sum(word_counts < min_words)) if len(chunks) > 1 else 0
    too_large = int(np.sum(word_counts > max_words))

    overlap_quality = _evaluate_overlap(chunks)

    recommendations = []

    if too_small > len(chunks) * 0.1:
        recommendations.append(
            f"Consider reducing min_words. {too_small} chunks "
            f"({too_small / len(chunks) * 100:.0f}%) are below {min_words} words."
        )

    if too_large > 0:
        recommendations.append(
            f"{too_large} chunks exceed {max_words} words "
            "(header prefix or unsplittable sentences)."
        )

    if std_words > target_words * 0.5:
        recommendations.append(
            f"High variance in chunk sizes (std={std_words:.0f}). "
            "Consider more consistent chunking boundaries."
        )

    if not recommendations:
        recommendations.append("Chunk sizes look good!")

    return ChunkSizeReport(
        total_chunks=len(chunks),
        avg_words=avg_words,
        min_words=int(np.min(word_counts)),
        max_words=int(np.max(word_counts)),
        std_words=std_words,
        chunks_too_small=too_small,
        chunks_too_large=too_large,
        overlap_quality=overlap_quality,
        recommendations=recommendations,
    )


def _evaluate_overlap(chunks: Sequence[Chunk]) -> float:
    """
    Share of words in the head of each chunk that also end the previous one.

    Checks if consecutive chunks share meaningful content.
    """
    if len(chunks) < 2:
        return 1.0

    overlaps = []
    for previous, current in zip(chunks, chunks[1:]):
        tail = {w.lower() for w in split_words(previous.text)[-50:]}
        head = {w.lower() for w in split_words(current.text)[:50]}

        if tail and head:
            overlaps.append(len(tail & head) / min(len(tail), len(head)))

    return float(np.mean(overlaps)) if overlaps else 0.0
