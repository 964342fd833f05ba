"""
Fixed-size sliding-window chunking.

The baseline strategy: no structure awareness, just windows of ``W`` words
advancing by ``W - O`` words so consecutive windows share ``O`` words.
"""

import logging
from typing import List

from shared.errors import ConfigurationError
from shared.models import Chunk, make_chunk_id

from .base import split_words

logger = logging.getLogger(__name__)


class WordChunker:
    """
    Word-window chunker with configurable overlap.

    Usage:
        chunker = WordChunker(window_size=180, overlap=40)
        chunks = chunker.chunk("doc-1", text)
    """

    def __init__(self, window_size: int = 180, overlap: int = 40):
        """
        Args:
            window_size: Words per window (W > 0)
            overlap: Words shared by consecutive windows (0 <= O < W)
        """
        if window_size <= 0:
            raise ConfigurationError("window_size must be a positive integer.")
        if overlap < 0:
            raise ConfigurationError("overlap must be non-negative.")
        if overlap >= window_size:
            raise ConfigurationError("overlap must be smaller than window_size.")

        self.window_size = window_size
        self.overlap = overlap

    @property
    def step(self) -> int:
        return self.window_size - self.overlap

    def chunk(self, source_id: str, text: str) -> List[Chunk]:
        """
        Split text into overlapping word windows.

        Args:
            source_id: Identifier of the source document
            text: Raw text

        Returns:
            Chunks in order; empty for blank text
        """
        if source_id is None:
            raise ValueError("source_id is required.")

        words = split_words(text)
        if not words:
            return []

        chunks = []
        for chunk_index, start in enumerate(range(0, len(words), self.step)):
            window = words[start : start + self.window_size]
            chunks.append(
                Chunk(
                    id=make_chunk_id(source_id, chunk_index),
                    source_id=source_id,
                    chunk_index=chunk_index,
                    text=" ".join(window),
                )
            )

        logger.debug(f"Word-chunked {source_id} into {len(chunks)} chunks")
        return chunks
