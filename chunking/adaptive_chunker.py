"""
Adaptive section-aware chunking.

Groups text by sections/headings and accumulates whole paragraphs toward a
target size.

Best practices:
- Chunk on semantic boundaries (paragraphs, sections)
- Preserve document structure (heading path as a "Section: ..." prefix)
- Use overlap to maintain context across chunk boundaries
- Never leave an undersized trailing chunk when it can be merged
"""

import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence

from shared.errors import ConfigurationError
from shared.models import Chunk, make_chunk_id

from .base import (
    DEFAULT_HEADER_PREFIX_TEMPLATE,
    WHITESPACE_PATTERN,
    count_words,
    format_header_prefix,
    join_header_path,
    prepend_overlap,
    split_words,
)
from .section_parser import SectionParser
from .sentence_splitter import SentenceSplitter, last_sentences

logger = logging.getLogger(__name__)


@dataclass
class AdaptiveChunkingConfig:
    """Configuration for adaptive section chunking."""

    target_words: int = 700
    max_words: int = 1100
    min_words: int = 200
    overlap_ratio: float = 0.15
    overlap_sentences: int = 2
    header_prefix_max_chars: int = 300
    embedding_char_cap: int = 0  # 0 = unlimited
    include_header_prefix: bool = True
    header_prefix_template: str = DEFAULT_HEADER_PREFIX_TEMPLATE
    trim_whitespace: bool = True
    normalize_whitespace: bool = True

    def validate(self) -> "AdaptiveChunkingConfig":
        if self.target_words <= 0:
            raise ConfigurationError("target_words must be positive.")
        if self.max_words < self.target_words:
            raise ConfigurationError(
                "max_words must be greater than or equal to target_words."
            )
        if self.min_words < 0:
            raise ConfigurationError("min_words must be non-negative.")
        if self.overlap_ratio < 0:
            raise ConfigurationError("overlap_ratio must be non-negative.")
        if self.overlap_sentences < 0:
            raise ConfigurationError("overlap_sentences must be non-negative.")
        if self.header_prefix_max_chars <= 0:
            raise ConfigurationError("header_prefix_max_chars must be positive.")
        if self.embedding_char_cap < 0:
            raise ConfigurationError("embedding_char_cap must be non-negative.")
        return self


def _merge_bodies(first: str, second: str) -> str:
    if not first.strip():
        return second
    if not second.strip():
        return first
    return f"{first}\n\n{second}"


class AdaptiveSectionChunker:
    """
    Section- and paragraph-aware chunker.

    Usage:
        chunker = AdaptiveSectionChunker()
        chunks = chunker.chunk("handbook", text)

        # With custom config
        config = AdaptiveChunkingConfig(target_words=300, max_words=450)
        chunker = AdaptiveSectionChunker(config)
    """

    def __init__(self, config: Optional[AdaptiveChunkingConfig] = None):
        self.config = (config or AdaptiveChunkingConfig()).validate()
        self._section_parser = SectionParser(self.config.trim_whitespace)
        self._sentence_splitter = SentenceSplitter(self.config.max_words)

    def chunk(self, source_id: str, text: str) -> List[Chunk]:
        """
        Chunk a document along section and paragraph boundaries.

        Args:
            source_id: Identifier of the source document
            text: Document text

        Returns:
            Chunks with document-wide sequential chunk_index
        """
        if source_id is None:
            raise ValueError("source_id is required.")
        if not text or not text.strip():
            return []

        chunks: List[Chunk] = []
        previous_body: Optional[str] = None

        for section in self._section_parser.parse(text):
            paragraphs = self.get_paragraphs(section.content)
            if not paragraphs:
                continue

            for body in self.build_bodies(paragraphs):
                overlap = self.build_overlap(previous_body)
                body_text = self.combine_with_overlap(body, overlap)
                chunk_text = self.build_chunk_text(section.heading_path, body_text)

                chunk_index = len(chunks)
                chunks.append(
                    Chunk(
                        id=make_chunk_id(source_id, chunk_index),
                        source_id=source_id,
                        chunk_index=chunk_index,
                        text=chunk_text,
                    )
                )
                previous_body = body

        logger.debug(f"Adaptive-chunked {source_id} into {len(chunks)} chunks")
        return chunks

    def get_paragraphs(self, content: str) -> List[str]:
        """Split section content into paragraphs on blank lines."""
        paragraphs: List[str] = []
        if not content or not content.strip():
            return paragraphs

        buffer: List[str] = []
        for line in content.replace("\r\n", "\n").split("\n"):
            working = line.strip() if self.config.trim_whitespace else line
            if self.config.normalize_whitespace:
                working = WHITESPACE_PATTERN.sub(" ", working)

            if not working.strip():
                if buffer:
                    paragraphs.append(" ".join(buffer))
                    buffer = []
                continue

            buffer.append(working)

        if buffer:
            paragraphs.append(" ".join(buffer))

        return paragraphs

    def build_bodies(self, paragraphs: Sequence[str]) -> List[str]:
        """
        Accumulate paragraphs into chunk bodies.

        Oversized paragraphs are split and their pieces pushed back onto
        the front of the pending queue, so accumulation continues in order.
        """
        max_words = self.config.max_words
        target_words = self.config.target_words

        if sum(count_words(p) for p in paragraphs) <= max_words:
            return ["\n\n".join(paragraphs)]

        pending: Deque[str] = deque(paragraphs)
        bodies: List[str] = []
        parts: List[str] = []
        word_count = 0

        while pending:
            paragraph = pending.popleft()
            paragraph_words = count_words(paragraph)

            if paragraph_words > max_words:
                pending.extendleft(reversed(self.split_paragraph(paragraph)))
                continue

            if parts and word_count + paragraph_words > max_words:
                bodies.append("\n\n".join(parts))
                parts = []
                word_count = 0

            parts.append(paragraph)
            word_count += paragraph_words

            if word_count >= target_words:
                bodies.append("\n\n".join(parts))
                parts = []
                word_count = 0

        if parts:
            bodies.append("\n\n".join(parts))

        if len(bodies) > 1 and count_words(bodies[-1]) < self.config.min_words:
            tail = bodies.pop()
            bodies[-1] = _merge_bodies(bodies[-1], tail)

        return bodies

    def split_paragraph(self, paragraph: str) -> List[str]:
        """Split an oversized paragraph by sentences, then by word windows."""
        return self._sentence_splitter.split(paragraph)

    def build_overlap(self, previous_body: Optional[str]) -> str:
        """
        Overlap text carried from the previous body.

        Sentence overlap takes priority; ratio overlap applies only when
        ``overlap_sentences`` is 0. The two are never combined.
        """
        if not previous_body or not previous_body.strip():
            return ""

        if self.config.overlap_sentences > 0:
            return last_sentences(previous_body, self.config.overlap_sentences)

        if self.config.overlap_ratio > 0:
            words = split_words(previous_body)
            if not words:
                return ""
            ratio = min(self.config.overlap_ratio, 1.0)
            take = min(len(words), max(1, math.ceil(len(words) * ratio)))
            return " ".join(words[-take:])

        return ""

    def combine_with_overlap(self, body: str, overlap: str) -> str:
        """Prepend overlap, keeping only its trailing words if it would overflow."""
        return prepend_overlap(body, overlap, self.config.max_words)

    def build_chunk_text(self, heading_path: Sequence[str], body: str) -> str:
        """Compose header prefix + body and apply the embedding character cap."""
        parts = []

        if self.config.include_header_prefix and heading_path:
            prefix = format_header_prefix(
                self.config.header_prefix_template, join_header_path(heading_path)
            )
            prefix = prefix[: self.config.header_prefix_max_chars].rstrip()
            parts.append(prefix)

        parts.append(body.strip())
        text = "\n\n".join(p for p in parts if p.strip())

        cap = self.config.embedding_char_cap
        if cap and len(text) > cap:
            text = text[:cap]

        return text
