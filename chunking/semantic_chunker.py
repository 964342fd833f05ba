"""
Planner-assisted semantic chunking.

A planner (usually an LLM) groups paragraphs into coherent chunks. The plan
is validated strictly; an invalid plan or a planner failure falls back to a
deterministic word-count heuristic when ``fallback_on_error`` is set.

Best practices:
- Never let the planner rewrite text: it only returns paragraph indices
- Keep original reading order (plans may not reorder paragraphs)
- Keep heading paragraphs with the content that follows them
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from shared.errors import ConfigurationError, PlanInvalidError
from shared.models import Chunk, make_chunk_id

from .base import (
    DEFAULT_HEADER_PREFIX_TEMPLATE,
    count_words,
    format_header_prefix,
    prepend_overlap,
)
from .paragraph_splitter import Paragraph, split_paragraphs
from .plan_validator import ChunkPlan, PlanItem, validate_plan
from .sentence_splitter import last_sentences

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a text segmentation engine. You never rewrite text. "
    "You only group paragraphs into ordered chunks. Return ONLY valid JSON."
)

DEFAULT_USER_PROMPT_TEMPLATE = """Group the paragraphs into coherent chunks for RAG retrieval.

CONSTRAINTS:
- Keep original paragraph order.
- Use each paragraph exactly once.
- Do not rewrite paragraph text.
- Prefer splitting on topic changes and headings.
- If a paragraph looks like a heading, keep it with the following content.
- Target chunk size: {{targetWords}} words, min {{minWords}}, max {{maxWords}} (approximate).

RETURN JSON ONLY in this schema:
{ "chunks": [ { "paragraphs": [0,1,2], "title": "optional" } ] }

PARAGRAPHS:
{{paragraphs}}"""


@dataclass
class SemanticChunkingConfig:
    """Configuration for planner-assisted chunking."""

    model: str = "qwen2.5:14b-instruct"
    request_timeout: float = 60.0  # seconds, enforced by the planner
    max_paragraphs_per_request: int = 80
    max_paragraph_chars: int = 1200
    target_words: int = 700
    min_words: int = 200
    max_words: int = 1100
    overlap_sentences: int = 2
    include_header_prefix: bool = True
    header_prefix_template: str = DEFAULT_HEADER_PREFIX_TEMPLATE
    fallback_on_error: bool = True
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    user_prompt_template: str = DEFAULT_USER_PROMPT_TEMPLATE

    def validate(self) -> "SemanticChunkingConfig":
        if self.target_words <= 0:
            raise ConfigurationError("target_words must be positive.")
        if self.max_words < self.target_words:
            raise ConfigurationError(
                "max_words must be greater than or equal to target_words."
            )
        if self.min_words < 0:
            raise ConfigurationError("min_words must be non-negative.")
        if self.overlap_sentences < 0:
            raise ConfigurationError("overlap_sentences must be non-negative.")
        if self.max_paragraphs_per_request <= 0:
            raise ConfigurationError("max_paragraphs_per_request must be positive.")
        if self.max_paragraph_chars < 0:
            raise ConfigurationError("max_paragraph_chars must be non-negative.")
        return self


class ChunkPlanner(Protocol):
    """Plans chunk boundaries over a list of paragraphs."""

    def plan(
        self, paragraphs: Sequence[Paragraph], config: SemanticChunkingConfig
    ) -> ChunkPlan:
        ...


def build_fallback_plan(
    paragraphs: Sequence[Paragraph],
    target_words: int,
    max_words: int,
    min_words: int,
) -> ChunkPlan:
    """
    Deterministic greedy plan by word count.

    - cut before a paragraph that would push a non-empty item past max_words
    - cut once the running count reaches target_words
    - merge a trailing item below min_words into the previous item

    Args:
        paragraphs: Paragraphs in document order
        target_words: Preferred words per item
        max_words: Upper bound per item (single paragraphs may exceed it)
        min_words: Minimum words for a standalone trailing item

    Returns:
        ChunkPlan covering every paragraph exactly once
    """
    items: List[List[int]] = []
    current: List[int] = []
    words = 0

    for paragraph in paragraphs:
        paragraph_words = count_words(paragraph.text)

        if current and words + paragraph_words > max_words:
            items.append(current)
            current = []
            words = 0

        current.append(paragraph.index)
        words += paragraph_words

        if words >= target_words:
            items.append(current)
            current = []
            words = 0

    if current:
        if items and words < min_words:
            items[-1] = items[-1] + current
        else:
            items.append(current)

    return ChunkPlan(items=[PlanItem(paragraph_indices=tuple(i)) for i in items])


class SemanticChunker:
    """
    Semantic chunker delegating grouping to a ChunkPlanner.

    Usage:
        planner = OllamaChunkPlanner(client)
        chunker = SemanticChunker(planner)
        chunks = chunker.chunk("contract-17", text)
    """

    def __init__(
        self,
        planner: Optional[ChunkPlanner] = None,
        config: Optional[SemanticChunkingConfig] = None,
    ):
        """
        Args:
            planner: Planning collaborator; None means always use the fallback
            config: Chunking configuration
        """
        self.planner = planner
        self.config = (config or SemanticChunkingConfig()).validate()

    def chunk(self, source_id: str, text: str) -> List[Chunk]:
        """
        Chunk text using a validated plan or the fallback heuristic.

        Raises:
            PlanInvalidError: When the plan is invalid and fallback_on_error
                is disabled (planner exceptions propagate unchanged)
        """
        if source_id is None:
            raise ValueError("source_id is required.")
        if not text or not text.strip():
            return []

        paragraphs = split_paragraphs(text)
        if not paragraphs:
            return []

        plan = self.plan_paragraphs(paragraphs)

        chunks: List[Chunk] = []
        previous_body = ""

        for item in plan.items:
            ordered = [paragraphs[i] for i in sorted(item.paragraph_indices)]
            body = "\n\n".join(p.text for p in ordered)

            overlap = last_sentences(previous_body, self.config.overlap_sentences)
            body_with_overlap = prepend_overlap(body, overlap, self.config.max_words)

            chunk_index = len(chunks)
            chunks.append(
                Chunk(
                    id=make_chunk_id(source_id, chunk_index),
                    source_id=source_id,
                    chunk_index=chunk_index,
                    text=self.build_chunk_text(body_with_overlap, ordered),
                )
            )
            previous_body = body

        logger.debug(f"Semantic-chunked {source_id} into {len(chunks)} chunks")
        return chunks

    def plan_paragraphs(self, paragraphs: Sequence[Paragraph]) -> ChunkPlan:
        """Ask the planner for a plan, falling back when allowed."""
        if len(paragraphs) > self.config.max_paragraphs_per_request:
            message = (
                f"{len(paragraphs)} paragraphs exceed max_paragraphs_per_request "
                f"({self.config.max_paragraphs_per_request})"
            )
            if not self.config.fallback_on_error:
                raise PlanInvalidError(message)
            logger.info(f"{message}; using fallback plan")
            return self.fallback_plan(paragraphs)

        if self.planner is None:
            if not self.config.fallback_on_error:
                raise PlanInvalidError("No chunk planner configured.")
            return self.fallback_plan(paragraphs)

        try:
            plan = self.planner.plan(paragraphs, self.config)
            return validate_plan(len(paragraphs), plan)
        except Exception as e:
            if not self.config.fallback_on_error:
                raise
            logger.warning(f"Chunk planning failed, using fallback plan: {e}")
            return self.fallback_plan(paragraphs)

    def fallback_plan(self, paragraphs: Sequence[Paragraph]) -> ChunkPlan:
        return build_fallback_plan(
            paragraphs,
            target_words=self.config.target_words,
            max_words=self.config.max_words,
            min_words=self.config.min_words,
        )

    def build_chunk_text(self, body: str, paragraphs: Sequence[Paragraph]) -> str:
        """Prefix the body with the heading path governing the chunk."""
        heading_path = self._heading_path_for(paragraphs)
        if not self.config.include_header_prefix or not heading_path:
            return body

        prefix = format_header_prefix(self.config.header_prefix_template, heading_path)
        return f"{prefix}{body}".strip()

    @staticmethod
    def _heading_path_for(paragraphs: Sequence[Paragraph]) -> str:
        # First heading paragraph wins; otherwise inherit the path in force.
        for paragraph in paragraphs:
            if paragraph.is_heading and paragraph.heading_path.strip():
                return paragraph.heading_path
        for paragraph in paragraphs:
            if paragraph.heading_path.strip():
                return paragraph.heading_path
        return ""
