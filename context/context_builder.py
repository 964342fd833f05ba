"""
Context assembly and prompt construction.

Treat prompt context as a resource with a budget.

Best practices:
- Keep retrieved chunks in rank order, best first
- Show the similarity score next to each chunk
- Tell the model to answer "I don't know" when context is insufficient
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import tiktoken

from shared.models import RankedResult

logger = logging.getLogger(__name__)

_enc = None


def _encoding():
    """Lazy load the cl100k_base tokenizer."""
    global _enc
    if _enc is None:
        _enc = tiktoken.get_encoding("cl100k_base")
    return _enc


def count_tokens(text: str) -> int:
    """Count tokens in text."""
    return len(_encoding().encode(text))


@dataclass
class AssembledContext:
    """Assembled context ready for the prompt."""

    text: str
    sources: List[Dict] = field(default_factory=list)
    chunks_included: int = 0
    chunks_dropped: int = 0


def format_chunk_line(result: RankedResult) -> str:
    """Example: ``[score:0.8731] Payment is due within 30 days.``"""
    return f"[score:{result.score:.4f}] {result.text}"


def assemble_context(
    results: Sequence[RankedResult],
    max_tokens: Optional[int] = None,
) -> AssembledContext:
    """
    Assemble context lines from ranked results.

    Args:
        results: Ranked results, best first
        max_tokens: Optional token budget; the first result is always kept

    Returns:
        AssembledContext ready for build_prompt
    """
    lines: List[str] = []
    sources: List[Dict] = []
    current_tokens = 0

    for result in results:
        line = format_chunk_line(result)

        if max_tokens is not None:
            line_tokens = count_tokens(line + "\n")
            if lines and current_tokens + line_tokens > max_tokens:
                break
            current_tokens += line_tokens

        lines.append(line)
        sources.append(
            {
                "id": result.id,
                "source_id": result.source_id,
                "chunk_index": result.chunk_index,
                "score": result.score,
            }
        )

    dropped = len(results) - len(lines)
    if dropped:
        logger.debug(f"Context budget dropped {dropped} of {len(results)} chunks")

    return AssembledContext(
        text="".join(f"{line}\n" for line in lines),
        sources=sources,
        chunks_included=len(lines),
        chunks_dropped=dropped,
    )


GROUNDED_QA_PROMPT = """Use only the context below. If the context is missing or insufficient, answer with "I don't know".
Context:
{context}

Question:
{question}
Answer:"""


def build_prompt(context: str, question: str) -> str:
    """
    Build the grounded question-answering prompt.

    Args:
        context: Assembled context string
        question: User question

    Returns:
        Complete prompt string
    """
    return GROUNDED_QA_PROMPT.format(context=context, question=question)
