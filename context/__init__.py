"""
Context Assembly Module.

Treat prompt context as a resource with a budget.

This module handles:
- Context building from ranked chunks (with scores)
- Optional token budget (tiktoken)
- Grounded prompt formatting
- Question answering orchestration

Usage:
    from context import AnswerOrchestrator

    orchestrator = AnswerOrchestrator(retriever, answerer)
    answer = orchestrator.ask("What are the payment terms?")
"""

from .answer_orchestrator import (
    EMPTY_QUESTION_MESSAGE,
    NO_CONTEXT_MESSAGE,
    AnswerOrchestrator,
    AnswerResult,
)
from .context_builder import (
    AssembledContext,
    assemble_context,
    build_prompt,
    count_tokens,
    format_chunk_line,
)

__all__ = [
    "AnswerOrchestrator",
    "AnswerResult",
    "EMPTY_QUESTION_MESSAGE",
    "NO_CONTEXT_MESSAGE",
    "AssembledContext",
    "assemble_context",
    "build_prompt",
    "count_tokens",
    "format_chunk_line",
]
