"""
Question answering over retrieved context.

Flow:
1. Reject blank questions without touching any backend
2. Retrieve (top_k, threshold)
3. No context -> fixed "I don't know" message, language model not called
4. Assemble context, build prompt, ask the language model
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from llm.base import Answerer
from retrieval.vector_retriever import DEFAULT_THRESHOLD, DEFAULT_TOP_K, VectorRetriever

from .context_builder import assemble_context, build_prompt

logger = logging.getLogger(__name__)

EMPTY_QUESTION_MESSAGE = "Empty question."
NO_CONTEXT_MESSAGE = "No context found -> I don't know."


@dataclass
class AnswerResult:
    """Answer plus the chunks and prompt that produced it."""

    answer: str
    sources: List[Dict] = field(default_factory=list)
    prompt: Optional[str] = None


class AnswerOrchestrator:
    """
    Retrieval-augmented answering.

    Usage:
        orchestrator = AnswerOrchestrator(retriever, answerer)
        print(orchestrator.ask("What are the payment terms?"))
    """

    def __init__(
        self,
        retriever: VectorRetriever,
        answerer: Answerer,
        top_k: int = DEFAULT_TOP_K,
        threshold: float = DEFAULT_THRESHOLD,
        max_context_tokens: Optional[int] = None,
    ):
        self.retriever = retriever
        self.answerer = answerer
        self.top_k = top_k
        self.threshold = threshold
        self.max_context_tokens = max_context_tokens

    def ask(self, question: str, cancel_event: Optional[threading.Event] = None) -> str:
        """Answer a question, returning only the text."""
        return self.answer(question, cancel_event=cancel_event).answer

    def answer(
        self, question: str, cancel_event: Optional[threading.Event] = None
    ) -> AnswerResult:
        """
        Answer a question with sources.

        Args:
            question: User question
            cancel_event: Optional cancellation signal

        Returns:
            AnswerResult; sources are empty when nothing was retrieved
        """
        if not question or not question.strip():
            return AnswerResult(answer=EMPTY_QUESTION_MESSAGE)

        results = self.retriever.retrieve(
            question,
            top_k=self.top_k,
            threshold=self.threshold,
            cancel_event=cancel_event,
        )
        if not results:
            logger.info("No context retrieved; skipping language model")
            return AnswerResult(answer=NO_CONTEXT_MESSAGE)

        assembled = assemble_context(results, max_tokens=self.max_context_tokens)
        prompt = build_prompt(assembled.text, question)
        logger.debug(f"Prompt: {prompt}")

        answer = self.answerer.ask(prompt)
        return AnswerResult(answer=answer, sources=assembled.sources, prompt=prompt)
