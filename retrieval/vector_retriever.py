"""
Vector retrieval: embed the query, then search the similarity store.
"""

import logging
import threading
from typing import List, Optional

from embeddings.base import Embedder
from shared.cancellation import raise_if_cancelled
from shared.models import RankedResult

from .vector_store import VectorStore

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
DEFAULT_THRESHOLD = 0.72


class VectorRetriever:
    """
    Pure vector retrieval over a VectorStore.

    Usage:
        retriever = VectorRetriever(embedder, store)
        results = retriever.retrieve("What are the payment terms?")
    """

    def __init__(self, embedder: Embedder, store: VectorStore):
        self.embedder = embedder
        self.store = store

    def retrieve(
        self,
        query: str,
        top_k: int = DEFAULT_TOP_K,
        threshold: float = DEFAULT_THRESHOLD,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[RankedResult]:
        """
        Retrieve chunks similar to a query.

        Args:
            query: Search query
            top_k: Number of results
            threshold: Minimum similarity score
            cancel_event: Optional cancellation signal

        Returns:
            List of RankedResult, best first
        """
        if not query or not query.strip() or top_k <= 0:
            return []

        raise_if_cancelled(cancel_event)
        query_vector = self.embedder.embed(query)

        results = self.store.search(
            query_vector, top_k=top_k, threshold=threshold, cancel_event=cancel_event
        )
        logger.debug(f"Retrieved {len(results)} chunks (top_k={top_k})")
        return results
