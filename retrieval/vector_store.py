"""
Similarity stores for embedded chunk records.

InMemoryVectorStore is the reference implementation: exact brute-force
cosine search over a lock-protected record list. ChromaVectorStore keeps
the same contract on an ephemeral Chroma collection.

Key practices:
- Never mix vectors from different embedding models in one store
- Upsert by chunk id so re-indexing a document replaces its chunks
- Search works on a snapshot, so writers are never blocked by scoring
"""

import logging
import threading
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from shared.cancellation import raise_if_cancelled
from shared.models import EmbeddedRecord, RankedResult

from .similarity import cosine_similarity

logger = logging.getLogger(__name__)


@runtime_checkable
class VectorStore(Protocol):
    """Keyed collection of embedded records searchable by similarity."""

    def upsert(
        self,
        records: Sequence[EmbeddedRecord],
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        ...

    def search(
        self,
        query_vector: Sequence[float],
        top_k: int,
        threshold: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[RankedResult]:
        ...

    def count(self) -> int:
        ...


def _validate_records(records: Sequence[EmbeddedRecord]) -> None:
    if records is None:
        raise ValueError("records is required.")
    for record in records:
        if record is None:
            raise ValueError("records must not contain None.")
        if not record.id:
            raise ValueError("Every record needs a non-empty id.")
        if record.vector is None:
            raise ValueError(f"Record {record.id} has no vector.")


class InMemoryVectorStore:
    """
    Thread-safe in-memory similarity store.

    Usage:
        store = InMemoryVectorStore()
        store.upsert(records)
        results = store.search(query_vector, top_k=5, threshold=0.72)
    """

    def __init__(self):
        self._records: List[EmbeddedRecord] = []
        self._lock = threading.Lock()

    def upsert(
        self,
        records: Sequence[EmbeddedRecord],
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Insert records, replacing any existing record with the same id.

        Args:
            records: Records to store
            cancel_event: Checked once per record

        Raises:
            ValueError: For a malformed batch (store left untouched)
            OperationCancelledError: If cancellation is observed mid-batch
                (store left untouched)
        """
        _validate_records(records)

        with self._lock:
            staged = list(self._records)
            positions = {r.id: i for i, r in enumerate(staged)}
            for record in records:
                raise_if_cancelled(cancel_event)
                existing = positions.get(record.id)
                if existing is None:
                    positions[record.id] = len(staged)
                    staged.append(record)
                else:
                    staged[existing] = record
            self._records = staged

        logger.debug(f"Upserted {len(records)} records")

    def search(
        self,
        query_vector: Sequence[float],
        top_k: int,
        threshold: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[RankedResult]:
        """
        Score every stored record against the query vector.

        Args:
            query_vector: Embedded query
            top_k: Maximum results (<= 0 returns nothing)
            threshold: Minimum score to keep (inclusive)
            cancel_event: Checked before each candidate

        Returns:
            Results sorted by score descending, ties in insertion order

        Raises:
            DimensionMismatchError: If a stored vector has another dimension
        """
        if top_k <= 0:
            return []

        with self._lock:
            snapshot = list(self._records)

        scored: List[RankedResult] = []
        for record in snapshot:
            raise_if_cancelled(cancel_event)
            score = cosine_similarity(query_vector, record.vector)
            if score >= threshold:
                scored.append(
                    RankedResult(
                        id=record.id,
                        source_id=record.source_id,
                        chunk_index=record.chunk_index,
                        text=record.text,
                        score=score,
                    )
                )

        # sorted() is stable, so equal scores keep insertion order
        scored = sorted(scored, key=lambda r: r.score, reverse=True)
        return scored[:top_k]

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


class ChromaVectorStore:
    """
    Similarity store backed by an ephemeral Chroma collection.

    Uses cosine space, so similarity = 1 - distance.

    Usage:
        store = ChromaVectorStore(collection_name="docs_v1")
        store.upsert(records)
        results = store.search(query_vector, top_k=5, threshold=0.72)
    """

    def __init__(self, collection_name: str = "docs_v1"):
        self.collection_name = collection_name
        self._client = None
        self._collection = None

    @property
    def client(self):
        """Lazy load an in-process Chroma client."""
        if self._client is None:
            import chromadb
            from chromadb.config import Settings as ChromaSettings

            self._client = chromadb.EphemeralClient(
                settings=ChromaSettings(anonymized_telemetry=False)
            )
        return self._client

    @property
    def collection(self):
        """Get or create collection."""
        if self._collection is None:
            self._collection = self.client.get_or_create_collection(
                name=self.collection_name,
                metadata={"hnsw:space": "cosine"},
            )
        return self._collection

    def upsert(
        self,
        records: Sequence[EmbeddedRecord],
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        _validate_records(records)
        raise_if_cancelled(cancel_event)
        if not records:
            return

        self.collection.upsert(
            ids=[r.id for r in records],
            documents=[r.text for r in records],
            embeddings=[list(r.vector) for r in records],
            metadatas=[
                {"source_id": r.source_id, "chunk_index": r.chunk_index}
                for r in records
            ],
        )
        logger.info(f"Upserted {len(records)} records into {self.collection_name}")

    def search(
        self,
        query_vector: Sequence[float],
        top_k: int,
        threshold: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[RankedResult]:
        if top_k <= 0:
            return []
        raise_if_cancelled(cancel_event)

        total = self.collection.count()
        if total == 0:
            return []

        results = self.collection.query(
            query_embeddings=[list(query_vector)],
            n_results=min(top_k, total),
            include=["documents", "metadatas", "distances"],
        )

        output: List[RankedResult] = []
        for i, record_id in enumerate(results["ids"][0]):
            score = 1.0 - float(results["distances"][0][i])
            if score < threshold:
                continue
            metadata = results["metadatas"][0][i] or {}
            output.append(
                RankedResult(
                    id=record_id,
                    source_id=str(metadata.get("source_id", "")),
                    chunk_index=int(metadata.get("chunk_index", 0)),
                    text=results["documents"][0][i],
                    score=score,
                )
            )

        return sorted(output, key=lambda r: r.score, reverse=True)

    def count(self) -> int:
        return self.collection.count()
