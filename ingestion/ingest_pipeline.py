"""
Indexing pipeline.

Orchestrates the document indexing workflow:
Raw text -> Chunking -> Embedding (one chunk at a time) -> Single store upsert

Indexing is all-or-nothing per document: records are collected in memory and
written with exactly one upsert, so an embedding failure or cancellation
leaves the store untouched.
"""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from chunking.base import TextChunker
from embeddings.base import Embedder
from retrieval.vector_store import VectorStore
from shared.cancellation import raise_if_cancelled
from shared.errors import OperationCancelledError, RagError
from shared.models import EmbeddedRecord

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".md")


@dataclass
class IndexingStats:
    """Statistics from an indexing run."""

    total_docs: int = 0
    successful: int = 0
    failed: int = 0
    total_chunks: int = 0
    errors: List[str] = field(default_factory=list)


class VectorIndexer:
    """
    Chunk, embed and store documents.

    Usage:
        indexer = VectorIndexer(AdaptiveSectionChunker(), embedder, store)

        # Index raw text
        count = indexer.index_text("contract-17", text)

        # Index a directory of .txt/.md files
        stats = indexer.index_directory("./documents")
    """

    def __init__(self, chunker: TextChunker, embedder: Embedder, store: VectorStore):
        self.chunker = chunker
        self.embedder = embedder
        self.store = store

    def index_text(
        self,
        source_id: str,
        text: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """
        Index one document.

        Args:
            source_id: Document identifier
            text: Document text
            cancel_event: Checked before each embedding call

        Returns:
            Number of records stored

        Raises:
            ValueError: For a blank source_id
            EmbeddingError: If any chunk fails to embed (nothing is stored)
            OperationCancelledError: If cancelled (nothing is stored)
        """
        if not source_id or not source_id.strip():
            raise ValueError("source_id must not be blank.")
        if not text or not text.strip():
            return 0

        chunks = self.chunker.chunk(source_id, text)

        records: List[EmbeddedRecord] = []
        for chunk in chunks:
            raise_if_cancelled(cancel_event)
            vector = self.embedder.embed(chunk.text)
            records.append(EmbeddedRecord.from_chunk(chunk, vector))

        raise_if_cancelled(cancel_event)
        if records:
            self.store.upsert(records, cancel_event=cancel_event)

        logger.info(f"Indexed {source_id}: {len(records)} chunks")
        return len(records)

    def index_file(
        self,
        path: str,
        stats: Optional[IndexingStats] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """
        Index a UTF-8 text file using its stem as source id.

        A failing document is logged and counted in ``stats``; it never
        aborts a batch. Cancellation still propagates.

        Returns:
            Number of records stored (0 on failure)
        """
        stats = stats if stats is not None else IndexingStats()
        stats.total_docs += 1
        file_path = Path(path)

        try:
            text = file_path.read_text(encoding="utf-8")
            count = self.index_text(file_path.stem, text, cancel_event=cancel_event)
        except OperationCancelledError:
            raise
        except (OSError, UnicodeDecodeError, ValueError, RagError) as e:
            stats.failed += 1
            stats.errors.append(f"{path}: {e}")
            logger.error(f"Failed to index {path}: {e}")
            return 0

        stats.successful += 1
        stats.total_chunks += count
        return count

    def index_files(
        self,
        paths: Iterable[str],
        cancel_event: Optional[threading.Event] = None,
    ) -> IndexingStats:
        """
        Index a batch of files and directories.

        Directories are expanded with index_directory.
        """
        stats = IndexingStats()
        for path in paths:
            if Path(path).is_dir():
                self.index_directory(path, stats=stats, cancel_event=cancel_event)
            else:
                self.index_file(path, stats=stats, cancel_event=cancel_event)
        return stats

    def index_directory(
        self,
        directory: str,
        extensions: Optional[Iterable[str]] = None,
        recursive: bool = True,
        stats: Optional[IndexingStats] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> IndexingStats:
        """
        Index all supported documents in a directory.

        Args:
            directory: Directory path
            extensions: File extensions to process (default .txt and .md)
            recursive: Search subdirectories
            stats: Stats to accumulate into

        Returns:
            IndexingStats for the run
        """
        allowed = {e.lower() for e in (extensions or SUPPORTED_EXTENSIONS)}
        stats = stats if stats is not None else IndexingStats()
        dir_path = Path(directory)

        if not dir_path.is_dir():
            logger.error(f"Directory not found: {directory}")
            stats.errors.append(f"Directory not found: {directory}")
            return stats

        pattern = "**/*" if recursive else "*"
        for file_path in sorted(dir_path.glob(pattern)):
            if file_path.is_file() and file_path.suffix.lower() in allowed:
                self.index_file(str(file_path), stats=stats, cancel_event=cancel_event)

        logger.info(
            f"Indexing complete: {stats.successful}/{stats.total_docs} "
            f"successful, {stats.total_chunks} chunks"
        )
        return stats


def stats_to_dict(stats: IndexingStats) -> Dict:
    """Get indexing statistics as a plain dict."""
    return {
        "total_docs": stats.total_docs,
        "successful": stats.successful,
        "failed": stats.failed,
        "total_chunks": stats.total_chunks,
        "errors": list(stats.errors),
    }
