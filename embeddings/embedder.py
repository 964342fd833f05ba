"""
Local embedding backend using sentence-transformers.

CRITICAL: Never mix vectors from different models in the same store.

When you change model_name, you MUST re-index all documents.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from shared.errors import EmbeddingError

logger = logging.getLogger(__name__)


@dataclass
class SentenceTransformerConfig:
    """
    Local embedding model configuration.

    IMPORTANT: When changing any value, re-index!
    """

    model_name: str = "all-MiniLM-L6-v2"
    normalize: bool = True
    max_seq_length: int = 512


class SentenceTransformerEmbedder:
    """
    Embedder running a sentence-transformers model in-process.

    Key practices:
    - Make embedding generation deterministic (same preprocessing every time)
    - Normalize vectors to unit length for cosine similarity

    Usage:
        embedder = SentenceTransformerEmbedder()
        vector = embedder.embed("What are the payment terms?")
    """

    def __init__(self, config: Optional[SentenceTransformerConfig] = None):
        self.config = config or SentenceTransformerConfig()
        self._model = None

    @property
    def model(self):
        """Lazy load the model."""
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            logger.info(f"Loading embedding model: {self.config.model_name}")
            self._model = SentenceTransformer(self.config.model_name)
        return self._model

    def preprocess_text(self, text: str) -> str:
        """
        Deterministic text preprocessing.

        IMPORTANT: Keep this consistent across all embeddings.
        Any change requires re-indexing!
        """
        text = " ".join(text.split())

        max_chars = self.config.max_seq_length * 4  # Approximate
        if len(text) > max_chars:
            text = text[:max_chars]

        return text

    def embed(self, text: str) -> List[float]:
        """
        Embed a single text.

        Args:
            text: Text to embed

        Returns:
            Vector as a list of floats

        Raises:
            ValueError: For blank text
            EmbeddingError: If the model fails or yields an empty vector
        """
        if not text or not text.strip():
            raise ValueError("Text to embed must not be blank.")

        try:
            vectors = self.model.encode(
                [self.preprocess_text(text)],
                show_progress_bar=False,
                convert_to_numpy=True,
            )
        except Exception as e:
            raise EmbeddingError(f"Embedding model failed: {e}") from e

        vector = np.asarray(vectors[0], dtype=np.float64)
        if vector.size == 0:
            raise EmbeddingError("Embedding model returned an empty vector.")

        # Normalize to unit length for cosine similarity
        if self.config.normalize:
            vector = vector / (np.linalg.norm(vector) + 1e-10)

        return vector.tolist()
