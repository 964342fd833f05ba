"""Embedding collaborator contract."""

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class Embedder(Protocol):
    """
    Turns text into a fixed-length vector.

    Implementations raise ValueError for blank text and EmbeddingError when
    the backend fails or returns an empty vector.
    """

    def embed(self, text: str) -> List[float]:
        ...
