"""
Error taxonomy shared by the chunking engine and the retrieval core.

- ConfigurationError: invalid options, raised at construction time
- PlanInvalidError: a chunk plan is not an ordered exact partition
- CollaboratorError: embedding / language-model / planning backend failure
- DimensionMismatchError: vectors of unequal length were compared
- OperationCancelledError: a cooperative cancellation signal was observed

None of these are retried by the core.
"""


class RagError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(RagError, ValueError):
    """Invalid constructor or settings options. Fatal at startup."""


class PlanInvalidError(RagError):
    """A proposed chunk plan failed partition, ordering or duplication checks."""


class CollaboratorError(RagError):
    """An external backend (embedder, answerer, planner) failed."""


class EmbeddingError(CollaboratorError):
    """Embedding backend failed or returned an empty vector."""


class LanguageModelError(CollaboratorError):
    """Language-model backend failed while answering."""


class PlanningError(CollaboratorError):
    """Chunk planner failed, timed out, or returned an unusable response."""


class DimensionMismatchError(RagError, ValueError):
    """Two vectors with different dimensionality were compared."""

    def __init__(self, left: int, right: int):
        super().__init__(
            f"Vectors must have the same dimensions (got {left} and {right})"
        )
        self.left = left
        self.right = right


class OperationCancelledError(RagError):
    """Work was abandoned because its cancellation event was set."""
