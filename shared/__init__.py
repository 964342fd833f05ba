"""
Shared data model, error taxonomy and API schemas.
"""

from .cancellation import raise_if_cancelled
from .errors import (
    CollaboratorError,
    ConfigurationError,
    DimensionMismatchError,
    EmbeddingError,
    LanguageModelError,
    OperationCancelledError,
    PlanInvalidError,
    PlanningError,
    RagError,
)
from .models import Chunk, EmbeddedRecord, RankedResult, make_chunk_id

__all__ = [
    "Chunk",
    "EmbeddedRecord",
    "RankedResult",
    "make_chunk_id",
    "RagError",
    "ConfigurationError",
    "PlanInvalidError",
    "CollaboratorError",
    "EmbeddingError",
    "LanguageModelError",
    "PlanningError",
    "DimensionMismatchError",
    "OperationCancelledError",
    "raise_if_cancelled",
]
