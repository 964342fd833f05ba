"""
Chunk plan contract and validation.

A plan groups paragraph indices into ordered chunks. A valid plan over N
paragraphs is an exact partition of [0, N) read in document order:
- at least one chunk, none empty
- every index in range, used exactly once
- indices never decrease, within or across chunks
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from shared.errors import PlanInvalidError


@dataclass(frozen=True)
class PlanItem:
    """One planned chunk: the paragraph indices it covers."""

    paragraph_indices: Sequence[int]
    title: Optional[str] = None


@dataclass(frozen=True)
class ChunkPlan:
    """Ordered list of plan items."""

    items: List[PlanItem] = field(default_factory=list)


def validate_plan(paragraph_count: int, plan: Optional[ChunkPlan]) -> ChunkPlan:
    """
    Verify the plan is an exact, ordered partition of the paragraphs.

    Args:
        paragraph_count: Number of paragraphs N
        plan: Proposed plan

    Returns:
        The plan, unchanged

    Raises:
        PlanInvalidError: Describing the first violation found
    """
    if plan is None or plan.items is None:
        raise PlanInvalidError("Plan is missing.")
    if not plan.items:
        raise PlanInvalidError("Plan has no chunks.")

    seen = [False] * paragraph_count
    last_index = -1

    for position, item in enumerate(plan.items):
        if not item.paragraph_indices:
            raise PlanInvalidError(f"Chunk {position} has no paragraphs.")

        for idx in item.paragraph_indices:
            if isinstance(idx, bool) or not isinstance(idx, int):
                raise PlanInvalidError(f"Paragraph index {idx!r} is not an integer.")
            if idx < 0 or idx >= paragraph_count:
                raise PlanInvalidError(f"Paragraph index {idx} is out of range.")
            if seen[idx]:
                raise PlanInvalidError(f"Paragraph index {idx} is duplicated.")
            if idx < last_index:
                raise PlanInvalidError("Paragraph ordering is not monotonic.")

            seen[idx] = True
            last_index = idx

    missing = [i for i, used in enumerate(seen) if not used]
    if missing:
        raise PlanInvalidError(
            f"{len(missing)} paragraph(s) were not assigned (first: {missing[0]})."
        )

    return plan


def is_valid_plan(paragraph_count: int, plan: Optional[ChunkPlan]) -> bool:
    """Boolean form of validate_plan."""
    try:
        validate_plan(paragraph_count, plan)
    except PlanInvalidError:
        return False
    return True
