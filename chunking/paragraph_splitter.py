"""
Paragraph extraction with heading tagging.

Feeds the semantic chunker: every blank-line separated block becomes a
Paragraph carrying its document position and the heading path in force.
"""

import logging
from dataclasses import dataclass
from typing import List

from .base import join_header_path
from .section_parser import is_mostly_upper

logger = logging.getLogger(__name__)

MAX_HEADING_LENGTH = 80


@dataclass(frozen=True)
class Paragraph:
    """A paragraph with its position and heading context."""

    index: int
    text: str
    heading_path: str
    is_heading: bool


def is_heading_paragraph(text: str) -> bool:
    """
    A paragraph is heading-like when it is short and either starts with
    ``#``, ends with a colon, or is mostly uppercase.
    """
    stripped = text.strip() if text else ""
    if not stripped or len(stripped) > MAX_HEADING_LENGTH:
        return False

    if stripped.startswith("#"):
        return True
    if stripped.endswith(":"):
        return True
    return is_mostly_upper(stripped)


def split_paragraphs(text: str) -> List[Paragraph]:
    """
    Split text into paragraphs on blank lines.

    The heading stack is flat: the first heading is pushed, and each later
    heading replaces the last entry.

    Args:
        text: Document text

    Returns:
        Paragraphs with 0-based index in document order
    """
    if not text or not text.strip():
        return []

    paragraphs: List[Paragraph] = []
    heading_stack: List[str] = []
    buffer: List[str] = []

    def flush() -> None:
        if not buffer:
            return

        paragraph_text = "\n".join(buffer).strip()
        is_heading = is_heading_paragraph(paragraph_text)

        if is_heading:
            if heading_stack:
                heading_stack[-1] = paragraph_text
            else:
                heading_stack.append(paragraph_text)

        paragraphs.append(
            Paragraph(
                index=len(paragraphs),
                text=paragraph_text,
                heading_path=join_header_path(heading_stack),
                is_heading=is_heading,
            )
        )
        buffer.clear()

    for line in text.replace("\r\n", "\n").split("\n"):
        if not line.strip():
            flush()
            continue
        buffer.append(line)

    flush()

    logger.debug(f"Split text into {len(paragraphs)} paragraphs")
    return paragraphs
