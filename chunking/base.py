"""
Chunker protocol and the small text helpers every strategy shares.
"""

import re
from typing import List, Protocol, Sequence, runtime_checkable

from shared.models import Chunk

# Collapses any run of whitespace to a single space.
WHITESPACE_PATTERN = re.compile(r"\s+")

HEADER_PATH_SEPARATOR = " > "
DEFAULT_HEADER_PREFIX_TEMPLATE = "Section: {path}\n\n"


@runtime_checkable
class TextChunker(Protocol):
    """Splits raw text into ordered chunks tagged with their source."""

    def chunk(self, source_id: str, text: str) -> List[Chunk]:
        ...


def split_words(text: str) -> List[str]:
    """Whitespace tokenization used for every word count in the engine."""
    if not text:
        return []
    return text.split()


def count_words(text: str) -> int:
    return len(split_words(text))


def join_header_path(path: Sequence[str]) -> str:
    return HEADER_PATH_SEPARATOR.join(path)


def format_header_prefix(template: str, path: str) -> str:
    """Substitute a joined heading path into a prefix template."""
    return template.replace("{path}", path)


def prepend_overlap(body: str, overlap: str, max_words: int) -> str:
    """
    Prepend overlap text to a body without pushing it past ``max_words``.

    Only the trailing overlap words that still fit are kept; when the body
    alone already fills the budget the overlap is dropped.
    """
    if not overlap or not overlap.strip():
        return body

    body_words = count_words(body)
    overlap_words = split_words(overlap)

    if body_words + len(overlap_words) <= max_words:
        return f"{overlap}\n\n{body}"

    allowed = max_words - body_words
    if allowed <= 0:
        return body

    return f"{' '.join(overlap_words[-allowed:])}\n\n{body}"
