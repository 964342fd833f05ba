"""
Sentence-level text splitting utilities.

Used by the adaptive chunker to break oversized paragraphs apart and by
both structure-aware chunkers to build sentence overlap between chunks.
"""

import logging
import re
from typing import List

from .base import count_words, split_words

logger = logging.getLogger(__name__)

# Common abbreviations that shouldn't split
ABBREVIATIONS = (
    "Mr",
    "Mrs",
    "Ms",
    "Dr",
    "Prof",
    "Sr",
    "Jr",
    "vs",
    "etc",
    "eg",
    "ie",
    "Inc",
    "Ltd",
    "Corp",
)

_DOT_PLACEHOLDER = "\x00"
_ABBREVIATION_PATTERN = re.compile(
    r"\b(" + "|".join(ABBREVIATIONS) + r")\.", flags=re.IGNORECASE
)
_DECIMAL_PATTERN = re.compile(r"(\d)\.(\d)")

# A sentence runs up to and including a run of terminal punctuation; a
# trailing fragment without punctuation is a sentence too.
_SENTENCE_PATTERN = re.compile(r"[^.!?]*[.!?]+|[^.!?]+$")


def split_into_sentences(text: str) -> List[str]:
    """
    Split text into sentences on terminal punctuation (. ! ?).

    Handles common edge cases:
    - Abbreviations (Mr., Dr., etc.)
    - Numbers with decimals
    - Ellipsis and repeated punctuation ("..." / "?!")

    Args:
        text: Text to split

    Returns:
        Stripped, non-empty sentences in document order
    """
    if not text or not text.strip():
        return []

    # Protect abbreviations and decimal numbers
    protected = _ABBREVIATION_PATTERN.sub(rf"\1{_DOT_PLACEHOLDER}", text)
    protected = _DECIMAL_PATTERN.sub(rf"\1{_DOT_PLACEHOLDER}\2", protected)

    sentences = []
    for match in _SENTENCE_PATTERN.finditer(protected):
        restored = match.group().replace(_DOT_PLACEHOLDER, ".").strip()
        if restored:
            sentences.append(restored)

    return sentences


def split_by_words(text: str, max_words: int) -> List[str]:
    """
    Split text into consecutive fixed-size word windows (no overlap).

    Last resort for a single sentence longer than the word budget.
    """
    if max_words <= 0:
        raise ValueError("max_words must be positive")

    words = split_words(text)
    return [
        " ".join(words[start : start + max_words])
        for start in range(0, len(words), max_words)
    ]


class SentenceSplitter:
    """
    Sentence-based splitter with word-budget grouping.

    Usage:
        splitter = SentenceSplitter(max_words=300)
        pieces = splitter.split(long_paragraph)
    """

    def __init__(self, max_words: int):
        """
        Args:
            max_words: Maximum words per produced piece
        """
        if max_words <= 0:
            raise ValueError("max_words must be positive")
        self.max_words = max_words

    def split(self, text: str) -> List[str]:
        """
        Re-merge sentences into pieces of at most ``max_words`` words.

        A sentence that alone exceeds the budget is emitted as fixed-size
        word windows, flushing any buffered sentences first.

        Args:
            text: Text to split

        Returns:
            List of piece strings
        """
        sentences = split_into_sentences(text)
        if not sentences:
            return split_by_words(text, self.max_words)

        pieces: List[str] = []
        buffer: List[str] = []
        buffer_words = 0

        for sentence in sentences:
            sentence_words = count_words(sentence)

            if sentence_words > self.max_words:
                if buffer:
                    pieces.append(" ".join(buffer))
                    buffer = []
                    buffer_words = 0
                logger.debug(
                    f"Sentence of {sentence_words} words exceeds {self.max_words}; "
                    "falling back to word windows"
                )
                pieces.extend(split_by_words(sentence, self.max_words))
                continue

            if buffer and buffer_words + sentence_words > self.max_words:
                pieces.append(" ".join(buffer))
                buffer = []
                buffer_words = 0

            buffer.append(sentence)
            buffer_words += sentence_words

        if buffer:
            pieces.append(" ".join(buffer))

        return pieces


def last_sentences(text: str, count: int) -> str:
    """
    Return the trailing ``count`` sentences of text joined by single spaces.

    Returns an empty string for ``count <= 0`` or text without sentences.
    """
    if count <= 0:
        return ""
    sentences = split_into_sentences(text)
    if not sentences:
        return ""
    return " ".join(sentences[-count:]).strip()
