"""
Section parsing with hierarchical heading detection.

Recognizes:
- Markdown headings (# .. ######)
- Plain-text headings, until the first markdown heading is seen:
  - numbered / roman / lettered markers (1.2 Scope, IV. Terms, b) Notes)
  - short lines ending with a colon
  - mostly uppercase lines
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

MAX_PLAIN_HEADING_LENGTH = 80
MAX_HEADING_LEVEL = 6

_MARKDOWN_HEADING = re.compile(r"^(#{1,6}) (.*)$")
_NUMBERED_MARKER = re.compile(r"^(\d+(?:\.\d+)*)[.)]?(?=\s|$)")
_ROMAN_MARKER = re.compile(r"^[IVXLCDM]{1,6}[.)]", flags=re.IGNORECASE)
_LETTER_MARKER = re.compile(r"^[^\W\d_][.)]")


@dataclass(frozen=True)
class Section:
    """A run of content governed by one heading path."""

    heading_path: Tuple[str, ...]
    content: str


@dataclass(frozen=True)
class Heading:
    """A detected heading and its depth (1 = top level)."""

    text: str
    level: int


def _clamp_level(level: int) -> int:
    return max(1, min(MAX_HEADING_LEVEL, level))


def _clean_heading(text: str) -> str:
    return text.strip().rstrip(":").strip()


def is_mostly_upper(line: str) -> bool:
    """At least 4 letters, of which at least 70% are uppercase."""
    letters = [ch for ch in line if ch.isalpha()]
    if len(letters) < 4:
        return False
    upper = sum(1 for ch in letters if ch.isupper())
    return upper >= len(letters) * 0.7


def parse_markdown_heading(line: str) -> Optional[Heading]:
    """
    Parse ``#``-style headings.

    Returns:
        Heading, or None when the line is not a markdown heading or the
        heading text is empty
    """
    match = _MARKDOWN_HEADING.match(line.strip())
    if not match:
        return None

    text = _clean_heading(match.group(2))
    if not text:
        return None
    return Heading(text=text, level=len(match.group(1)))


def numbered_heading_level(line: str) -> Optional[int]:
    """
    Depth of a list-marker heading, or None when the line has no marker.

    ``1.`` / ``2)`` are level 1, ``1.2`` level 2, ``1.2.3`` level 3, and
    roman (``IV.``) or lettered (``b)``) markers level 1.
    """
    stripped = line.strip()
    if not stripped:
        return None

    if _ROMAN_MARKER.match(stripped) or _LETTER_MARKER.match(stripped):
        return 1

    match = _NUMBERED_MARKER.match(stripped)
    if not match:
        return None

    depth = len(match.group(1).split("."))
    return _clamp_level(depth)


def parse_plain_heading(line: str) -> Optional[Heading]:
    """Detect a heading in plain text using length and shape heuristics."""
    stripped = line.strip()
    if not stripped or stripped.endswith("."):
        return None
    if len(stripped) > MAX_PLAIN_HEADING_LENGTH:
        return None

    level = numbered_heading_level(stripped)
    if level is not None:
        text = _clean_heading(stripped)
        return Heading(text=text, level=level) if text else None

    if stripped.endswith(":"):
        text = _clean_heading(stripped[:-1])
        return Heading(text=text, level=1) if text else None

    if is_mostly_upper(stripped):
        return Heading(text=_clean_heading(stripped), level=1)

    return None


def update_heading_path(path: List[str], heading: Heading) -> None:
    """Truncate the path to ``level - 1`` entries and append the heading."""
    level = _clamp_level(heading.level)
    del path[level - 1 :]
    path.append(heading.text)


class SectionParser:
    """
    Splits a document into ordered sections keyed by heading path.

    Usage:
        parser = SectionParser()
        for section in parser.parse(text):
            print(" > ".join(section.heading_path), len(section.content))
    """

    def __init__(self, trim_whitespace: bool = True):
        """
        Args:
            trim_whitespace: Strip each content line before buffering it
        """
        self.trim_whitespace = trim_whitespace

    def parse(self, text: str) -> List[Section]:
        """
        Parse text into sections.

        Args:
            text: Document text

        Returns:
            Sections in document order; a document without content yields
            a single empty section
        """
        if text is None:
            raise ValueError("text is required.")

        lines = text.replace("\r\n", "\n").split("\n")

        sections: List[Section] = []
        current_path: List[str] = []
        buffer: List[str] = []
        saw_markdown = False

        def flush() -> None:
            content = "\n".join(buffer).strip("\n")
            if content:
                sections.append(Section(tuple(current_path), content))
            buffer.clear()

        for raw in lines:
            line = raw.strip() if self.trim_whitespace else raw

            heading = parse_markdown_heading(line)
            if heading is not None:
                saw_markdown = True
                flush()
                update_heading_path(current_path, heading)
                continue

            if not saw_markdown:
                heading = parse_plain_heading(line)
                if heading is not None:
                    flush()
                    update_heading_path(current_path, heading)
                    continue

            buffer.append(line)

        flush()

        if not sections:
            sections.append(Section(tuple(current_path), ""))

        logger.debug(f"Parsed {len(sections)} sections")
        return sections
