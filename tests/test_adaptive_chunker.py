"""
Test suite for adaptive section chunking.

Covers header prefixes, size bounds, tail merging, overlap modes and
configuration validation.
"""

import pytest

from chunking.adaptive_chunker import AdaptiveChunkingConfig, AdaptiveSectionChunker
from chunking.base import count_words
from shared.errors import ConfigurationError

P1 = "Alpha beta gamma delta epsilon. Zeta eta theta iota kappa."
P2 = "Lambda mu nu xi omicron. Pi rho sigma tau upsilon."
P3 = "Phi chi psi omega one. Two three four five six."


def eight_word_paragraph(n: int) -> str:
    return f"Paragraph number {n} has exactly eight words total."


def make_chunker(**overrides) -> AdaptiveSectionChunker:
    return AdaptiveSectionChunker(AdaptiveChunkingConfig(**overrides))


class TestHeaderPrefix:

    def test_heading_path_should_prefix_chunk(self) -> None:
        chunks = AdaptiveSectionChunker().chunk("doc", "# Title\n## Sub\nA short paragraph.")

        assert len(chunks) == 1
        assert chunks[0].text.startswith("Section: Title > Sub")
        assert chunks[0].text == "Section: Title > Sub\n\nA short paragraph."

    def test_plain_headings_should_produce_one_chunk_per_section(self) -> None:
        text = "PRODUCTS:\nWe sell chairs.\n\nPRICING:\nChairs cost 10 dollars."

        chunks = make_chunker(overlap_sentences=0, overlap_ratio=0).chunk("doc", text)

        assert [c.text for c in chunks] == [
            "Section: PRODUCTS\n\nWe sell chairs.",
            "Section: PRICING\n\nChairs cost 10 dollars.",
        ]

    def test_prefix_should_be_truncated_to_max_chars(self) -> None:
        chunks = make_chunker(header_prefix_max_chars=12).chunk(
            "doc", "# Title\n## Sub\nA short paragraph."
        )

        assert chunks[0].text == "Section: Tit\n\nA short paragraph."

    def test_prefix_can_be_disabled(self) -> None:
        chunks = make_chunker(include_header_prefix=False).chunk(
            "doc", "# Title\nA short paragraph."
        )

        assert chunks[0].text == "A short paragraph."

    def test_embedding_char_cap_should_truncate_text(self) -> None:
        chunks = make_chunker(embedding_char_cap=10).chunk(
            "doc", "# Title\nA short paragraph."
        )

        assert chunks[0].text == "Section: T"


class TestSizing:

    def test_short_text_should_yield_single_normalized_chunk(self) -> None:
        text = "This is   a short\ndocument.\n\nIt has   two paragraphs."

        chunks = AdaptiveSectionChunker().chunk("doc", text)

        assert len(chunks) == 1
        assert chunks[0].text == "This is a short document.\n\nIt has two paragraphs."

    def test_bodies_should_respect_max_words(self) -> None:
        text = "\n\n".join(eight_word_paragraph(i) for i in range(10))
        chunker = make_chunker(
            target_words=20, max_words=30, min_words=5,
            overlap_sentences=0, overlap_ratio=0,
        )

        chunks = chunker.chunk("doc", text)

        assert len(chunks) == 4
        assert all(count_words(c.text) <= 30 for c in chunks)
        assert [count_words(c.text) for c in chunks] == [24, 24, 24, 8]

    def test_short_tail_should_merge_into_previous_body(self) -> None:
        paragraphs = [eight_word_paragraph(i) for i in range(6)] + ["Tail has four words."]
        chunker = make_chunker(
            target_words=20, max_words=40, min_words=10,
            overlap_sentences=0, overlap_ratio=0,
        )

        chunks = chunker.chunk("doc", "\n\n".join(paragraphs))

        assert len(chunks) == 2
        assert chunks[-1].text.endswith("Tail has four words.")
        assert count_words(chunks[-1].text) == 28

    def test_oversized_paragraph_should_split_on_sentences(self) -> None:
        text = "One two three. Four five six. Seven eight nine. Ten eleven twelve."
        chunker = make_chunker(
            target_words=5, max_words=8, min_words=0,
            overlap_sentences=0, overlap_ratio=0,
        )

        chunks = chunker.chunk("doc", text)

        assert [c.text for c in chunks] == [
            "One two three. Four five six.",
            "Seven eight nine. Ten eleven twelve.",
        ]

    def test_chunk_indexes_should_be_sequential_across_sections(self) -> None:
        text = "# A\n" + P1 + "\n# B\n" + P2 + "\n# C\n" + P3

        chunks = AdaptiveSectionChunker().chunk("doc", text)

        assert [c.chunk_index for c in chunks] == [0, 1, 2]
        assert [c.id for c in chunks] == [
            "doc::chunk::00000", "doc::chunk::00001", "doc::chunk::00002",
        ]

    def test_blank_text_should_yield_no_chunks(self) -> None:
        assert AdaptiveSectionChunker().chunk("doc", "  \n\n ") == []


class TestOverlap:

    def test_sentence_overlap_should_prefix_next_chunk(self) -> None:
        chunker = make_chunker(target_words=10, max_words=20, min_words=0, overlap_sentences=1)

        chunks = chunker.chunk("doc", "\n\n".join([P1, P2, P3]))

        assert chunks[0].text == P1
        assert chunks[1].text == "Zeta eta theta iota kappa.\n\n" + P2
        assert chunks[2].text == "Pi rho sigma tau upsilon.\n\n" + P3

    def test_overlap_should_be_truncated_from_its_head(self) -> None:
        chunker = make_chunker(target_words=10, max_words=12, min_words=0, overlap_sentences=1)

        chunks = chunker.chunk("doc", "\n\n".join([P1, P2, P3]))

        assert chunks[1].text == "iota kappa.\n\n" + P2
        assert all(count_words(c.text) <= 12 for c in chunks)

    def test_ratio_overlap_applies_when_sentence_overlap_is_off(self) -> None:
        chunker = make_chunker(
            target_words=10, max_words=20, min_words=0,
            overlap_sentences=0, overlap_ratio=0.2,
        )

        chunks = chunker.chunk("doc", "\n\n".join([P1, P2, P3]))

        assert chunks[1].text == "iota kappa.\n\n" + P2

    def test_overlap_should_carry_across_sections(self) -> None:
        chunker = make_chunker(overlap_sentences=1)

        chunks = chunker.chunk("doc", "# A\n" + P1 + "\n# B\n" + P2)

        assert chunks[1].text == "Section: B\n\nZeta eta theta iota kappa.\n\n" + P2

    def test_no_overlap_when_both_modes_disabled(self) -> None:
        chunker = make_chunker(
            target_words=10, max_words=20, min_words=0,
            overlap_sentences=0, overlap_ratio=0,
        )

        chunks = chunker.chunk("doc", "\n\n".join([P1, P2, P3]))

        assert [c.text for c in chunks] == [P1, P2, P3]


class TestDeterminismAndConfig:

    def test_should_be_deterministic(self) -> None:
        text = "# A\n" + "\n\n".join(eight_word_paragraph(i) for i in range(200))
        chunker = AdaptiveSectionChunker()

        assert chunker.chunk("doc", text) == chunker.chunk("doc", text)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"target_words": 0},
            {"target_words": 100, "max_words": 50},
            {"min_words": -1},
            {"overlap_ratio": -0.1},
            {"overlap_sentences": -1},
            {"header_prefix_max_chars": 0},
            {"embedding_char_cap": -1},
        ],
    )
    def test_invalid_configuration_should_raise(self, overrides) -> None:
        with pytest.raises(ConfigurationError):
            make_chunker(**overrides)
