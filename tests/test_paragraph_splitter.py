"""
Test suite for paragraph splitting and heading tagging.
"""

from chunking.paragraph_splitter import is_heading_paragraph, split_paragraphs


class TestSplitParagraphs:

    def test_should_tag_headings_and_track_flat_heading_path(self) -> None:
        text = "INTRO\n\nSome text here.\n\nDetails:\n\nMore text."

        paragraphs = split_paragraphs(text)

        assert [p.index for p in paragraphs] == [0, 1, 2, 3]
        assert [p.is_heading for p in paragraphs] == [True, False, True, False]
        assert [p.heading_path for p in paragraphs] == [
            "INTRO", "INTRO", "Details:", "Details:",
        ]

    def test_text_before_any_heading_has_empty_path(self) -> None:
        paragraphs = split_paragraphs("Opening words.\n\n# Title\n\nBody.")

        assert paragraphs[0].heading_path == ""
        assert paragraphs[1].is_heading
        assert paragraphs[2].heading_path == "# Title"

    def test_lines_of_a_paragraph_should_be_kept_together(self) -> None:
        paragraphs = split_paragraphs("line one\nline two\n\nnext")

        assert [p.text for p in paragraphs] == ["line one\nline two", "next"]

    def test_blank_text_should_yield_nothing(self) -> None:
        assert split_paragraphs("  \n\n  ") == []


class TestIsHeadingParagraph:

    def test_short_shapes_are_headings(self) -> None:
        assert is_heading_paragraph("# Overview")
        assert is_heading_paragraph("Payment terms:")
        assert is_heading_paragraph("GENERAL CONDITIONS")

    def test_regular_sentences_are_not_headings(self) -> None:
        assert not is_heading_paragraph("We ship worldwide within five days.")

    def test_long_paragraphs_are_never_headings(self) -> None:
        assert not is_heading_paragraph("A" * 81)
