"""Unit tests for heading inference and section segmentation."""

import pytest

from corpus_explorer.models.heading import Heading
from corpus_explorer.models.positioned_word import PositionedWord
from corpus_explorer.pipeline.heading_segmentation import (
    SegmenterConfig,
    find_headings,
    sections_to_documents,
    sections_to_mapping,
    segment_sections,
)

BODY = 10
HEAD = 14


def _document(heading_lines, n_lines, words_per_page=None, heading_texts=None):
    """Build a document with one word per line; y spacing keeps line number == index.

    Args:
        heading_lines: Line numbers carrying a heading-height word
        n_lines: Total number of lines
        words_per_page: Lines per page (default: everything on page 1)
        heading_texts: Optional mapping line -> heading word text
    """
    heading_texts = heading_texts or {}
    words = []
    for line in range(1, n_lines + 1):
        if words_per_page:
            page = (line - 1) // words_per_page + 1
            y = ((line - 1) % words_per_page) * 10
        else:
            page, y = 1, line * 10
        if line in heading_lines:
            text = heading_texts.get(line, f"H{line}")
            words.append(PositionedWord(page=page, x=10, y=y, width=30, height=HEAD, text=text))
        else:
            words.append(PositionedWord(page=page, x=10, y=y, width=30, height=BODY, text=f"w{line}"))
    return words


class TestFindHeadings:
    """Heading candidates and line-gap merging."""

    def test_separated_candidates_form_separate_headings(self):
        words = _document({38, 751, 1322}, 1400)
        headings = find_headings(words, HEAD)

        assert [h.line for h in headings] == [38, 751, 1322]
        assert [h.head_id for h in headings] == [0, 1, 2]

    def test_adjacent_lines_merge_into_one_heading(self):
        words = _document({38, 39, 751}, 800, heading_texts={38: "General", 39: "Terms", 751: "Privacy"})
        headings = find_headings(words, HEAD)

        assert headings == [
            Heading(head_id=0, page=1, line=38, text="General Terms"),
            Heading(head_id=1, page=1, line=751, text="Privacy"),
        ]

    def test_words_on_same_line_merge_in_x_order(self):
        words = [
            PositionedWord(page=1, x=120, y=50, width=30, height=HEAD, text="Two"),
            PositionedWord(page=1, x=10, y=50, width=30, height=HEAD, text="Part"),
            PositionedWord(page=1, x=10, y=80, width=30, height=BODY, text="body"),
        ]
        headings = find_headings(words, HEAD)
        assert [h.text for h in headings] == ["Part Two"]

    def test_larger_gap_threshold_merges_more(self):
        words = _document({10, 12}, 20)
        assert len(find_headings(words, HEAD, max_line_gap=1)) == 2
        assert len(find_headings(words, HEAD, max_line_gap=2)) == 1

    def test_single_word_at_heading_height_is_a_heading(self):
        words = _document({5}, 10)
        headings = find_headings(words, HEAD)
        assert len(headings) == 1
        assert headings[0].text == "H5"

    def test_no_candidates(self):
        assert find_headings(_document(set(), 10), HEAD) == []

    def test_heading_records_start_page(self):
        words = _document({7}, 20, words_per_page=5)
        headings = find_headings(words, HEAD)
        assert headings[0].page == 2
        assert headings[0].line == 7


class TestSegmentSections:
    """Forward fill of headings onto body words."""

    def test_forward_fill_assigns_words_to_latest_heading(self):
        words = _document({10, 50}, 60)
        sections = segment_sections(words, SegmenterConfig(heading_size=HEAD))

        assert [s.heading.line for s in sections] == [10, 50]
        first_lines = {w.line for w in sections[0].words}
        second_lines = {w.line for w in sections[1].words}
        assert first_lines == set(range(11, 50))
        assert second_lines == set(range(51, 61))

    def test_words_before_first_heading_are_dropped(self):
        words = _document({10, 50}, 60)
        sections = segment_sections(words, SegmenterConfig(heading_size=HEAD))
        kept = {w.line for s in sections for w in s.words}
        assert not any(line < 10 for line in kept)

    def test_body_word_on_heading_line_belongs_to_that_heading(self):
        words = _document({10}, 12) + [
            PositionedWord(page=1, x=200, y=100, width=30, height=BODY, text="inline"),
        ]
        sections = segment_sections(words, SegmenterConfig(heading_size=HEAD))
        assert sections[0].words[0].text == "inline"

    def test_section_text_is_space_joined_in_order(self):
        words = _document({2}, 5)
        sections = segment_sections(words, SegmenterConfig(heading_size=HEAD))
        assert sections[0].text == "w3 w4 w5"

    def test_no_heading_candidates_yields_no_sections(self):
        words = _document(set(), 30)
        assert segment_sections(words, SegmenterConfig(heading_size=HEAD)) == []

    def test_empty_input(self):
        assert segment_sections([], SegmenterConfig(heading_size=HEAD)) == []

    def test_last_page_cuts_final_section(self):
        # 5 lines per page: heading on line 2 (page 1), body continues to page 4
        words = _document({2}, 20, words_per_page=5)
        sections = segment_sections(words, SegmenterConfig(heading_size=HEAD, last_page=2))

        assert len(sections) == 1
        assert max(w.page for w in sections[0].words) == 2
        assert sections[0].page_end == 2

    def test_heading_beyond_last_page_produces_no_section(self):
        words = _document({2, 17}, 20, words_per_page=5)
        sections = segment_sections(words, SegmenterConfig(heading_size=HEAD, last_page=2))
        assert [s.heading.line for s in sections] == [2]

    def test_heading_without_body_is_omitted(self):
        words = _document({5, 7}, 10)
        sections = segment_sections(words, SegmenterConfig(heading_size=HEAD))
        # line 6 belongs to heading 5; heading 7 keeps lines 8..10
        assert [s.heading.line for s in sections] == [5, 7]

        back_to_back = _document({5, 6, 9}, 9)
        sections = segment_sections(back_to_back, SegmenterConfig(heading_size=HEAD))
        assert [s.heading.text for s in sections] == ["H5 H6"]

    def test_mapping_and_documents(self):
        words = _document({1, 4}, 6, heading_texts={1: "Scope", 4: "Scope"})
        sections = segment_sections(words, SegmenterConfig(heading_size=HEAD))

        mapping = sections_to_mapping(sections)
        assert list(mapping.values()) == ["w2 w3", "w5 w6"]

        docs = sections_to_documents(sections, category="legal")
        assert [d.doc_id for d in docs] == ["Scope", "Scope #2"]
        assert all(d.category == "legal" for d in docs)


class TestSegmenterConfig:

    @pytest.mark.parametrize("kwargs", [
        {"heading_size": 0},
        {"heading_size": 12, "last_page": 0},
        {"heading_size": 12, "max_line_gap": -1},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SegmenterConfig(**kwargs)

    def test_defaults(self):
        config = SegmenterConfig(heading_size=12)
        assert config.last_page is None
        assert config.max_line_gap == 1
