"""Heading inference and section segmentation for positioned PDF words."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..models.document import Document
from ..models.heading import Heading
from ..models.positioned_word import PositionedWord
from ..models.section import Section
from .line_numbering import assign_line_numbers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmenterConfig:
    """Settings for heading segmentation.

    Attributes:
        heading_size: Word height that marks a heading candidate (required, document specific)
        last_page: Last page to keep body words from (None = unbounded)
        max_line_gap: Largest line-number gap that still merges candidates into one heading
    """

    heading_size: int
    last_page: Optional[int] = None
    max_line_gap: int = 1

    def __post_init__(self):
        if self.heading_size <= 0:
            raise ValueError(f"heading_size must be positive, got {self.heading_size}")
        if self.last_page is not None and self.last_page < 1:
            raise ValueError(f"last_page must be >= 1, got {self.last_page}")
        if self.max_line_gap < 0:
            raise ValueError(f"max_line_gap must be >= 0, got {self.max_line_gap}")


def _ensure_numbered(words: List[PositionedWord]) -> List[PositionedWord]:
    if all(w.line is not None for w in words):
        return sorted(words, key=lambda w: (w.page, w.line, w.x))
    return assign_line_numbers(words)


def _split_heading_runs(
    words: List[PositionedWord], heading_size: int, max_line_gap: int
) -> List[List[PositionedWord]]:
    """Group heading-height words into runs of contiguous line numbers."""
    runs: List[List[PositionedWord]] = []
    current: List[PositionedWord] = []
    for word in words:
        if word.height != heading_size:
            continue
        if current and word.line - current[-1].line > max_line_gap:
            runs.append(current)
            current = []
        current.append(word)
    if current:
        runs.append(current)
    return runs


def find_headings(
    words: List[PositionedWord], heading_size: int, max_line_gap: int = 1
) -> List[Heading]:
    """Infer headings from word heights and line adjacency.

    Args:
        words: Positioned words of one document (line numbers assigned if missing)
        heading_size: Height that marks a heading candidate
        max_line_gap: Candidates whose line numbers differ by at most this are merged

    Returns:
        Headings in order of appearance, head_id 0..n-1
    """
    numbered = _ensure_numbered(words)
    runs = _split_heading_runs(numbered, heading_size, max_line_gap)
    return [
        Heading(
            head_id=i,
            page=run[0].page,
            line=run[0].line,
            text=" ".join(w.text for w in run),
        )
        for i, run in enumerate(runs)
    ]


def segment_sections(words: List[PositionedWord], config: SegmenterConfig) -> List[Section]:
    """Partition body words into sections, one per heading.

    Args:
        words: Positioned words of one document
        config: Heading size, last-page cutoff and merge gap

    Returns:
        Sections in heading order; headings without body words are omitted

    Algorithm:
    - Number lines over the full document, then extract headings
    - Drop words on pages beyond config.last_page
    - Walk body words in (page, line, x) order keeping the current heading;
      advance to the next heading once its (page, line) start is reached
    - Body words seen before the first heading start are dropped
    """
    if not words:
        return []

    numbered = _ensure_numbered(words)
    headings = find_headings(numbered, config.heading_size, config.max_line_gap)
    if not headings:
        logger.info("No words of height %d found; no sections produced", config.heading_size)
        return []

    body = [
        w for w in numbered
        if w.height != config.heading_size
        and (config.last_page is None or w.page <= config.last_page)
    ]

    sections: Dict[int, Section] = {}
    current: Optional[Heading] = None
    next_index = 0
    dropped = 0

    for word in body:
        position = (word.page, word.line)
        while next_index < len(headings) and (headings[next_index].page, headings[next_index].line) <= position:
            current = headings[next_index]
            next_index += 1
        if current is None:
            dropped += 1
            continue
        if current.head_id not in sections:
            sections[current.head_id] = Section(heading=current)
        sections[current.head_id].words.append(word)

    if dropped:
        logger.debug("Dropped %d words before the first heading", dropped)
    logger.info("Found %d headings, %d sections with body text", len(headings), len(sections))

    return [sections[h.head_id] for h in headings if h.head_id in sections]


def sections_to_mapping(sections: List[Section]) -> Dict[Heading, str]:
    """Map each heading to its concatenated body text."""
    return {section.heading: section.text for section in sections}


def sections_to_documents(sections: List[Section], category: Optional[str] = None) -> List[Document]:
    """Turn sections into corpus documents named after their heading text.

    Repeated heading texts get a " #2", " #3", ... suffix so doc_ids stay unique.
    """
    seen: Dict[str, int] = {}
    documents = []
    for section in sections:
        base = section.heading.text
        count = seen.get(base, 0) + 1
        seen[base] = count
        doc_id = base if count == 1 else f"{base} #{count}"
        documents.append(Document(doc_id=doc_id, text=section.text, category=category))
    return documents
