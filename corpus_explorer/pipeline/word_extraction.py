"""Positioned word extraction from pdfplumber (searchable PDFs)."""

import logging
from typing import List, TYPE_CHECKING

from ..models.positioned_word import PositionedWord

if TYPE_CHECKING:
    from pdfplumber.page import Page as PDFPlumberPage
else:
    PDFPlumberPage = object  # type: ignore

logger = logging.getLogger(__name__)


def _words_reading_order(words: List[PositionedWord]) -> List[PositionedWord]:
    """Sort words top-to-bottom by y, then left-to-right by x."""
    return sorted(words, key=lambda w: (w.page, w.y, w.x))


def _mark_trailing_spaces(words: List[PositionedWord]) -> List[PositionedWord]:
    """Set has_trailing_space on every word that has a successor on the same y."""
    out: List[PositionedWord] = []
    for i, word in enumerate(words):
        nxt = words[i + 1] if i + 1 < len(words) else None
        trailing = nxt is not None and nxt.page == word.page and nxt.y == word.y
        out.append(PositionedWord(
            page=word.page,
            x=word.x,
            y=word.y,
            width=word.width,
            height=word.height,
            text=word.text,
            has_trailing_space=trailing,
        ))
    return out


def extract_positioned_words(pdfplumber_page: PDFPlumberPage, page_number: int) -> List[PositionedWord]:
    """Extract positioned words from a pdfplumber page object.

    Args:
        pdfplumber_page: pdfplumber Page object with text objects
        page_number: 1-based page number to stamp on each word

    Returns:
        List of PositionedWord in reading order (top-to-bottom, left-to-right)

    Note:
        Coordinates and dimensions are rounded to whole points so that words on
        one visual line share the same y, and headings share one height.
    """
    words = pdfplumber_page.extract_words(x_tolerance=3, y_tolerance=3, keep_blank_chars=False)

    positioned = []
    for word in words:
        text = word.get("text", "").strip()
        if not text:
            continue

        x0 = float(word.get("x0", 0))
        top = float(word.get("top", 0))  # pdfplumber uses 'top' for Y
        x1 = float(word.get("x1", 0))
        bottom = float(word.get("bottom", 0))

        width = round(x1 - x0)
        height = round(bottom - top)
        if width <= 0 or height <= 0:
            continue  # Skip degenerate boxes

        positioned.append(PositionedWord(
            page=page_number,
            x=round(x0),
            y=round(top),
            width=width,
            height=height,
            text=text,
        ))

    logger.debug("Page %d: %d words", page_number, len(positioned))
    return _mark_trailing_spaces(_words_reading_order(positioned))
