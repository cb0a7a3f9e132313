"""PDF reading functionality using pdfplumber."""

import io
import logging
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional, Tuple, Union

import pdfplumber

from ..models.positioned_word import PositionedWord
from .word_extraction import extract_positioned_words

logger = logging.getLogger(__name__)

PDFSource = Union[str, Path, bytes, BinaryIO]


class PDFReadError(Exception):
    """Raised when PDF reading fails."""
    pass


def _open(source: PDFSource):
    if isinstance(source, bytes):
        return pdfplumber.open(io.BytesIO(source))
    if isinstance(source, Path):
        return pdfplumber.open(str(source))
    return pdfplumber.open(source)


def read_positioned_words(
    source: PDFSource,
    page_range: Optional[Tuple[int, Optional[int]]] = None,
    use_fonts: Optional[Iterable[int]] = None,
) -> List[PositionedWord]:
    """Read a PDF and extract positioned words from all selected pages.

    Args:
        source: Path to PDF file, raw PDF bytes, or binary file object
        page_range: Inclusive (first, last) pages; last=None means unbounded
        use_fonts: Word heights to keep (None keeps every word)

    Returns:
        Positioned words in reading order, page by page

    Raises:
        PDFReadError: If PDF cannot be read or is corrupt
        FileNotFoundError: If a path source does not exist
    """
    if isinstance(source, (str, Path)) and not Path(source).exists():
        raise FileNotFoundError(f"PDF file not found: {source}")

    first, last = page_range if page_range else (1, None)
    fonts = set(use_fonts) if use_fonts is not None else None

    try:
        with _open(source) as pdf:
            words: List[PositionedWord] = []
            for page_number, pdfplumber_page in enumerate(pdf.pages, start=1):
                if page_number < first:
                    continue
                if last is not None and page_number > last:
                    break
                page_words = extract_positioned_words(pdfplumber_page, page_number)
                if fonts is not None:
                    page_words = [w for w in page_words if w.height in fonts]
                words.extend(page_words)
    except Exception as e:
        raise PDFReadError(f"Failed to read PDF: {e}") from e

    logger.debug("Read %d positioned words", len(words))
    return words


def words_to_text(words: Iterable[PositionedWord]) -> str:
    """Join word texts with single spaces (original order)."""
    return " ".join(w.text for w in words)
