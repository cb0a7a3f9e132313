"""Document-global line numbering based on (page, y) alignment."""

from dataclasses import replace
from typing import Dict, List, Tuple

from ..models.positioned_word import PositionedWord


def assign_line_numbers(words: List[PositionedWord]) -> List[PositionedWord]:
    """Assign a document-global line number to every word.

    Args:
        words: Positioned words from one document (any order)

    Returns:
        New PositionedWord list with line set, sorted by (page, line, x)

    Algorithm:
    - Collect distinct (page, y) pairs
    - Sort them by page ascending, then y ascending
    - Number them 1..L; every word sharing a (page, y) pair shares the number
    - Sorting is stable, so words with equal (page, y, x) keep input order
    """
    if not words:
        return []

    keys = sorted({(w.page, w.y) for w in words})
    line_of: Dict[Tuple[int, int], int] = {key: i for i, key in enumerate(keys, start=1)}

    numbered = [replace(w, line=line_of[(w.page, w.y)]) for w in words]
    return sorted(numbered, key=lambda w: (w.page, w.line, w.x))
