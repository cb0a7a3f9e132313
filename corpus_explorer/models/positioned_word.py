"""Positioned word model: a PDF word with page, position and font height."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PositionedWord:
    """Represents a word extracted from a PDF page with spatial information.

    Coordinate system:
    - Origin (0, 0) is top-left corner of the page
    - X increases rightward
    - Y increases downward

    Attributes:
        page: Page number (starts at 1)
        x: X-coordinate (left edge)
        y: Y-coordinate (top edge)
        width: Word width
        height: Word height (tracks font size; used for heading detection)
        text: The word text
        has_trailing_space: True if another word follows on the same line
        line: Document-global line number (None until assign_line_numbers runs)
    """

    page: int
    x: int
    y: int
    width: int
    height: int
    text: str
    has_trailing_space: bool = False
    line: Optional[int] = None

    def __post_init__(self):
        """Validate page number and dimensions."""
        if self.page < 1:
            raise ValueError(f"Page number must be >= 1, got {self.page}")
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Word dimensions must be non-negative: "
                f"width={self.width}, height={self.height}"
            )
