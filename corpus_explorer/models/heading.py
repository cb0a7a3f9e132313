"""Heading data model representing an inferred PDF section title."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Heading:
    """A run of heading-height words on contiguous lines.

    Attributes:
        head_id: Sequential id, 0-based in order of appearance
        page: Page where the heading starts
        line: Document-global line number where the heading starts
        text: Heading words joined by single spaces
    """

    head_id: int
    page: int
    line: int
    text: str

    def __post_init__(self):
        if self.head_id < 0:
            raise ValueError(f"head_id must be >= 0, got {self.head_id}")
