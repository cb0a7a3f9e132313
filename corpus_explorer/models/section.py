"""Section data model: body words belonging to one heading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from .heading import Heading
    from .positioned_word import PositionedWord


@dataclass
class Section:
    """Represents the body of a document section.

    Important: words is the source of truth; text is CONVENIENCE only.

    Attributes:
        heading: Heading that opens this section
        words: Body words in (page, line, x) order
    """

    heading: Heading
    words: List[PositionedWord] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Body word texts joined by single spaces."""
        return " ".join(w.text for w in self.words)

    @property
    def page_start(self) -> int:
        return self.heading.page

    @property
    def page_end(self) -> int:
        if not self.words:
            return self.heading.page
        return max(w.page for w in self.words)
