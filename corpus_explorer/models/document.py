"""Document data model representing one text unit of a corpus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Document:
    """Represents a single corpus document.

    Attributes:
        doc_id: Unique document name within a corpus
        text: Raw document text (may be empty)
        category: Optional category label (e.g. "dogs")
        source_url: Optional URL or path the text was fetched from
    """

    doc_id: str
    text: str
    category: Optional[str] = None
    source_url: Optional[str] = None

    def __post_init__(self):
        """Validate that doc_id is set."""
        if not self.doc_id or not str(self.doc_id).strip():
            raise ValueError("Document doc_id must be a non-empty string")

    @property
    def is_empty(self) -> bool:
        """True when the document has no extractable text."""
        return not self.text or not self.text.strip()
