"""Splitting one plain-text document into parts at marker lines (acts, chapters)."""

import logging
import re
from typing import List

from ..models.document import Document

logger = logging.getLogger(__name__)


def split_document(document: Document, pattern: str) -> List[Document]:
    """Split a document at every match of a multiline regex.

    Args:
        document: Source document
        pattern: Regex matched per line (re.MULTILINE), e.g. r"^ACT [IVX]+"

    Returns:
        One Document per match, named "<doc_id> - <marker>", holding the text up
        to the next match. Text before the first match is dropped. Without any
        match the original document is returned unchanged.

    Raises:
        ValueError: If pattern is not a valid regex
    """
    try:
        regex = re.compile(pattern, re.MULTILINE)
    except re.error as e:
        raise ValueError(f"Invalid split pattern {pattern!r}: {e}") from e

    matches = list(regex.finditer(document.text))
    if not matches:
        logger.info("Split pattern %r matched nothing in %r", pattern, document.doc_id)
        return [document]

    parts = []
    seen = {}
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(document.text)
        marker = " ".join(match.group(0).split())
        count = seen.get(marker, 0) + 1
        seen[marker] = count
        doc_id = f"{document.doc_id} - {marker}" if count == 1 else f"{document.doc_id} - {marker} #{count}"
        parts.append(Document(
            doc_id=doc_id,
            text=document.text[match.end():end].strip(),
            category=document.category,
            source_url=document.source_url,
        ))
    return parts
