"""Batch corpus building with isolated handling per source document."""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..analysis.corpus import Corpus
from ..fetch.fetcher import DocumentFetcher, FetchFailure
from ..models.document import Document
from ..models.source import MalformedDescriptorError, SourceDescriptor
from ..pipeline.heading_segmentation import SegmenterConfig, sections_to_documents, segment_sections
from ..pipeline.reader import read_positioned_words
from ..pipeline.text_splitting import split_document
from ..pipeline.tokenizer import Stemmer

logger = logging.getLogger(__name__)


def fetch_document_isolated(
    raw_descriptor: Union[Dict[str, Any], SourceDescriptor],
    fetcher: DocumentFetcher,
    base_url: Optional[str] = None,
) -> Dict:
    """Fetch a single source in isolation.

    Args:
        raw_descriptor: Descriptor dict from a profile (or a SourceDescriptor)
        fetcher: Shared fetcher (keeps the inter-request delay)
        base_url: Optional prefix for relative urls

    Returns:
        Dict with processing results:
        - name: Document name (or a repr of the descriptor if it has none)
        - status: OK / EMPTY / FAILED / INVALID
        - documents: Document objects (one, or one per part when the
          descriptor has a split_pattern; empty for FAILED and INVALID)
        - error: Error message (FAILED and INVALID only)
    """
    try:
        if isinstance(raw_descriptor, SourceDescriptor):
            descriptor = raw_descriptor
        else:
            descriptor = SourceDescriptor.from_dict(raw_descriptor, base_url=base_url)
    except MalformedDescriptorError as e:
        logger.warning("%s", e)
        return {"name": e.identity, "status": "INVALID", "documents": [], "error": str(e)}

    try:
        document = fetcher.fetch(descriptor)
    except FetchFailure as e:
        logger.warning("%s", e)
        return {"name": descriptor.name, "status": "FAILED", "documents": [], "error": str(e)}

    if document.is_empty:
        logger.warning("Document %r has no extractable text", descriptor.name)
        return {"name": descriptor.name, "status": "EMPTY", "documents": [document], "error": None}

    documents = [document]
    if descriptor.split_pattern:
        try:
            documents = split_document(document, descriptor.split_pattern)
        except ValueError as e:
            logger.warning("%s", e)
            return {"name": descriptor.name, "status": "INVALID", "documents": [], "error": str(e)}

    return {"name": descriptor.name, "status": "OK", "documents": documents, "error": None}


def build_corpus(
    descriptors: Iterable[Union[Dict[str, Any], SourceDescriptor]],
    fetcher: DocumentFetcher,
    stemmer: Optional[Stemmer] = None,
    stem: bool = True,
    base_url: Optional[str] = None,
    fail_fast: bool = False,
) -> Dict:
    """Fetch every source sequentially and build a corpus from what succeeded.

    Args:
        descriptors: Raw descriptor dicts or SourceDescriptor objects
        fetcher: DocumentFetcher used for every source, in order
        stemmer: Optional stemming function (default English Snowball)
        stem: Set False to skip stemming
        base_url: Optional prefix for relative urls
        fail_fast: Stop on first FAILED or INVALID entry if True

    Returns:
        Dict with batch results:
        - total, ok, empty, failed, invalid: counts
        - results: List of per-source result dicts (without Document objects)
        - corpus: Corpus over OK and EMPTY documents
    """
    descriptors = list(descriptors)
    stats = {"total": len(descriptors), "ok": 0, "empty": 0, "failed": 0, "invalid": 0}
    results: List[Dict] = []
    documents: List[Document] = []
    seen = set()

    for i, raw in enumerate(descriptors, start=1):
        result = fetch_document_isolated(raw, fetcher, base_url=base_url)
        logger.info("Source %d/%d %s: %s", i, stats["total"], result["name"], result["status"])

        fetched = result.pop("documents")
        duplicates = [d.doc_id for d in fetched if d.doc_id in seen]
        if duplicates:
            result = {
                "name": result["name"],
                "status": "INVALID",
                "error": f"Duplicate document name: {', '.join(duplicates)}",
            }
            fetched = []
        results.append(result)
        stats[result["status"].lower()] += 1

        if fetched:
            seen.update(d.doc_id for d in fetched)
            documents.extend(fetched)
        elif fail_fast:
            break

    corpus = Corpus.from_documents(documents, stemmer=stemmer, stem=stem)
    return {**stats, "results": results, "corpus": corpus}


def build_section_corpus(
    source: Union[str, Path, bytes],
    config: SegmenterConfig,
    category: Optional[str] = None,
    stemmer: Optional[Stemmer] = None,
    stem: bool = True,
) -> Corpus:
    """Segment a PDF into sections and build a corpus with one document per section.

    Args:
        source: PDF path or bytes
        config: Segmenter settings (heading size is document specific)
        category: Optional category for every section document
    """
    words = read_positioned_words(source)
    sections = segment_sections(words, config)
    documents = sections_to_documents(sections, category=category)
    return Corpus.from_documents(documents, stemmer=stemmer, stem=stem)
