"""In-memory corpus table of (document, word) occurrences."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

import pandas as pd

from ..models.document import Document
from ..pipeline.tokenizer import TOKEN_COLUMNS, Stemmer, tokenize_documents

logger = logging.getLogger(__name__)

COUNT_COLUMNS = ["doc_id", "word", "n"]


class Corpus:
    """In-memory store for tokenized documents.

    The token table keeps one row per occurrence. Documents that produced no
    tokens are still members of the corpus (see empty_documents) but add no rows.
    """

    def __init__(self, doc_ids: Iterable[str], tokens: pd.DataFrame, categories: Optional[Dict[str, Optional[str]]] = None):
        """Initialize corpus.

        Args:
            doc_ids: Ordered, unique document ids
            tokens: DataFrame with columns doc_id, word
            categories: Optional mapping doc_id -> category label
        """
        self._doc_ids: List[str] = list(doc_ids)
        if len(set(self._doc_ids)) != len(self._doc_ids):
            raise ValueError("Corpus doc_ids must be unique")

        missing = [c for c in TOKEN_COLUMNS if c not in tokens.columns]
        if missing:
            raise ValueError(f"Token table missing columns: {missing}")

        unknown = set(tokens["doc_id"]) - set(self._doc_ids)
        if unknown:
            raise ValueError(f"Tokens reference unknown documents: {sorted(unknown)}")

        self._tokens = tokens[TOKEN_COLUMNS].reset_index(drop=True)
        self._categories: Dict[str, Optional[str]] = {d: None for d in self._doc_ids}
        if categories:
            self._categories.update({k: v for k, v in categories.items() if k in self._categories})

    @classmethod
    def from_documents(
        cls,
        documents: Iterable[Document],
        stemmer: Optional[Stemmer] = None,
        stem: bool = True,
    ) -> Corpus:
        """Tokenize documents and build a corpus."""
        documents = list(documents)
        tokens = tokenize_documents(documents, stemmer=stemmer, stem=stem)
        return cls(
            doc_ids=[d.doc_id for d in documents],
            tokens=tokens,
            categories={d.doc_id: d.category for d in documents},
        )

    @property
    def doc_ids(self) -> List[str]:
        return list(self._doc_ids)

    @property
    def categories(self) -> Dict[str, Optional[str]]:
        return dict(self._categories)

    @property
    def tokens(self) -> pd.DataFrame:
        return self._tokens.copy()

    def __len__(self) -> int:
        return len(self._doc_ids)

    def category_of(self, doc_id: str) -> Optional[str]:
        return self._categories[doc_id]

    def empty_documents(self) -> List[str]:
        """Documents that contribute zero token rows."""
        present = set(self._tokens["doc_id"])
        return [d for d in self._doc_ids if d not in present]

    def count_words(self) -> pd.DataFrame:
        """Aggregate occurrences into term-count rows.

        Returns:
            DataFrame with columns doc_id, word, n (n >= 1, unique per pair),
            in document order, then first-appearance order within a document
        """
        if self._tokens.empty:
            return pd.DataFrame(columns=COUNT_COLUMNS).astype({"n": "int64"})
        counts = (
            self._tokens.groupby(["doc_id", "word"], sort=False)
            .size()
            .reset_index(name="n")
        )
        order = {d: i for i, d in enumerate(self._doc_ids)}
        counts = counts.sort_values("doc_id", key=lambda s: s.map(order), kind="stable")
        return counts.reset_index(drop=True)

    def word_totals(self) -> pd.DataFrame:
        """Corpus-wide word frequencies, most frequent first (ties keep first appearance)."""
        if self._tokens.empty:
            return pd.DataFrame(columns=["word", "n"]).astype({"n": "int64"})
        totals = self._tokens.groupby("word", sort=False).size().reset_index(name="n")
        return totals.sort_values("n", ascending=False, kind="stable").reset_index(drop=True)

    def subset(self, doc_ids: Optional[Iterable[str]] = None, category: Optional[str] = None) -> Corpus:
        """Return a new corpus restricted to doc_ids and/or a category.

        Args:
            doc_ids: Documents to keep (None keeps all)
            category: Category to keep (None keeps all)

        Raises:
            KeyError: If a requested doc_id is not in the corpus
        """
        keep = list(self._doc_ids)
        if doc_ids is not None:
            wanted = set(doc_ids)
            unknown = wanted - set(self._doc_ids)
            if unknown:
                raise KeyError(f"Unknown documents: {sorted(unknown)}")
            keep = [d for d in keep if d in wanted]
        if category is not None:
            keep = [d for d in keep if self._categories.get(d) == category]

        if not keep:
            logger.warning("Subset (doc_ids=%s, category=%s) is empty", doc_ids, category)

        tokens = self._tokens[self._tokens["doc_id"].isin(keep)]
        return Corpus(keep, tokens, {d: self._categories[d] for d in keep})

    def without_words(self, words: Iterable[str]) -> Corpus:
        """Return a new corpus with every occurrence of the given words removed."""
        drop = set(words)
        tokens = self._tokens[~self._tokens["word"].isin(drop)]
        logger.debug("Removed %d occurrences of %d words", len(self._tokens) - len(tokens), len(drop))
        return Corpus(self._doc_ids, tokens, self._categories)
