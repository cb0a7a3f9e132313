"""TF-IDF scoring over term-count rows."""

import logging
from typing import Iterable, Tuple, Union

import numpy as np
import pandas as pd

from .corpus import COUNT_COLUMNS

logger = logging.getLogger(__name__)

TFIDF_COLUMNS = ["doc_id", "word", "n", "tf", "idf", "tf_idf"]

CountRows = Union[pd.DataFrame, Iterable[Tuple[str, str, int]]]


def _as_count_frame(rows: CountRows) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        missing = [c for c in COUNT_COLUMNS if c not in rows.columns]
        if missing:
            raise ValueError(f"Term-count rows missing columns: {missing}")
        return rows[COUNT_COLUMNS].copy()
    return pd.DataFrame.from_records(list(rows), columns=COUNT_COLUMNS)


def compute_tfidf(rows: CountRows) -> pd.DataFrame:
    """Compute term frequency, inverse document frequency and their product.

    Args:
        rows: Term-count rows (doc_id, word, n) for the document set under
            consideration; a DataFrame or an iterable of tuples

    Returns:
        DataFrame with columns doc_id, word, n, tf, idf, tf_idf in input order

    Algorithm:
    - K_doc = sum of n per doc_id; tf = n / K_doc
    - df = number of distinct doc_ids containing the word
    - J = number of distinct doc_ids in these rows (not a global constant)
    - idf = ln(J / df); tf_idf = tf * idf

    Note:
        Rows with n <= 0 are dropped first, so a document with no occurrences
        never reaches the tf denominator and does not count towards J.
    """
    counts = _as_count_frame(rows)
    if counts.empty:
        return pd.DataFrame(columns=TFIDF_COLUMNS).astype(
            {"n": "int64", "tf": "float64", "idf": "float64", "tf_idf": "float64"}
        )

    counts["n"] = counts["n"].astype("int64")
    non_positive = counts["n"] <= 0
    if non_positive.any():
        logger.debug("Dropping %d rows with n <= 0", int(non_positive.sum()))
        counts = counts[~non_positive]

    if counts.duplicated(["doc_id", "word"]).any():
        counts = counts.groupby(["doc_id", "word"], sort=False, as_index=False)["n"].sum()

    counts = counts.reset_index(drop=True)

    doc_totals = counts.groupby("doc_id", sort=False)["n"].transform("sum")
    counts["tf"] = counts["n"] / doc_totals

    n_docs = counts["doc_id"].nunique()
    doc_freq = counts.groupby("word", sort=False)["doc_id"].transform("nunique")
    counts["idf"] = np.log(n_docs / doc_freq)
    counts["tf_idf"] = counts["tf"] * counts["idf"]

    logger.debug("TF-IDF over %d documents, %d rows", n_docs, len(counts))
    return counts[TFIDF_COLUMNS]


def rank_terms(tfidf: pd.DataFrame, ascending: bool = False) -> pd.DataFrame:
    """Sort TF-IDF rows by tf_idf; ties keep input order."""
    return tfidf.sort_values("tf_idf", ascending=ascending, kind="stable").reset_index(drop=True)


def top_terms(tfidf: pd.DataFrame, n: int = 10, per_document: bool = True) -> pd.DataFrame:
    """Highest-scoring terms per document (or over the whole table).

    Args:
        tfidf: Output of compute_tfidf
        n: Number of terms to keep per group
        per_document: Group by doc_id when True, rank globally when False

    Returns:
        Per document: documents in input order, terms by descending tf_idf
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")

    ranked = rank_terms(tfidf)
    if not per_document:
        return ranked.head(n)

    order = {d: i for i, d in enumerate(pd.unique(tfidf["doc_id"]))}
    top = ranked.groupby("doc_id", sort=False).head(n)
    return top.sort_values("doc_id", key=lambda s: s.map(order), kind="stable").reset_index(drop=True)
