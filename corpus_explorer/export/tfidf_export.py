"""Export of TF-IDF tables to Excel or CSV."""

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

# Excel limits sheet names to 31 chars and forbids []:*?/\
_SHEET_NAME_INVALID = re.compile(r"[\[\]:*?/\\]")


def _sheet_name(name: str, used: set) -> str:
    base = _SHEET_NAME_INVALID.sub("_", name)[:31] or "sheet"
    candidate = base
    i = 2
    while candidate in used:
        suffix = f"_{i}"
        candidate = base[:31 - len(suffix)] + suffix
        i += 1
    used.add(candidate)
    return candidate


def export_tfidf(tfidf: pd.DataFrame, output_path: Union[str, Path]) -> str:
    """Write a TF-IDF (or term-count) table to disk.

    Args:
        tfidf: Table to export
        output_path: Target file; .xlsx writes Excel (openpyxl), anything else CSV

    Returns:
        Path to created file
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == ".xlsx":
        tfidf.to_excel(path, index=False, sheet_name="tf_idf", engine="openpyxl")
    else:
        tfidf.to_csv(path, index=False, encoding="utf-8")

    logger.info(f"Exported {len(tfidf)} rows to {path}")
    return str(path)


def export_top_terms(
    top: pd.DataFrame,
    output_path: Union[str, Path],
    categories: Optional[Dict[str, Optional[str]]] = None,
) -> str:
    """Write top terms to an Excel workbook with one sheet per category.

    Args:
        top: Output of top_terms (doc_id, word, n, tf, idf, tf_idf)
        output_path: Target .xlsx file
        categories: Optional mapping doc_id -> category; documents without a
            category go to an "uncategorized" sheet. Without a mapping all rows
            go to a single "top_terms" sheet.

    Returns:
        Path to created file
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if not categories:
        groups = {"top_terms": top}
    else:
        labels = top["doc_id"].map(lambda d: categories.get(d) or "uncategorized")
        groups = {label: frame for label, frame in top.groupby(labels, sort=False)}
        if not groups:
            groups = {"top_terms": top}

    used: set = set()
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for label, frame in groups.items():
            frame.to_excel(writer, index=False, sheet_name=_sheet_name(str(label), used))

    logger.info(f"Exported top terms for {top['doc_id'].nunique()} documents to {path}")
    return str(path)
