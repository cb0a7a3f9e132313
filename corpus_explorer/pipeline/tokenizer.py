"""Word tokenization: raw document text to normalized, stemmed word tokens."""

import logging
import re
from typing import Callable, Iterable, List, Mapping, Optional, Union

import pandas as pd
from nltk.stem.snowball import SnowballStemmer

from ..models.document import Document

logger = logging.getLogger(__name__)

Stemmer = Callable[[str], str]

TOKEN_COLUMNS = ["doc_id", "word"]

_ALPHA_ONLY = re.compile(r"^[a-z]+$")

_default_stemmer: Optional[Stemmer] = None


def get_default_stemmer() -> Stemmer:
    """Get the shared English Snowball (Porter2) stemmer."""
    global _default_stemmer
    if _default_stemmer is None:
        _default_stemmer = SnowballStemmer("english").stem
    return _default_stemmer


def tokenize_text(text: str, stemmer: Optional[Stemmer] = None) -> List[str]:
    """Split text into normalized word tokens.

    Args:
        text: Raw document text
        stemmer: Optional stemming function applied to each kept token

    Returns:
        Tokens in original order

    Algorithm:
    - Split on whitespace and lowercase each token
    - Keep only tokens matching ^[a-z]+$ (digits, punctuation, accents rejected)
    - Apply stemmer
    """
    if not text:
        return []

    tokens = []
    for raw in text.split():
        token = raw.lower()
        if not _ALPHA_ONLY.match(token):
            continue
        tokens.append(stemmer(token) if stemmer else token)
    return tokens


def tokenize_documents(
    documents: Union[Mapping[str, str], Iterable[Document]],
    stemmer: Optional[Stemmer] = None,
    stem: bool = True,
) -> pd.DataFrame:
    """Tokenize a set of documents into a (doc_id, word) occurrence table.

    Args:
        documents: Mapping doc_id -> text, or iterable of Document objects
        stemmer: Stemming function (default: English Snowball stemmer)
        stem: Set False to skip stemming entirely

    Returns:
        DataFrame with columns doc_id, word; document order, then token order
    """
    if stem and stemmer is None:
        stemmer = get_default_stemmer()
    elif not stem:
        stemmer = None

    if isinstance(documents, Mapping):
        items = list(documents.items())
    else:
        items = [(doc.doc_id, doc.text) for doc in documents]

    records = []
    for doc_id, text in items:
        words = tokenize_text(text, stemmer)
        if not words:
            logger.info("Document %r produced no tokens", doc_id)
        records.extend((doc_id, word) for word in words)

    return pd.DataFrame.from_records(records, columns=TOKEN_COLUMNS)


def title_words(doc_ids: Iterable[str], stemmer: Optional[Stemmer] = None, stem: bool = True) -> set:
    """Tokenize document names into the set of words they contain.

    Document names often use underscores (e.g. "Golden_Retriever"), so these
    are treated as spaces before tokenizing.
    """
    if stem and stemmer is None:
        stemmer = get_default_stemmer()
    elif not stem:
        stemmer = None

    words = set()
    for doc_id in doc_ids:
        words.update(tokenize_text(str(doc_id).replace("_", " "), stemmer))
    return words
