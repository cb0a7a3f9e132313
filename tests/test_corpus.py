"""Unit tests for the in-memory corpus table."""

import pandas as pd
import pytest

from corpus_explorer.analysis.corpus import Corpus
from corpus_explorer.models.document import Document


@pytest.fixture
def pets_corpus():
    """Small corpus with two categories and one empty document."""
    docs = [
        Document(doc_id="rex", text="dog barks dog runs", category="dogs"),
        Document(doc_id="fido", text="dog sleeps", category="dogs"),
        Document(doc_id="tom", text="cat sleeps", category="cats"),
        Document(doc_id="blank", text="", category="cats"),
    ]
    return Corpus.from_documents(docs, stem=False)


def test_from_documents_keeps_document_order(pets_corpus):
    assert pets_corpus.doc_ids == ["rex", "fido", "tom", "blank"]
    assert len(pets_corpus) == 4
    assert pets_corpus.category_of("tom") == "cats"


def test_empty_document_is_member_without_rows(pets_corpus):
    """Documents without tokens stay in the corpus but add no rows."""
    assert pets_corpus.empty_documents() == ["blank"]
    assert "blank" not in set(pets_corpus.tokens["doc_id"])


def test_count_words_aggregates_per_pair(pets_corpus):
    counts = pets_corpus.count_words()

    assert list(counts.columns) == ["doc_id", "word", "n"]
    assert list(counts.itertuples(index=False, name=None)) == [
        ("rex", "dog", 2), ("rex", "barks", 1), ("rex", "runs", 1),
        ("fido", "dog", 1), ("fido", "sleeps", 1),
        ("tom", "cat", 1), ("tom", "sleeps", 1),
    ]
    assert not counts.duplicated(["doc_id", "word"]).any()
    assert (counts["n"] >= 1).all()


def test_count_words_on_empty_corpus():
    corpus = Corpus.from_documents([Document(doc_id="a", text="")])
    counts = corpus.count_words()
    assert counts.empty
    assert list(counts.columns) == ["doc_id", "word", "n"]


def test_word_totals_most_frequent_first(pets_corpus):
    totals = pets_corpus.word_totals()
    assert totals.iloc[0]["word"] == "dog"
    assert totals.iloc[0]["n"] == 3
    assert totals["n"].sum() == len(pets_corpus.tokens)


def test_subset_by_category(pets_corpus):
    dogs = pets_corpus.subset(category="dogs")
    assert dogs.doc_ids == ["rex", "fido"]
    assert set(dogs.tokens["doc_id"]) == {"rex", "fido"}
    # original corpus is untouched
    assert len(pets_corpus) == 4


def test_subset_by_doc_ids_keeps_corpus_order(pets_corpus):
    subset = pets_corpus.subset(doc_ids=["tom", "rex"])
    assert subset.doc_ids == ["rex", "tom"]


def test_subset_unknown_doc_raises(pets_corpus):
    with pytest.raises(KeyError):
        pets_corpus.subset(doc_ids=["nope"])


def test_without_words_removes_all_occurrences(pets_corpus):
    trimmed = pets_corpus.without_words({"dog"})
    assert "dog" not in set(trimmed.tokens["word"])
    assert trimmed.doc_ids == pets_corpus.doc_ids
    assert trimmed.categories == pets_corpus.categories


def test_duplicate_doc_ids_rejected():
    tokens = pd.DataFrame(columns=["doc_id", "word"])
    with pytest.raises(ValueError, match="unique"):
        Corpus(["a", "a"], tokens)


def test_tokens_for_unknown_document_rejected():
    tokens = pd.DataFrame([("b", "x")], columns=["doc_id", "word"])
    with pytest.raises(ValueError, match="unknown documents"):
        Corpus(["a"], tokens)
