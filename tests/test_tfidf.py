"""
Tests for tf-idf scoring.
"""

from __future__ import annotations

import math

import pytest

from core.corpus import TokenizedCorpus
from core.errors import EmptyCorpusError, InternalConsistencyError
from core.frequency import TermCount, TermCountTable, count_terms
from core.tfidf import bind_tf_idf, top_terms


def _by_key(rows):
    return {(r.document_id, r.term): r for r in rows}


def test_scenario_scores(cat_dog_corpus):
    scored = _by_key(bind_tf_idf(count_terms(cat_dog_corpus)))

    cat = scored[("doc1", "cat")]
    assert cat.term_frequency == 0.5
    assert cat.inverse_document_frequency == pytest.approx(math.log(2))
    assert cat.tfidf_score == pytest.approx(0.3466, abs=1e-4)

    sat = scored[("doc1", "sat")]
    assert sat.inverse_document_frequency == 0.0
    assert sat.tfidf_score == 0.0
    assert scored[("doc2", "dog")].tfidf_score == pytest.approx(cat.tfidf_score)


def test_empty_documents_count_towards_n():
    corpus = TokenizedCorpus("text", {"d1": ("cat", "sat"), "d2": ("dog", "sat"), "d3": ()})
    scored = _by_key(bind_tf_idf(count_terms(corpus)))
    assert scored[("d1", "sat")].inverse_document_frequency == pytest.approx(math.log(3 / 2))
    assert len(scored) == 4


def test_properties_hold():
    corpus = TokenizedCorpus(
        "text",
        {
            "a": ("x", "y", "x", "w"),
            "b": ("x", "y"),
            "c": ("x", "z", "z"),
        },
    )
    table = count_terms(corpus)
    rows = bind_tf_idf(table)
    n = table.document_count
    df = {"x": 3, "y": 2, "w": 1, "z": 1}

    for r in rows:
        assert r.tfidf_score >= 0
        assert r.tfidf_score == pytest.approx(r.term_frequency * r.inverse_document_frequency)
        assert 1 <= df[r.term] <= n
        assert (r.inverse_document_frequency == 0) == (df[r.term] == n)


def test_empty_corpus_raises():
    with pytest.raises(EmptyCorpusError):
        bind_tf_idf(TermCountTable(counts=[], totals={}))


def test_zero_total_with_positive_count_raises():
    table = TermCountTable(counts=[TermCount("d", "x", 1, 0)], totals={"d": 0})
    with pytest.raises(InternalConsistencyError):
        bind_tf_idf(table)


def test_counts_disagreeing_with_totals_raise():
    table = TermCountTable(
        counts=[TermCount("d", "x", 1, 3), TermCount("d", "y", 1, 3)],
        totals={"d": 3},
    )
    with pytest.raises(InternalConsistencyError):
        bind_tf_idf(table)


def test_rerun_is_identical(cat_dog_corpus):
    table = count_terms(cat_dog_corpus)
    assert bind_tf_idf(table) == bind_tf_idf(table)


def test_top_terms_overall_and_per_document():
    corpus = TokenizedCorpus(
        "text",
        {
            "a": ("apple", "apple", "pear"),
            "b": ("pear", "plum"),
            "c": ("kiwi",),
        },
    )
    rows = bind_tf_idf(count_terms(corpus))

    best = top_terms(rows, n=1)
    assert [(r.document_id, r.term) for r in best] == [("c", "kiwi")]

    per_doc = top_terms(rows, n=1, per_document=True)
    assert {r.document_id: r.term for r in per_doc} == {"a": "apple", "b": "plum", "c": "kiwi"}
