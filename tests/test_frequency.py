"""
Tests for term counting.
"""

from __future__ import annotations

from core.corpus import TokenizedCorpus
from core.frequency import TermCount, count_terms, document_frequencies, rank_frequency


def test_count_terms_scenario(cat_dog_corpus):
    table = count_terms(cat_dog_corpus)
    assert table.counts == [
        TermCount("doc1", "cat", 1, 2),
        TermCount("doc1", "sat", 1, 2),
        TermCount("doc2", "dog", 1, 2),
        TermCount("doc2", "sat", 1, 2),
    ]
    assert table.totals == {"doc1": 2, "doc2": 2}
    assert table.document_count == 2


def test_counts_sum_to_document_totals():
    corpus = TokenizedCorpus(
        "text",
        {
            "a": ("x", "y", "x", "z", "x"),
            "b": ("y", "y"),
            "c": (),
        },
    )
    table = count_terms(corpus)
    for doc_id, total in table.totals.items():
        assert sum(r.raw_count for r in table.counts if r.document_id == doc_id) == total
    assert table.totals["c"] == 0
    assert table.document_count == 3
    assert not [r for r in table.counts if r.document_id == "c"]
    assert TermCount("a", "x", 3, 5) in table.counts


def test_count_terms_is_deterministic():
    corpus = TokenizedCorpus("text", {"a": ("b", "a", "b"), "z": ("q",)})
    assert count_terms(corpus) == count_terms(corpus)
    assert [r.term for r in count_terms(corpus).counts] == ["b", "a", "q"]


def test_document_frequencies(cat_dog_corpus):
    df = document_frequencies(count_terms(cat_dog_corpus).counts)
    assert df == {"cat": 1, "sat": 2, "dog": 1}


def test_rank_frequency():
    corpus = TokenizedCorpus("text", {"a": ("x", "y", "x", "z", "x", "y")})
    ranks = rank_frequency(count_terms(corpus))
    assert [(r.term, r.rank) for r in ranks] == [("x", 1), ("y", 2), ("z", 3)]
    assert ranks[0].term_frequency == 0.5
