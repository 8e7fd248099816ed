"""
Tests for pairwise co-occurrence counts and correlations.
"""

from __future__ import annotations

import pytest

from core.cooccur import (
    CoOccurrence,
    canonical_pair,
    pairwise_correlation,
    pairwise_count,
    partners,
)
from core.corpus import TokenizedCorpus


def test_scenario_pairs(cat_dog_corpus):
    pairs = pairwise_count(cat_dog_corpus)
    assert pairs == [CoOccurrence("cat", "sat", 1), CoOccurrence("dog", "sat", 1)]
    assert partners(pairs, "cat") == [("sat", 1)]


def test_pairs_are_canonical_and_symmetric():
    corpus = TokenizedCorpus("text", {"a": ("zeta", "alpha"), "b": ("alpha", "zeta")})
    pairs = pairwise_count(corpus)
    assert pairs == [CoOccurrence("alpha", "zeta", 2)]
    assert partners(pairs, "zeta") == [("alpha", 2)]
    assert partners(pairs, "alpha") == [("zeta", 2)]
    assert canonical_pair("b", "a") == ("a", "b")


def test_repeats_within_a_document_count_once():
    corpus = TokenizedCorpus("text", {"a": ("x", "y", "x", "y", "x")})
    assert pairwise_count(corpus) == [CoOccurrence("x", "y", 1)]


def test_no_self_pairs_and_bounded_by_document_frequency():
    corpus = TokenizedCorpus(
        "text",
        {
            "a": ("x", "y", "z"),
            "b": ("x", "y"),
            "c": ("x",),
            "d": ("z", "z"),
        },
    )
    df = {"x": 3, "y": 2, "z": 2}
    pairs = pairwise_count(corpus)
    assert all(r.term_a < r.term_b for r in pairs)
    for r in pairs:
        assert r.pair_count <= min(df[r.term_a], df[r.term_b])
    assert pairs[0] == CoOccurrence("x", "y", 2)


def test_pairs_sorted_and_filtered():
    corpus = TokenizedCorpus(
        "text",
        {"a": ("p", "q", "r"), "b": ("p", "q"), "c": ("q", "r")},
    )
    pairs = pairwise_count(corpus)
    assert [r.pair_count for r in pairs] == [2, 2, 1]
    assert [(r.term_a, r.term_b) for r in pairs[:2]] == [("p", "q"), ("q", "r")]

    assert pairwise_count(corpus, min_count=2) == pairs[:2]


def test_quadratic_pairs_per_document():
    corpus = TokenizedCorpus("text", {"a": tuple("abcde")})
    assert len(pairwise_count(corpus)) == 10


def test_partners():
    corpus = TokenizedCorpus(
        "text",
        {"a": ("ice", "sea", "ocean"), "b": ("ice", "sea"), "c": ("ice", "land")},
    )
    pairs = pairwise_count(corpus)
    assert partners(pairs, "ice") == [("sea", 2), ("land", 1), ("ocean", 1)]
    assert partners(pairs, "ice", k=1) == [("sea", 2)]
    assert partners(pairs, "missing") == []


def test_pairwise_correlation():
    corpus = TokenizedCorpus(
        "text",
        {
            "d1": ("a", "b"),
            "d2": ("a", "b"),
            "d3": ("c", "a"),
            "d4": ("c",),
        },
    )
    rows = pairwise_correlation(corpus)
    by_pair = {(r.term_a, r.term_b): r.correlation for r in rows}
    # a: 3 docs, b: 2 docs, c: 2 docs
    assert by_pair[("a", "b")] == pytest.approx((4 * 2 - 3 * 2) / (3 * 1 * 2 * 2) ** 0.5)
    assert by_pair[("a", "c")] == pytest.approx((4 * 1 - 3 * 2) / (3 * 1 * 2 * 2) ** 0.5)
    assert ("b", "c") not in by_pair
    assert rows[0].term_a == "a" and rows[0].term_b == "b"


def test_correlation_skips_rare_and_universal_terms():
    corpus = TokenizedCorpus(
        "text",
        {"d1": ("all", "x", "y"), "d2": ("all", "x", "y"), "d3": ("all", "z")},
    )
    rows = pairwise_correlation(corpus, min_df=2)
    assert [(r.term_a, r.term_b) for r in rows] == [("x", "y")]
    assert rows[0].correlation == pytest.approx(1.0)
    assert pairwise_correlation(TokenizedCorpus("text", {})) == []
