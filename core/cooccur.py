"""Pairwise co-occurrence of terms within documents.

Each document contributes its *set* of distinct terms: a term repeated
inside one document still counts once.  A document with k distinct terms
adds k·(k−1)/2 pair increments, so cost is quadratic per document.

Pairs are keyed with the lexicographically smaller term first; (a, b) and
(b, a) are the same record and (a, a) never occurs.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import asdict, dataclass
from itertools import combinations

from core.corpus import TokenizedCorpus


@dataclass(frozen=True)
class CoOccurrence:
    term_a: str
    term_b: str
    pair_count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Correlation:
    term_a: str
    term_b: str
    correlation: float

    def to_dict(self) -> dict:
        return asdict(self)


def canonical_pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a <= b else (b, a)


def _pair_counter(corpus: TokenizedCorpus) -> Counter[tuple[str, str]]:
    counter: Counter[tuple[str, str]] = Counter()
    for _, terms in corpus.term_sets():
        # sorted() makes every emitted pair canonical
        counter.update(combinations(sorted(terms), 2))
    return counter


def pairwise_count(corpus: TokenizedCorpus, min_count: int = 1) -> list[CoOccurrence]:
    """Count documents shared by each pair of distinct terms.

    Returns rows with ``pair_count >= min_count``, highest count first.
    """
    rows = [
        CoOccurrence(a, b, n)
        for (a, b), n in _pair_counter(corpus).items()
        if n >= min_count
    ]
    rows.sort(key=lambda r: (-r.pair_count, r.term_a, r.term_b))
    return rows


def partners(pairs: list[CoOccurrence], term: str, k: int = 10) -> list[tuple[str, int]]:
    """Top-k terms that co-occur with ``term``."""
    matches: list[tuple[str, int]] = []
    for row in pairs:
        if row.term_a == term:
            matches.append((row.term_b, row.pair_count))
        elif row.term_b == term:
            matches.append((row.term_a, row.pair_count))
    matches.sort(key=lambda x: (-x[1], x[0]))
    return matches[:k]


def pairwise_correlation(corpus: TokenizedCorpus, min_df: int = 1) -> list[Correlation]:
    """Phi coefficient between the document-presence vectors of two terms.

    Only terms found in at least ``min_df`` documents take part.  Terms
    present in every document have zero variance and are skipped.  Pairs
    that never co-occur are not reported.  Strongest correlation first.
    """
    n_docs = corpus.document_count
    if n_docs == 0:
        return []

    doc_freq: Counter[str] = Counter()
    for _, terms in corpus.term_sets():
        doc_freq.update(terms)
    eligible = {t for t, df in doc_freq.items() if min_df <= df < n_docs}

    rows: list[Correlation] = []
    for (a, b), both in _pair_counter(corpus).items():
        if a not in eligible or b not in eligible:
            continue
        df_a, df_b = doc_freq[a], doc_freq[b]
        numerator = n_docs * both - df_a * df_b
        denominator = math.sqrt(df_a * (n_docs - df_a) * df_b * (n_docs - df_b))
        rows.append(Correlation(a, b, numerator / denominator))

    rows.sort(key=lambda r: (-r.correlation, r.term_a, r.term_b))
    return rows
