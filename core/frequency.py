"""Term counting: raw (document, term) tallies and per-document totals."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass

from core.corpus import TokenizedCorpus


@dataclass(frozen=True)
class TermCount:
    document_id: str
    term: str
    raw_count: int
    document_total: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TermCountTable:
    """TermCount rows plus the corpus facts tf-idf needs.

    ``totals`` holds every document, including ones with zero tokens, so
    ``document_count`` is the true corpus size N.
    """

    counts: list[TermCount]
    totals: dict[str, int]

    @property
    def document_count(self) -> int:
        return len(self.totals)


@dataclass(frozen=True)
class RankFrequency:
    document_id: str
    term: str
    raw_count: int
    rank: int
    term_frequency: float

    def to_dict(self) -> dict:
        return asdict(self)


def count_terms(corpus: TokenizedCorpus) -> TermCountTable:
    """Tally each (document, term) pair.

    Rows follow document order, then each term's first appearance.
    """
    counts: list[TermCount] = []
    totals: dict[str, int] = {}

    for doc_id, tokens in corpus.documents.items():
        tally = Counter(tokens)
        total = sum(tally.values())
        totals[doc_id] = total
        for term, n in tally.items():
            counts.append(TermCount(doc_id, term, n, total))

    return TermCountTable(counts=counts, totals=totals)


def document_frequencies(counts: list[TermCount]) -> Counter[str]:
    """Number of distinct documents each term occurs in."""
    seen: set[tuple[str, str]] = set()
    doc_freq: Counter[str] = Counter()
    for row in counts:
        if row.raw_count <= 0:
            continue
        key = (row.document_id, row.term)
        if key not in seen:
            seen.add(key)
            doc_freq[row.term] += 1
    return doc_freq


def rank_frequency(table: TermCountTable) -> list[RankFrequency]:
    """Rank each document's terms by count (Zipf's law view).

    Ties share the order of the term's first appearance; ranks start at 1.
    """
    by_doc: dict[str, list[TermCount]] = {}
    for row in table.counts:
        by_doc.setdefault(row.document_id, []).append(row)

    out: list[RankFrequency] = []
    for doc_id, rows in by_doc.items():
        ordered = sorted(rows, key=lambda r: r.raw_count, reverse=True)
        for rank, row in enumerate(ordered, 1):
            out.append(
                RankFrequency(
                    document_id=doc_id,
                    term=row.term,
                    raw_count=row.raw_count,
                    rank=rank,
                    term_frequency=row.raw_count / row.document_total,
                )
            )
    return out
