"""TF-IDF scoring over a TermCount table.

  tf    = raw_count / document_total
  df    = number of documents containing the term
  idf   = ln(N / df)
  score = tf × idf

N counts every ingested document, including those left empty after
stop-word removal.  A term found in all N documents scores 0.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import asdict, dataclass

from core.errors import EmptyCorpusError, InternalConsistencyError
from core.frequency import TermCountTable, document_frequencies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TfIdf:
    document_id: str
    term: str
    raw_count: int
    document_total: int
    term_frequency: float
    inverse_document_frequency: float
    tfidf_score: float

    def to_dict(self) -> dict:
        return asdict(self)


def _check_totals(table: TermCountTable) -> None:
    sums: dict[str, int] = defaultdict(int)
    for row in table.counts:
        if row.raw_count <= 0:
            raise InternalConsistencyError(
                f"non-positive raw_count {row.raw_count} for ({row.document_id!r}, {row.term!r})"
            )
        if row.document_total <= 0:
            raise InternalConsistencyError(
                f"document {row.document_id!r} has total {row.document_total} "
                f"but term {row.term!r} occurs {row.raw_count} time(s)"
            )
        if table.totals.get(row.document_id) != row.document_total:
            raise InternalConsistencyError(
                f"document {row.document_id!r}: row total {row.document_total} "
                f"!= corpus total {table.totals.get(row.document_id)}"
            )
        sums[row.document_id] += row.raw_count

    for doc_id, total in table.totals.items():
        if sums.get(doc_id, 0) != total:
            raise InternalConsistencyError(
                f"document {doc_id!r}: counts sum to {sums.get(doc_id, 0)}, total is {total}"
            )


def bind_tf_idf(table: TermCountTable) -> list[TfIdf]:
    """Score every (document, term) row of ``table``.

    Raises EmptyCorpusError when the table covers no documents and
    InternalConsistencyError when counts and totals disagree.
    """
    n_docs = table.document_count
    if n_docs == 0:
        raise EmptyCorpusError("cannot compute tf-idf over an empty corpus")

    _check_totals(table)

    doc_freq = document_frequencies(table.counts)
    idf = {term: math.log(n_docs / df) for term, df in doc_freq.items()}

    scored: list[TfIdf] = []
    for row in table.counts:
        tf = row.raw_count / row.document_total
        scored.append(
            TfIdf(
                document_id=row.document_id,
                term=row.term,
                raw_count=row.raw_count,
                document_total=row.document_total,
                term_frequency=tf,
                inverse_document_frequency=idf[row.term],
                tfidf_score=tf * idf[row.term],
            )
        )

    logger.debug("Scored %d rows over %d documents, %d terms", len(scored), n_docs, len(idf))
    return scored


def top_terms(
    records: list[TfIdf],
    n: int = 10,
    per_document: bool = False,
) -> list[TfIdf]:
    """Highest tf-idf rows, overall or for each document.

    Ties are broken by term so the output is stable.
    """
    ordered = sorted(records, key=lambda r: (-r.tfidf_score, r.term, r.document_id))
    if not per_document:
        return ordered[:n]

    taken: dict[str, int] = defaultdict(int)
    out: list[TfIdf] = []
    for row in ordered:
        if taken[row.document_id] < n:
            taken[row.document_id] += 1
            out.append(row)
    return out
