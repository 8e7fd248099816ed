"""Pipeline: loads a corpus, tokenizes it, builds every output table and
stores them in SQLite.

Tables are all computed before anything is written, so a failing run
leaves the previous run's tables untouched.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from core.cooccur import CoOccurrence, Correlation, pairwise_correlation, pairwise_count
from core.corpus import Document, IngestReport, load_corpus, tokenize_corpus
from core.errors import ConfigError, EmptyCorpusError
from core.frequency import RankFrequency, TermCount, count_terms, rank_frequency
from core.store import DEFAULT_TOP_N, QuarryStore
from core.text import StopWords, build_stop_words
from core.tfidf import TfIdf, bind_tf_idf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    term_counts: list[TermCount]
    rank_frequency: list[RankFrequency]
    tfidf: list[TfIdf]
    cooccurrence: list[CoOccurrence]
    correlations: list[Correlation]
    total_documents: int


# ── Config ──────────────────────────────────────────────────────────

def load_config(config_path: str) -> dict:
    """Read a config and resolve its relative paths against its directory."""
    path = Path(config_path)
    try:
        config = json.loads(path.read_text())
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

    base = path.parent
    corpus = config.get("corpus") or {}
    if "path" in corpus and not Path(corpus["path"]).is_absolute():
        corpus["path"] = str(base / corpus["path"])
    sw = config.get("stop_words") or {}
    sw["files"] = [f if Path(f).is_absolute() else str(base / f) for f in sw.get("files", [])]
    config["stop_words"] = sw
    return config


def stop_words_from_config(config: dict) -> StopWords:
    sw = config.get("stop_words") or {}
    return build_stop_words(
        base=sw.get("base", True),
        custom=sw.get("custom", []),
        files=sw.get("files", []),
        drop_numeric=sw.get("drop_numeric", False),
    )


# ── Analysis ────────────────────────────────────────────────────────

def analyze(
    documents: list[Document],
    tfidf_field: str,
    pair_field: str,
    stop_words: StopWords | None = None,
    min_count: int = 1,
    correlation_min_df: int = 1,
    filter_keywords: bool = False,
) -> AnalysisResult:
    """Compute every table for an in-memory corpus.

    Raises EmptyCorpusError when there are no documents.
    """
    if not documents:
        raise EmptyCorpusError("no documents to analyze")

    tfidf_tokens = tokenize_corpus(documents, tfidf_field, stop_words, filter_keywords)
    if pair_field == tfidf_field:
        pair_tokens = tfidf_tokens
    else:
        pair_tokens = tokenize_corpus(documents, pair_field, stop_words, filter_keywords)

    table = count_terms(tfidf_tokens)
    return AnalysisResult(
        term_counts=table.counts,
        rank_frequency=rank_frequency(table),
        tfidf=bind_tf_idf(table),
        cooccurrence=pairwise_count(pair_tokens, min_count=min_count),
        correlations=pairwise_correlation(pair_tokens, min_df=correlation_min_df),
        total_documents=table.document_count,
    )


# ── Main entry point ───────────────────────────────────────────────

def run_analysis(config: dict, store: QuarryStore) -> dict:
    """Run a loaded config end to end and store the tables.

    Returns a summary dict with counts.
    """
    documents, report = load_corpus(config["corpus"])
    logger.info("Loaded %d documents (%d skipped)", report.accepted, report.skipped)

    co_cfg = config["cooccurrence"]
    result = analyze(
        documents,
        tfidf_field=config["tfidf"]["field"],
        pair_field=co_cfg["field"],
        stop_words=stop_words_from_config(config),
        min_count=co_cfg.get("min_count", 1),
        correlation_min_df=co_cfg.get("correlation_min_df", 1),
        filter_keywords=(config.get("stop_words") or {}).get("filter_keywords", False),
    )

    store.replace_all(
        term_counts=[r.to_dict() for r in result.term_counts],
        rank_frequency=[r.to_dict() for r in result.rank_frequency],
        tfidf=[r.to_dict() for r in result.tfidf],
        cooccurrence=[r.to_dict() for r in result.cooccurrence],
        correlations=[r.to_dict() for r in result.correlations],
        stats={
            "name": config["name"],
            "total_documents": result.total_documents,
            "skipped": report.skipped,
            "tfidf_field": config["tfidf"]["field"],
            "pair_field": co_cfg["field"],
            "tfidf_top_n": config["tfidf"].get("top_n", DEFAULT_TOP_N),
            "pair_top_n": co_cfg.get("top_n", DEFAULT_TOP_N),
        },
    )

    return _summary(result, report)


def _summary(result: AnalysisResult, report: IngestReport) -> dict:
    return {
        "documents": result.total_documents,
        "skipped": report.skipped,
        "terms": len({r.term for r in result.term_counts}),
        "term_counts": len(result.term_counts),
        "pairs": len(result.cooccurrence),
        "correlations": len(result.correlations),
    }
