"""SQLite storage layer for Quarry.

Holds the derived tables of the last run: term_counts, rank_frequency,
tfidf, cooccurrence, correlations and corpus_stats.  Every run replaces them
in full; nothing is updated incrementally.
"""

from __future__ import annotations

import sqlite3

import pandas as pd

DEFAULT_DB_PATH = "quarry.db"
DEFAULT_TOP_N = 10

TABLES = ("term_counts", "rank_frequency", "tfidf", "cooccurrence", "correlations")

_TABLE_ORDER = {
    "term_counts": "document_id, term",
    "rank_frequency": "document_id, rank",
    "tfidf": "tfidf_score DESC, document_id, term",
    "cooccurrence": "pair_count DESC, term_a, term_b",
    "correlations": "correlation DESC, term_a, term_b",
}


class QuarryStore:
    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        self.conn = sqlite3.connect(db_path)
        self.conn.row_factory = sqlite3.Row
        self._init_tables()

    # ── Schema ──────────────────────────────────────────────────────

    def _init_tables(self) -> None:
        stmts = [
            """CREATE TABLE IF NOT EXISTS term_counts (
                document_id    TEXT    NOT NULL,
                term           TEXT    NOT NULL,
                raw_count      INTEGER NOT NULL,
                document_total INTEGER NOT NULL,
                PRIMARY KEY (document_id, term)
            )""",
            """CREATE TABLE IF NOT EXISTS rank_frequency (
                document_id    TEXT    NOT NULL,
                term           TEXT    NOT NULL,
                raw_count      INTEGER NOT NULL,
                rank           INTEGER NOT NULL,
                term_frequency REAL    NOT NULL,
                PRIMARY KEY (document_id, term)
            )""",
            """CREATE TABLE IF NOT EXISTS tfidf (
                document_id                TEXT    NOT NULL,
                term                       TEXT    NOT NULL,
                raw_count                  INTEGER NOT NULL,
                document_total             INTEGER NOT NULL,
                term_frequency             REAL    NOT NULL,
                inverse_document_frequency REAL    NOT NULL,
                tfidf_score                REAL    NOT NULL,
                PRIMARY KEY (document_id, term)
            )""",
            """CREATE TABLE IF NOT EXISTS cooccurrence (
                term_a     TEXT    NOT NULL,
                term_b     TEXT    NOT NULL,
                pair_count INTEGER NOT NULL,
                PRIMARY KEY (term_a, term_b),
                CHECK (term_a < term_b)
            )""",
            """CREATE TABLE IF NOT EXISTS correlations (
                term_a      TEXT NOT NULL,
                term_b      TEXT NOT NULL,
                correlation REAL NOT NULL,
                PRIMARY KEY (term_a, term_b),
                CHECK (term_a < term_b)
            )""",
            """CREATE TABLE IF NOT EXISTS corpus_stats (
                id              INTEGER PRIMARY KEY CHECK (id = 1),
                name            TEXT    NOT NULL,
                total_documents INTEGER NOT NULL,
                skipped         INTEGER NOT NULL,
                tfidf_field     TEXT    NOT NULL,
                pair_field      TEXT    NOT NULL,
                tfidf_top_n     INTEGER NOT NULL,
                pair_top_n      INTEGER NOT NULL
            )""",
        ]
        cur = self.conn.cursor()
        for stmt in stmts:
            cur.execute(stmt)
        self.conn.commit()

    # ── Writes ──────────────────────────────────────────────────────

    def replace_all(
        self,
        term_counts: list[dict],
        rank_frequency: list[dict],
        tfidf: list[dict],
        cooccurrence: list[dict],
        correlations: list[dict],
        stats: dict,
    ) -> None:
        """Swap in a complete run's tables in one transaction."""
        with self.conn:
            for table in TABLES:
                self.conn.execute(f"DELETE FROM {table}")
            self.conn.executemany(
                "INSERT INTO term_counts (document_id, term, raw_count, document_total) "
                "VALUES (:document_id, :term, :raw_count, :document_total)",
                term_counts,
            )
            self.conn.executemany(
                "INSERT INTO rank_frequency (document_id, term, raw_count, rank, term_frequency) "
                "VALUES (:document_id, :term, :raw_count, :rank, :term_frequency)",
                rank_frequency,
            )
            self.conn.executemany(
                "INSERT INTO tfidf (document_id, term, raw_count, document_total, "
                "term_frequency, inverse_document_frequency, tfidf_score) "
                "VALUES (:document_id, :term, :raw_count, :document_total, "
                ":term_frequency, :inverse_document_frequency, :tfidf_score)",
                tfidf,
            )
            self.conn.executemany(
                "INSERT INTO cooccurrence (term_a, term_b, pair_count) "
                "VALUES (:term_a, :term_b, :pair_count)",
                cooccurrence,
            )
            self.conn.executemany(
                "INSERT INTO correlations (term_a, term_b, correlation) "
                "VALUES (:term_a, :term_b, :correlation)",
                correlations,
            )
            self.conn.execute(
                "INSERT OR REPLACE INTO corpus_stats "
                "(id, name, total_documents, skipped, tfidf_field, pair_field, tfidf_top_n, pair_top_n) "
                "VALUES (1, :name, :total_documents, :skipped, :tfidf_field, :pair_field, "
                ":tfidf_top_n, :pair_top_n)",
                stats,
            )

    # ── Reads ───────────────────────────────────────────────────────

    def top_tfidf(self, limit: int = 10, document_id: str | None = None) -> list[dict]:
        sql = "SELECT * FROM tfidf"
        params: list = []
        if document_id is not None:
            sql += " WHERE document_id = ?"
            params.append(document_id)
        sql += " ORDER BY tfidf_score DESC, term, document_id LIMIT ?"
        params.append(limit)
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]

    def _top_pairs(self, table: str, order_col: str, limit: int, term: str | None) -> list[dict]:
        sql = f"SELECT * FROM {table}"
        params: list = []
        if term is not None:
            sql += " WHERE term_a = ? OR term_b = ?"
            params.extend([term, term])
        sql += f" ORDER BY {order_col} DESC, term_a, term_b LIMIT ?"
        params.append(limit)
        return [dict(r) for r in self.conn.execute(sql, params).fetchall()]

    def top_pairs(self, limit: int = 10) -> list[dict]:
        return self._top_pairs("cooccurrence", "pair_count", limit, None)

    def top_correlations(self, limit: int = 10, term: str | None = None) -> list[dict]:
        return self._top_pairs("correlations", "correlation", limit, term)

    def get_corpus_stats(self) -> dict | None:
        row = self.conn.execute("SELECT * FROM corpus_stats WHERE id = 1").fetchone()
        return dict(row) if row else None

    def rows(self, table: str) -> list[dict]:
        """Every row of a stored table, in its export order."""
        if table not in TABLES:
            raise ValueError(f"unknown table '{table}', expected one of {list(TABLES)}")
        sql = f"SELECT * FROM {table} ORDER BY {_TABLE_ORDER[table]}"
        return [dict(r) for r in self.conn.execute(sql).fetchall()]

    def read_table(self, table: str) -> pd.DataFrame:
        if table not in TABLES:
            raise ValueError(f"unknown table '{table}', expected one of {list(TABLES)}")
        cur = self.conn.execute(f"SELECT * FROM {table} ORDER BY {_TABLE_ORDER[table]}")
        columns = [d[0] for d in cur.description]
        return pd.DataFrame.from_records([tuple(r) for r in cur.fetchall()], columns=columns)

    def export_csv(self, table: str, path: str) -> int:
        """Write a stored table to CSV.  Returns the row count."""
        frame = self.read_table(table)
        frame.to_csv(path, index=False)
        return len(frame)

    # ── Utilities ──────────────────────────────────────────────────

    def close(self) -> None:
        self.conn.close()
