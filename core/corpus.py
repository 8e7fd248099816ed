"""Corpus ingestion and tokenization.

Documents arrive as loosely-typed rows (JSON metadata records, CSV rows,
plain-text files).  Ingestion is tolerant: rows without a usable id are
skipped and counted rather than aborting the run.  Tokenization turns one
field of every document into an ordered token sequence keyed by document id.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

import pandas as pd

from core.errors import ConfigError, MalformedDocumentError
from core.text import StopWords, normalize_tag, tokenize

logger = logging.getLogger(__name__)

KEYWORDS = "keywords"
DEFAULT_KEYWORD_SEP = ";"


@dataclass(frozen=True)
class Document:
    id: str
    fields: dict[str, str] = field(default_factory=dict)
    keywords: tuple[str, ...] = ()

    def text(self, name: str) -> str:
        return self.fields.get(name, "")


@dataclass
class IngestReport:
    accepted: int = 0
    skipped: int = 0
    reasons: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TokenizedCorpus:
    """Tokens of one field, per document, in ingestion order.

    Documents whose field produced no tokens are kept with an empty tuple so
    they still count towards the corpus size.
    """

    field: str
    documents: dict[str, tuple[str, ...]]

    @property
    def document_count(self) -> int:
        return len(self.documents)

    def records(self) -> Iterator[tuple[str, str]]:
        """One (document_id, token) pair per token occurrence."""
        for doc_id, tokens in self.documents.items():
            for token in tokens:
                yield doc_id, token

    def term_sets(self) -> Iterator[tuple[str, frozenset[str]]]:
        for doc_id, tokens in self.documents.items():
            yield doc_id, frozenset(tokens)


# ── Ingestion ───────────────────────────────────────────────────────

def _resolve(row: dict, path: str) -> Any:
    """Look up a dotted path such as ``_id.$oid``."""
    value: Any = row
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return " ".join(_as_text(v) for v in value)
    return str(value)


def _as_tags(value: Any, sep: str) -> tuple[str, ...]:
    if value is None:
        return ()
    items = value.split(sep) if isinstance(value, str) else value
    if not isinstance(items, (list, tuple)):
        return ()
    tags = (normalize_tag(t) for t in items if isinstance(t, str))
    return tuple(t for t in tags if t)


def ingest_rows(
    rows: Iterable[dict],
    id_field: str = "id",
    text_fields: list[str] | None = None,
    keyword_field: str | None = None,
    keyword_sep: str = DEFAULT_KEYWORD_SEP,
    strict: bool = False,
) -> tuple[list[Document], IngestReport]:
    """Build Documents from raw rows.

    Rows with a missing/blank id, or an id already seen, are skipped and
    reported.  With ``strict=True`` they raise MalformedDocumentError instead.
    """
    documents: list[Document] = []
    report = IngestReport()
    seen: set[str] = set()

    for position, row in enumerate(rows):
        raw_id = _resolve(row, id_field) if isinstance(row, dict) else None
        doc_id = str(raw_id).strip() if raw_id is not None else ""

        reason = None
        if not doc_id:
            reason = f"row {position}: missing '{id_field}'"
        elif doc_id in seen:
            reason = f"row {position}: duplicate id '{doc_id}'"

        if reason is not None:
            if strict:
                raise MalformedDocumentError(reason)
            report.skipped += 1
            report.reasons.append(reason)
            continue

        if text_fields is None:
            names = [
                k for k, v in row.items()
                if k not in (id_field.split(".")[0], keyword_field) and isinstance(v, str)
            ]
        else:
            names = text_fields

        seen.add(doc_id)
        documents.append(
            Document(
                id=doc_id,
                fields={name: _as_text(_resolve(row, name)) for name in names},
                keywords=_as_tags(_resolve(row, keyword_field), keyword_sep) if keyword_field else (),
            )
        )

    report.accepted = len(documents)
    if report.skipped:
        logger.warning(
            "Skipped %d malformed document(s) of %d", report.skipped, report.skipped + report.accepted
        )
        for reason in report.reasons:
            logger.debug("Skipped %s", reason)
    return documents, report


# ── Loaders ─────────────────────────────────────────────────────────

def load_json_rows(path: str, records_key: str | None = None) -> list[dict]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"{path}: invalid JSON: {e}") from e
    if isinstance(data, dict):
        if not records_key or not isinstance(data.get(records_key), list):
            raise ConfigError(f"{path}: expected a list under '{records_key}'")
        data = data[records_key]
    if not isinstance(data, list):
        raise ConfigError(f"{path}: expected a JSON array of records")
    return data


def load_csv_rows(path: str) -> list[dict]:
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ConfigError(f"{path}: unreadable CSV: {e}") from e
    return frame.to_dict(orient="records")


def _read_text_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e


def load_text_rows(directory: str, pattern: str = "*.txt") -> list[dict]:
    """One row per text file: id is the file stem, the body goes in ``text``."""
    return [
        {"id": p.stem, "text": _read_text_file(p)}
        for p in sorted(Path(directory).glob(pattern))
    ]


def load_corpus(corpus_cfg: dict) -> tuple[list[Document], IngestReport]:
    """Load and ingest the corpus described by a config's ``corpus`` block."""
    fmt = corpus_cfg.get("format", "json")
    path = corpus_cfg["path"]

    if fmt == "json":
        rows = load_json_rows(path, corpus_cfg.get("records_key"))
    elif fmt == "csv":
        rows = load_csv_rows(path)
    elif fmt == "text":
        rows = load_text_rows(path, corpus_cfg.get("pattern", "*.txt"))
    else:
        raise ConfigError(f"Unknown corpus format '{fmt}'")

    return ingest_rows(
        rows,
        id_field=corpus_cfg.get("id_field", "id"),
        text_fields=corpus_cfg.get("text_fields", ["text"] if fmt == "text" else None),
        keyword_field=corpus_cfg.get("keyword_field"),
        keyword_sep=corpus_cfg.get("keyword_sep", DEFAULT_KEYWORD_SEP),
        strict=corpus_cfg.get("strict", False),
    )


# ── Tokenization ────────────────────────────────────────────────────

def tokenize_corpus(
    documents: Iterable[Document],
    field: str,
    stop_words: StopWords | None = None,
    filter_keywords: bool = False,
) -> TokenizedCorpus:
    """Tokenize one field of every document.

    ``field="keywords"`` uses the keyword tags as whole tokens; stop words
    only apply to them when ``filter_keywords`` is set.
    """
    tokens: dict[str, tuple[str, ...]] = {}
    for doc in documents:
        if field == KEYWORDS:
            tags = doc.keywords
            if filter_keywords and stop_words is not None:
                tags = tuple(t for t in tags if t not in stop_words)
            tokens[doc.id] = tags
        else:
            tokens[doc.id] = tuple(tokenize(doc.text(field), stop_words))

    empty = sum(1 for t in tokens.values() if not t)
    logger.debug("Tokenized %r: %d documents, %d without tokens", field, len(tokens), empty)
    return TokenizedCorpus(field=field, documents=tokens)
