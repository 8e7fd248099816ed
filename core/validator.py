"""Two-level analysis config validation: syntactic, semantic.

Syntactic = structure and types.
Semantic  = cross-field consistency and the corpus path existing on disk.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.corpus import KEYWORDS

VALID_FORMATS = {"json", "csv", "text"}


def _is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _is_pos_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


# ── Syntactic Validation ────────────────────────────────────────────

def validate_syntactic(config: dict) -> list[str]:
    """Check required fields and types.  Returns list of error strings."""
    errors: list[str] = []

    if not isinstance(config.get("name"), str) or not config["name"]:
        errors.append("'name' is required and must be a non-empty string.")

    corpus = config.get("corpus")
    if not isinstance(corpus, dict):
        errors.append("'corpus' is required and must be an object.")
        return errors  # can't check children

    if not isinstance(corpus.get("path"), str) or not corpus["path"]:
        errors.append("'corpus.path' is required and must be a non-empty string.")

    fmt = corpus.get("format", "json")
    if fmt not in VALID_FORMATS:
        errors.append(f"'corpus.format' must be one of {sorted(VALID_FORMATS)}, got '{fmt}'.")

    for key in ("id_field", "keyword_field", "records_key", "keyword_sep", "pattern"):
        if key in corpus and not isinstance(corpus[key], str):
            errors.append(f"'corpus.{key}' must be a string.")

    if "text_fields" in corpus and (not _is_str_list(corpus["text_fields"]) or not corpus["text_fields"]):
        errors.append("'corpus.text_fields' must be a non-empty list of strings.")

    if "strict" in corpus and not isinstance(corpus["strict"], bool):
        errors.append("'corpus.strict' must be a boolean.")

    # Stop words block (optional)
    sw = config.get("stop_words")
    if sw is not None:
        if not isinstance(sw, dict):
            errors.append("'stop_words' must be an object if provided.")
        else:
            for key in ("base", "drop_numeric", "filter_keywords"):
                if key in sw and not isinstance(sw[key], bool):
                    errors.append(f"'stop_words.{key}' must be a boolean.")
            for key in ("custom", "files"):
                if key in sw and not _is_str_list(sw[key]):
                    errors.append(f"'stop_words.{key}' must be a list of strings.")

    # tfidf block
    tfidf = config.get("tfidf")
    if not isinstance(tfidf, dict):
        errors.append("'tfidf' is required and must be an object.")
    else:
        if not isinstance(tfidf.get("field"), str) or not tfidf["field"]:
            errors.append("'tfidf.field' is required and must be a non-empty string.")
        if "top_n" in tfidf and not _is_pos_int(tfidf["top_n"]):
            errors.append("'tfidf.top_n' must be a positive integer.")

    # cooccurrence block
    co = config.get("cooccurrence")
    if not isinstance(co, dict):
        errors.append("'cooccurrence' is required and must be an object.")
    else:
        if not isinstance(co.get("field"), str) or not co["field"]:
            errors.append("'cooccurrence.field' is required and must be a non-empty string.")
        for key in ("min_count", "top_n", "correlation_min_df"):
            if key in co and not _is_pos_int(co[key]):
                errors.append(f"'cooccurrence.{key}' must be a positive integer.")

    return errors


# ── Semantic Validation ─────────────────────────────────────────────

def validate_semantic(config: dict, base_dir: Path | None = None) -> list[str]:
    """Check cross-field logical consistency."""
    errors: list[str] = []
    corpus = config["corpus"]
    fmt = corpus.get("format", "json")

    path = Path(corpus["path"])
    if base_dir is not None and not path.is_absolute():
        path = base_dir / path
    if fmt == "text":
        if not path.is_dir():
            errors.append(f"'corpus.path' must be a directory for format 'text': {corpus['path']}")
    elif not path.is_file():
        errors.append(f"Corpus file not found: {corpus['path']}")

    if fmt == "text":
        text_fields = corpus.get("text_fields", ["text"])
    else:
        text_fields = corpus.get("text_fields")

    has_keywords = bool(corpus.get("keyword_field"))
    if fmt == "text" and has_keywords:
        errors.append("'corpus.keyword_field' is not supported for format 'text'.")

    for block in ("tfidf", "cooccurrence"):
        name = config[block]["field"]
        if name == KEYWORDS:
            if not has_keywords:
                errors.append(
                    f"'{block}.field' is '{KEYWORDS}' but 'corpus.keyword_field' is not set."
                )
        elif text_fields is not None and name not in text_fields:
            errors.append(
                f"'{block}.field' is '{name}', which is not one of "
                f"'corpus.text_fields' {text_fields} or '{KEYWORDS}'."
            )

    for f in (config.get("stop_words") or {}).get("files", []):
        fp = Path(f)
        if base_dir is not None and not fp.is_absolute():
            fp = base_dir / fp
        if not fp.is_file():
            errors.append(f"Stop-word file not found: {f}")

    return errors


# ── Top-level validate ──────────────────────────────────────────────

def validate_config(config_path: str) -> tuple[bool, list[str]]:
    """Run syntactic + semantic validation on a config file.

    Relative paths inside the config resolve against the config's directory.
    Returns (passed, errors).
    """
    path = Path(config_path)
    try:
        config = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        return False, [f"Invalid JSON: {e}"]
    except FileNotFoundError:
        return False, [f"Config file not found: {config_path}"]

    if not isinstance(config, dict):
        return False, ["Config must be a JSON object."]

    syn_errors = validate_syntactic(config)
    if syn_errors:
        return False, syn_errors

    sem_errors = validate_semantic(config, base_dir=path.parent)
    if sem_errors:
        return False, sem_errors

    return True, []
