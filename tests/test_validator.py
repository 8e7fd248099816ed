"""
Tests for analysis config validation.
"""

from __future__ import annotations

import json

import pytest

from core.validator import validate_config, validate_semantic, validate_syntactic


@pytest.fixture
def config() -> dict:
    return {
        "name": "demo",
        "corpus": {
            "path": "meta.json",
            "format": "json",
            "text_fields": ["title", "description"],
            "keyword_field": "keyword",
        },
        "stop_words": {"base": True, "custom": ["v1"], "drop_numeric": True},
        "tfidf": {"field": "description", "top_n": 5},
        "cooccurrence": {"field": "keywords", "min_count": 1},
    }


def test_shipped_configs_validate(workspace):
    for name in ("nasa.json", "physics.json"):
        passed, errors = validate_config(str(workspace / "configs" / name))
        assert passed, errors


def test_syntactic_ok(config):
    assert validate_syntactic(config) == []


def test_syntactic_errors(config):
    config["name"] = ""
    config["corpus"]["format"] = "xml"
    config["stop_words"]["base"] = "yes"
    config["tfidf"]["top_n"] = 0
    config["cooccurrence"]["min_count"] = True
    errors = validate_syntactic(config)
    assert len(errors) == 5
    assert any("'corpus.format'" in e for e in errors)


def test_syntactic_missing_blocks():
    errors = validate_syntactic({"name": "x", "corpus": {"path": "p"}})
    assert any("'tfidf'" in e for e in errors)
    assert any("'cooccurrence'" in e for e in errors)


def test_semantic_field_checks(config, tmp_path):
    (tmp_path / "meta.json").write_text("[]")
    assert validate_semantic(config, base_dir=tmp_path) == []

    config["tfidf"]["field"] = "abstract"
    del config["corpus"]["keyword_field"]
    errors = validate_semantic(config, base_dir=tmp_path)
    assert len(errors) == 2
    assert any("'tfidf.field' is 'abstract'" in e for e in errors)
    assert any("'corpus.keyword_field' is not set" in e for e in errors)


def test_semantic_missing_paths(config, tmp_path):
    config["stop_words"]["files"] = ["nope.txt"]
    errors = validate_semantic(config, base_dir=tmp_path)
    assert any("Corpus file not found" in e for e in errors)
    assert any("Stop-word file not found" in e for e in errors)


def test_validate_config_file_errors(tmp_path):
    passed, errors = validate_config(str(tmp_path / "absent.json"))
    assert not passed and "not found" in errors[0]

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    passed, errors = validate_config(str(bad))
    assert not passed and errors[0].startswith("Invalid JSON")

    arr = tmp_path / "arr.json"
    arr.write_text(json.dumps([1, 2]))
    assert validate_config(str(arr)) == (False, ["Config must be a JSON object."])
