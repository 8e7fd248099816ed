from __future__ import annotations

from pathlib import Path

import pytest

from core.corpus import Document, TokenizedCorpus, tokenize_corpus
from core.text import StopWords

WORKSPACE = Path(__file__).resolve().parent.parent / "workspace"


@pytest.fixture
def cat_dog_docs() -> list[Document]:
    return [
        Document("doc1", {"text": "the cat sat"}),
        Document("doc2", {"text": "the dog sat"}),
    ]


@pytest.fixture
def cat_dog_corpus(cat_dog_docs) -> TokenizedCorpus:
    return tokenize_corpus(cat_dog_docs, "text", StopWords.from_words(["the"]))


@pytest.fixture
def workspace() -> Path:
    return WORKSPACE
