"""Shared text normalization for tokenization and stop-word filtering.

Every table is built from the same token stream, so text fields and
keyword tags must be normalized in exactly one place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from core.errors import ConfigError

BASE_STOP_WORDS = frozenset(
    "a about above after again against all am an and any are aren't as at be "
    "because been before being below between both but by can can't cannot could "
    "couldn't did didn't do does doesn't doing don't down during each few for "
    "from further had hadn't has hasn't have haven't having he he'd he'll he's "
    "her here here's hers herself him himself his how how's i i'd i'll i'm i've "
    "if in into is isn't it it's its itself let's me more most mustn't my myself "
    "no nor not of off on once only or other ought our ours ourselves out over "
    "own same shan't she she'd she'll she's should shouldn't so some such than "
    "that that's the their theirs them themselves then there there's these they "
    "they'd they'll they're they've this those through to too under until up "
    "very was wasn't we we'd we'll we're we've were weren't what what's when "
    "when's where where's which while who who's whom why why's will with won't "
    "would wouldn't you you'd you'll you're you've your yours yourself yourselves".split()
)

_WORD_RE = re.compile(r"[^\W_]+(?:'[^\W_]+)*")


def _fold_apostrophes(text: str) -> str:
    return text.replace("’", "'")


@dataclass(frozen=True)
class StopWords:
    """A stop-word set plus the rule for purely numeric tokens."""

    words: frozenset[str] = frozenset()
    drop_numeric: bool = False

    def __contains__(self, token: str) -> bool:
        if self.drop_numeric and token.isdigit():
            return True
        return token in self.words

    def __len__(self) -> int:
        return len(self.words)

    def merge(self, *others: StopWords) -> StopWords:
        words = set(self.words)
        drop_numeric = self.drop_numeric
        for other in others:
            words |= other.words
            drop_numeric = drop_numeric or other.drop_numeric
        return StopWords(frozenset(words), drop_numeric)

    @classmethod
    def from_words(cls, words: Iterable[str], drop_numeric: bool = False) -> StopWords:
        normalized = (normalize_tag(w) for w in words)
        return cls(frozenset(w for w in normalized if w), drop_numeric)

    @classmethod
    def base(cls) -> StopWords:
        return cls(BASE_STOP_WORDS)


def load_stop_words(path: str) -> StopWords:
    """Read one stop word per line; blank lines and ``#`` comments are ignored."""
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except UnicodeDecodeError as e:
        raise ConfigError(f"{path}: not valid UTF-8 ({e.reason} at byte {e.start})") from e
    return StopWords.from_words(line.split("#", 1)[0] for line in lines)


def build_stop_words(
    base: bool = True,
    custom: Iterable[str] = (),
    files: Iterable[str] = (),
    drop_numeric: bool = False,
) -> StopWords:
    """Merge the base list with custom words and stop-word files."""
    sources = [StopWords.from_words(custom, drop_numeric=drop_numeric)]
    sources.extend(load_stop_words(f) for f in files)
    start = StopWords.base() if base else StopWords()
    return start.merge(*sources)


def tokenize(text: str | None, stop_words: StopWords | None = None) -> list[str]:
    """Lowercase → extract word runs → drop stop words."""
    if not text:
        return []
    tokens = _WORD_RE.findall(_fold_apostrophes(text.lower()))
    if stop_words is None:
        return tokens
    return [t for t in tokens if t not in stop_words]


def normalize_tag(tag: str | None) -> str:
    """Keyword tags are whole tokens: trimmed, inner whitespace collapsed, lowercased."""
    if not tag:
        return ""
    return _fold_apostrophes(" ".join(tag.split()).lower())
