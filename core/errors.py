"""Exception types raised by the analysis core."""

from __future__ import annotations


class QuarryError(Exception):
    """Base class for all analysis failures."""


class EmptyCorpusError(QuarryError):
    """No documents were supplied, so N and df are undefined."""


class MalformedDocumentError(QuarryError):
    """A document row is missing its identifier (or repeats one)."""


class InternalConsistencyError(QuarryError):
    """Term tallies disagree with document totals."""


class ConfigError(QuarryError):
    """An analysis config could not be loaded."""
