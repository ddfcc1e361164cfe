# src/qamatch/exceptions.py
"""Exceptions raised by the matching engine."""

from __future__ import annotations


class QAMatchError(Exception):
    """Base class for all qamatch errors."""


class DataLoadError(QAMatchError):
    """Raised when the corpus cannot be read, parsed, or validated.

    Attributes:
        source: Description of the corpus location that failed to load.
        problems: Individual validation problems, if any were collected.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        problems: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.problems = problems or []


class DataPersistError(QAMatchError):
    """Raised when the corpus cannot be written.

    The previously persisted corpus is left untouched when this is raised.
    """

    def __init__(self, message: str, destination: str | None = None) -> None:
        super().__init__(message)
        self.destination = destination


class EmbeddingError(QAMatchError):
    """Raised when the embedding provider fails.

    Attributes:
        errors: (position, exception) tuples for the texts that failed. Empty
            for single-text failures where the cause is chained instead.
    """

    def __init__(
        self,
        message: str,
        errors: list[tuple[int, BaseException]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []


class NotReadyError(QAMatchError):
    """Raised when the engine is queried before a corpus has been loaded."""


class ReloadInProgressError(QAMatchError):
    """Raised when a reload or mutation is requested while another is running."""
