# src/qamatch/stores/base.py
"""Abstract base class for corpus storage."""

from abc import ABC, abstractmethod

from qamatch.models import QAPair


class CorpusStore(ABC):
    """Abstract base class for durable QA corpus storage.

    The corpus is always read and written as a whole; there is no partial
    access.
    """

    @abstractmethod
    def load(self) -> list[QAPair]:
        """Read the full corpus in stored order.

        Raises DataLoadError if the source is unreadable, malformed, or
        violates the QA pair invariants. Never returns a partial result.
        """
        ...

    @abstractmethod
    def persist(self, pairs: list[QAPair]) -> None:
        """Write the full corpus, replacing the stored copy in one step.

        Raises DataPersistError on failure, leaving the stored copy intact.
        """
        ...

    @abstractmethod
    def describe(self) -> str:
        """Human-readable location of the corpus (for logs and messages)."""
        ...
