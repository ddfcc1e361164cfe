# src/qamatch/embedder/base.py
"""Embedder abstract base class."""

from abc import ABC, abstractmethod


class Embedder(ABC):
    """Abstract base class for embedding generation.

    This is the only capability the matching engine needs from a model:
    turn text into a fixed-length vector. Implementations should be
    deterministic for identical text and return vectors of constant
    dimensionality. Vectors do not need to be unit length.

    Subclasses must implement embed_text and embed_texts.
    """

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text."""
        ...

    @abstractmethod
    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for multiple texts (batched)."""
        ...

    async def aembed_text(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (async).

        Default implementation calls sync embed_text().
        Override in subclasses for true async behavior.
        """
        return self.embed_text(text)
