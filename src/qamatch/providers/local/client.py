# src/qamatch/providers/local/client.py
"""Local embedding client using Sentence Transformers."""

from __future__ import annotations

import asyncio
from typing import Any

from qamatch.providers.base import EmbeddingClient

DEFAULT_LOCAL_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


class SentenceTransformerEmbeddingClient(EmbeddingClient):
    """Embedding client that runs a Sentence Transformers model in-process.

    Requires the sentence-transformers package: pip install qamatch[local]

    Example:
        from qamatch.providers.local import SentenceTransformerEmbeddingClient

        client = SentenceTransformerEmbeddingClient()
        embeddings = client.embed(["How do I reset my password?"])
    """

    _models: dict[str, Any] = {}

    def __init__(self, model: str = DEFAULT_LOCAL_MODEL, normalize: bool = True) -> None:
        """Initialize the client and load the model once per process.

        Args:
            model: Sentence Transformers model name or local path.
            normalize: Scale every vector to unit length.
        """
        from sentence_transformers import SentenceTransformer

        self.model_name = model
        self.normalize = normalize
        if model not in SentenceTransformerEmbeddingClient._models:
            SentenceTransformerEmbeddingClient._models[model] = SentenceTransformer(model)
        self._model = SentenceTransformerEmbeddingClient._models[model]

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings with the local model."""
        if not texts:
            return []
        vectors = self._model.encode(
            texts,
            convert_to_numpy=True,
            normalize_embeddings=self.normalize,
        )
        return vectors.tolist()

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings in a worker thread so the event loop keeps serving."""
        return await asyncio.to_thread(self.embed, texts)
