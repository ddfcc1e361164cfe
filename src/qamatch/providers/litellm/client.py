# src/qamatch/providers/litellm/client.py
"""LiteLLM embedding client."""

from typing import Any

import litellm

from qamatch.providers.base import EmbeddingClient
from qamatch.providers.litellm.models import EmbeddingModels


class LiteLLMEmbeddingClient(EmbeddingClient):
    """LiteLLM-based embedding client.

    Supports any embedding model available through LiteLLM.

    Example:
        from qamatch.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
        embeddings = client.embed(["Hello world", "How are you?"])

        # With retry for rate-limited APIs
        client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL, num_retries=5)
    """

    def __init__(
        self,
        model: str = EmbeddingModels.TEXT_3_SMALL,
        num_retries: int = 3,
        api_key: str | None = None,
    ) -> None:
        """Initialize the LiteLLM embedding client.

        Args:
            model: LiteLLM embedding model identifier.
                   Examples: "openai/text-embedding-3-small", "gemini/gemini-embedding-001"
            num_retries: Number of retries on rate limit errors. LiteLLM handles
                        exponential backoff automatically. Default: 3.
            api_key: Optional API key. If None, LiteLLM reads the provider's
                     usual environment variable.
        """
        self.model = model
        self.num_retries = num_retries
        self.api_key = api_key

    def _request_kwargs(self, texts: list[str]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "input": texts,
            "num_retries": self.num_retries,
        }
        if self.api_key:
            kwargs["api_key"] = self.api_key
        return kwargs

    @staticmethod
    def _ordered(response: Any) -> list[list[float]]:
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x["index"])
        return [item["embedding"] for item in sorted_data]

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM."""
        if not texts:
            return []
        response = litellm.embedding(**self._request_kwargs(texts))
        return self._ordered(response)

    async def aembed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings using LiteLLM (async)."""
        if not texts:
            return []
        response = await litellm.aembedding(**self._request_kwargs(texts))
        return self._ordered(response)
