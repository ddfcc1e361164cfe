# src/qamatch/providers/litellm/__init__.py
"""LiteLLM provider client for qamatch.

Usage:
    from qamatch.providers.litellm import LiteLLMEmbeddingClient, EmbeddingModels

    client = LiteLLMEmbeddingClient(model=EmbeddingModels.TEXT_3_SMALL)
"""

from qamatch.providers.litellm.client import LiteLLMEmbeddingClient
from qamatch.providers.litellm.models import EmbeddingModels

__all__ = [
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
]
