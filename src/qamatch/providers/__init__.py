# src/qamatch/providers/__init__.py
"""Embedding provider implementations for qamatch.

This module contains embedding provider abstractions:
- EmbeddingClient: Abstract base class for embedding providers
- LiteLLM implementation (hosted APIs and self-hosted servers)
- Sentence Transformers implementation in qamatch.providers.local
  (requires: pip install qamatch[local])

Usage:
    from qamatch.providers import EmbeddingClient, LiteLLMEmbeddingClient
    from qamatch.providers.local import SentenceTransformerEmbeddingClient
"""

from qamatch.providers.base import EmbeddingClient
from qamatch.providers.litellm import EmbeddingModels, LiteLLMEmbeddingClient

__all__ = [
    "EmbeddingClient",
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
]
