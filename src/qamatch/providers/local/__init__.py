# src/qamatch/providers/local/__init__.py
"""In-process embedding client (requires: pip install qamatch[local])."""

from qamatch.providers.local.client import (
    DEFAULT_LOCAL_MODEL,
    SentenceTransformerEmbeddingClient,
)

__all__ = ["DEFAULT_LOCAL_MODEL", "SentenceTransformerEmbeddingClient"]
