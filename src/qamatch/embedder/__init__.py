# src/qamatch/embedder/__init__.py
"""Embedding functionality for qamatch."""

from qamatch.embedder.base import Embedder
from qamatch.embedder.client import ClientEmbedder

__all__ = ["Embedder", "ClientEmbedder"]
