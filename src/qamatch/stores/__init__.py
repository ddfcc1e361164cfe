# src/qamatch/stores/__init__.py
"""Storage abstractions for qamatch."""

from qamatch.stores.base import CorpusStore
from qamatch.stores.json_file import JSONCorpusStore

__all__ = [
    "CorpusStore",
    "JSONCorpusStore",
]
