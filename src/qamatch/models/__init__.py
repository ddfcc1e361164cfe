# src/qamatch/models/__init__.py
"""Data models for qamatch."""

from qamatch.models.qa import Answer, Difficulty, QAPair
from qamatch.models.record import EmbeddingRecord
from qamatch.models.results import CorpusStats, Match, MatchAll

__all__ = [
    "Answer",
    "Difficulty",
    "QAPair",
    "EmbeddingRecord",
    "Match",
    "MatchAll",
    "CorpusStats",
]
