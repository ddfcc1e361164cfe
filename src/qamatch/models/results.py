# src/qamatch/models/results.py
"""Result data models for qamatch queries."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from qamatch.models.qa import Answer, QAPair


class Match(BaseModel):
    """The best corpus entry for a query, with its primary answer resolved."""

    model_config = ConfigDict(frozen=True)

    qa_id: str
    question: str
    answer: Answer
    score: float  # raw cosine similarity, not rounded
    category: str
    tags: tuple[str, ...]
    total_answers: int


class MatchAll(BaseModel):
    """The best corpus entry for a query, with every answer."""

    model_config = ConfigDict(frozen=True)

    qa_id: str
    question: str
    answers: tuple[Answer, ...]
    score: float
    category: str
    tags: tuple[str, ...]


class CorpusStats(BaseModel):
    """Summary counts for a corpus."""

    total_questions: int
    total_answers: int
    categories: list[str]
    unique_tags: int
    average_answers_per_question: float

    @classmethod
    def from_pairs(cls, pairs: Sequence[QAPair]) -> CorpusStats:
        """Compute stats. Categories are listed in first-appearance order."""
        total_answers = sum(len(p.answers) for p in pairs)
        return cls(
            total_questions=len(pairs),
            total_answers=total_answers,
            categories=list(dict.fromkeys(p.category for p in pairs)),
            unique_tags=len({t for p in pairs for t in p.tags}),
            average_answers_per_question=total_answers / len(pairs) if pairs else 0.0,
        )
