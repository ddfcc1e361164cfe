# src/qamatch/matching.py
"""Similarity ranking of a query against one index generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from qamatch.exceptions import EmbeddingError
from qamatch.index import IndexGeneration, embed_query
from qamatch.models import Match, MatchAll, QAPair
from qamatch.similarity import cosine_similarities

if TYPE_CHECKING:
    from qamatch.embedder import Embedder


def _to_match(pair: QAPair, score: float) -> Match:
    return Match(
        qa_id=pair.id,
        question=pair.question,
        answer=pair.primary_answer(),
        score=score,
        category=pair.category,
        tags=pair.tags,
        total_answers=len(pair.answers),
    )


def _to_match_all(pair: QAPair, score: float) -> MatchAll:
    return MatchAll(
        qa_id=pair.id,
        question=pair.question,
        answers=pair.answers,
        score=score,
        category=pair.category,
        tags=pair.tags,
    )


class MatchEngine:
    """Ranks the records of a generation by cosine similarity to a query.

    Every method takes the generation to search explicitly, so a caller that
    borrowed a generation keeps using it for the whole call even if a newer
    one becomes active meanwhile.
    """

    def __init__(self, embedder: Embedder) -> None:
        """Initialize the match engine.

        Args:
            embedder: Embedder used for query text. Must be the same model
                that built the generations being searched.
        """
        self.embedder = embedder

    async def score(self, generation: IndexGeneration, query: str) -> npt.NDArray[np.float64]:
        """Similarity of ``query`` to every record, in corpus order.

        An empty generation yields an empty array without calling the embedder.
        """
        if generation.is_empty:
            return np.zeros(0, dtype=np.float64)

        vector = await embed_query(self.embedder, query)
        if vector.shape[0] != generation.dimension:
            raise EmbeddingError(
                f"Query vector has dimension {vector.shape[0]}, "
                f"index generation {generation.number} has {generation.dimension}"
            )
        return cosine_similarities(vector, generation.matrix, generation.norms)

    @staticmethod
    def _best_position(scores: npt.NDArray[np.float64]) -> int | None:
        if scores.size == 0:
            return None
        # argmax returns the first occurrence, so exact ties go to the earliest record
        return int(np.argmax(scores))

    async def find_best_match(self, generation: IndexGeneration, query: str) -> Match | None:
        """Best match with its primary answer, or None for an empty generation."""
        scores = await self.score(generation, query)
        best = self._best_position(scores)
        if best is None:
            return None
        return _to_match(generation.pairs[best], float(scores[best]))

    async def find_best_match_with_all_answers(
        self, generation: IndexGeneration, query: str
    ) -> MatchAll | None:
        """Best match with every answer, or None for an empty generation."""
        scores = await self.score(generation, query)
        best = self._best_position(scores)
        if best is None:
            return None
        return _to_match_all(generation.pairs[best], float(scores[best]))

    async def find_matches(self, generation: IndexGeneration, query: str, k: int) -> list[Match]:
        """The ``k`` best matches by descending score; ties keep corpus order."""
        if k <= 0:
            raise ValueError("k must be positive")
        scores = await self.score(generation, query)
        order = np.argsort(-scores, kind="stable")[:k]
        return [_to_match(generation.pairs[i], float(scores[i])) for i in order]
