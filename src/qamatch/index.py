# src/qamatch/index.py
"""Immutable embedding index generations and the builder that produces them."""

from __future__ import annotations

import asyncio
import time
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import structlog

from qamatch.exceptions import DataLoadError, EmbeddingError
from qamatch.models import EmbeddingRecord, QAPair

if TYPE_CHECKING:
    from collections.abc import Mapping

    from qamatch.embedder import Embedder

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, eq=False)
class IndexGeneration:
    """One immutable snapshot of the corpus and its question embeddings.

    ``pairs`` and ``records`` are aligned: ``records[i]`` is the embedding of
    ``pairs[i].question``, and both keep corpus load order. The vector matrix
    is flagged read-only.
    """

    number: int
    pairs: tuple[QAPair, ...]
    records: tuple[EmbeddingRecord, ...]
    matrix: npt.NDArray[np.float64] = field(repr=False)
    norms: npt.NDArray[np.float64] = field(repr=False)
    built_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    _positions: Mapping[str, int] = field(default_factory=dict, repr=False)

    @classmethod
    def assemble(
        cls,
        pairs: Sequence[QAPair],
        vectors: Sequence[Sequence[float]],
        number: int,
    ) -> IndexGeneration:
        """Build a generation from pairs and their vectors (same order).

        Raises:
            EmbeddingError: If vectors are empty, non-finite, or of differing dimension.
        """
        if len(pairs) != len(vectors):
            raise ValueError(f"Got {len(vectors)} vectors for {len(pairs)} QA pairs")

        dimensions = {len(v) for v in vectors}
        if len(dimensions) > 1:
            raise EmbeddingError(
                f"Embedding provider returned vectors of differing dimensions: {sorted(dimensions)}"
            )
        dimension = dimensions.pop() if dimensions else 0
        if pairs and dimension == 0:
            raise EmbeddingError("Embedding provider returned empty vectors")

        matrix = np.array(vectors, dtype=np.float64).reshape(len(pairs), dimension)
        if not np.all(np.isfinite(matrix)):
            raise EmbeddingError("Embedding provider returned non-finite values")
        norms = np.linalg.norm(matrix, axis=1)
        matrix.setflags(write=False)
        norms.setflags(write=False)

        records = tuple(
            EmbeddingRecord(qa_id=p.id, question=p.question, vector=tuple(row))
            for p, row in zip(pairs, matrix.tolist(), strict=True)
        )
        return cls(
            number=number,
            pairs=tuple(pairs),
            records=records,
            matrix=matrix,
            norms=norms,
            _positions=MappingProxyType({p.id: i for i, p in enumerate(pairs)}),
        )

    @classmethod
    def empty(cls, number: int = 0) -> IndexGeneration:
        return cls.assemble([], [], number)

    @property
    def dimension(self) -> int:
        return int(self.matrix.shape[1])

    @property
    def is_empty(self) -> bool:
        return not self.pairs

    def __len__(self) -> int:
        return len(self.pairs)

    def position(self, qa_id: str) -> int | None:
        return self._positions.get(qa_id)

    def get(self, qa_id: str) -> QAPair | None:
        position = self.position(qa_id)
        return None if position is None else self.pairs[position]

    def record_for(self, qa_id: str) -> EmbeddingRecord | None:
        position = self.position(qa_id)
        return None if position is None else self.records[position]


def _check_unique_ids(pairs: Sequence[QAPair]) -> None:
    duplicates = sorted(qa_id for qa_id, n in Counter(p.id for p in pairs).items() if n > 1)
    if duplicates:
        raise DataLoadError(f"Duplicate QA ids: {', '.join(duplicates)}")


async def build_index(
    pairs: Sequence[QAPair],
    embedder: Embedder,
    *,
    max_concurrent: int = 8,
    number: int = 1,
    previous: IndexGeneration | None = None,
) -> IndexGeneration:
    """Embed every question and assemble a new generation.

    Embedding calls run concurrently, at most ``max_concurrent`` at a time.
    Vectors are placed by input position, so the result matches corpus order
    whatever order the calls complete in.

    Args:
        pairs: Corpus in load order.
        embedder: Embedding provider.
        max_concurrent: Maximum embedding calls in flight.
        number: Generation number to stamp on the result.
        previous: Generation whose vectors may be reused. A pair with the same
            id and the same question text as in ``previous`` is not re-embedded.

    Returns:
        The new generation.

    Raises:
        DataLoadError: If QA ids are not unique.
        EmbeddingError: If any embedding call fails. No generation is produced.
    """
    if max_concurrent < 1:
        raise ValueError("max_concurrent must be >= 1")
    _check_unique_ids(pairs)
    start = time.perf_counter()

    vectors: list[Sequence[float]] = [()] * len(pairs)
    pending: list[int] = []
    for i, pair in enumerate(pairs):
        record = previous.record_for(pair.id) if previous is not None else None
        if record is not None and not record.is_stale_for(pair):
            vectors[i] = record.vector
        else:
            pending.append(i)

    semaphore = asyncio.Semaphore(max_concurrent)

    async def embed_with_limit(position: int) -> list[float]:
        async with semaphore:
            return await embedder.aembed_text(pairs[position].question)

    results = await asyncio.gather(
        *[embed_with_limit(i) for i in pending],
        return_exceptions=True,
    )

    errors: list[tuple[int, BaseException]] = []
    for position, result in zip(pending, results, strict=True):
        if isinstance(result, BaseException):
            errors.append((position, result))
        else:
            vectors[position] = result

    if errors:
        first_position, first_error = errors[0]
        raise EmbeddingError(
            f"Failed to embed {len(errors)}/{len(pending)} questions "
            f"(first: QA '{pairs[first_position].id}': {first_error})",
            errors=errors,
        ) from first_error

    generation = IndexGeneration.assemble(pairs, vectors, number)
    logger.info(
        "index_built",
        generation=number,
        records=len(generation),
        embedded=len(pending),
        reused=len(pairs) - len(pending),
        dimension=generation.dimension,
        duration_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    return generation


async def embed_query(embedder: Embedder, text: str) -> npt.NDArray[np.float64]:
    """Embed a single query, converting provider failures to EmbeddingError."""
    try:
        vector = await embedder.aembed_text(text)
    except Exception as e:
        raise EmbeddingError(f"Failed to embed query: {e}") from e

    query = np.asarray(vector, dtype=np.float64)
    if query.ndim != 1 or query.size == 0 or not np.all(np.isfinite(query)):
        raise EmbeddingError("Embedding provider returned an invalid query vector")
    return query
