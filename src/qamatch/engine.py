# src/qamatch/engine.py
"""The QA matching service object."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from qamatch.exceptions import NotReadyError
from qamatch.matching import MatchEngine
from qamatch.models import CorpusStats, Match, MatchAll, QAPair
from qamatch.reload import ReloadCoordinator
from qamatch.settings import Settings

if TYPE_CHECKING:
    from types import TracebackType

    from qamatch.embedder import Embedder
    from qamatch.index import IndexGeneration
    from qamatch.stores import CorpusStore


class QAEngine:
    """Answers free-text questions from a curated QA corpus.

    Construct one per service and share it. Until ``initialize`` has loaded a
    corpus every query raises NotReadyError.

    Example:
        from qamatch import JSONCorpusStore, QAEngine
        from qamatch.embedder import ClientEmbedder
        from qamatch.providers.litellm import LiteLLMEmbeddingClient

        engine = QAEngine(
            store=JSONCorpusStore("./data/qa_data.json"),
            embedder=ClientEmbedder(LiteLLMEmbeddingClient()),
        )
        async with engine:
            match = await engine.find_best_match("I forgot my password")

    Each query takes the active index generation once when it starts and uses
    it throughout, so a reload that completes mid-query does not change that
    query's result.
    """

    def __init__(
        self,
        store: CorpusStore,
        embedder: Embedder,
        settings: Settings | None = None,
    ) -> None:
        """Create an engine.

        Args:
            store: Where the corpus is loaded from and saved to.
            embedder: Embedding provider. Queries and corpus questions must use
                the same one.
            settings: Behavioral settings. Defaults to ``Settings()``.
        """
        self.store = store
        self.embedder = embedder
        self.settings = settings if settings is not None else Settings()
        self.coordinator = ReloadCoordinator(
            store,
            embedder,
            max_concurrent=self.settings.max_concurrent_embeddings,
        )
        self.matcher = MatchEngine(embedder)
        self._log = structlog.get_logger(__name__).bind(store=store.describe())

    # Lifecycle

    async def initialize(self) -> None:
        """Load the corpus and build the first index generation."""
        generation = await self.coordinator.reload()
        self._log.info(
            "engine_initialized",
            generation=generation.number,
            qa_pairs=len(generation),
            dimension=generation.dimension,
        )

    async def reload_qa_data(self) -> CorpusStats:
        """Reload the corpus from the store and swap in a fresh index.

        On failure the engine keeps serving the previous corpus and the error
        is re-raised.
        """
        generation = await self.coordinator.reload()
        return CorpusStats.from_pairs(generation.pairs)

    async def save_qa_data(self) -> CorpusStats:
        """Persist the corpus currently being served."""
        generation = self._borrow()
        await asyncio.to_thread(self.store.persist, list(generation.pairs))
        return CorpusStats.from_pairs(generation.pairs)

    def shutdown(self) -> None:
        self.coordinator.clear()
        self._log.info("engine_shutdown")

    async def __aenter__(self) -> QAEngine:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    # Queries

    def is_ready(self) -> bool:
        return self.coordinator.active is not None

    def _borrow(self) -> IndexGeneration:
        generation = self.coordinator.active
        if generation is None:
            raise NotReadyError("QA engine is not initialized")
        return generation

    async def find_best_match(self, question: str) -> Match | None:
        """Return the closest corpus question with its primary answer.

        Returns None only when the corpus is empty.

        Raises:
            NotReadyError: If no corpus is loaded.
            EmbeddingError: If the query cannot be embedded.
        """
        generation = self._borrow()
        match = await self.matcher.find_best_match(generation, question)
        self._log_result(generation, match)
        return match

    async def find_best_match_with_all_answers(self, question: str) -> MatchAll | None:
        """Like ``find_best_match`` but returns every answer of the matched pair."""
        generation = self._borrow()
        match = await self.matcher.find_best_match_with_all_answers(generation, question)
        self._log_result(generation, match)
        return match

    async def find_matches(self, question: str, k: int | None = None) -> list[Match]:
        """Return the ``k`` closest corpus questions, best first.

        Args:
            question: Free-text query.
            k: Number of matches. Defaults to ``settings.default_k``.
        """
        generation = self._borrow()
        return await self.matcher.find_matches(
            generation, question, k if k is not None else self.settings.default_k
        )

    def _log_result(self, generation: IndexGeneration, match: Match | MatchAll | None) -> None:
        if match is None:
            self._log.debug("query_no_match", generation=generation.number)
        else:
            self._log.debug(
                "query_matched",
                generation=generation.number,
                qa_id=match.qa_id,
                score=match.score,
            )

    def get_qa_pairs(self) -> list[QAPair]:
        return list(self._borrow().pairs)

    def get_qa_pair_by_id(self, qa_id: str) -> QAPair | None:
        return self._borrow().get(qa_id)

    def search_by_category(self, category: str) -> list[QAPair]:
        """Pairs whose category equals ``category`` exactly, in corpus order."""
        return [p for p in self._borrow().pairs if p.category == category]

    def search_by_tags(self, tags: Iterable[str]) -> list[QAPair]:
        """Pairs carrying at least one of ``tags``, in corpus order."""
        wanted = set(tags)
        return [p for p in self._borrow().pairs if wanted.intersection(p.tags)]

    def get_categories(self) -> set[str]:
        return {p.category for p in self._borrow().pairs}

    def get_tags(self) -> set[str]:
        return {t for p in self._borrow().pairs for t in p.tags}

    def get_stats(self) -> CorpusStats:
        return CorpusStats.from_pairs(self._borrow().pairs)

    # Mutations (in memory until save_qa_data)

    async def upsert_qa_pair(self, pair: QAPair) -> QAPair:
        """Replace the pair with the same id in place, or append it.

        Only the new or changed question is embedded; the index swap is atomic.
        """

        def update(pairs: tuple[QAPair, ...]) -> list[QAPair]:
            if any(p.id == pair.id for p in pairs):
                return [pair if p.id == pair.id else p for p in pairs]
            return [*pairs, pair]

        await self.coordinator.apply(update)
        return pair

    async def remove_qa_pair(self, qa_id: str) -> QAPair:
        """Remove a pair by id and return it.

        Raises:
            KeyError: If no pair has ``qa_id``.
        """
        if self._borrow().get(qa_id) is None:
            raise KeyError(qa_id)
        removed: list[QAPair] = []

        def update(pairs: tuple[QAPair, ...]) -> list[QAPair]:
            removed.extend(p for p in pairs if p.id == qa_id)
            if not removed:
                raise KeyError(qa_id)
            return [p for p in pairs if p.id != qa_id]

        await self.coordinator.apply(update)
        return removed[0]
