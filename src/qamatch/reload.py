# src/qamatch/reload.py
"""Reload coordination and the active-generation pointer."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from qamatch.exceptions import NotReadyError, ReloadInProgressError
from qamatch.index import IndexGeneration, build_index
from qamatch.models import QAPair

if TYPE_CHECKING:
    from qamatch.embedder import Embedder
    from qamatch.stores import CorpusStore

# Builds the next corpus from the pairs of the active generation.
CorpusUpdate = Callable[[tuple[QAPair, ...]], Sequence[QAPair]]


class ReloadState(Enum):
    """Coordinator states."""

    IDLE = "idle"
    RELOADING = "reloading"


class ReloadCoordinator:
    """Owns the active index generation and swaps it atomically.

    A reload runs load -> build -> swap. The swap is a single attribute
    assignment, so a reader sees either the old generation or the new one.
    Readers take ``active`` once and keep that reference for their whole
    call; the old generation is freed once the last of them finishes.

    Only one reload (or update) runs at a time. A request that arrives while
    one is running is rejected with ReloadInProgressError. On failure the
    active generation is left as it was and the error is re-raised.
    """

    def __init__(
        self,
        store: CorpusStore,
        embedder: Embedder,
        max_concurrent: int = 8,
    ) -> None:
        """Initialize the coordinator.

        Args:
            store: Corpus source for reloads.
            embedder: Embedder used to build generations.
            max_concurrent: Maximum embedding calls in flight during a build.
        """
        self._store = store
        self._embedder = embedder
        self._max_concurrent = max_concurrent
        self._active: IndexGeneration | None = None
        self._state = ReloadState.IDLE
        self._last_number = 0
        # Bumped by clear(); a build started under an older epoch is discarded
        self._epoch = 0
        self._log = structlog.get_logger(__name__).bind(component="reload_coordinator")

    @property
    def active(self) -> IndexGeneration | None:
        """The generation queries should use, or None before the first load."""
        return self._active

    @property
    def state(self) -> ReloadState:
        return self._state

    def _begin(self, operation: str) -> int:
        # No await between the check and the set, so this is race-free on one event loop.
        if self._state is ReloadState.RELOADING:
            self._log.warning("reload_rejected", operation=operation)
            raise ReloadInProgressError(f"Cannot {operation}: a reload is already in progress")
        self._state = ReloadState.RELOADING
        self._log.info("reload_started", operation=operation)
        return self._epoch

    def _swap(
        self, generation: IndexGeneration, operation: str, started: float, epoch: int
    ) -> None:
        if epoch != self._epoch:
            self._log.warning(
                "reload_discarded", operation=operation, generation=generation.number
            )
            raise NotReadyError(f"Coordinator was cleared during {operation}; result discarded")
        previous = self._active
        self._active = generation
        self._last_number = generation.number
        self._log.info(
            "reload_succeeded",
            operation=operation,
            generation=generation.number,
            previous_generation=previous.number if previous is not None else None,
            records=len(generation),
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )

    async def reload(self) -> IndexGeneration:
        """Load the corpus from the store, re-embed everything, and swap.

        Raises:
            ReloadInProgressError: If another reload is running.
            DataLoadError: If the corpus cannot be loaded.
            EmbeddingError: If building the index fails.
            NotReadyError: If ``clear`` is called while the reload runs.
        """
        epoch = self._begin("reload")
        started = time.perf_counter()
        try:
            pairs = await asyncio.to_thread(self._store.load)
            generation = await build_index(
                pairs,
                self._embedder,
                max_concurrent=self._max_concurrent,
                number=self._last_number + 1,
            )
            self._swap(generation, "reload", started, epoch)
            return generation
        except Exception as e:
            self._log.error("reload_failed", operation="reload", error=str(e))
            raise
        finally:
            self._state = ReloadState.IDLE

    async def apply(self, update: CorpusUpdate) -> IndexGeneration:
        """Build a new generation from an edited copy of the active corpus and swap.

        ``update`` receives the active pairs and returns the new corpus. Pairs
        whose question text is unchanged keep their existing vectors.

        Raises:
            NotReadyError: If there is no active generation, or ``clear`` is
                called while the update runs.
            ReloadInProgressError: If a reload is running.
            EmbeddingError: If embedding a new or changed question fails.
        """
        previous = self._active
        if previous is None:
            raise NotReadyError("No corpus loaded yet")
        epoch = self._begin("update")
        started = time.perf_counter()
        try:
            # Re-read: nothing can swap between _begin and here.
            previous = self._active
            assert previous is not None
            pairs = update(previous.pairs)
            generation = await build_index(
                pairs,
                self._embedder,
                max_concurrent=self._max_concurrent,
                number=self._last_number + 1,
                previous=previous,
            )
            self._swap(generation, "update", started, epoch)
            return generation
        except Exception as e:
            self._log.error("reload_failed", operation="update", error=str(e))
            raise
        finally:
            self._state = ReloadState.IDLE

    def clear(self) -> None:
        """Drop the active generation (used on shutdown).

        A reload or update still running when this is called does not install
        its result; it raises NotReadyError instead.
        """
        self._epoch += 1
        self._active = None
