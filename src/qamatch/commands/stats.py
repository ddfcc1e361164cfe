# src/qamatch/commands/stats.py
"""Stats command - summarize the corpus without embedding it."""

from __future__ import annotations

from pathlib import Path

from qamatch.commands.base import StatsResult
from qamatch.config import ConfigError, get_store
from qamatch.exceptions import DataLoadError
from qamatch.models import CorpusStats


def stats(
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> StatsResult:
    """Get corpus statistics.

    Args:
        data_path: Override corpus file path
        config_path: Override config file path

    Returns:
        StatsResult with question/answer counts and categories
    """
    store = get_store(data_path, config_path)
    if isinstance(store, ConfigError):
        return StatsResult(success=False, error=store.message)

    try:
        pairs = store.load()
    except DataLoadError as e:
        return StatsResult(success=False, data_path=store.describe(), error=str(e))

    return StatsResult(
        success=True,
        data_path=store.describe(),
        stats=CorpusStats.from_pairs(pairs),
    )
