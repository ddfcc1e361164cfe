# src/qamatch/commands/normalize.py
"""Normalize command - rewrite the corpus file in canonical form.

Loading fills defaults (difficulty, last_updated), drops unknown fields and
duplicate tags; persisting recomputes the metadata block.
"""

from __future__ import annotations

from pathlib import Path

from qamatch.commands.base import NormalizeResult
from qamatch.config import ConfigError, get_store
from qamatch.exceptions import DataLoadError, DataPersistError
from qamatch.models import CorpusStats


def normalize(
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> NormalizeResult:
    """Load and re-save the corpus.

    A backup of the previous file is kept when ``backup_count`` is configured.
    """
    store = get_store(data_path, config_path)
    if isinstance(store, ConfigError):
        return NormalizeResult(success=False, error=store.message)

    try:
        pairs = store.load()
        store.persist(pairs)
    except (DataLoadError, DataPersistError) as e:
        return NormalizeResult(success=False, data_path=store.describe(), error=str(e))

    return NormalizeResult(
        success=True,
        data_path=store.describe(),
        stats=CorpusStats.from_pairs(pairs),
        backup_count=len(store.list_backups()),
    )
