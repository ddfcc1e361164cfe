# src/qamatch/commands/browse.py
"""Browse commands - list categories and tags, search and show QA pairs.

None of these need the embedding provider; they read the corpus file directly.
"""

from __future__ import annotations

from pathlib import Path

from qamatch.commands.base import QAPairInfo, SearchResult, ValuesResult
from qamatch.config import ConfigError, get_store
from qamatch.exceptions import DataLoadError
from qamatch.models import QAPair


def _load(data_path: str | None, config_path: str | Path | None) -> list[QAPair] | str:
    """Load the corpus, or return an error message."""
    store = get_store(data_path, config_path)
    if isinstance(store, ConfigError):
        return store.message
    try:
        return store.load()
    except DataLoadError as e:
        return str(e)


def categories(
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> ValuesResult:
    """List the distinct categories, sorted."""
    pairs = _load(data_path, config_path)
    if isinstance(pairs, str):
        return ValuesResult(success=False, error=pairs)
    return ValuesResult(success=True, values=sorted({p.category for p in pairs}))


def tags(
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> ValuesResult:
    """List the distinct tags, sorted."""
    pairs = _load(data_path, config_path)
    if isinstance(pairs, str):
        return ValuesResult(success=False, error=pairs)
    return ValuesResult(success=True, values=sorted({t for p in pairs for t in p.tags}))


def search(
    category: str | None = None,
    tag_filter: list[str] | None = None,
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> SearchResult:
    """Find QA pairs by exact category and/or any of the given tags.

    With both filters a pair must satisfy both. With neither, every pair
    is returned.
    """
    pairs = _load(data_path, config_path)
    if isinstance(pairs, str):
        return SearchResult(success=False, error=pairs)

    wanted = set(tag_filter or [])
    found = [
        p
        for p in pairs
        if (category is None or p.category == category)
        and (not wanted or wanted.intersection(p.tags))
    ]
    return SearchResult(success=True, pairs=[QAPairInfo.from_pair(p) for p in found])


def show(
    qa_id: str,
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> SearchResult:
    """Show one QA pair by id."""
    pairs = _load(data_path, config_path)
    if isinstance(pairs, str):
        return SearchResult(success=False, error=pairs)

    for pair in pairs:
        if pair.id == qa_id:
            return SearchResult(success=True, pairs=[QAPairInfo.from_pair(pair)])
    return SearchResult(success=False, error=f"QA pair not found: {qa_id}")
