# src/qamatch/commands/validate.py
"""Validate command - check the corpus file and configuration."""

from __future__ import annotations

from pathlib import Path

import yaml

from qamatch.commands.base import ValidateResult
from qamatch.config import ConfigError, find_config_file, get_store, load_config, validate_config
from qamatch.exceptions import DataLoadError
from qamatch.models import CorpusStats


def validate(
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> ValidateResult:
    """Load the corpus without embedding it and report any problems.

    Args:
        data_path: Override corpus file path
        config_path: Override config file path

    Returns:
        ValidateResult with stats on success, or the individual problems
    """
    warnings: list[str] = []
    found_config = Path(config_path) if config_path is not None else find_config_file()
    if found_config is not None:
        try:
            warnings = validate_config(load_config(found_config), found_config)
        except (OSError, yaml.YAMLError, ValueError) as e:
            return ValidateResult(success=False, error=f"Cannot read config file: {e}")

    store = get_store(data_path, config_path)
    if isinstance(store, ConfigError):
        return ValidateResult(success=False, error=store.message, warnings=warnings)

    try:
        pairs = store.load()
    except DataLoadError as e:
        return ValidateResult(
            success=False,
            data_path=store.describe(),
            error=str(e),
            problems=e.problems,
            warnings=warnings,
        )

    return ValidateResult(
        success=True,
        data_path=store.describe(),
        stats=CorpusStats.from_pairs(pairs),
        warnings=warnings,
    )
