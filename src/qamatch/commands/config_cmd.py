# src/qamatch/commands/config_cmd.py
"""Config command - display the effective configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from qamatch.commands.base import ConfigResult, SettingInfo
from qamatch.config import (
    build_settings,
    find_config_file,
    get_settings_from_env,
    get_settings_from_yaml,
    load_config,
    resolve_data_path,
    validate_config,
)
from qamatch.settings import Settings


def _get_setting_source(
    key: str,
    yaml_settings: dict[str, Any],
    env_settings: dict[str, Any],
) -> str:
    """Determine the source of a setting value."""
    if key in env_settings:
        return "env var"
    if key in yaml_settings:
        return "yaml"
    return "default"


def config(
    config_path: str | Path | None = None,
) -> ConfigResult:
    """Get current configuration settings and where each came from.

    Args:
        config_path: Override config file path
    """
    found_config_path = Path(config_path) if config_path is not None else find_config_file()
    try:
        file_config = load_config(found_config_path)
        env_settings = get_settings_from_env()
        yaml_settings = get_settings_from_yaml(file_config)
        settings = build_settings(file_config, env_settings)
    except (OSError, yaml.YAMLError, ValueError) as e:
        return ConfigResult(success=False, error=f"Invalid configuration: {e}")

    result = ConfigResult(success=True)
    result.config_path = str(found_config_path) if found_config_path else None
    result.warnings = validate_config(file_config, found_config_path)
    result.provider = os.environ.get("QAMATCH_PROVIDER") or file_config.get("provider", "litellm")
    result.embedding_model = os.environ.get("QAMATCH_EMBEDDING_MODEL") or file_config.get(
        "embedding_model"
    )
    result.data_path = resolve_data_path(file_config)

    for key in Settings.model_fields:
        value = getattr(settings, key)
        result.settings.append(
            SettingInfo(
                name=key,
                value=str(value) if value is not None else "compact",
                source=_get_setting_source(key, yaml_settings, env_settings),
            )
        )

    return result
