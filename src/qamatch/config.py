# src/qamatch/config.py
"""Configuration loading utilities for qamatch.

Used by the CLI and by applications embedding qamatch that want file/env
based configuration. It handles:
- Finding and loading qamatch.yaml config files
- Loading .env files for API keys
- Building Settings objects from multiple sources
- Creating QAEngine instances from configuration
"""

from __future__ import annotations

import importlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import yaml

from qamatch.providers.local.client import DEFAULT_LOCAL_MODEL
from qamatch.settings import Settings

if TYPE_CHECKING:
    from qamatch.embedder import Embedder
    from qamatch.engine import QAEngine
    from qamatch.stores import JSONCorpusStore

# Defaults
DEFAULT_DATA_PATH = "./data/qa_data.json"

CONFIG_FILES = ["qamatch.yaml", "qamatch.yml", ".qamatchrc"]
ENV_FILE = ".env"
PROVIDERS = ("litellm", "local", "custom")


@dataclass
class ConfigError:
    """Error during configuration loading."""

    message: str
    suggestion: str | None = None


def load_env_file(env_path: str | Path = ENV_FILE) -> None:
    """Load environment variables from a .env file if it exists.

    Variables already present in the environment are left alone.

    Args:
        env_path: Path to .env file (default: .env in current directory)
    """
    path = Path(env_path)
    if not path.exists():
        return

    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key and key not in os.environ:
                os.environ[key] = value


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find a configuration file in the given directory or its parents.

    Args:
        start_dir: Directory to start searching from (default: cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_dir or Path.cwd()
    for _ in range(10):  # Limit search depth
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists():
                return config_path
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# Valid configuration keys for validation
VALID_ROOT_KEYS = {
    "provider",
    "data_path",
    "embedding_model",
    "log_level",
    # Custom provider
    "embedder",
    "embedder_kwargs",
    # Settings section
    "settings",
}

VALID_SETTINGS_KEYS = {
    "max_concurrent_embeddings",
    "default_k",
    "num_retries",
    "backup_count",
    "json_indent",
    "rate_limit_profile",
}


def validate_config(config: dict[str, Any], config_path: Path | None = None) -> list[str]:
    """Validate config and return warnings about unknown keys.

    Args:
        config: The loaded configuration dictionary
        config_path: Path to config file (for messages)

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    unknown_root = set(config.keys()) - VALID_ROOT_KEYS
    if unknown_root:
        path_str = str(config_path) if config_path else "config"
        warnings.append(f"Unknown config keys in {path_str}: {', '.join(sorted(unknown_root))}")

    settings = config.get("settings", {})
    if isinstance(settings, dict):
        unknown_settings = set(settings.keys()) - VALID_SETTINGS_KEYS
        if unknown_settings:
            warnings.append(f"Unknown settings keys: {', '.join(sorted(unknown_settings))}")

    return warnings


def load_config(config_path: Path | str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file.

    Args:
        config_path: Explicit path to config file, or None to search

    Returns:
        Configuration dictionary (empty if no config found)
    """
    config_path = Path(config_path) if config_path is not None else find_config_file()
    if config_path is None:
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    return cast(dict[str, Any], config)


def _safe_int(value: str | None) -> int | None:
    """Parse int from string, returning None on invalid value."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


# Environment variable -> Settings field, for integer settings
_INT_ENV_SETTINGS = {
    "QAMATCH_MAX_CONCURRENT_EMBEDDINGS": "max_concurrent_embeddings",
    "QAMATCH_DEFAULT_K": "default_k",
    "QAMATCH_NUM_RETRIES": "num_retries",
    "QAMATCH_BACKUP_COUNT": "backup_count",
}


def get_settings_from_env() -> dict[str, Any]:
    """Read behavioral settings from QAMATCH_* environment variables.

    Only variables that are set (and parse) are returned, so YAML settings
    are used unless overridden.
    """
    result: dict[str, Any] = {}

    for env_key, settings_key in _INT_ENV_SETTINGS.items():
        if (val := _safe_int(os.environ.get(env_key))) is not None:
            result[settings_key] = val
    if os.environ.get("QAMATCH_RATE_LIMIT_PROFILE"):
        result["rate_limit_profile"] = os.environ["QAMATCH_RATE_LIMIT_PROFILE"]

    return result


def get_settings_from_yaml(config: dict[str, Any]) -> dict[str, Any]:
    """Extract known settings from the ``settings:`` section of a YAML config."""
    yaml_settings = config.get("settings", {}) or {}
    return {key: yaml_settings[key] for key in VALID_SETTINGS_KEYS if key in yaml_settings}


def build_settings(
    config: dict[str, Any] | None = None,
    env_settings: dict[str, Any] | None = None,
) -> Settings:
    """Build a Settings object from YAML config and env vars.

    Precedence (highest to lowest):
    1. Environment variables
    2. YAML settings: section
    3. Settings class defaults

    Args:
        config: YAML configuration dictionary
        env_settings: Environment variable overrides (if None, reads from env)
    """
    config = config or {}
    yaml_settings = get_settings_from_yaml(config)
    env_settings = env_settings if env_settings is not None else get_settings_from_env()

    merged = {**yaml_settings, **env_settings}

    # A rate limit profile supplies defaults for several settings at once
    rate_limit_profile = merged.pop("rate_limit_profile", None)
    if rate_limit_profile:
        return Settings.with_profile(rate_limit_profile, **merged)
    return Settings(**merged)


def resolve_data_path(config: dict[str, Any], data_path: str | None = None) -> str:
    """Corpus path: explicit argument > QAMATCH_DATA_PATH > YAML data_path > default."""
    return (
        data_path
        or os.environ.get("QAMATCH_DATA_PATH")
        or config.get("data_path")
        or DEFAULT_DATA_PATH
    )


def import_class(class_path: str) -> type[Any]:
    """Import a class from a dotted path like 'my_package.module.ClassName'."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return cast(type[Any], getattr(module, class_name))


@dataclass
class QAMatchConfig:
    """Configuration for creating a QAEngine."""

    provider: str
    data_path: str
    settings: Settings
    embedding_model: str | None = None
    embedding_api_key: str | None = None
    log_level: str = "WARNING"
    # Custom provider fields
    embedder_class: str | None = None
    embedder_kwargs: dict[str, Any] = field(default_factory=dict)


def get_config(
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> QAMatchConfig | ConfigError:
    """Resolve configuration without building anything.

    Args:
        data_path: Override corpus file path
        config_path: Override config file path

    Returns:
        QAMatchConfig, or ConfigError if the configuration is unusable
    """
    try:
        config = load_config(config_path)
    except (OSError, yaml.YAMLError, ValueError) as e:
        return ConfigError(
            message=f"Cannot read config file: {e}",
            suggestion="Check the YAML syntax of qamatch.yaml",
        )

    effective_data_path = resolve_data_path(config, data_path)
    provider = os.environ.get("QAMATCH_PROVIDER") or config.get("provider", "litellm")
    log_level = os.environ.get("QAMATCH_LOG_LEVEL") or config.get("log_level", "WARNING")

    try:
        settings = build_settings(config, get_settings_from_env())
    except ValueError as e:
        # pydantic ValidationError and unknown profiles are both ValueErrors
        return ConfigError(
            message=f"Invalid settings: {e}",
            suggestion="Check the settings: section of qamatch.yaml and QAMATCH_* variables",
        )

    embedding_model = os.environ.get("QAMATCH_EMBEDDING_MODEL") or config.get("embedding_model")

    if provider == "litellm":
        if not embedding_model:
            return ConfigError(
                message="LiteLLM provider requires embedding_model.",
                suggestion="Set embedding_model in qamatch.yaml or QAMATCH_EMBEDDING_MODEL",
            )
        return QAMatchConfig(
            provider=provider,
            data_path=effective_data_path,
            settings=settings,
            embedding_model=embedding_model,
            embedding_api_key=os.environ.get("QAMATCH_EMBEDDING_API_KEY"),
            log_level=log_level,
        )

    if provider == "local":
        return QAMatchConfig(
            provider=provider,
            data_path=effective_data_path,
            settings=settings,
            embedding_model=embedding_model or DEFAULT_LOCAL_MODEL,
            log_level=log_level,
        )

    if provider == "custom":
        embedder_class = config.get("embedder")
        if not embedder_class:
            return ConfigError(
                message="Custom provider requires embedder.",
                suggestion="Add 'embedder' to qamatch.yaml as a dotted class path",
            )
        return QAMatchConfig(
            provider=provider,
            data_path=effective_data_path,
            settings=settings,
            log_level=log_level,
            embedder_class=embedder_class,
            embedder_kwargs=config.get("embedder_kwargs") or {},
        )

    return ConfigError(
        message=f"Unknown provider '{provider}'",
        suggestion=f"Supported providers: {', '.join(PROVIDERS)}",
    )


def create_embedder(config: QAMatchConfig) -> Embedder:
    """Build the embedder named by the configuration.

    Raises:
        ImportError: If a custom embedder class, or the optional
            sentence-transformers dependency, cannot be imported.
        ValueError: If the configuration is incomplete.
    """
    from qamatch.embedder import ClientEmbedder

    if config.provider == "litellm":
        if not config.embedding_model:
            raise ValueError("LiteLLM provider requires embedding_model")
        from qamatch.providers.litellm import LiteLLMEmbeddingClient

        return ClientEmbedder(
            LiteLLMEmbeddingClient(
                model=config.embedding_model,
                num_retries=config.settings.num_retries,
                api_key=config.embedding_api_key,
            )
        )

    if config.provider == "local":
        from qamatch.providers.local import SentenceTransformerEmbeddingClient

        return ClientEmbedder(
            SentenceTransformerEmbeddingClient(model=config.embedding_model or DEFAULT_LOCAL_MODEL)
        )

    if config.provider == "custom":
        if not config.embedder_class:
            raise ValueError("Custom provider requires an embedder class path")
        embedder_cls = import_class(config.embedder_class)
        return cast("Embedder", embedder_cls(**config.embedder_kwargs))

    raise ValueError(f"Unknown provider: {config.provider}")


def create_store(config: QAMatchConfig) -> JSONCorpusStore:
    """Build the corpus store for the configured data path."""
    from qamatch.stores import JSONCorpusStore

    return JSONCorpusStore(
        config.data_path,
        backup_count=config.settings.backup_count,
        indent=config.settings.json_indent,
    )


def create_engine(config: QAMatchConfig) -> QAEngine:
    """Create an (uninitialized) QAEngine from configuration."""
    from qamatch.engine import QAEngine

    return QAEngine(
        store=create_store(config),
        embedder=create_embedder(config),
        settings=config.settings,
    )


def get_store(
    data_path: str | None = None,
    config_path: str | Path | None = None,
) -> JSONCorpusStore | ConfigError:
    """Get the corpus store for operations that need no embedding provider.

    Args:
        data_path: Override corpus file path
        config_path: Override config file path

    Returns:
        The store, or ConfigError if the configuration is unusable
    """
    from qamatch.stores import JSONCorpusStore

    try:
        config = load_config(config_path)
        settings = build_settings(config)
    except (OSError, yaml.YAMLError, ValueError) as e:
        return ConfigError(message=f"Invalid configuration: {e}")

    return JSONCorpusStore(
        resolve_data_path(config, data_path),
        backup_count=settings.backup_count,
        indent=settings.json_indent,
    )
