# tests/test_config.py
"""Tests for configuration loading."""

import os
import sys
import types
from pathlib import Path

import pytest

from qamatch.config import (
    DEFAULT_DATA_PATH,
    ConfigError,
    QAMatchConfig,
    build_settings,
    create_embedder,
    create_engine,
    find_config_file,
    get_config,
    get_settings_from_env,
    get_settings_from_yaml,
    get_store,
    load_config,
    load_env_file,
    validate_config,
)
from qamatch.embedder import ClientEmbedder, Embedder
from qamatch.engine import QAEngine
from qamatch.providers.litellm import LiteLLMEmbeddingClient
from qamatch.settings import Settings
from qamatch.stores import JSONCorpusStore


class StaticEmbedder(Embedder):
    def __init__(self, dimension: int = 3) -> None:
        self.dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        return [1.0] * self.dimension

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(t) for t in texts]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run every test in an empty directory without QAMATCH_* variables."""
    for key in list(os.environ):
        if key.startswith("QAMATCH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_yaml(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestEnvFile:
    def test_loads_missing_keys(self, tmp_path, monkeypatch):
        monkeypatch.delenv("QAMATCH_TEST_KEY", raising=False)
        env = write_yaml(tmp_path / ".env", "# comment\nQAMATCH_TEST_KEY='value'\n\nBROKEN\n")

        load_env_file(env)

        assert os.environ["QAMATCH_TEST_KEY"] == "value"

    def test_does_not_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("QAMATCH_TEST_KEY", "existing")
        env = write_yaml(tmp_path / ".env", "QAMATCH_TEST_KEY=new\n")

        load_env_file(env)

        assert os.environ["QAMATCH_TEST_KEY"] == "existing"

    def test_missing_file_is_ignored(self, tmp_path):
        load_env_file(tmp_path / "nope.env")


class TestConfigFile:
    def test_find_in_parent(self, tmp_path):
        config = write_yaml(tmp_path / "qamatch.yaml", "provider: local\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_file(nested) == config

    def test_not_found(self, tmp_path):
        assert find_config_file(tmp_path) is None
        assert load_config() == {}

    def test_load(self, tmp_path):
        config = write_yaml(tmp_path / "qamatch.yml", "provider: local\nsettings:\n  default_k: 3\n")
        assert load_config(config) == {"provider": "local", "settings": {"default_k": 3}}

    def test_non_mapping_rejected(self, tmp_path):
        config = write_yaml(tmp_path / "qamatch.yaml", "- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(config)

    def test_validate_unknown_keys(self):
        warnings = validate_config({"provider": "local", "colour": "red", "settings": {"x": 1}})
        assert len(warnings) == 2
        assert "colour" in warnings[0]
        assert "x" in warnings[1]

    def test_validate_clean(self):
        assert validate_config({"provider": "litellm", "settings": {"default_k": 2}}) == []


class TestSettingsPrecedence:
    def test_env_settings(self, monkeypatch):
        monkeypatch.setenv("QAMATCH_DEFAULT_K", "7")
        monkeypatch.setenv("QAMATCH_BACKUP_COUNT", "not-a-number")
        assert get_settings_from_env() == {"default_k": 7}

    def test_yaml_settings(self):
        config = {"settings": {"default_k": 2, "unknown": 1}}
        assert get_settings_from_yaml(config) == {"default_k": 2}

    def test_env_overrides_yaml(self):
        settings = build_settings(
            {"settings": {"default_k": 2, "backup_count": 4}},
            env_settings={"default_k": 9},
        )
        assert settings.default_k == 9
        assert settings.backup_count == 4

    def test_defaults(self):
        assert build_settings({}, env_settings={}) == Settings()

    def test_rate_limit_profile(self):
        settings = build_settings({"settings": {"rate_limit_profile": "conservative"}}, {})
        assert settings.max_concurrent_embeddings == 2


class TestGetConfig:
    def test_litellm_requires_model(self):
        result = get_config()
        assert isinstance(result, ConfigError)
        assert "embedding_model" in result.message

    def test_litellm_from_env(self, monkeypatch):
        monkeypatch.setenv("QAMATCH_EMBEDDING_MODEL", "openai/text-embedding-3-small")
        monkeypatch.setenv("QAMATCH_EMBEDDING_API_KEY", "sk-test")

        result = get_config()

        assert isinstance(result, QAMatchConfig)
        assert result.provider == "litellm"
        assert result.embedding_api_key == "sk-test"
        assert result.data_path == DEFAULT_DATA_PATH

    def test_local_defaults(self, tmp_path):
        write_yaml(tmp_path / "qamatch.yaml", "provider: local\n")

        result = get_config()

        assert isinstance(result, QAMatchConfig)
        assert result.embedding_model == "sentence-transformers/all-MiniLM-L6-v2"

    def test_data_path_precedence(self, tmp_path, monkeypatch):
        write_yaml(tmp_path / "qamatch.yaml", "provider: local\ndata_path: yaml.json\n")
        assert get_config().data_path == "yaml.json"

        monkeypatch.setenv("QAMATCH_DATA_PATH", "env.json")
        assert get_config().data_path == "env.json"
        assert get_config(data_path="arg.json").data_path == "arg.json"

    def test_custom_requires_embedder(self, tmp_path):
        write_yaml(tmp_path / "qamatch.yaml", "provider: custom\n")
        assert isinstance(get_config(), ConfigError)

    def test_unknown_provider(self, monkeypatch):
        monkeypatch.setenv("QAMATCH_PROVIDER", "magic")
        result = get_config()
        assert isinstance(result, ConfigError)
        assert "magic" in result.message

    def test_invalid_settings(self, tmp_path):
        write_yaml(tmp_path / "qamatch.yaml", "provider: local\nsettings:\n  default_k: 0\n")
        assert isinstance(get_config(), ConfigError)

    def test_broken_yaml(self, tmp_path):
        write_yaml(tmp_path / "qamatch.yaml", "provider: [unclosed\n")
        assert isinstance(get_config(), ConfigError)


class TestFactories:
    def test_litellm_embedder(self):
        config = QAMatchConfig(
            provider="litellm",
            data_path="qa.json",
            settings=Settings(num_retries=5),
            embedding_model="openai/text-embedding-3-small",
            embedding_api_key="sk-test",
        )

        embedder = create_embedder(config)

        assert isinstance(embedder, ClientEmbedder)
        client = embedder._client
        assert isinstance(client, LiteLLMEmbeddingClient)
        assert client.model == "openai/text-embedding-3-small"
        assert client.num_retries == 5
        assert client.api_key == "sk-test"

    def test_custom_embedder(self, monkeypatch):
        module = types.ModuleType("custom_embedders")
        module.StaticEmbedder = StaticEmbedder  # type: ignore[attr-defined]
        monkeypatch.setitem(sys.modules, "custom_embedders", module)
        config = QAMatchConfig(
            provider="custom",
            data_path="qa.json",
            settings=Settings(),
            embedder_class="custom_embedders.StaticEmbedder",
            embedder_kwargs={"dimension": 5},
        )

        embedder = create_embedder(config)

        assert isinstance(embedder, StaticEmbedder)
        assert embedder.dimension == 5

    def test_create_engine(self):
        config = QAMatchConfig(
            provider="litellm",
            data_path="qa.json",
            settings=Settings(backup_count=3),
            embedding_model="openai/text-embedding-3-small",
        )

        engine = create_engine(config)

        assert isinstance(engine, QAEngine)
        assert isinstance(engine.store, JSONCorpusStore)
        assert engine.store.backup_count == 3
        assert not engine.is_ready()

    def test_get_store_needs_no_provider(self):
        store = get_store(data_path="corpus.json")
        assert isinstance(store, JSONCorpusStore)
        assert store.path == Path("corpus.json")
