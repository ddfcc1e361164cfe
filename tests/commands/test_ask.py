# tests/commands/test_ask.py
"""Tests for the ask command."""

from pathlib import Path
from unittest.mock import patch

import pytest

from qamatch.commands import ask
from qamatch.engine import QAEngine
from qamatch.stores import JSONCorpusStore


@pytest.fixture
def engine_factory(embedder):
    """Replace create_engine with one that uses the word-count embedder."""

    def factory(config):
        return QAEngine(JSONCorpusStore(config.data_path), embedder, config.settings)

    with patch("qamatch.commands.ask.create_engine", side_effect=factory) as mock:
        yield mock


@pytest.fixture(autouse=True)
def embedding_model(isolated_env, monkeypatch):
    monkeypatch.setenv("QAMATCH_EMBEDDING_MODEL", "test/word-count")


class TestAskCommand:
    """Tests for ask.ask()."""

    def test_best_match(self, corpus_path, engine_factory) -> None:
        result = ask.ask("I need to reset my password", data_path=str(corpus_path))

        assert result.success is True
        assert result.query == "I need to reset my password"
        (match,) = result.matches
        assert match.qa_id == "q1"
        assert [a.id for a in match.answers] == ["a1"]
        assert match.total_answers == 2
        assert 0.0 < match.score <= 1.0

    def test_all_answers(self, corpus_path, engine_factory) -> None:
        result = ask.ask("reset password", data_path=str(corpus_path), all_answers=True)

        (match,) = result.matches
        assert [a.id for a in match.answers] == ["a1", "a2"]
        assert match.total_answers == 2

    def test_top_k(self, corpus_path, engine_factory) -> None:
        result = ask.ask("how do I change my email", data_path=str(corpus_path), k=2)

        assert result.success is True
        assert len(result.matches) == 2
        assert result.matches[0].qa_id == "q2"
        assert result.matches[0].score >= result.matches[1].score

    def test_empty_corpus(self, temp_dir, write_corpus, engine_factory) -> None:
        path = write_corpus(Path(temp_dir) / "empty.json", [])

        result = ask.ask("anything", data_path=str(path))

        assert result.success is True
        assert result.matches == []

    def test_missing_corpus(self, temp_dir, engine_factory) -> None:
        result = ask.ask("anything", data_path=f"{temp_dir}/missing.json")

        assert result.success is False
        assert (result.error or "").startswith("Failed to load corpus")

    def test_config_error(self, monkeypatch) -> None:
        monkeypatch.delenv("QAMATCH_EMBEDDING_MODEL")

        result = ask.ask("anything")

        assert result.success is False
        assert "embedding_model" in (result.error or "")


class TestAskWithEngine:
    @pytest.mark.asyncio
    async def test_uninitialized_engine(self, corpus_path, embedder) -> None:
        engine = QAEngine(JSONCorpusStore(corpus_path), embedder)

        result = await ask.ask_with_engine(engine, "reset password")

        assert result.success is False
        assert "not initialized" in (result.error or "")

    @pytest.mark.asyncio
    async def test_reuses_engine(self, corpus_path, embedder) -> None:
        async with QAEngine(JSONCorpusStore(corpus_path), embedder) as engine:
            first = await ask.ask_with_engine(engine, "payment methods")
            second = await ask.ask_with_engine(engine, "email address")

        assert first.matches[0].qa_id == "q3"
        assert second.matches[0].qa_id == "q2"
