"""Tests for the CLI."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from qamatch.cli import app
from qamatch.engine import QAEngine
from qamatch.stores import JSONCorpusStore


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("QAMATCH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestCliBasics:
    def test_help(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "qamatch" in result.output

    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_log_level(self, runner, corpus_path):
        result = runner.invoke(app, ["--log-level", "LOUD", "stats", "-d", str(corpus_path)])
        assert result.exit_code == 2
        assert "Unknown log level" in result.output


class TestAskCommand:
    @pytest.fixture(autouse=True)
    def word_count_engine(self, isolated_env, embedder, monkeypatch):
        monkeypatch.setenv("QAMATCH_EMBEDDING_MODEL", "test/word-count")

        def factory(config):
            return QAEngine(JSONCorpusStore(config.data_path), embedder, config.settings)

        with patch("qamatch.commands.ask.create_engine", side_effect=factory):
            yield

    def test_ask_best_match(self, runner, corpus_path):
        result = runner.invoke(
            app, ["ask", "reset my password", "-d", str(corpus_path), "--plain"]
        )
        assert result.exit_code == 0
        assert "How do I reset my password?" in result.output
        assert "Use the reset link on the login page." in result.output
        assert "Contact support." not in result.output

    def test_ask_all_answers(self, runner, corpus_path):
        result = runner.invoke(
            app, ["ask", "reset my password", "--all", "-d", str(corpus_path), "--plain"]
        )
        assert result.exit_code == 0
        assert "Contact support." in result.output

    def test_ask_top_k(self, runner, corpus_path):
        result = runner.invoke(
            app, ["ask", "change email", "-k", "2", "-d", str(corpus_path), "--plain"]
        )
        assert result.exit_code == 0
        assert "[1] How do I change my email address?" in result.output
        assert "[2]" in result.output

    def test_ask_rejects_zero_k(self, runner, corpus_path):
        result = runner.invoke(app, ["ask", "email", "-k", "0", "-d", str(corpus_path)])
        assert result.exit_code != 0

    def test_ask_empty_corpus(self, runner, temp_dir, write_corpus):
        path = write_corpus(Path(temp_dir) / "empty.json", [])
        result = runner.invoke(app, ["ask", "anything", "-d", str(path), "--plain"])
        assert result.exit_code == 0
        assert "No match found." in result.output

    def test_ask_missing_corpus(self, runner, temp_dir):
        result = runner.invoke(
            app, ["ask", "anything", "-d", f"{temp_dir}/missing.json", "--plain"]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestBrowseCommands:
    def test_stats(self, runner, corpus_path):
        result = runner.invoke(app, ["stats", "-d", str(corpus_path), "--plain"])
        assert result.exit_code == 0
        assert "Corpus Stats" in result.output
        assert "Questions: 3" in result.output
        assert "Answers per question: 1.33" in result.output

    def test_stats_missing_file(self, runner, temp_dir):
        result = runner.invoke(app, ["stats", "-d", f"{temp_dir}/missing.json", "--plain"])
        assert result.exit_code == 1
        assert "Cannot read corpus file" in result.output

    def test_categories(self, runner, corpus_path):
        result = runner.invoke(app, ["categories", "-d", str(corpus_path), "--plain"])
        assert result.exit_code == 0
        assert "Categories (2):" in result.output
        assert "billing" in result.output

    def test_tags(self, runner, corpus_path):
        result = runner.invoke(app, ["tags", "-d", str(corpus_path), "--plain"])
        assert result.exit_code == 0
        assert "Tags (5):" in result.output

    def test_search_by_tag(self, runner, corpus_path):
        result = runner.invoke(
            app, ["search", "-t", "email", "-t", "payment", "-d", str(corpus_path), "--plain"]
        )
        assert result.exit_code == 0
        assert "q2 [account]" in result.output
        assert "q3 [billing]" in result.output
        assert "q1" not in result.output

    def test_search_no_results(self, runner, corpus_path):
        result = runner.invoke(
            app, ["search", "--category", "shipping", "-d", str(corpus_path), "--plain"]
        )
        assert result.exit_code == 0
        assert "No QA pairs found." in result.output

    def test_show(self, runner, corpus_path):
        result = runner.invoke(app, ["show", "q1", "-d", str(corpus_path), "--plain"])
        assert result.exit_code == 0
        assert "q1: How do I reset my password?" in result.output
        assert "[a1] (primary)" in result.output

    def test_show_unknown(self, runner, corpus_path):
        result = runner.invoke(app, ["show", "q9", "-d", str(corpus_path), "--plain"])
        assert result.exit_code == 1
        assert "QA pair not found: q9" in result.output


class TestMaintenanceCommands:
    def test_validate_ok(self, runner, corpus_path):
        result = runner.invoke(app, ["validate", "-d", str(corpus_path), "--plain"])
        assert result.exit_code == 0
        assert "3 questions, 4 answers. OK" in result.output

    def test_validate_problems(self, runner, temp_dir, sample_data, write_corpus):
        sample_data[1]["question"] = "  "
        path = write_corpus(Path(temp_dir) / "bad.json", sample_data)
        result = runner.invoke(app, ["validate", "-d", str(path), "--plain"])
        assert result.exit_code == 1
        assert "qa_pairs[1].question" in result.output

    def test_normalize(self, runner, corpus_path):
        result = runner.invoke(app, ["normalize", "-d", str(corpus_path), "--plain"])
        assert result.exit_code == 0
        assert "Rewrote" in result.output
        assert "(3 questions)" in result.output

    def test_config(self, runner):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "default_k" in result.output
        assert "No config file found" in result.output
