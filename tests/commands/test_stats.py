# tests/commands/test_stats.py
"""Tests for the stats command."""

import os

from qamatch.commands import stats


class TestStatsCommand:
    """Tests for stats.stats()."""

    def test_stats_missing_file(self, temp_dir) -> None:
        """Stats on a missing corpus file returns an error."""
        result = stats.stats(data_path=os.path.join(temp_dir, "missing.json"))

        assert result.success is False
        assert result.error is not None
        assert "Cannot read corpus file" in result.error

    def test_stats_counts(self, corpus_path) -> None:
        result = stats.stats(data_path=str(corpus_path))

        assert result.success is True
        assert result.data_path == str(corpus_path)
        assert result.stats is not None
        assert result.stats.total_questions == 3
        assert result.stats.total_answers == 4
        assert result.stats.categories == ["account", "billing"]
        assert result.stats.unique_tags == 5

    def test_stats_non_utf8_file(self, temp_dir) -> None:
        path = os.path.join(temp_dir, "latin.json")
        with open(path, "wb") as f:
            f.write(b'{"qa_pairs": [\xff\xfe]}')

        result = stats.stats(data_path=path)

        assert result.success is False
        assert "UTF-8" in (result.error or "")

    def test_stats_uses_env_data_path(self, corpus_path, monkeypatch) -> None:
        monkeypatch.setenv("QAMATCH_DATA_PATH", str(corpus_path))

        result = stats.stats()

        assert result.success is True
        assert result.data_path == str(corpus_path)

    def test_stats_needs_no_embedding_model(self, corpus_path) -> None:
        """Stats works even though no provider is configured."""
        assert stats.stats(data_path=str(corpus_path)).success is True
