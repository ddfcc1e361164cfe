"""Fixtures for command tests."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run commands in an empty directory without QAMATCH_* variables."""
    for key in list(os.environ):
        if key.startswith("QAMATCH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path
