"""Shared pytest fixtures."""

import asyncio
import copy
import json
import re
import tempfile
from pathlib import Path

import pytest
import structlog

from qamatch.embedder import Embedder
from qamatch.models import QAPair

DIMENSION = 512


class WordCountEmbedder(Embedder):
    """Deterministic bag-of-words embedder.

    Each distinct lowercase word gets its own coordinate the first time it is
    seen, so texts sharing more words have higher cosine similarity.
    """

    def __init__(self) -> None:
        self.vocabulary: dict[str, int] = {}
        self.calls: list[str] = []

    def _index(self, word: str) -> int:
        if word not in self.vocabulary:
            self.vocabulary[word] = len(self.vocabulary) % DIMENSION
        return self.vocabulary[word]

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        vector = [0.0] * DIMENSION
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            vector[self._index(word)] += 1.0
        return vector

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(t) for t in texts]

    async def aembed_text(self, text: str) -> list[float]:
        # Yield once so concurrent builds and queries interleave like real I/O
        await asyncio.sleep(0)
        return self.embed_text(text)


def pair_data(
    qa_id: str,
    question: str,
    answers: list[tuple[str, str, bool]],
    tags: list[str] | None = None,
    category: str = "account",
) -> dict:
    """Raw QA pair as stored in the corpus file."""
    return {
        "id": qa_id,
        "question": question,
        "answers": [
            {"id": answer_id, "answer": text, "is_primary": primary}
            for answer_id, text, primary in answers
        ],
        "tags": tags or [],
        "category": category,
        "difficulty": "easy",
        "last_updated": "2024-01-15T10:00:00+00:00",
    }


SAMPLE_PAIRS = [
    pair_data(
        "q1",
        "How do I reset my password?",
        [("a1", "Use the reset link on the login page.", True), ("a2", "Contact support.", False)],
        tags=["password", "urgent"],
    ),
    pair_data(
        "q2",
        "How do I change my email address?",
        [("a3", "Open Settings > Profile.", True)],
        tags=["email"],
    ),
    pair_data(
        "q3",
        "What payment methods do you accept?",
        [("a4", "Visa, Mastercard and PayPal.", False)],
        tags=["billing", "payment"],
        category="billing",
    ),
]


def write_corpus(path: Path, pairs: list[dict], metadata: dict | None = None) -> Path:
    document = {"qa_pairs": pairs, "metadata": metadata or {"total_answers": None}}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any setup_logging call made by a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def embedder():
    return WordCountEmbedder()


@pytest.fixture
def sample_pairs():
    """The sample corpus as validated models."""
    return [QAPair.model_validate(p) for p in SAMPLE_PAIRS]


@pytest.fixture
def corpus_path(temp_dir):
    """Sample corpus written to a JSON file."""
    return write_corpus(Path(temp_dir) / "qa_data.json", SAMPLE_PAIRS)


@pytest.fixture
def sample_data():
    """The sample corpus as raw dicts (safe to modify)."""
    return copy.deepcopy(SAMPLE_PAIRS)


@pytest.fixture(name="make_pair")
def make_pair_fixture():
    return pair_data


@pytest.fixture(name="write_corpus")
def write_corpus_fixture():
    return write_corpus
