"""qamatch - semantic question/answer matching.

Answers free-text questions by embedding them and finding the most similar
question in a curated QA corpus.

Quick Start:
    from qamatch import ClientEmbedder, JSONCorpusStore, QAEngine
    from qamatch.providers.litellm import LiteLLMEmbeddingClient

    engine = QAEngine(
        store=JSONCorpusStore("./data/qa_data.json"),
        embedder=ClientEmbedder(LiteLLMEmbeddingClient(model="openai/text-embedding-3-small")),
    )

    async with engine:
        match = await engine.find_best_match("I forgot my password")
        print(match.answer.text, match.score)

Local model (pip install qamatch[local]):
    from qamatch.providers.local import SentenceTransformerEmbeddingClient

    embedder = ClientEmbedder(SentenceTransformerEmbeddingClient())
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("qamatch")
except PackageNotFoundError:
    # Source-tree fallback (e.g. running tests without installing the package).
    import tomllib
    from pathlib import Path

    def _read_version_from_pyproject() -> str | None:
        for parent in Path(__file__).resolve().parents:
            pyproject = parent / "pyproject.toml"
            if pyproject.exists():
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
                found = data.get("project", {}).get("version")
                return str(found) if found is not None else None
        return None

    __version__ = _read_version_from_pyproject() or "unknown"

from qamatch.embedder import ClientEmbedder, Embedder
from qamatch.engine import QAEngine
from qamatch.exceptions import (
    DataLoadError,
    DataPersistError,
    EmbeddingError,
    NotReadyError,
    QAMatchError,
    ReloadInProgressError,
)
from qamatch.index import IndexGeneration, build_index
from qamatch.matching import MatchEngine
from qamatch.models import (
    Answer,
    CorpusStats,
    Difficulty,
    EmbeddingRecord,
    Match,
    MatchAll,
    QAPair,
)
from qamatch.providers import EmbeddingClient, EmbeddingModels, LiteLLMEmbeddingClient
from qamatch.reload import ReloadCoordinator, ReloadState
from qamatch.settings import Settings
from qamatch.similarity import cosine_similarity
from qamatch.stores import CorpusStore, JSONCorpusStore

__all__ = [
    "__version__",
    # Engine
    "QAEngine",
    "Settings",
    # Models
    "Answer",
    "Difficulty",
    "QAPair",
    "EmbeddingRecord",
    "Match",
    "MatchAll",
    "CorpusStats",
    # Components
    "CorpusStore",
    "JSONCorpusStore",
    "Embedder",
    "ClientEmbedder",
    "EmbeddingClient",
    "EmbeddingModels",
    "LiteLLMEmbeddingClient",
    "IndexGeneration",
    "build_index",
    "MatchEngine",
    "ReloadCoordinator",
    "ReloadState",
    "cosine_similarity",
    # Errors
    "QAMatchError",
    "DataLoadError",
    "DataPersistError",
    "EmbeddingError",
    "NotReadyError",
    "ReloadInProgressError",
]
