# src/qamatch/commands/base.py
"""Result types for the commands layer.

Commands never raise for expected failures (missing corpus, bad config,
provider errors); they return a result with ``success=False`` and an
``error`` message that the UI renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from qamatch.models import Answer, CorpusStats, QAPair


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class AnswerInfo:
    """An answer as shown to the user."""

    id: str
    text: str
    is_primary: bool = False

    @classmethod
    def from_answer(cls, answer: Answer) -> AnswerInfo:
        return cls(id=answer.id, text=answer.text, is_primary=answer.is_primary)


@dataclass
class MatchInfo:
    """A matched corpus entry.

    Attributes:
        qa_id: Matched QA pair id
        question: The corpus question that matched
        score: Cosine similarity (not rounded)
        category: Category of the matched pair
        tags: Tags of the matched pair
        answers: The primary answer, or every answer when requested
        total_answers: Number of answers the pair has
    """

    qa_id: str
    question: str
    score: float
    category: str
    tags: list[str] = field(default_factory=list)
    answers: list[AnswerInfo] = field(default_factory=list)
    total_answers: int = 0


@dataclass
class AskResult(CommandResult):
    """Result of the ask command.

    Attributes:
        query: The original question
        matches: Best match first (empty when the corpus is empty)
    """

    query: str = ""
    matches: list[MatchInfo] = field(default_factory=list)


@dataclass
class StatsResult(CommandResult):
    """Result of the stats command."""

    data_path: str = ""
    stats: CorpusStats | None = None


@dataclass
class QAPairInfo:
    """A QA pair as shown to the user."""

    id: str
    question: str
    category: str
    difficulty: str
    tags: list[str] = field(default_factory=list)
    answers: list[AnswerInfo] = field(default_factory=list)

    @classmethod
    def from_pair(cls, pair: QAPair) -> QAPairInfo:
        return cls(
            id=pair.id,
            question=pair.question,
            category=pair.category,
            difficulty=pair.difficulty.value,
            tags=list(pair.tags),
            answers=[AnswerInfo.from_answer(a) for a in pair.answers],
        )


@dataclass
class ValuesResult(CommandResult):
    """Result of the categories and tags commands."""

    values: list[str] = field(default_factory=list)


@dataclass
class SearchResult(CommandResult):
    """Result of the search and show commands."""

    pairs: list[QAPairInfo] = field(default_factory=list)


@dataclass
class ValidateResult(CommandResult):
    """Result of the validate command.

    Attributes:
        data_path: Corpus file that was checked
        stats: Corpus stats when the corpus is valid
        problems: Individual validation problems when it is not
        warnings: Configuration warnings (unknown keys)
    """

    data_path: str = ""
    stats: CorpusStats | None = None
    problems: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class NormalizeResult(CommandResult):
    """Result of the normalize command."""

    data_path: str = ""
    stats: CorpusStats | None = None
    backup_count: int = 0


@dataclass
class SettingInfo:
    """Information about a single setting."""

    name: str
    value: str
    source: str  # "env var", "yaml", "default"


@dataclass
class ConfigResult(CommandResult):
    """Result of the config command."""

    provider: str = "litellm"
    embedding_model: str | None = None
    data_path: str = ""
    settings: list[SettingInfo] = field(default_factory=list)
    config_path: str | None = None
    warnings: list[str] = field(default_factory=list)
