# src/qamatch/commands/__init__.py
"""UI-agnostic command layer for qamatch.

Commands return data structures, allowing UIs to render results appropriately.

Usage:
    from qamatch.commands import ask, stats

    result = ask.ask("I forgot my password")
    result = stats.stats()
"""

from qamatch.commands import ask, browse, config_cmd, normalize, stats, validate
from qamatch.commands.base import (
    AnswerInfo,
    AskResult,
    CommandResult,
    ConfigResult,
    MatchInfo,
    NormalizeResult,
    QAPairInfo,
    SearchResult,
    SettingInfo,
    StatsResult,
    ValidateResult,
    ValuesResult,
)

__all__ = [
    # Result types
    "CommandResult",
    "AnswerInfo",
    "MatchInfo",
    "AskResult",
    "StatsResult",
    "QAPairInfo",
    "ValuesResult",
    "SearchResult",
    "ValidateResult",
    "NormalizeResult",
    "SettingInfo",
    "ConfigResult",
    # Command modules
    "ask",
    "stats",
    "browse",
    "validate",
    "normalize",
    "config_cmd",
]
