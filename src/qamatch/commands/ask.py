# src/qamatch/commands/ask.py
"""Ask command - match a question against the corpus.

This module provides the matching logic the CLI uses.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from qamatch.commands.base import AnswerInfo, AskResult, MatchInfo
from qamatch.config import ConfigError, create_engine, get_config
from qamatch.exceptions import QAMatchError
from qamatch.models import Match, MatchAll

if TYPE_CHECKING:
    from qamatch.engine import QAEngine


def _to_info(match: Match | MatchAll) -> MatchInfo:
    if isinstance(match, MatchAll):
        answers = [AnswerInfo.from_answer(a) for a in match.answers]
        total = len(match.answers)
    else:
        answers = [AnswerInfo.from_answer(match.answer)]
        total = match.total_answers
    return MatchInfo(
        qa_id=match.qa_id,
        question=match.question,
        score=match.score,
        category=match.category,
        tags=list(match.tags),
        answers=answers,
        total_answers=total,
    )


async def ask_with_engine(
    engine: QAEngine,
    question: str,
    k: int | None = None,
    all_answers: bool = False,
) -> AskResult:
    """Ask using an existing, initialized engine.

    Args:
        engine: Initialized QAEngine
        question: The question to ask
        k: Return the k best matches instead of only the best one
        all_answers: Include every answer of the best match

    Returns:
        AskResult with the matches, best first
    """
    try:
        found: list[Match | MatchAll]
        if k is not None:
            found = list(await engine.find_matches(question, k))
        elif all_answers:
            best_all = await engine.find_best_match_with_all_answers(question)
            found = [best_all] if best_all is not None else []
        else:
            best = await engine.find_best_match(question)
            found = [best] if best is not None else []
    except (QAMatchError, ValueError) as e:
        return AskResult(success=False, query=question, error=f"Query failed: {e}")

    return AskResult(success=True, query=question, matches=[_to_info(m) for m in found])


async def _ask(engine: QAEngine, question: str, k: int | None, all_answers: bool) -> AskResult:
    try:
        await engine.initialize()
    except QAMatchError as e:
        return AskResult(success=False, query=question, error=f"Failed to load corpus: {e}")
    try:
        return await ask_with_engine(engine, question, k=k, all_answers=all_answers)
    finally:
        engine.shutdown()


def ask(
    question: str,
    data_path: str | None = None,
    config_path: str | Path | None = None,
    k: int | None = None,
    all_answers: bool = False,
) -> AskResult:
    """Load the corpus, build the index, and match one question.

    Args:
        question: The question to ask
        data_path: Override corpus file path
        config_path: Override config file path
        k: Return the k best matches instead of only the best one
        all_answers: Include every answer of the best match

    Returns:
        AskResult with the matches, best first
    """
    qa_config = get_config(data_path, config_path)
    if isinstance(qa_config, ConfigError):
        return AskResult(success=False, query=question, error=qa_config.message)

    try:
        engine = create_engine(qa_config)
    except (ImportError, ValueError, TypeError) as e:
        return AskResult(success=False, query=question, error=f"Failed to create engine: {e}")

    return asyncio.run(_ask(engine, question, k, all_answers))
