# src/qamatch/models/qa.py
"""Question/answer data models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Difficulty(str, Enum):
    """How hard a question is to answer."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Answer(BaseModel):
    """One answer to a QA pair. Stored under the ``answer`` key."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    text: str = Field(alias="answer")
    is_primary: bool = False

    @field_validator("id", "text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class QAPair(BaseModel):
    """A curated question with one or more answers.

    Instances are immutable; the ``with_*``/``without_*`` methods return a new
    pair and leave the original untouched.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    question: str
    answers: tuple[Answer, ...]
    tags: tuple[str, ...] = ()
    category: str
    difficulty: Difficulty = Difficulty.EASY
    last_updated: datetime = Field(default_factory=_utcnow)

    @field_validator("id", "question", "category")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, tags: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(tags))

    @model_validator(mode="after")
    def _check_answers(self) -> QAPair:
        if not self.answers:
            raise ValueError("at least one answer is required")
        ids = [a.id for a in self.answers]
        if len(set(ids)) != len(ids):
            raise ValueError(f"duplicate answer ids in QA pair '{self.id}'")
        if sum(1 for a in self.answers if a.is_primary) > 1:
            raise ValueError(f"more than one primary answer in QA pair '{self.id}'")
        return self

    def primary_answer(self) -> Answer:
        """Return the flagged primary answer, or the first answer if none is flagged."""
        return next((a for a in self.answers if a.is_primary), self.answers[0])

    def get_answer_by_id(self, answer_id: str) -> Answer | None:
        return next((a for a in self.answers if a.id == answer_id), None)

    def has_multiple_answers(self) -> bool:
        return len(self.answers) > 1

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def _replace(self, **changes: Any) -> QAPair:
        # Re-run validation so invariants hold on every copy.
        data = dict(self)
        data.update(changes)
        return QAPair(**data)

    def with_answer(
        self, text: str, *, is_primary: bool = False, answer_id: str | None = None
    ) -> QAPair:
        """Append an answer. Without an explicit id it gets ``ans_<qa id>_<n>``."""
        answer = Answer(
            id=answer_id or f"ans_{self.id}_{len(self.answers) + 1}",
            text=text,
            is_primary=is_primary,
        )
        return self._replace(answers=(*self.answers, answer), last_updated=_utcnow())

    def with_updated_answer(self, answer_id: str, **changes: Any) -> QAPair:
        """Replace fields of one answer.

        Raises:
            KeyError: If no answer has ``answer_id``.
        """
        if self.get_answer_by_id(answer_id) is None:
            raise KeyError(answer_id)
        changes = {("text" if key == "answer" else key): value for key, value in changes.items()}
        answers = tuple(
            Answer(**{**a.model_dump(), **changes}) if a.id == answer_id else a
            for a in self.answers
        )
        return self._replace(answers=answers, last_updated=_utcnow())

    def without_answer(self, answer_id: str) -> QAPair:
        """Remove one answer.

        Raises:
            KeyError: If no answer has ``answer_id``.
        """
        if self.get_answer_by_id(answer_id) is None:
            raise KeyError(answer_id)
        answers = tuple(a for a in self.answers if a.id != answer_id)
        return self._replace(answers=answers, last_updated=_utcnow())

    def with_tag(self, tag: str) -> QAPair:
        if self.has_tag(tag):
            return self
        return self._replace(tags=(*self.tags, tag))

    def without_tag(self, tag: str) -> QAPair:
        if not self.has_tag(tag):
            return self
        return self._replace(tags=tuple(t for t in self.tags if t != tag))
