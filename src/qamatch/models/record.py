# src/qamatch/models/record.py
"""Embedding record model."""

from pydantic import BaseModel, ConfigDict

from qamatch.models.qa import QAPair


class EmbeddingRecord(BaseModel):
    """A QA pair's question paired with its embedding vector.

    ``question`` is the text as it was embedded. The record goes stale once
    the pair's question text changes and must then be re-embedded.
    """

    model_config = ConfigDict(frozen=True)

    qa_id: str
    question: str
    vector: tuple[float, ...]

    @property
    def dimension(self) -> int:
        return len(self.vector)

    def is_stale_for(self, pair: QAPair) -> bool:
        return pair.id != self.qa_id or pair.question != self.question
