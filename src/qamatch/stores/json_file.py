# src/qamatch/stores/json_file.py
"""JSON file corpus store implementation."""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from qamatch.exceptions import DataLoadError, DataPersistError
from qamatch.models import QAPair
from qamatch.stores.base import CorpusStore

logger = structlog.get_logger(__name__)

BACKUP_DIR_NAME = "backups"


class JSONCorpusStore(CorpusStore):
    """Corpus stored as a single JSON document.

    Layout:
        {
          "qa_pairs": [{"id", "question", "answers": [{"id", "answer", "is_primary"}],
                        "tags", "category", "difficulty", "last_updated"}],
          "metadata": {"total_questions", "total_answers", "last_updated"}
        }

    Writes go to a temporary file in the same directory which is then moved
    over the destination with os.replace, so a crash mid-write never leaves a
    truncated corpus behind.
    """

    def __init__(self, path: str | Path, backup_count: int = 0, indent: int | None = 2) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON corpus file.
            backup_count: Number of previous versions to keep under
                <dir>/backups/ when persisting. 0 disables backups.
            indent: JSON indentation for written files (None for compact).
        """
        if backup_count < 0:
            raise ValueError("backup_count must be >= 0")
        self.path = Path(path)
        self.backup_count = backup_count
        self.indent = indent

    def describe(self) -> str:
        return str(self.path)

    @property
    def backup_dir(self) -> Path:
        return self.path.parent / BACKUP_DIR_NAME

    def load(self) -> list[QAPair]:
        """Read and validate the whole corpus file."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DataLoadError(
                f"Corpus file {self.path} is not valid UTF-8: {e}", source=self.describe()
            ) from e
        except OSError as e:
            raise DataLoadError(
                f"Cannot read corpus file {self.path}: {e}", source=self.describe()
            ) from e

        try:
            document = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise DataLoadError(
                f"Corpus file {self.path} is not valid JSON: {e}", source=self.describe()
            ) from e

        if not isinstance(document, dict) or not isinstance(document.get("qa_pairs"), list):
            raise DataLoadError(
                f"Corpus file {self.path} must contain a 'qa_pairs' list",
                source=self.describe(),
            )

        pairs, problems = self._parse_pairs(document["qa_pairs"])
        if problems:
            raise DataLoadError(
                f"Corpus file {self.path} failed validation ({len(problems)} problems)",
                source=self.describe(),
                problems=problems,
            )

        total_answers = sum(len(p.answers) for p in pairs)
        metadata = document.get("metadata")
        if isinstance(metadata, dict) and metadata.get("total_answers") not in (
            None,
            total_answers,
        ):
            logger.warning(
                "corpus_metadata_mismatch",
                path=str(self.path),
                declared_total_answers=metadata.get("total_answers"),
                total_answers=total_answers,
            )

        logger.info(
            "corpus_loaded",
            path=str(self.path),
            qa_pairs=len(pairs),
            total_answers=total_answers,
        )
        return pairs

    @staticmethod
    def _parse_pairs(items: list[Any]) -> tuple[list[QAPair], list[str]]:
        pairs: list[QAPair] = []
        problems: list[str] = []

        for i, item in enumerate(items):
            try:
                pairs.append(QAPair.model_validate(item))
            except ValidationError as e:
                for error in e.errors():
                    location = ".".join(str(part) for part in error["loc"])
                    where = f"qa_pairs[{i}]" + (f".{location}" if location else "")
                    problems.append(f"{where}: {error['msg']}")

        counts = Counter(p.id for p in pairs)
        for qa_id, count in counts.items():
            if count > 1:
                problems.append(f"duplicate QA id '{qa_id}' ({count} occurrences)")

        return pairs, problems

    def _to_document(self, pairs: list[QAPair]) -> dict[str, Any]:
        return {
            "qa_pairs": [p.model_dump(mode="json", by_alias=True) for p in pairs],
            "metadata": {
                "total_questions": len(pairs),
                "total_answers": sum(len(p.answers) for p in pairs),
                "last_updated": datetime.now(UTC).isoformat(),
            },
        }

    def persist(self, pairs: list[QAPair]) -> None:
        """Atomically write the corpus, optionally keeping a backup of the old file."""
        payload = json.dumps(self._to_document(pairs), indent=self.indent, ensure_ascii=False)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.backup_count and self.path.exists():
                self._backup()
            self._atomic_write(payload + "\n")
        except OSError as e:
            raise DataPersistError(
                f"Cannot write corpus file {self.path}: {e}", destination=self.describe()
            ) from e

        logger.info("corpus_persisted", path=str(self.path), qa_pairs=len(pairs))

    def _atomic_write(self, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            # The destination has not been touched; only the staging file goes.
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _backup(self) -> None:
        """Copy the current file into the backup directory and prune old copies."""
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%fZ")
        target = self.backup_dir / f"{self.path.stem}.{stamp}{self.path.suffix}"
        shutil.copy2(self.path, target)

        for old in self.list_backups()[: -self.backup_count]:
            # Another save may have pruned it already
            old.unlink(missing_ok=True)

    def list_backups(self) -> list[Path]:
        """Backups of this corpus, oldest first."""
        if not self.backup_dir.exists():
            return []
        return sorted(self.backup_dir.glob(f"{self.path.stem}.*{self.path.suffix}"))
