"""JSON file persistence for the quiz store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from .model import QuizRecord

__all__ = [
    "DEFAULT_QUIZZES",
    "QuizStorage",
    "QuizStorageError",
]

DEFAULT_QUIZZES: tuple[QuizRecord, ...] = (
    QuizRecord("Capital de Italia", "Roma"),
    QuizRecord("Capital de Francia", "París"),
    QuizRecord("Capital de España", "Madrid"),
    QuizRecord("Capital de Portugal", "Lisboa"),
)

logger = logging.getLogger(__name__)


class QuizStorageError(RuntimeError):
    """Raised when the quiz data file cannot be read or written."""


class QuizStorage:
    """Load and save quiz records as a JSON array of objects."""

    def __init__(self, path: Path, *, seed_defaults: bool = True) -> None:
        self.path = Path(path)
        self.seed_defaults = seed_defaults

    def load(self) -> list[QuizRecord]:
        if not self.path.exists():
            logger.info(
                "Quiz data file not found, starting fresh",
                extra={"path": self.path, "seeded": self.seed_defaults},
            )
            return list(DEFAULT_QUIZZES) if self.seed_defaults else []
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise QuizStorageError(
                f"Unable to read quiz data from {self.path}: {exc}"
            ) from exc
        records = _parse_records(payload, self.path)
        logger.debug(
            "Loaded quiz data",
            extra={"path": self.path, "count": len(records)},
        )
        return records

    def save(self, records: Sequence[QuizRecord]) -> None:
        payload = [record.to_dict() for record in records]
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
            tmp_path.replace(self.path)
        except OSError as exc:
            raise QuizStorageError(
                f"Unable to write quiz data to {self.path}: {exc}"
            ) from exc


def _parse_records(payload: object, path: Path) -> list[QuizRecord]:
    if not isinstance(payload, list):
        raise QuizStorageError(
            f"Quiz data in {path} must be a JSON array of records."
        )
    records: list[QuizRecord] = []
    for position, item in enumerate(payload):
        if not isinstance(item, dict):
            raise QuizStorageError(
                f"Record {position} in {path} is not an object."
            )
        question = item.get("question")
        answer = item.get("answer")
        if not isinstance(question, str) or not isinstance(answer, str):
            raise QuizStorageError(
                f"Record {position} in {path} needs string 'question' and "
                "'answer' fields."
            )
        records.append(QuizRecord(question, answer))
    return records
