"""In-memory quiz store addressed by 0-based position.

Records have no identity of their own: a record's id is simply its current
position, so deleting a record shifts every later record down by one.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

__all__ = [
    "MISSING_ID_MESSAGE",
    "INVALID_ID_MESSAGE",
    "NotFoundError",
    "QuizRecord",
    "QuizStore",
    "RecordSink",
]

MISSING_ID_MESSAGE = "Falta el parámetro id."
INVALID_ID_MESSAGE = "El valor del parámetro id no es válido."

_INDEX_RE = re.compile(r"0|[1-9][0-9]*")

logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """Raised when an id argument is absent or does not address a record."""

    def __init__(self, message: str, index: object = None) -> None:
        super().__init__(message)
        self.message = message
        self.index = index


@dataclass(frozen=True)
class QuizRecord:
    """A single question/answer pair."""

    question: str
    answer: str

    def to_dict(self) -> dict[str, str]:
        return {"question": self.question, "answer": self.answer}


class RecordSink(Protocol):
    """Anything able to persist the full ordered record list."""

    def save(self, records: Sequence[QuizRecord]) -> None:
        """Persist ``records`` replacing whatever was stored before."""


class QuizStore:
    """Ordered quiz records with index-based CRUD operations.

    When a ``sink`` is supplied the whole record list is handed to it after
    every successful mutation.
    """

    def __init__(
        self,
        records: Iterable[QuizRecord] = (),
        *,
        sink: RecordSink | None = None,
    ) -> None:
        self._records: list[QuizRecord] = list(records)
        self._sink = sink

    def __len__(self) -> int:
        return len(self._records)

    def count(self) -> int:
        return len(self._records)

    def add(self, question: str, answer: str) -> int:
        self._records.append(QuizRecord(question, answer))
        index = len(self._records) - 1
        self._persist("quiz.add", index)
        return index

    def get_by_index(self, index: object) -> QuizRecord:
        return self._records[self._resolve(index)]

    def update(self, index: object, question: str, answer: str) -> QuizRecord:
        position = self._resolve(index)
        record = QuizRecord(question, answer)
        self._records[position] = record
        self._persist("quiz.update", position)
        return record

    def delete_by_index(self, index: object) -> QuizRecord:
        position = self._resolve(index)
        removed = self._records.pop(position)
        self._persist("quiz.delete", position)
        return removed

    def get_all(self) -> list[tuple[int, QuizRecord]]:
        return list(enumerate(self._records))

    def _resolve(self, index: object) -> int:
        if index is None:
            raise NotFoundError(MISSING_ID_MESSAGE)
        position = _coerce_index(index)
        if position is None or position >= len(self._records):
            raise NotFoundError(INVALID_ID_MESSAGE, index)
        return position

    def _persist(self, event: str, index: int) -> None:
        logger.info(
            "Quiz store changed",
            extra={"event": event, "index": index, "count": len(self)},
        )
        if self._sink is not None:
            self._sink.save(self._records)


def _coerce_index(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and _INDEX_RE.fullmatch(value):
        return int(value)
    return None
