"""In-memory record store."""

import copy
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional

from brandquiz.core.errors import DuplicateRecordError, NotFoundError
from brandquiz.schemas.records import QuizRecord, Record, ScoringMappingRecord
from brandquiz.storage.base import RecordT


class InMemoryQuizStore:
    """
    Dict-backed QuizStore.

    Tables are keyed by record class name. The outermost transaction takes a
    snapshot and restores it if the block raises; nested transactions join
    the outer one. A re-entrant lock serialises writers.
    """

    def __init__(self):
        self._tables: dict[str, dict[str, Record]] = {}
        self._lock = threading.RLock()
        self._depth = 0
        self._snapshot: Optional[dict[str, dict[str, Record]]] = None

    def _table(self, model: type[Record]) -> dict[str, Record]:
        return self._tables.setdefault(model.__name__, {})

    def _check_unique(self, record: Record) -> None:
        if isinstance(record, QuizRecord) and self.slug_exists(record.slug):
            raise DuplicateRecordError(f"Quiz slug '{record.slug}' is already taken")
        if isinstance(record, ScoringMappingRecord):
            for existing in self._table(ScoringMappingRecord).values():
                if (
                    existing.answer_option_id == record.answer_option_id
                    and existing.result_type_id == record.result_type_id
                ):
                    raise DuplicateRecordError(
                        f"Answer option {record.answer_option_id} is already mapped "
                        f"to result type {record.result_type_id}"
                    )

    def insert(self, record: Record) -> str:
        with self._lock:
            self._check_unique(record)
            record_id = uuid.uuid4().hex
            self._table(type(record))[record_id] = record.model_copy(
                update={"id": record_id}, deep=True
            )
            self._after_write()
            return record_id

    def get(self, model: type[RecordT], record_id: str) -> Optional[RecordT]:
        with self._lock:
            record = self._table(model).get(record_id)
            return record.model_copy(deep=True) if record is not None else None

    def find(self, model: type[RecordT], **criteria: Any) -> list[RecordT]:
        with self._lock:
            return [
                record.model_copy(deep=True)
                for record in self._table(model).values()
                if all(getattr(record, key) == value for key, value in criteria.items())
            ]

    def find_in(self, model: type[RecordT], field: str, values: Iterable[Any]) -> list[RecordT]:
        wanted = set(values)
        if not wanted:
            return []
        with self._lock:
            return [
                record.model_copy(deep=True)
                for record in self._table(model).values()
                if getattr(record, field) in wanted
            ]

    def update(self, model: type[RecordT], record_id: str, **changes: Any) -> RecordT:
        with self._lock:
            table = self._table(model)
            if record_id not in table:
                raise NotFoundError(f"{model.__name__} {record_id} not found")
            updated = model.model_validate({**table[record_id].model_dump(), **changes})
            table[record_id] = updated
            self._after_write()
            return updated.model_copy(deep=True)

    def slug_exists(self, slug: str) -> bool:
        with self._lock:
            return any(quiz.slug == slug for quiz in self._table(QuizRecord).values())

    @contextmanager
    def transaction(self) -> Iterator["InMemoryQuizStore"]:
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._snapshot = copy.deepcopy(self._tables)
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._depth -= 1
                if outermost:
                    self._tables = self._snapshot
                    self._snapshot = None
                raise
            self._depth -= 1
            if outermost:
                self._snapshot = None
                self._commit()

    def _after_write(self) -> None:
        if self._depth == 0:
            self._commit()

    def _commit(self) -> None:
        """Hook for durable subclasses; called after each committed write."""
        pass

    def count(self, model: type[Record]) -> int:
        with self._lock:
            return len(self._table(model))
