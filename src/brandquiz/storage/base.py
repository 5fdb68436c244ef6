"""Interface for the persistence collaborator."""

from contextlib import AbstractContextManager
from typing import Any, Iterable, Optional, Protocol, TypeVar

from brandquiz.schemas.records import Record

RecordT = TypeVar("RecordT", bound=Record)


class QuizStore(Protocol):
    """
    Record store for the persisted quiz aggregate and responses.

    Implementations assign identifiers on insert, enforce slug uniqueness and
    (answer_option_id, result_type_id) uniqueness for scoring mappings, and
    make everything written inside ``transaction()`` visible all at once or
    not at all.
    """

    def insert(self, record: Record) -> str:
        """Store a new record and return its generated identifier."""
        ...

    def get(self, model: type[RecordT], record_id: str) -> Optional[RecordT]:
        """Fetch one record by identifier."""
        ...

    def find(self, model: type[RecordT], **criteria: Any) -> list[RecordT]:
        """All records whose fields equal the given values, in insertion order."""
        ...

    def find_in(self, model: type[RecordT], field: str, values: Iterable[Any]) -> list[RecordT]:
        """Bulk lookup: all records whose ``field`` is one of ``values``."""
        ...

    def update(self, model: type[RecordT], record_id: str, **changes: Any) -> RecordT:
        """Apply field changes to an existing record and return it."""
        ...

    def slug_exists(self, slug: str) -> bool:
        """Whether a quiz already uses this slug."""
        ...

    def transaction(self) -> AbstractContextManager["QuizStore"]:
        """Scope whose writes are all kept on success and all discarded on error."""
        ...
